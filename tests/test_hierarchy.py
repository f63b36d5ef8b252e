from blobpath.utils.entry import BlobItem
from blobpath.utils.hierarchy import group_by_delimiter


def _keys(*paths):
    return [(path, 1, None) for path in paths]


def test_one_level():
    keys = _keys('docs/sub/x.bin', 'docs/readme.txt', 'docs/sub/deep/y.bin', 'other/z.txt')
    items = list(group_by_delimiter(keys, 'docs/'))
    assert items == [
        BlobItem(False, 'docs/readme.txt', 1, None),
        BlobItem(True, 'docs/sub/'),
    ]


def test_root_prefix():
    items = list(group_by_delimiter(_keys('a.txt', 'docs/b.txt', 'docs/c.txt'), ''))
    assert items == [BlobItem(False, 'a.txt', 1, None), BlobItem(True, 'docs/')]


def test_flat_listing_without_delimiter():
    items = list(group_by_delimiter(_keys('docs/sub/x.bin', 'docs/a.txt'), 'docs/', delimiter=''))
    assert [item.path for item in items] == ['docs/a.txt', 'docs/sub/x.bin']
    assert not any(item.is_prefix for item in items)


def test_custom_delimiter():
    items = list(group_by_delimiter(_keys('docs|sub|x', 'docs|y'), 'docs|', delimiter='|'))
    assert items == [BlobItem(True, 'docs|sub|'), BlobItem(False, 'docs|y', 1, None)]


def test_no_match():
    assert list(group_by_delimiter(_keys('a/b.txt'), 'missing/')) == []
