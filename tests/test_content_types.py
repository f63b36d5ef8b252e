import pytest

from blobpath.utils.content_types import CONTENT_TYPES, DEFAULT_CONTENT_TYPE, guess_content_type


@pytest.mark.parametrize('path, content_type', [
    ('a/b/photo.jpg', 'image/jpeg'),
    ('photo.JPEG', 'image/jpeg'),
    ('image.Png', 'image/png'),
    ('clip.mp4', 'video/mp4'),
    ('notes.txt', 'text/plain'),
    ('song.MP3', 'audio/mpeg'),
    ('doc.pdf', 'application/pdf'),
    ('a\\b\\doc.pdf', 'application/pdf'),
])
def test_known_extensions(path, content_type):
    assert guess_content_type(path) == content_type


@pytest.mark.parametrize('path', ['a/b/data.unknownext', 'README', 'archive.tar.gz', 'dir.jpg/file', '.jpg'])
def test_unknown_extensions(path):
    assert guess_content_type(path) == DEFAULT_CONTENT_TYPE == 'application/octet-stream'


def test_table_is_read_only():
    with pytest.raises(TypeError):
        CONTENT_TYPES['.gif'] = 'image/gif'
