import pytest

from blobpath.errors import InvalidArgumentError
from blobpath.utils.paths import (
    ROOT_PREFIX,
    base_name,
    normalize_blob_path,
    normalize_directory_path,
    prefix_name,
    validate_container,
)


@pytest.mark.parametrize('path', [
    None, '', '   ', '/', 'docs', 'docs/', '/docs', 'a\\b', 'a\\b\\', 'a/b/c', '\\\\server\\share', 'a//b',
])
def test_normalize_directory_path_idempotent(path):
    once = normalize_directory_path(path)
    assert normalize_directory_path(once) == once


def test_root_prefix():
    assert normalize_directory_path('') == normalize_directory_path(None) == ROOT_PREFIX
    assert normalize_directory_path('   ') == ROOT_PREFIX
    assert normalize_directory_path('/') == ROOT_PREFIX


def test_normalize_directory_path():
    assert normalize_directory_path('a\\b') == 'a/b/'
    assert normalize_directory_path('docs') == 'docs/'
    assert normalize_directory_path('docs/') == 'docs/'
    assert normalize_directory_path('/docs/sub') == 'docs/sub/'


def test_normalize_blob_path():
    assert normalize_blob_path('a\\b\\photo.jpg') == 'a/b/photo.jpg'
    assert normalize_blob_path('/a/b.txt') == 'a/b.txt'


@pytest.mark.parametrize('path', [None, '', '  ', '/', 'docs/', 'a\\', '../x.txt', 'a/../../x.txt', '..\\x.txt', '..'])
def test_normalize_blob_path_invalid(path):
    with pytest.raises(InvalidArgumentError):
        normalize_blob_path(path)


@pytest.mark.parametrize('path', ['..', '../', '../other-container', 'docs/../..', '/..', '..\\x'])
def test_normalize_directory_path_parent_segment(path):
    with pytest.raises(InvalidArgumentError):
        normalize_directory_path(path)


def test_dots_inside_names_allowed():
    assert normalize_blob_path('a..b/c...txt') == 'a..b/c...txt'
    assert normalize_directory_path('.hidden/..x') == '.hidden/..x/'


@pytest.mark.parametrize('container', ['abc', 'my-container', 'x1-2-3', 'a' * 63])
def test_validate_container(container):
    assert validate_container(container) == container


@pytest.mark.parametrize('container', [None, '', 'ab', 'a' * 64, 'My-Container', '-abc', 'abc-', 'a--b', 'a_b', 'a.b'])
def test_validate_container_invalid(container):
    with pytest.raises(InvalidArgumentError):
        validate_container(container)


def test_names():
    assert base_name('docs/readme.txt') == 'readme.txt'
    assert base_name('readme.txt') == 'readme.txt'
    assert base_name('docs/') == ''
    assert prefix_name('docs/sub/') == 'sub'
    assert prefix_name('sub/') == 'sub'
    assert prefix_name('docs/sub|', delimiter='|') == 'sub'
