import re
from typing import Optional

from blobpath.errors import InvalidArgumentError

ROOT_PREFIX = ''

_CONTAINER_REGEX = re.compile(r'^[a-z0-9](?!.*--)[a-z0-9-]{1,61}[a-z0-9]$')


def normalize_directory_path(path: Optional[str]) -> str:
    """Normalize directory path to a listing prefix.

    Parameters
    ----------
    path : Optional[str]
        Directory path, ``None`` or blank for container root.

    Returns
    -------
    str
        Prefix ending with ``/``, or empty string for container root.

    Raises
    ------
    InvalidArgumentError
        If path has a ``..`` segment.
    """
    if path is None or not path.strip():
        return ROOT_PREFIX
    path = path.replace('\\', '/').lstrip('/')
    if not path:
        return ROOT_PREFIX
    _check_segments(path)
    return path if path.endswith('/') else path + '/'


def normalize_blob_path(path: Optional[str]) -> str:
    if path is None or not path.strip():
        raise InvalidArgumentError('blob path must not be empty')
    path = path.replace('\\', '/').lstrip('/')
    if not path or path.endswith('/'):
        raise InvalidArgumentError(f"invalid blob path: '{path}'")
    _check_segments(path)
    return path


def _check_segments(path: str) -> None:
    if '..' in path.split('/'):
        raise InvalidArgumentError(f"parent directory segment in path: '{path}'")


def validate_container(container: Optional[str]) -> str:
    if not container or not _CONTAINER_REGEX.match(container):
        raise InvalidArgumentError(f"invalid container name: '{container}'")
    return container


def base_name(path: str) -> str:
    return path.split('/')[-1]


def prefix_name(prefix: str, delimiter: str = '/') -> str:
    """Last segment of common prefix, without trailing delimiter."""
    if delimiter and prefix.endswith(delimiter):
        prefix = prefix[:-len(delimiter)]
    return prefix.rstrip('/').split('/')[-1]
