import posixpath
from types import MappingProxyType
from typing import Mapping

DEFAULT_CONTENT_TYPE = 'application/octet-stream'

CONTENT_TYPES: Mapping[str, str] = MappingProxyType({
    '.png': 'image/png',
    '.mp4': 'video/mp4',
    '.txt': 'text/plain',
    '.mp3': 'audio/mpeg',
    '.jpg': 'image/jpeg',
    '.jpeg': 'image/jpeg',
    '.pdf': 'application/pdf',
})


def guess_content_type(path: str) -> str:
    """Guess blob content type from file extension.

    Parameters
    ----------
    path : str
        Blob path.

    Returns
    -------
    str
        Content type, ``application/octet-stream`` if extension is unknown.
    """
    extension = posixpath.splitext(path.replace('\\', '/'))[1].lower()
    return CONTENT_TYPES.get(extension, DEFAULT_CONTENT_TYPE)
