import datetime
from dataclasses import dataclass
from typing import Literal, Optional


@dataclass(frozen=True)
class FSEntry:
    name: str
    path: str
    type: Literal['file', 'dir']
    size: Optional[int] = None
    last_modified: Optional[datetime.datetime] = None
    url: Optional[str] = None


@dataclass(frozen=True)
class BlobItem:
    """Raw item yielded by a backend prefix listing."""

    is_prefix: bool
    path: str
    size: Optional[int] = None
    last_modified: Optional[datetime.datetime] = None


@dataclass(frozen=True)
class BlobProperties:
    path: str
    size: int
    url: str
    last_modified: Optional[datetime.datetime] = None
    content_type: Optional[str] = None
