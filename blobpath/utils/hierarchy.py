import datetime
from typing import Iterable, Iterator, Optional

from blobpath.utils.entry import BlobItem

KeyInfo = tuple[str, Optional[int], Optional[datetime.datetime]]


def group_by_delimiter(keys: Iterable[KeyInfo], prefix: str, delimiter: str = '/') -> Iterator[BlobItem]:
    """Partition flat keys into common prefixes and leaf items.

    Parameters
    ----------
    keys : Iterable[KeyInfo]
        ``(key, size, last_modified)`` tuples, any order.
    prefix : str
        Listing prefix.
    delimiter : str, default='/'
        Hierarchy delimiter, empty string lists flat.

    Yields
    ------
    BlobItem
        Items one level below prefix, sorted by path.
    """
    seen = set()
    for key, size, last_modified in sorted(keys, key=lambda x: x[0]):
        if not key.startswith(prefix):
            continue
        rest = key[len(prefix):]
        if delimiter and delimiter in rest:
            common = prefix + rest[:rest.index(delimiter) + len(delimiter)]
            if common not in seen:
                seen.add(common)
                yield BlobItem(True, common)
        else:
            yield BlobItem(False, key, size, last_modified)
