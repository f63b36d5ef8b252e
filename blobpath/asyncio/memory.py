import asyncio
import datetime
import io
from dataclasses import dataclass
from typing import IO, Any, AsyncIterator, Optional

from blobpath.asyncio.backend import AsyncBlobBackend, AsyncBlobReader
from blobpath.errors import BlobNotFoundError
from blobpath.utils.content_types import DEFAULT_CONTENT_TYPE
from blobpath.utils.entry import BlobItem, BlobProperties
from blobpath.utils.hierarchy import group_by_delimiter


@dataclass
class _MemoryBlob:
    data: bytes
    last_modified: datetime.datetime
    content_type: str = DEFAULT_CONTENT_TYPE


class AsyncMemoryReader(AsyncBlobReader):

    def __init__(self, blob: _MemoryBlob):
        self.blob = blob
        self.stream: Optional[io.BytesIO] = None

    async def __aenter__(self) -> 'AsyncMemoryReader':
        self.stream = io.BytesIO(self.blob.data)
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        assert self.stream is not None
        self.stream.close()

    async def read(self, size: Optional[int] = None) -> bytes:
        assert self.stream is not None
        await asyncio.sleep(0)
        return self.stream.read(size)


class AsyncMemoryBackend(AsyncBlobBackend):
    """In-process blob backend.

    Attributes
    ----------
    base_url : str
        URL prefix of containers.
    page_size : int
        Items yielded between event loop switches while listing.
    """

    def __init__(self, base_url: str = 'memory://', page_size: int = 1000) -> None:
        self.base_url = base_url
        self.page_size = page_size
        self.containers: dict[str, dict[str, _MemoryBlob]] = {}

    def container_url(self, container: str) -> str:
        return self.base_url + container

    async def ensure_container(self, container: str) -> None:
        await asyncio.sleep(0)
        self.containers.setdefault(container, {})

    def open_object(self, container: str, path: str) -> AsyncMemoryReader:
        return AsyncMemoryReader(self._get_blob(container, path))

    async def put_object(self, container: str, path: str, stream: IO[bytes]) -> str:
        await asyncio.sleep(0)
        blobs = self.containers.setdefault(container, {})
        blobs[path] = _MemoryBlob(stream.read(), datetime.datetime.now(datetime.timezone.utc))
        return self.blob_url(container, path)

    async def delete_object(self, container: str, path: str) -> bool:
        await asyncio.sleep(0)
        return self.containers.get(container, {}).pop(path, None) is not None

    async def list_by_prefix(self, container: str, prefix: str, delimiter: str = '/') -> AsyncIterator[BlobItem]:
        keys = [(path, len(blob.data), blob.last_modified)
                for path, blob in self.containers.get(container, {}).items()]
        for i, item in enumerate(group_by_delimiter(keys, prefix, delimiter)):
            if i % self.page_size == 0:
                await asyncio.sleep(0)
            yield item

    async def set_content_type(self, container: str, path: str, content_type: str) -> None:
        await asyncio.sleep(0)
        self._get_blob(container, path).content_type = content_type

    async def get_properties(self, container: str, path: str) -> BlobProperties:
        await asyncio.sleep(0)
        blob = self._get_blob(container, path)
        return BlobProperties(path, len(blob.data), self.blob_url(container, path),
                              blob.last_modified, blob.content_type)

    def _get_blob(self, container: str, path: str) -> _MemoryBlob:
        try:
            return self.containers[container][path]
        except KeyError as err:
            raise BlobNotFoundError(container, path) from err
