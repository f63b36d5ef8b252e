import datetime
import os
from pathlib import Path
from typing import IO, Any, AsyncIterator, Optional

import aiofiles
import aiofiles.os

from blobpath.asyncio.backend import AsyncBlobBackend, AsyncBlobReader
from blobpath.errors import BlobNotFoundError, InvalidArgumentError
from blobpath.utils.entry import BlobItem, BlobProperties
from blobpath.utils.hierarchy import KeyInfo, group_by_delimiter

META_DIR = '.content-types'


def _mtime(stat: os.stat_result) -> datetime.datetime:
    return datetime.datetime.fromtimestamp(stat.st_mtime, tz=datetime.timezone.utc)


class AsyncLocalReader(AsyncBlobReader):

    def __init__(self, container: str, path: str, file_path: str):
        self.container = container
        self.path = path
        self.file_path = file_path
        self.file: Any = None

    async def __aenter__(self) -> 'AsyncLocalReader':
        if not await aiofiles.os.path.isfile(self.file_path):
            raise BlobNotFoundError(self.container, self.path)
        self.file = await aiofiles.open(self.file_path, 'rb')
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.file.close()

    async def read(self, size: Optional[int] = None) -> bytes:
        return await self.file.read(-1 if size is None else size)


class AsyncLocalBackend(AsyncBlobBackend):
    """Async local file system backend. Containers are directories under root.

    Attributes
    ----------
    root : str
        Storage root directory.
    chunk_size : int, default=1024 * 1024
        Copy chunk size in bytes.
    """

    def __init__(self, root: str, chunk_size: int = 1024 * 1024) -> None:
        self.root = os.path.abspath(root)
        self.chunk_size = chunk_size

    def container_url(self, container: str) -> str:
        return Path(self.root, container).as_uri()

    async def ensure_container(self, container: str) -> None:
        await aiofiles.os.makedirs(os.path.join(self.root, container), exist_ok=True)

    def open_object(self, container: str, path: str) -> AsyncLocalReader:
        return AsyncLocalReader(container, path, self._file_path(container, path))

    async def put_object(self, container: str, path: str, stream: IO[bytes]) -> str:
        file_path = self._file_path(container, path)
        await aiofiles.os.makedirs(os.path.dirname(file_path), exist_ok=True)
        async with aiofiles.open(file_path, 'wb') as f:
            chunk = stream.read(self.chunk_size)
            while chunk:
                await f.write(chunk)
                chunk = stream.read(self.chunk_size)
        return self.blob_url(container, path)

    async def delete_object(self, container: str, path: str) -> bool:
        file_path = self._file_path(container, path)
        if not await aiofiles.os.path.isfile(file_path):
            return False
        await aiofiles.os.remove(file_path)
        await self._prune(os.path.dirname(file_path), os.path.join(self.root, container))
        meta_path = self._meta_path(container, path)
        if await aiofiles.os.path.isfile(meta_path):
            await aiofiles.os.remove(meta_path)
            await self._prune(os.path.dirname(meta_path), os.path.join(self.root, META_DIR, container))
        return True

    @staticmethod
    async def _prune(directory: str, base: str) -> None:
        """Remove empty directories from ``directory`` up to ``base``."""
        while directory != base and not await aiofiles.os.listdir(directory):
            try:
                await aiofiles.os.rmdir(directory)
            except OSError:
                # refilled by a concurrent write
                break
            directory = os.path.dirname(directory)

    async def list_by_prefix(self, container: str, prefix: str, delimiter: str = '/') -> AsyncIterator[BlobItem]:
        container_path = os.path.join(self.root, container)
        directory = prefix.rpartition('/')[0]
        start = self._resolve(container_path, directory)
        if delimiter == '/':
            items = await self._scan_level(start, directory, prefix)
        else:
            keys: list[KeyInfo] = []
            for root, dirs, files in os.walk(start):  # TODO: walk in executor
                for name in files:
                    file_path = os.path.join(root, name)
                    key = os.path.relpath(file_path, container_path).replace(os.sep, '/')
                    stat = await aiofiles.os.stat(file_path)
                    keys.append((key, stat.st_size, _mtime(stat)))
            items = list(group_by_delimiter(keys, prefix, delimiter))
        for item in items:
            yield item

    @staticmethod
    async def _scan_level(start: str, directory: str, prefix: str) -> list[BlobItem]:
        if not await aiofiles.os.path.isdir(start):
            return []
        result = []
        with await aiofiles.os.scandir(start) as entries:
            for entry in entries:
                key = f'{directory}/{entry.name}' if directory else entry.name
                if not key.startswith(prefix):
                    continue
                if entry.is_dir():
                    result.append(BlobItem(True, key + '/'))
                elif entry.is_file():
                    stat = entry.stat()
                    result.append(BlobItem(False, key, stat.st_size, _mtime(stat)))
        return sorted(result, key=lambda item: item.path)

    async def set_content_type(self, container: str, path: str, content_type: str) -> None:
        if not await aiofiles.os.path.isfile(self._file_path(container, path)):
            raise BlobNotFoundError(container, path)
        meta_path = self._meta_path(container, path)
        await aiofiles.os.makedirs(os.path.dirname(meta_path), exist_ok=True)
        async with aiofiles.open(meta_path, 'w') as f:
            await f.write(content_type)

    async def get_properties(self, container: str, path: str) -> BlobProperties:
        file_path = self._file_path(container, path)
        if not await aiofiles.os.path.isfile(file_path):
            raise BlobNotFoundError(container, path)
        stat = await aiofiles.os.stat(file_path)
        content_type = None
        meta_path = self._meta_path(container, path)
        if await aiofiles.os.path.isfile(meta_path):
            async with aiofiles.open(meta_path) as f:
                content_type = await f.read()
        return BlobProperties(
            path=path,
            size=stat.st_size,
            url=self.blob_url(container, path),
            last_modified=_mtime(stat),
            content_type=content_type
        )

    def _file_path(self, container: str, path: str) -> str:
        return self._resolve(os.path.join(self.root, container), path)

    def _meta_path(self, container: str, path: str) -> str:
        return self._resolve(os.path.join(self.root, META_DIR, container), path)

    @staticmethod
    def _resolve(base: str, path: str) -> str:
        file_path = os.path.normpath(os.path.join(base, *path.split('/')))
        if os.path.commonpath([base, file_path]) != base:
            raise InvalidArgumentError(f"path escapes container: '{path}'")
        return file_path
