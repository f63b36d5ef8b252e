"""Blob path service.

Translates directory paths and container names into backend calls and reshapes
backend listings into :class:`FSEntry` values.
"""

import io
import logging
from contextlib import aclosing
from typing import IO, AsyncIterator, Optional, Union

from blobpath.asyncio.backend import AsyncBlobBackend
from blobpath.errors import BlobNotFoundError, InvalidArgumentError
from blobpath.utils.content_types import guess_content_type
from blobpath.utils.entry import BlobItem, BlobProperties, FSEntry
from blobpath.utils.paths import (
    base_name,
    normalize_blob_path,
    normalize_directory_path,
    prefix_name,
    validate_container,
)

logger = logging.getLogger(__name__)


class BlobPathService:
    """List, upload, download and delete blobs by path.

    Attributes
    ----------
    backend : AsyncBlobBackend
        Connected blob backend, shared across calls.
    """

    def __init__(self, backend: AsyncBlobBackend) -> None:
        if backend is None:
            raise InvalidArgumentError('backend must not be None')
        self.backend = backend

    normalize_directory_path = staticmethod(normalize_directory_path)

    async def iter_entries(
        self,
        directory_path: Optional[str],
        container: str,
        delimiter: str = '/'
    ) -> AsyncIterator[FSEntry]:
        """Iterate entries one level below a directory.

        Parameters
        ----------
        directory_path : Optional[str]
            Directory path, ``None`` or blank for container root.
        container : str
            Container name.
        delimiter : str, default='/'
            Hierarchy delimiter.

        Yields
        ------
        FSEntry
            Directory and file entries.
        """
        prefix = normalize_directory_path(directory_path)
        validate_container(container)
        await self.backend.ensure_container(container)
        container_url = self.backend.container_url(container)
        logger.debug("listing '%s/%s'", container, prefix)
        async with aclosing(self.backend.list_by_prefix(container, prefix, delimiter)) as items:
            async for item in items:
                entry = self._to_entry(item, container_url, delimiter)
                if entry is not None:
                    yield entry

    async def list_entries(
        self,
        directory_path: Optional[str],
        container: str,
        delimiter: str = '/'
    ) -> list[FSEntry]:
        """List entries one level below a directory.

        Parameters
        ----------
        directory_path : Optional[str]
            Directory path, ``None`` or blank for container root.
        container : str
            Container name.
        delimiter : str, default='/'
            Hierarchy delimiter.

        Returns
        -------
        list[FSEntry]
            Directory and file entries, empty if nothing matches.
        """
        result = []
        async with aclosing(self.iter_entries(directory_path, container, delimiter)) as entries:
            async for entry in entries:
                result.append(entry)
        return result

    async def upload(
        self,
        stream: Union[IO[bytes], bytes, None],
        target_path: str,
        container: str
    ) -> str:
        """Upload stream, overwriting existing blob, and set its content type.

        Parameters
        ----------
        stream : Union[IO[bytes], bytes]
            Data to upload. Seekable streams are rewound first.
        target_path : str
            Blob path.
        container : str
            Container name.

        Returns
        -------
        str
            Blob URL.
        """
        if stream is None:
            raise InvalidArgumentError('stream must not be None')
        if isinstance(stream, (bytes, bytearray)):
            stream = io.BytesIO(stream)
        path = normalize_blob_path(target_path)
        validate_container(container)
        await self.backend.ensure_container(container)
        if stream.seekable():
            stream.seek(0)
        url = await self.backend.put_object(container, path, stream)
        content_type = guess_content_type(path)
        try:
            await self.backend.set_content_type(container, path, content_type)
        except Exception:
            logger.error("uploaded '%s/%s' but failed to set content type '%s'", container, path, content_type)
            raise
        logger.debug("uploaded '%s/%s' as %s", container, path, content_type)
        return url

    async def download(self, source_path: str, container: str) -> bytes:
        """Download whole blob into memory.

        Raises
        ------
        BlobNotFoundError
            If blob does not exist.
        """
        path = normalize_blob_path(source_path)
        validate_container(container)
        await self.backend.ensure_container(container)
        async with self.backend.open_object(container, path) as reader:
            data = await reader.read()
        logger.debug("downloaded '%s/%s', %d bytes", container, path, len(data))
        return data

    async def delete(self, target_path: str, container: str) -> bool:
        """Delete blob if it exists.

        Returns
        -------
        bool
            Whether blob existed.
        """
        path = normalize_blob_path(target_path)
        validate_container(container)
        await self.backend.ensure_container(container)
        existed = await self.backend.delete_object(container, path)
        logger.debug("deleted '%s/%s', existed=%s", container, path, existed)
        return existed

    async def get_info(self, target_path: str, container: str) -> Optional[BlobProperties]:
        """Blob properties, ``None`` if blob does not exist.

        Backend errors other than a missing blob propagate.
        """
        path = normalize_blob_path(target_path)
        validate_container(container)
        await self.backend.ensure_container(container)
        try:
            return await self.backend.get_properties(container, path)
        except BlobNotFoundError:
            return None

    @staticmethod
    def _to_entry(item: BlobItem, container_url: str, delimiter: str) -> Optional[FSEntry]:
        url = f'{container_url}/{item.path}'
        if item.is_prefix:
            name = prefix_name(item.path, delimiter)
            if not name:
                return None
            return FSEntry(name, item.path, 'dir', url=url)
        name = base_name(item.path)
        if not name:
            return None
        return FSEntry(name, item.path, 'file', item.size or 0, item.last_modified, url)
