from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import IO, Any, AsyncIterator, Optional

from azure.core.exceptions import ResourceExistsError, ResourceNotFoundError
from azure.storage.blob import ContentSettings
from azure.storage.blob.aio import BlobPrefix, BlobServiceClient

from blobpath.asyncio.backend import AsyncBlobBackend, AsyncBlobReader
from blobpath.errors import BlobNotFoundError
from blobpath.utils.entry import BlobItem, BlobProperties


class AsyncAzureReader(AsyncBlobReader):
    """Async Azure blob reader.

    Attributes
    ----------
    client : Any
        Azure ``BlobServiceClient``.
    container : str
        Container name.
    path : str
        Blob name.
    """

    def __init__(self, client: Any, container: str, path: str):
        self.client = client
        self.container = container
        self.path = path
        self.downloader: Any = None

    async def __aenter__(self) -> 'AsyncAzureReader':
        blob_client = self.client.get_blob_client(self.container, self.path)
        try:
            self.downloader = await blob_client.download_blob()
        except ResourceNotFoundError as err:
            raise BlobNotFoundError(self.container, self.path) from err
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.downloader = None

    async def read(self, size: Optional[int] = None) -> bytes:
        if size is None:
            return await self.downloader.readall()
        return await self.downloader.read(size)


class AsyncAzureBackend(AsyncBlobBackend):
    """Async Azure Blob Storage backend.

    Attributes
    ----------
    connection_string : str
        Storage account connection string.
    """

    def __init__(self, connection_string: str) -> None:
        self.connection_string = connection_string
        self.client: Any = None

    @asynccontextmanager
    async def connect(self) -> AsyncGenerator['AsyncAzureBackend', None]:
        """Connects to storage account.

        Yields
        -------
        AsyncAzureBackend
            Class instance
        """
        async with BlobServiceClient.from_connection_string(self.connection_string) as client:
            self.client = client
            try:
                yield self
            finally:
                self.client = None

    def container_url(self, container: str) -> str:
        return self.client.get_container_client(container).url

    async def ensure_container(self, container: str) -> None:
        try:
            await self.client.get_container_client(container).create_container()
        except ResourceExistsError:
            pass

    def open_object(self, container: str, path: str) -> AsyncAzureReader:
        return AsyncAzureReader(self.client, container, path)

    async def put_object(self, container: str, path: str, stream: IO[bytes]) -> str:
        blob_client = self.client.get_blob_client(container, path)
        await blob_client.upload_blob(stream, overwrite=True)
        return blob_client.url

    async def delete_object(self, container: str, path: str) -> bool:
        try:
            await self.client.get_blob_client(container, path).delete_blob()
        except ResourceNotFoundError:
            return False
        return True

    async def list_by_prefix(self, container: str, prefix: str, delimiter: str = '/') -> AsyncIterator[BlobItem]:
        container_client = self.client.get_container_client(container)
        if delimiter:
            items = container_client.walk_blobs(name_starts_with=prefix or None, delimiter=delimiter)
        else:
            items = container_client.list_blobs(name_starts_with=prefix or None)
        async for item in items:
            if isinstance(item, BlobPrefix):
                yield BlobItem(True, item.name)
            else:
                yield BlobItem(False, item.name, item.size, item.last_modified)

    async def set_content_type(self, container: str, path: str, content_type: str) -> None:
        blob_client = self.client.get_blob_client(container, path)
        await blob_client.set_http_headers(content_settings=ContentSettings(content_type=content_type))

    async def get_properties(self, container: str, path: str) -> BlobProperties:
        blob_client = self.client.get_blob_client(container, path)
        try:
            props = await blob_client.get_blob_properties()
        except ResourceNotFoundError as err:
            raise BlobNotFoundError(container, path) from err
        content_settings = props.content_settings
        return BlobProperties(
            path=path,
            size=props.size or 0,
            url=blob_client.url,
            last_modified=props.last_modified,
            content_type=content_settings.content_type if content_settings else None
        )
