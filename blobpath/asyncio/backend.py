from abc import ABC, abstractmethod
from contextlib import AbstractAsyncContextManager, asynccontextmanager
from typing import IO, Any, AsyncGenerator, AsyncIterator, Optional

import yaml

from blobpath.utils.entry import BlobItem, BlobProperties


class AsyncBlobReader(AbstractAsyncContextManager[Any]):
    """Readable blob stream, opened on enter and released on exit."""

    @abstractmethod
    async def read(self, size: Optional[int] = None) -> bytes:
        pass


class AsyncBlobBackend(ABC):
    """Abstract class for async blob backend."""

    @asynccontextmanager
    async def connect(self) -> AsyncGenerator['AsyncBlobBackend', None]:
        """Connects to blob storage.

        Yields
        -------
        AsyncBlobBackend
            Class instance
        """
        yield self

    @classmethod
    def from_yaml(cls, path: str) -> 'AsyncBlobBackend':
        """Creates class instance from configuration path.

        Parameters
        ----------
        path : str
            path to configuration file.

        Returns
        -------
        AsyncBlobBackend
            Class instance.
        """
        with open(path) as f:
            config = yaml.safe_load(f)
        config.pop('backend', None)
        return cls(**config)

    @abstractmethod
    def container_url(self, container: str) -> str:
        pass

    def blob_url(self, container: str, path: str) -> str:
        return f'{self.container_url(container)}/{path}'

    @abstractmethod
    async def ensure_container(self, container: str) -> None:
        pass

    @abstractmethod
    def open_object(self, container: str, path: str) -> AsyncBlobReader:
        pass

    @abstractmethod
    async def put_object(self, container: str, path: str, stream: IO[bytes]) -> str:
        pass

    @abstractmethod
    async def delete_object(self, container: str, path: str) -> bool:
        pass

    @abstractmethod
    def list_by_prefix(self, container: str, prefix: str, delimiter: str = '/') -> AsyncIterator[BlobItem]:
        pass

    @abstractmethod
    async def set_content_type(self, container: str, path: str, content_type: str) -> None:
        pass

    @abstractmethod
    async def get_properties(self, container: str, path: str) -> BlobProperties:
        pass
