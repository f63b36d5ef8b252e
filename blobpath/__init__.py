from blobpath.asyncio.azure import AsyncAzureBackend
from blobpath.asyncio.backend import AsyncBlobBackend
from blobpath.asyncio.local import AsyncLocalBackend
from blobpath.asyncio.memory import AsyncMemoryBackend
from blobpath.asyncio.s3 import AsyncS3Backend
from blobpath.errors import (
    BlobNotFoundError,
    BlobPathError,
    ConfigError,
    InvalidArgumentError,
)
from blobpath.service import BlobPathService
from blobpath.utils.content_types import guess_content_type
from blobpath.utils.entry import BlobProperties, FSEntry
from blobpath.utils.paths import normalize_directory_path

__all__ = [
    'AsyncAzureBackend',
    'AsyncBlobBackend',
    'AsyncLocalBackend',
    'AsyncMemoryBackend',
    'AsyncS3Backend',
    'BlobNotFoundError',
    'BlobPathError',
    'BlobPathService',
    'BlobProperties',
    'ConfigError',
    'FSEntry',
    'InvalidArgumentError',
    'guess_content_type',
    'normalize_directory_path',
]
