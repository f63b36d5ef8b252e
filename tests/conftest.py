"""Shared fixtures for blobpath tests."""

import pytest

from blobpath.asyncio.local import AsyncLocalBackend
from blobpath.asyncio.memory import AsyncMemoryBackend
from blobpath.service import BlobPathService

CONTAINER = 'test-container'


@pytest.fixture
def memory_backend():
    return AsyncMemoryBackend(page_size=2)


@pytest.fixture
def service(memory_backend):
    return BlobPathService(memory_backend)


@pytest.fixture
def local_backend(tmp_path):
    return AsyncLocalBackend(str(tmp_path / 'storage'), chunk_size=4)


@pytest.fixture
def local_service(local_backend):
    return BlobPathService(local_backend)
