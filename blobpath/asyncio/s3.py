from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import IO, Any, AsyncIterator, Optional

import aioboto3
from botocore.exceptions import ClientError

from blobpath.asyncio.backend import AsyncBlobBackend, AsyncBlobReader
from blobpath.errors import BlobNotFoundError
from blobpath.utils.entry import BlobItem, BlobProperties

_NOT_FOUND_CODES = ('404', 'NoSuchKey', 'NoSuchBucket', 'NotFound')


def _is_not_found(err: ClientError) -> bool:
    return err.response.get('Error', {}).get('Code') in _NOT_FOUND_CODES


class AsyncS3Reader(AsyncBlobReader):
    """Async S3 stream reader.

    Attributes
    ----------
    client : Any
        Aioboto3 S3 client.
    bucket : str
        S3 bucket.
    key : str
        S3 file key.
    """

    def __init__(
        self,
        client: Any,
        bucket: str,
        key: str
    ):
        self.client = client
        self.bucket = bucket
        self.key = key

    async def __aenter__(self) -> 'AsyncS3Reader':
        try:
            obj = await self.client.get_object(Bucket=self.bucket, Key=self.key)
        except ClientError as err:
            if _is_not_found(err):
                raise BlobNotFoundError(self.bucket, self.key) from err
            raise
        self.stream = obj['Body']
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.stream.close()

    async def read(self, size: Optional[int] = None) -> bytes:
        return await self.stream.read(size)


class AsyncS3Backend(AsyncBlobBackend):
    """Async S3 backend. Containers are buckets.

    Attributes
    ----------
    endpoint_url : str
        Endpoint URL.
    aws_access_key_id : str
        AWS access key ID
    aws_secret_access_key : str
        AWS secret access key
    page_size : int, default=1000
        Listing page size.
    """

    def __init__(
        self,
        endpoint_url: str,
        aws_access_key_id: str,
        aws_secret_access_key: str,
        page_size: int = 1000
    ) -> None:
        self.endpoint_url = endpoint_url
        self.aws_access_key_id = aws_access_key_id
        self.aws_secret_access_key = aws_secret_access_key
        self.page_size = page_size
        self.client: Any = None

    @asynccontextmanager
    async def connect(self) -> AsyncGenerator['AsyncS3Backend', None]:
        """Connects to S3.

        Yields
        -------
        AsyncS3Backend
            Class instance
        """
        async with aioboto3.Session().client(
                's3', endpoint_url=self.endpoint_url,
                aws_access_key_id=self.aws_access_key_id,
                aws_secret_access_key=self.aws_secret_access_key
        ) as client:
            self.client = client
            try:
                yield self
            finally:
                self.client = None

    def container_url(self, container: str) -> str:
        return f"{self.endpoint_url.rstrip('/')}/{container}"

    async def ensure_container(self, container: str) -> None:
        try:
            await self.client.head_bucket(Bucket=container)
        except ClientError as err:
            if not _is_not_found(err):
                raise
            try:
                await self.client.create_bucket(Bucket=container)
            except ClientError as create_err:
                code = create_err.response.get('Error', {}).get('Code')
                if code not in ('BucketAlreadyOwnedByYou', 'BucketAlreadyExists'):
                    raise

    def open_object(self, container: str, path: str) -> AsyncS3Reader:
        return AsyncS3Reader(self.client, bucket=container, key=path)

    async def put_object(self, container: str, path: str, stream: IO[bytes]) -> str:
        await self.client.upload_fileobj(stream, container, path)
        return self.blob_url(container, path)

    async def delete_object(self, container: str, path: str) -> bool:
        try:
            await self.client.head_object(Bucket=container, Key=path)
        except ClientError as err:
            if _is_not_found(err):
                return False
            raise
        await self.client.delete_object(Bucket=container, Key=path)
        return True

    async def list_by_prefix(self, container: str, prefix: str, delimiter: str = '/') -> AsyncIterator[BlobItem]:
        paginator = self.client.get_paginator('list_objects_v2')
        params = {'Bucket': container, 'Prefix': prefix, 'PaginationConfig': {'PageSize': self.page_size}}
        if delimiter:
            params['Delimiter'] = delimiter
        async for page in paginator.paginate(**params):
            for item in page.get('CommonPrefixes', []):
                yield BlobItem(True, item['Prefix'])
            for item in page.get('Contents', []):
                yield BlobItem(False, item['Key'], item.get('Size'), item.get('LastModified'))

    async def set_content_type(self, container: str, path: str, content_type: str) -> None:
        await self.client.copy_object(
            Bucket=container,
            Key=path,
            CopySource={'Bucket': container, 'Key': path},
            ContentType=content_type,
            MetadataDirective='REPLACE'
        )

    async def get_properties(self, container: str, path: str) -> BlobProperties:
        try:
            resp = await self.client.head_object(Bucket=container, Key=path)
        except ClientError as err:
            if _is_not_found(err):
                raise BlobNotFoundError(container, path) from err
            raise
        return BlobProperties(
            path=path,
            size=resp.get('ContentLength', 0),
            url=self.blob_url(container, path),
            last_modified=resp.get('LastModified'),
            content_type=resp.get('ContentType')
        )
