import argparse
import asyncio
import logging
import os
import platform
import re
import sys
from typing import Optional

import aiofiles
import aiofiles.os
import asyncio_pool
from tqdm.auto import tqdm

from blobpath.config import backend_from_yaml
from blobpath.service import BlobPathService
from blobpath.utils.entry import FSEntry
from blobpath.utils.paths import normalize_directory_path

logger = logging.getLogger(__name__)


class CLI:
    """Async upload/download class.

    Attributes
    ----------
    service : BlobPathService
        Blob path service on a connected backend.
    container : str
        Container name.
    """

    def __init__(
        self,
        service: BlobPathService,
        container: str
    ):
        self.service = service
        self.container = container

    async def ls(self, path: Optional[str]) -> list[FSEntry]:
        return await self.service.list_entries(path, self.container)

    async def upload(
        self,
        local_path: str,
        path: str,
        num_workers: int = 16
    ) -> list[str]:
        """Upload file or directory.

        Parameters
        ----------
        local_path : str
            Local file or directory path.
        path : str
            Blob path, or directory path if ``local_path`` is a directory.
        num_workers : int, default=16
            Max workers.

        Returns
        -------
        list[str]
            Error files.
        """
        local_path = self._prepare_local_path(local_path)
        if not await aiofiles.os.path.isdir(local_path):
            await self._upload_file(local_path, path)
            return []
        prefix = normalize_directory_path(path)
        files = self._scan_local_files(local_path)
        files_pbar = tqdm(total=len(files), desc='Files')
        bytes_pbar = tqdm(total=sum(files.values()), desc='Bytes')
        futures = {}
        async with asyncio_pool.AioPool(size=num_workers) as pool:
            for file_path, file_size in files.items():
                blob_path = prefix + os.path.relpath(file_path, local_path).replace(os.sep, '/')
                futures[file_path] = await pool.spawn(self._upload_file(
                    file_path, blob_path, file_size, files_pbar, bytes_pbar
                ))
        files_pbar.close()
        bytes_pbar.close()
        return self._collect_errors(futures)

    async def download(
        self,
        path: str,
        local_path: str,
        num_workers: int = 16
    ) -> list[str]:
        """Download blob or directory.

        Parameters
        ----------
        path : str
            Blob path, or directory path ending with ``/``.
        local_path : str
            Local file or directory path.
        num_workers : int, default=16
            Max workers.

        Returns
        -------
        list[str]
            Error files.
        """
        local_path = self._prepare_local_path(local_path)
        if not path.endswith('/'):
            await self._download_file(path, local_path)
            return []
        files = await self._walk(path)
        files_pbar = tqdm(total=len(files), desc='Files')
        bytes_pbar = tqdm(total=sum(file.size or 0 for file in files), desc='Bytes')
        prefix = normalize_directory_path(path)
        futures = {}
        async with asyncio_pool.AioPool(size=num_workers) as pool:
            for file in files:
                destination_path = os.path.join(local_path, *file.path[len(prefix):].split('/'))
                futures[file.path] = await pool.spawn(self._download_file(
                    file.path, destination_path, file.size or 0, files_pbar, bytes_pbar
                ))
        files_pbar.close()
        bytes_pbar.close()
        return self._collect_errors(futures)

    async def _walk(self, path: str) -> list[FSEntry]:
        result = []
        for entry in await self.service.list_entries(path, self.container):
            if entry.type == 'dir':
                result += await self._walk(entry.path)
            else:
                result.append(entry)
        return result

    async def _upload_file(
        self,
        source_path: str,
        destination_path: str,
        file_size: int = 0,
        files_pbar: Optional[tqdm] = None,
        bytes_pbar: Optional[tqdm] = None
    ) -> str:
        async with aiofiles.open(source_path, 'rb') as f:
            data = await f.read()
        try:
            return await self.service.upload(data, destination_path, self.container)
        finally:
            if files_pbar is not None:
                files_pbar.update(1)
            if bytes_pbar is not None:
                bytes_pbar.update(file_size)

    async def _download_file(
        self,
        source_path: str,
        destination_path: str,
        file_size: int = 0,
        files_pbar: Optional[tqdm] = None,
        bytes_pbar: Optional[tqdm] = None
    ) -> None:
        try:
            data = await self.service.download(source_path, self.container)
            directory = os.path.dirname(destination_path)
            if directory:
                await aiofiles.os.makedirs(directory, exist_ok=True)
            async with aiofiles.open(destination_path, 'wb') as f:
                await f.write(data)
        finally:
            if files_pbar is not None:
                files_pbar.update(1)
            if bytes_pbar is not None:
                bytes_pbar.update(file_size)

    @staticmethod
    def _collect_errors(futures: dict[str, 'asyncio.Future[object]']) -> list[str]:
        error_files = []
        for path, future in futures.items():
            err = future.exception()
            if err is not None:
                logger.warning("'%s' failed: %s", path, err)
                error_files.append(path)
        return error_files

    @staticmethod
    def _scan_local_files(local_path: str) -> dict[str, int]:
        path2size = {}
        for root, dirs, files in os.walk(local_path):
            for name in files:
                file_path = os.path.join(root, name)
                path2size[file_path] = os.path.getsize(file_path)
        return path2size

    @staticmethod
    def _prepare_local_path(local_path: str) -> str:
        if platform.system() == 'Windows':
            local_path = re.sub(r'\\+', '/', local_path)
        return local_path.rstrip('/') or '/'


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog='blobpath',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog='to see action help message:\n  blobpath upload -h\n  blobpath download -h'
    )
    parser.add_argument('-v', '--verbose', action='store_true', help='verbose logging')
    subparsers = parser.add_subparsers(dest='action')
    subparsers.required = True
    ls_parser = subparsers.add_parser('ls', help='list directory')
    upload_parser = subparsers.add_parser('upload', help='upload file or directory')
    download_parser = subparsers.add_parser('download', help='download blob or directory')
    rm_parser = subparsers.add_parser('rm', help='delete blob')
    info_parser = subparsers.add_parser('info', help='show blob properties')
    for subparser in [ls_parser, upload_parser, download_parser, rm_parser, info_parser]:
        subparser.add_argument('--config_path', required=True, type=str, help='path to configuration file')
        subparser.add_argument('--container', required=True, type=str, help='container name')
    ls_parser.add_argument('--path', default='', type=str, help='directory path')
    for subparser in [upload_parser, download_parser, rm_parser, info_parser]:
        subparser.add_argument('--path', required=True, type=str, help='blob path')
    for subparser in [upload_parser, download_parser]:
        subparser.add_argument('--local_path', required=True, type=str, help='local file or folder path')
        subparser.add_argument('--workers', type=int, default=16, help='max workers')
    return parser.parse_args(argv)


async def main(argv: Optional[list[str]] = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    backend = backend_from_yaml(args.config_path)
    async with backend.connect() as connected:
        cli = CLI(BlobPathService(connected), args.container)
        if args.action == 'ls':
            for entry in await cli.ls(args.path):
                marker = 'd' if entry.type == 'dir' else '-'
                print(f'{marker} {entry.size or 0:>12} {entry.name}')
        elif args.action == 'upload':
            error_files = await cli.upload(args.local_path, args.path, num_workers=args.workers)
            print(f'Error files: {error_files}')
            return 1 if error_files else 0
        elif args.action == 'download':
            error_files = await cli.download(args.path, args.local_path, num_workers=args.workers)
            print(f'Error files: {error_files}')
            return 1 if error_files else 0
        elif args.action == 'rm':
            existed = await cli.service.delete(args.path, args.container)
            if not existed:
                print(f"'{args.path}' did not exist")
        elif args.action == 'info':
            info = await cli.service.get_info(args.path, args.container)
            if info is None:
                print(f"No such blob: '{args.path}'", file=sys.stderr)
                return 1
            print(f'path: {info.path}')
            print(f'size: {info.size}')
            print(f'content_type: {info.content_type}')
            print(f'last_modified: {info.last_modified}')
            print(f'url: {info.url}')
        else:
            raise ValueError(f"invalid action: '{args.action}'")
    return 0


def run() -> None:
    sys.exit(asyncio.run(main()))


if __name__ == '__main__':
    run()
