"""
File-like adapters over Azure blob downloads and block uploads.
"""

import base64
import io
import uuid

from azure.core import MatchConditions
from azure.core.exceptions import AzureError, ResourceExistsError, ResourceModifiedError
from azure.storage.blob import BlobBlock, BlobClient, StorageStreamDownloader

from src.storage.errors import BlobAlreadyExistsError, StreamIOError


class BlobReadStream(io.RawIOBase):
    """
    Sequential, read-only raw stream over a started blob download.

    Wrap in ``io.BufferedReader`` for line and partial reads.
    """

    def __init__(self, downloader: StorageStreamDownloader, name: str):
        self._downloader = downloader
        self.name = name

    def readable(self) -> bool:
        return True

    def readinto(self, b) -> int:
        if self.closed:
            raise ValueError("I/O operation on closed stream")
        try:
            data = self._downloader.read(len(b))
        except AzureError as exc:
            raise StreamIOError(f"Failed to read blob '{self.name}': {exc}") from exc
        n = len(data)
        b[:n] = data
        return n

    @property
    def size(self) -> int:
        """Total blob size in bytes, as reported when the download started."""
        return self._downloader.size


class BlobWriteStream(io.RawIOBase):
    """
    Write-only raw stream that stages blocks and commits them on close.

    Nothing becomes visible in the container until ``close()`` commits the
    block list. With ``overwrite=False`` the commit only succeeds while the
    blob is still absent.
    """

    def __init__(
        self,
        blob_client: BlobClient,
        container: str,
        block_size: int,
        overwrite: bool = True,
    ):
        self._blob_client = blob_client
        self._container = container
        self._block_size = block_size
        self._overwrite = overwrite
        self._buffer = bytearray()
        self._block_ids: list[str] = []
        self.name = blob_client.blob_name

    def writable(self) -> bool:
        return True

    def write(self, b) -> int:
        if self.closed:
            raise ValueError("I/O operation on closed stream")
        data = memoryview(b).cast("B")
        self._buffer += data
        while len(self._buffer) >= self._block_size:
            self._stage(bytes(self._buffer[: self._block_size]))
            del self._buffer[: self._block_size]
        return len(data)

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        # Leave the blob untouched when the writer body failed
        if exc_type is not None:
            self.abort()
        else:
            self.close()

    def __del__(self):
        # Only an explicit close() commits; a dropped stream is discarded
        if not self.closed:
            self.abort()

    def abort(self) -> None:
        """Close without committing; staged blocks are discarded by the service."""
        self._buffer.clear()
        self._block_ids.clear()
        super().close()

    def close(self) -> None:
        if self.closed:
            return
        try:
            if self._buffer:
                self._stage(bytes(self._buffer))
                self._buffer.clear()
            self._commit()
        finally:
            super().close()

    def _stage(self, chunk: bytes) -> None:
        # Block ids within a blob must all have the same encoded length
        block_id = base64.b64encode(uuid.uuid4().hex.encode()).decode()
        try:
            self._blob_client.stage_block(block_id=block_id, data=chunk, length=len(chunk))
        except AzureError as exc:
            raise StreamIOError(f"Failed to stage block for blob '{self.name}': {exc}") from exc
        self._block_ids.append(block_id)

    def _commit(self) -> None:
        kwargs = {}
        if not self._overwrite:
            kwargs = {"etag": "*", "match_condition": MatchConditions.IfMissing}

        block_list = [BlobBlock(block_id=block_id) for block_id in self._block_ids]
        try:
            self._blob_client.commit_block_list(block_list, **kwargs)
        except (ResourceExistsError, ResourceModifiedError) as exc:
            raise BlobAlreadyExistsError(self.name, self._container) from exc
        except AzureError as exc:
            raise StreamIOError(f"Failed to commit blob '{self.name}': {exc}") from exc
