"""
Azure Blob Storage streamer.
"""

import io
import threading
from typing import BinaryIO

import structlog
from azure.core.exceptions import AzureError, ResourceNotFoundError
from azure.identity import DefaultAzureCredential
from azure.storage.blob import BlobClient, BlobServiceClient

from src.config.settings import DEFAULT_BLOCK_SIZE, DEFAULT_CONTAINER
from src.storage.errors import (
    BlobAlreadyExistsError,
    BlobNotFoundError,
    StreamIOError,
    validate_filename,
)
from src.storage.streams import BlobReadStream, BlobWriteStream

logger = structlog.get_logger(__name__)


class AzureBlobStreamer:
    """
    Streamer for reading and writing blobs in an Azure container.

    The account connection is built on the first stream request and reused
    for every later call on the same instance. Supports both connection
    string and Managed Identity authentication.
    """

    def __init__(
        self,
        connection_string: str | None = None,
        container_name: str = DEFAULT_CONTAINER,
        account_url: str | None = None,
        block_size: int = DEFAULT_BLOCK_SIZE,
    ):
        self.connection_string = connection_string
        self.container_name = container_name
        self.account_url = account_url
        self.block_size = block_size

        self._service_client: BlobServiceClient | None = None
        self._lock = threading.Lock()

    def __enter__(self) -> "AzureBlobStreamer":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def open_read_stream(self, filename: str) -> BinaryIO:
        """
        Open a blob for sequential reading.

        Args:
            filename: Blob name inside the container

        Returns:
            Buffered binary reader over the blob content
        """
        filename = validate_filename(filename)
        blob_client = self._get_blob_client(filename)

        try:
            downloader = blob_client.download_blob()
        except ResourceNotFoundError as exc:
            raise BlobNotFoundError(filename, self.container_name) from exc
        except AzureError as exc:
            raise StreamIOError(f"Failed to open blob '{filename}' for reading: {exc}") from exc

        logger.debug(
            "Opened blob for reading",
            container=self.container_name,
            blob=filename,
            size=downloader.size,
        )
        return io.BufferedReader(BlobReadStream(downloader, filename))

    def open_write_stream(self, filename: str, overwrite: bool = True) -> BinaryIO:
        """
        Open a blob for writing.

        Args:
            filename: Blob name inside the container
            overwrite: If False and the blob exists, raise BlobAlreadyExistsError

        Returns:
            Writable binary stream; the blob is committed when it is closed
        """
        filename = validate_filename(filename)
        blob_client = self._get_blob_client(filename)

        if not overwrite:
            try:
                exists = blob_client.exists()
            except AzureError as exc:
                raise StreamIOError(f"Failed to check blob '{filename}': {exc}") from exc
            if exists:
                logger.info(
                    "Refusing to overwrite existing blob",
                    container=self.container_name,
                    blob=filename,
                )
                raise BlobAlreadyExistsError(filename, self.container_name)

        logger.debug(
            "Opened blob for writing",
            container=self.container_name,
            blob=filename,
            overwrite=overwrite,
        )
        return BlobWriteStream(
            blob_client,
            container=self.container_name,
            block_size=self.block_size,
            overwrite=overwrite,
        )

    def close(self) -> None:
        """Release the account connection if one was built."""
        with self._lock:
            service_client, self._service_client = self._service_client, None
        if service_client is not None:
            service_client.close()

    def _get_service_client(self) -> BlobServiceClient:
        service_client = self._service_client
        if service_client is not None:
            return service_client

        with self._lock:
            if self._service_client is None:
                self._service_client = self._connect()
            return self._service_client

    def _connect(self) -> BlobServiceClient:
        try:
            if self.connection_string:
                service_client = BlobServiceClient.from_connection_string(self.connection_string)
            elif self.account_url:
                # Use Managed Identity
                credential = DefaultAzureCredential()
                service_client = BlobServiceClient(self.account_url, credential=credential)
            else:
                raise ValueError("Either connection_string or account_url must be provided")
        except ValueError as exc:
            raise StreamIOError(f"Failed to connect to storage account: {exc}") from exc

        logger.debug("Connected to storage account", account=service_client.account_name)
        return service_client

    def _get_blob_client(self, filename: str) -> BlobClient:
        container_client = self._get_service_client().get_container_client(self.container_name)
        return container_client.get_blob_client(filename)
