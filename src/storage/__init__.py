"""
Stream access to Azure Blob Storage and local files.
"""

from src.storage.base import Streamer
from src.storage.blob import AzureBlobStreamer
from src.storage.errors import (
    BlobAlreadyExistsError,
    BlobNotFoundError,
    InvalidFilenameError,
    StreamerError,
    StreamIOError,
)
from src.storage.factory import get_streamer, make_streamer
from src.storage.local import LocalFileStreamer

__all__ = [
    "Streamer",
    "AzureBlobStreamer",
    "LocalFileStreamer",
    "get_streamer",
    "make_streamer",
    # Errors
    "StreamerError",
    "InvalidFilenameError",
    "BlobNotFoundError",
    "BlobAlreadyExistsError",
    "StreamIOError",
]
