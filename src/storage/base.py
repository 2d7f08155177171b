"""Base protocol for streamer implementations."""

from typing import BinaryIO, Protocol


class Streamer(Protocol):
    """
    Opens named resources for sequential read or write access.

    Implementations address names within their own namespace (a blob
    container, a directory) and raise the errors in ``src.storage.errors``.
    """

    def open_read_stream(self, filename: str) -> BinaryIO:
        """
        Open a stream for reading.

        Args:
            filename: Name of the resource inside the namespace

        Returns:
            Readable binary stream

        Raises:
            InvalidFilenameError: If filename is None or empty
            BlobNotFoundError: If the resource does not exist
            StreamIOError: On any other storage failure
        """
        ...

    def open_write_stream(self, filename: str, overwrite: bool = True) -> BinaryIO:
        """
        Open a stream for writing.

        Args:
            filename: Name of the resource inside the namespace
            overwrite: If False and the resource exists, refuse to open

        Returns:
            Writable binary stream; content is committed on close

        Raises:
            InvalidFilenameError: If filename is None or empty
            BlobAlreadyExistsError: If overwrite is False and the resource exists
            StreamIOError: On any other storage failure
        """
        ...
