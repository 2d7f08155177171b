"""Local filesystem streamer for development and tests."""

from pathlib import Path
from typing import BinaryIO

import structlog

from src.storage.errors import (
    BlobAlreadyExistsError,
    BlobNotFoundError,
    InvalidFilenameError,
    StreamIOError,
    validate_filename,
)

logger = structlog.get_logger(__name__)


class LocalFileStreamer:
    """
    Streamer over a local directory (avoids an Azurite dependency).

    Filenames may contain "/" to address sub-directories below the root.
    """

    def __init__(self, root: Path):
        self.root = Path(root)

    def open_read_stream(self, filename: str) -> BinaryIO:
        """
        Open a file below the root for reading.

        Args:
            filename: Path relative to the root

        Returns:
            Binary file object
        """
        path = self._resolve(filename)
        try:
            return path.open("rb")
        except (FileNotFoundError, IsADirectoryError) as exc:
            raise BlobNotFoundError(filename, str(self.root)) from exc
        except OSError as exc:
            raise StreamIOError(f"Failed to open '{filename}' for reading: {exc}") from exc

    def open_write_stream(self, filename: str, overwrite: bool = True) -> BinaryIO:
        """
        Open a file below the root for writing, creating parent directories.

        Args:
            filename: Path relative to the root
            overwrite: If False and the file exists, raise BlobAlreadyExistsError

        Returns:
            Binary file object
        """
        path = self._resolve(filename)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            return path.open("wb" if overwrite else "xb")
        except FileExistsError as exc:
            logger.info("Refusing to overwrite existing file", root=str(self.root), file=filename)
            raise BlobAlreadyExistsError(filename, str(self.root)) from exc
        except OSError as exc:
            raise StreamIOError(f"Failed to open '{filename}' for writing: {exc}") from exc

    def _resolve(self, filename: str) -> Path:
        """Map a filename to a path, rejecting names that escape the root."""
        filename = validate_filename(filename)
        root = self.root.resolve()
        path = (root / filename).resolve()
        if path == root or not path.is_relative_to(root):
            raise InvalidFilenameError(f"Filename escapes streamer root: {filename}")
        return path
