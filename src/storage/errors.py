"""
Streamer exceptions.

Each error also derives from the closest builtin so callers may catch
either the streamer type or e.g. ``FileNotFoundError``.
"""


class StreamerError(Exception):
    """Base class for streamer failures."""


class InvalidFilenameError(StreamerError, ValueError):
    """Filename is missing, empty, or escapes the streamer's namespace."""


class BlobNotFoundError(StreamerError, FileNotFoundError):
    """Requested blob does not exist."""

    def __init__(self, filename: str, container: str):
        super().__init__(f"The file '{filename}' was not found in container '{container}'.")
        self.filename = filename
        self.container = container


class BlobAlreadyExistsError(StreamerError, FileExistsError):
    """Write refused because the blob exists and overwrite is disabled."""

    def __init__(self, filename: str, container: str):
        super().__init__(f"The file '{filename}' already exists in container '{container}'.")
        self.filename = filename
        self.container = container


class StreamIOError(StreamerError, OSError):
    """Any other storage or transport failure."""


def validate_filename(filename: str | None) -> str:
    """Reject missing or empty filenames before any storage access."""
    if filename is None:
        raise InvalidFilenameError("filename must not be None")
    if not isinstance(filename, str):
        raise InvalidFilenameError(f"filename must be a string, got {type(filename).__name__}")
    if not filename:
        raise InvalidFilenameError("filename must not be empty")
    return filename
