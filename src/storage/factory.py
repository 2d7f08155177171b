"""Factory for creating streamer instances."""

from functools import lru_cache

from src.config import Settings, get_settings
from src.storage.base import Streamer
from src.storage.blob import AzureBlobStreamer
from src.storage.local import LocalFileStreamer


def validate_azure_config(settings: Settings) -> None:
    """
    Early validation of Azure configuration.

    Raises:
        ValueError: If configuration is invalid
    """
    if not settings.azure_storage_container:
        raise ValueError("AZURE_STORAGE_CONTAINER required for Azure blob storage")

    if not settings.azure_connection_string_str and not settings.azure_storage_account_url:
        raise ValueError(
            "Set AZURE_STORAGE_CONNECTION_STRING or AZURE_STORAGE_ACCOUNT_URL "
            "for Azure blob storage"
        )


def make_streamer(settings: Settings) -> Streamer:
    """
    Create streamer instance based on settings.

    Args:
        settings: Application settings

    Returns:
        AzureBlobStreamer or LocalFileStreamer

    Raises:
        ValueError: If configuration is invalid
        NotImplementedError: If backend is not supported
    """
    if settings.streamer_backend == "azure":
        validate_azure_config(settings)
        return AzureBlobStreamer(
            connection_string=settings.azure_connection_string_str,
            container_name=settings.azure_storage_container,
            account_url=settings.azure_storage_account_url,
            block_size=settings.streamer_block_size,
        )

    elif settings.streamer_backend == "local":
        if settings.streamer_local_root is None:
            raise ValueError("STREAMER_LOCAL_ROOT required for the local backend")
        return LocalFileStreamer(settings.streamer_local_root)

    else:
        raise NotImplementedError(f"Backend {settings.streamer_backend} not supported")


@lru_cache
def get_streamer() -> Streamer:
    """Get cached streamer for the configured backend."""
    return make_streamer(get_settings())
