"""
Application settings using Pydantic Settings.
"""

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_CONTAINER = "Container"
DEFAULT_BLOCK_SIZE = 4 * 1024 * 1024


class Settings(BaseSettings):
    """Streamer configuration loaded from environment variables."""

    model_config = SettingsConfigDict(
        # Prefer local overrides while keeping .env as the default source
        env_file=(".env.local", ".env"),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Backend selection
    streamer_backend: Literal["azure", "local"] = "azure"

    # Azure Storage
    azure_storage_connection_string: SecretStr | None = None
    azure_storage_account_url: str | None = None
    azure_storage_container: str = DEFAULT_CONTAINER

    # Streams
    streamer_block_size: int = Field(
        DEFAULT_BLOCK_SIZE, gt=0, description="Bytes staged per block on write"
    )

    # Local backend
    streamer_local_root: Path | None = None

    # Logging
    log_level: str = "INFO"
    log_format: Literal["json", "text"] = "json"

    @property
    def azure_connection_string_str(self) -> str | None:
        """Get Azure Storage connection string as string."""
        if self.azure_storage_connection_string:
            return self.azure_storage_connection_string.get_secret_value()
        return None


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings."""
    return Settings()
