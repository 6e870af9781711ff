# Server settings — env-driven configuration for the FileDrop server.
# Created: 2026-10-19
#
# Every field can be overridden with a FILEDROP_* environment variable.
# PORT and MAX_FILE_SIZE_MB are honoured too so the server runs unchanged
# on hosts that only export the conventional names.

from __future__ import annotations

import logging
import os
from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

DEFAULT_PORT = 3001
DEFAULT_MAX_FILE_SIZE_MB = 100


def get_config_dir() -> Path:
    """Get/create the per-user config directory (~/.filedrop)."""
    d = Path(os.environ.get("FILEDROP_CONFIG_DIR", Path.home() / ".filedrop"))
    d.mkdir(parents=True, exist_ok=True)
    return d


class Settings(BaseSettings):
    """FileDrop server settings."""

    model_config = SettingsConfigDict(env_prefix="FILEDROP_", extra="ignore")

    host: str = "0.0.0.0"
    port: int = Field(default=DEFAULT_PORT, ge=1, le=65535)
    storage_dir: Path = Field(default_factory=lambda: Path.cwd() / "uploads")
    max_file_size_mb: int = Field(default=DEFAULT_MAX_FILE_SIZE_MB, ge=1)
    cors_allowed_origins: list[str] = Field(default_factory=list)
    log_level: str = "INFO"

    @field_validator("storage_dir")
    @classmethod
    def _expand_storage_dir(cls, value: Path) -> Path:
        return value.expanduser()

    @property
    def max_file_size_bytes(self) -> int:
        return self.max_file_size_mb * 1024 * 1024

    @classmethod
    def load(cls, **overrides) -> Settings:
        """Build settings from the environment, then apply explicit overrides.

        ``PORT`` and ``MAX_FILE_SIZE_MB`` fill in when the prefixed variables
        are absent. Overrides whose value is ``None`` are ignored so argparse
        defaults can be passed straight through.
        """
        fallbacks = {
            "port": os.environ.get("PORT"),
            "max_file_size_mb": os.environ.get("MAX_FILE_SIZE_MB"),
        }
        values = {}
        for key, raw in fallbacks.items():
            if raw and f"FILEDROP_{key.upper()}" not in os.environ:
                values[key] = raw
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)

    def ensure_storage_dir(self) -> Path:
        """Create the storage root if needed and return its resolved path."""
        self.storage_dir.mkdir(parents=True, exist_ok=True)
        return self.storage_dir.resolve()


@lru_cache
def get_settings() -> Settings:
    """Process-wide settings, loaded once."""
    return Settings.load()
