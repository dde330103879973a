"""Runtime configuration.

Values come from ``ODF_*`` environment variables, then a ``.env`` file in
the working directory, then the defaults below. A few unprefixed names
common on hosting platforms are accepted too: ``PORT`` for the bind port,
``DATA_DIR`` and ``RENDER_DISK_MOUNT_PATH`` for the data directory.

    >>> OdfSettings(backend="sqlite", database_url="sqlite:///:memory:").backend
    'sqlite'
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

Backend = Literal["memory", "json", "sqlite"]


class OdfSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="ODF_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    # server
    host: str = "0.0.0.0"
    port: int = Field(default=5500, validation_alias=AliasChoices("ODF_PORT", "PORT", "port"))
    debug: bool = Field(default=False, description="Include exception text in 500 responses")
    api_prefix: str = "/api"

    # logging
    log_level: str = "INFO"
    json_logs: bool | None = Field(default=None, description="None picks JSON when stderr is not a terminal")

    # storage
    backend: Backend = "json"
    data_dir: Path = Field(
        default_factory=Path.cwd,
        validation_alias=AliasChoices("ODF_DATA_DIR", "DATA_DIR", "RENDER_DISK_MOUNT_PATH", "data_dir"),
    )
    data_file: str = "data.json"
    seed_file: Path | None = Field(default=None, description="Copied into data_file when it does not exist yet")
    atomic_writes: bool = True
    database_url: str = Field(default="sqlite:///odf.db", description="Relative paths resolve inside data_dir")

    # frames
    default_port_count: int = Field(default=96, ge=0)
    search_limit: int = Field(default=100, ge=1)
    max_payload_bytes: int = Field(default=2_000_000, ge=1)

    @field_validator("log_level")
    @classmethod
    def _normalize_level(cls, value: str) -> str:
        return value.strip().upper()

    @property
    def data_path(self) -> Path:
        return Path(self.data_dir) / self.data_file


@lru_cache(maxsize=1)
def get_settings() -> OdfSettings:
    """Process-wide settings, read from the environment on first call."""
    return OdfSettings()


__all__ = ["Backend", "OdfSettings", "get_settings"]
