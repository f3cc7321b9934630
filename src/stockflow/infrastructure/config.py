"""Runtime settings, read from ``STOCKFLOW_*`` environment variables or a ``.env`` file."""

from __future__ import annotations

from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Resolve data directory relative to the project root.
# When installed in editable mode the project root is the repo root.
_DEFAULT_DATA_DIR = Path(__file__).resolve().parents[3] / "data"


class Settings(BaseSettings):
    """Connection and runtime settings.

    Without ``api_url`` every adapter reads and writes JSON files under
    ``data_dir``. Malformed values (a timeout of ``"soon"``) raise
    ``pydantic.ValidationError`` when the settings are loaded.
    """

    api_url: str = Field(default="", description="Base URL of the upstream inventory API")
    consumer_key: str = Field(default="")
    consumer_secret: str = Field(default="")
    timeout: float = Field(default=10.0, gt=0, description="Seconds per upstream request")
    max_workers: int = Field(default=8, description="Parallel location writes when provisioning")
    data_dir: Path = Field(default=_DEFAULT_DATA_DIR)
    log_level: str = Field(default="INFO")

    model_config = SettingsConfigDict(
        env_prefix="STOCKFLOW_",
        env_file=".env",
        env_ignore_empty=True,
        extra="ignore",
        frozen=True,
    )

    @field_validator("api_url")
    @classmethod
    def _strip_url(cls, value: str) -> str:
        return value.strip()

    @field_validator("max_workers")
    @classmethod
    def _at_least_one_worker(cls, value: int) -> int:
        return max(1, value)

    @field_validator("log_level")
    @classmethod
    def _upper_level(cls, value: str) -> str:
        return value.strip().upper()

    @property
    def uses_upstream(self) -> bool:
        return bool(self.api_url)
