"""Client configuration, read from ``WSS_*`` environment variables or a ``.env`` file."""

from pathlib import Path
from typing import Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_SERVICE_URL = "https://saas.whitesourcesoftware.com/agent"
DEFAULT_CONNECTION_TIMEOUT_MINUTES = 60

# Envelope status meaning the request was served
STATUS_SUCCESS = 0


class Settings(BaseSettings):
    """Settings for the service client and the file-backed codec.

    Values passed explicitly to a client constructor win over these.
    """

    model_config = SettingsConfigDict(
        env_prefix="WSS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    url: str = DEFAULT_SERVICE_URL
    connection_timeout_minutes: int = DEFAULT_CONNECTION_TIMEOUT_MINUTES

    # Staging directory for the chunked file codec; None means the system default
    temp_dir: Optional[Path] = None

    success_status: int = STATUS_SUCCESS

    agent: str = "generic"
    agent_version: str = "1.0"
    plugin_version: str = "1.0"

    @field_validator("url")
    @classmethod
    def _default_blank_url(cls, value: str) -> str:
        return value.strip() or DEFAULT_SERVICE_URL

    @field_validator("connection_timeout_minutes")
    @classmethod
    def _default_non_positive_timeout(cls, value: int) -> int:
        return value if value > 0 else DEFAULT_CONNECTION_TIMEOUT_MINUTES

    @property
    def timeout_seconds(self) -> float:
        return self.connection_timeout_minutes * 60.0
