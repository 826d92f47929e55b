"""Application configuration for homesphere.

Defines configuration models for the remote API, durable storage and logging.
Config is stored as JSON at the OS-appropriate location (via platformdirs).
A missing file means defaults; the API URL can be overridden per process
with the HOMESPHERE_API_URL environment variable.

Example usage:
    config = AppConfig.load_from_file(get_config_path())
    config.save_to_file(get_config_path())
"""

from __future__ import annotations

__all__ = [
    "DEFAULT_LOG_DIR",
    "ApiConfig",
    "AppConfig",
    "LoggingConfig",
    "StorageConfig",
    "get_config_path",
    "load_config",
]

import json
import os
import sys
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator

from homesphere.constants import (
    API_URL_ENV_VAR,
    APP_NAME,
    CONFIG_DIR,
    CONFIG_FILENAME,
    DEFAULT_API_BASE_URL,
    DEFAULT_HTTP_TIMEOUT_SECONDS,
    MAX_HTTP_TIMEOUT_SECONDS,
    MIN_HTTP_TIMEOUT_SECONDS,
)
from homesphere.exceptions import ConfigurationError
from homesphere.utils.file_helpers import load_validated_json, write_private_file


def _get_platform_log_dir() -> str:
    """Get platform-appropriate base log directory following OS conventions.

    Platform conventions:
        - macOS: ~/Library/Logs
        - Linux: ~/.local/state (XDG_STATE_HOME)
        - Windows: ~/AppData/Local
    """
    if sys.platform == "darwin":
        return "~/Library/Logs"
    elif sys.platform == "win32":
        return "~/AppData/Local"
    else:
        return os.environ.get("XDG_STATE_HOME", "~/.local/state")


DEFAULT_LOG_DIR = _get_platform_log_dir()


class ApiConfig(BaseModel):
    """Remote API connection settings.

    Attributes:
        base_url: Base endpoint; every resource path is appended to it.
        timeout_seconds: Per-request timeout, surfaced as TransportError.
    """

    base_url: str = Field(default=DEFAULT_API_BASE_URL, min_length=1)
    timeout_seconds: float = Field(
        default=DEFAULT_HTTP_TIMEOUT_SECONDS,
        ge=MIN_HTTP_TIMEOUT_SECONDS,
        le=MAX_HTTP_TIMEOUT_SECONDS,
    )

    @field_validator("base_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        if not value.startswith(("http://", "https://")):
            raise ValueError("base_url must start with http:// or https://")
        return value.rstrip("/")


class StorageConfig(BaseModel):
    """Where the session token and profile are persisted.

    Attributes:
        backend: "auto" uses the OS keychain when usable, else an encrypted
            file. "memory" keeps nothing across restarts.
    """

    backend: Literal["auto", "keychain", "encrypted_file", "memory"] = "auto"


class LoggingConfig(BaseModel):
    """Logging settings.

    Attributes:
        log_dir: Base directory; the system log is <log_dir>/homesphere/system.jsonl.
        log_level: Console threshold; --verbose lowers it to INFO.
    """

    log_dir: str = DEFAULT_LOG_DIR
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "WARNING"

    @property
    def system_log_path(self) -> Path:
        return Path(self.log_dir).expanduser() / APP_NAME / "system.jsonl"


class AppConfig(BaseModel):
    """Top-level configuration."""

    api: ApiConfig = Field(default_factory=ApiConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @classmethod
    def load_from_file(cls, path: Path) -> "AppConfig":
        """Load config from ``path``; defaults when the file does not exist.

        Raises:
            ConfigurationError: If the file is not valid JSON or fails validation.
        """
        if not path.exists():
            return cls()
        try:
            return load_validated_json(path, cls, file_type="config")
        except ValueError as e:
            raise ConfigurationError(str(e)) from e

    def save_to_file(self, path: Path) -> None:
        """Write config as indented JSON with owner-only permissions."""
        data = json.dumps(self.model_dump(mode="json"), indent=2) + "\n"
        write_private_file(path, data.encode("utf-8"))

    def with_env_overrides(self) -> "AppConfig":
        """Return a copy with environment overrides applied."""
        url = os.environ.get(API_URL_ENV_VAR)
        if not url:
            return self
        api = ApiConfig(base_url=url, timeout_seconds=self.api.timeout_seconds)
        return self.model_copy(update={"api": api})


def get_config_path() -> Path:
    return Path(CONFIG_DIR) / CONFIG_FILENAME


def load_config(path: Path | None = None) -> AppConfig:
    """Load config from ``path`` (default location if None) plus env overrides."""
    return AppConfig.load_from_file(path or get_config_path()).with_env_overrides()
