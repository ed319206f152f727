"""Dataclass schema objects used by runtime configuration loading."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from offline.config import (
    CACHE_NAME,
    DEFAULT_FETCH_TIMEOUT_SECONDS,
    DEFAULT_PATH_PREFIX,
    EXTERNAL_URLS,
)

DEFAULT_CONFIG_FILE = "config.toml"


class AppConfigurationError(Exception):
    """Raised when application configuration fails."""


@dataclass(frozen=True)
class AudioSettings:
    """Audio cue settings from `[audio]`."""
    enabled: bool = False
    file: str = ""
    output_device: Optional[int] = None


@dataclass(frozen=True)
class UIServerSettings:
    """Built-in UI server settings from `[ui_server]`."""
    enabled: bool = True
    host: str = "127.0.0.1"
    port: int = 8765
    web_root: str = ""


@dataclass(frozen=True)
class OfflineSettings:
    """Offline cache proxy settings from `[offline]`."""
    cache_name: str = CACHE_NAME
    origin: str = ""
    path_prefix: str = DEFAULT_PATH_PREFIX
    external_urls: tuple[str, ...] = field(default=EXTERNAL_URLS)
    fallback_url: str = ""
    fetch_timeout_seconds: float = DEFAULT_FETCH_TIMEOUT_SECONDS
    install_on_startup: bool = True


@dataclass(frozen=True)
class LoggingSettings:
    """Root log level from `[logging]`."""
    level: str = "INFO"


@dataclass(frozen=True)
class AppConfig:
    """Complete typed runtime configuration loaded from `config.toml`."""
    audio: AudioSettings
    ui_server: UIServerSettings
    offline: OfflineSettings
    logging: LoggingSettings
    source_file: str
