"""Configuration model for the static UI and websocket server runtime."""

from __future__ import annotations

import sys
from dataclasses import dataclass
from pathlib import Path


class ServerConfigurationError(Exception):
    """Raised when UI server configuration is invalid."""


WEBSOCKET_PATH = "/ws"
HEALTHZ_PATH = "/healthz"
INDEX_FILE = "index.html"


def default_web_root() -> Path:
    base_dir = Path(getattr(sys, "_MEIPASS", Path(__file__).resolve().parents[2]))
    return base_dir / "web_ui"


@dataclass(frozen=True)
class UIServerConfig:
    """Validated UI server configuration derived from app settings."""
    enabled: bool = True
    host: str = "127.0.0.1"
    port: int = 8765
    web_root: str = ""

    def __post_init__(self) -> None:
        if not self.host.strip():
            raise ServerConfigurationError("UI_SERVER_HOST cannot be empty")

        if not 1 <= self.port <= 65535:
            raise ServerConfigurationError(
                f"UI_SERVER_PORT must be in [1, 65535], got: {self.port}"
            )

        if self.enabled:
            if not self.web_root:
                raise ServerConfigurationError("UI_SERVER_WEB_ROOT cannot be empty")

            root = Path(self.web_root)
            if not root.is_dir():
                raise ServerConfigurationError(f"UI web root is not a directory: {root}")
            if not (root / INDEX_FILE).is_file():
                raise ServerConfigurationError(
                    f"UI index file not found: {root / INDEX_FILE}"
                )

    @property
    def websocket_path(self) -> str:
        return WEBSOCKET_PATH

    @property
    def origin(self) -> str:
        return f"http://{self.host}:{self.port}"

    @classmethod
    def from_settings(cls, settings) -> "UIServerConfig":
        web_root = settings.web_root.strip() if settings.web_root else ""
        if not web_root:
            web_root = str(default_web_root())
        return cls(
            enabled=bool(settings.enabled),
            host=settings.host,
            port=settings.port,
            web_root=web_root,
        )
