"""Cache generation name, manifest layout, and validated proxy configuration."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional
from urllib.parse import urljoin

from .types import origin_of

CACHE_NAME = "pomo-timer-v1"
DEFAULT_PATH_PREFIX = "/"
DEFAULT_ORIGIN = "http://127.0.0.1:8765"
DEFAULT_FETCH_TIMEOUT_SECONDS = 10.0

# Page shell, relative to the deployment prefix.
SHELL_PATHS: tuple[str, ...] = (
    "",
    "index.html",
    "script.js",
    "audio.wav",
    "manifest.json",
    "icons/icon-192x192.png",
    "icons/icon-512x512.png",
    "icons/icon.svg",
)

EXTERNAL_URLS: tuple[str, ...] = (
    "https://cdn.tailwindcss.com?plugins=forms,container-queries",
    "https://fonts.googleapis.com/css2?family=Inter:wght@400;500;600;700&display=swap",
    "https://fonts.googleapis.com/icon?family=Material+Icons",
)


class OfflineConfigurationError(Exception):
    """Raised when offline cache configuration is invalid."""


def normalize_path_prefix(path_prefix: str) -> str:
    prefix = "/" + path_prefix.strip().strip("/")
    return prefix if prefix == "/" else prefix + "/"


def build_manifest(
    path_prefix: str = DEFAULT_PATH_PREFIX,
    external_urls: tuple[str, ...] = EXTERNAL_URLS,
) -> tuple[str, ...]:
    """List every URL cached at install time, shell paths first."""
    prefix = normalize_path_prefix(path_prefix)
    return tuple(prefix + path for path in SHELL_PATHS) + tuple(external_urls)


@dataclass(frozen=True)
class OfflineCacheConfig:
    """Validated offline cache settings derived from app settings."""
    cache_name: str = CACHE_NAME
    origin: str = DEFAULT_ORIGIN
    path_prefix: str = DEFAULT_PATH_PREFIX
    external_urls: tuple[str, ...] = EXTERNAL_URLS
    fallback_url: Optional[str] = None
    fetch_timeout_seconds: float = DEFAULT_FETCH_TIMEOUT_SECONDS

    def __post_init__(self) -> None:
        if not self.cache_name.strip():
            raise OfflineConfigurationError("offline.cache_name cannot be empty")
        if not origin_of(self.origin):
            raise OfflineConfigurationError(
                f"offline.origin must be an absolute http(s) URL, got: {self.origin!r}"
            )
        if not self.path_prefix.startswith("/"):
            raise OfflineConfigurationError("offline.path_prefix must start with '/'")
        if self.fetch_timeout_seconds <= 0:
            raise OfflineConfigurationError(
                "offline.fetch_timeout_seconds must be greater than zero"
            )
        for url in self.external_urls:
            if not origin_of(url):
                raise OfflineConfigurationError(
                    f"offline.external_urls entries must be absolute URLs, got: {url!r}"
                )

    @property
    def normalized_prefix(self) -> str:
        return normalize_path_prefix(self.path_prefix)

    @property
    def manifest(self) -> tuple[str, ...]:
        return tuple(
            self.resolve(url)
            for url in build_manifest(self.path_prefix, self.external_urls)
        )

    def resolve(self, path_or_url: str) -> str:
        """Absolute URL for a manifest entry or request path, against the origin."""
        return urljoin(self.origin.rstrip("/") + "/", path_or_url)

    @classmethod
    def from_settings(cls, settings, *, origin: Optional[str] = None) -> "OfflineCacheConfig":
        raw_origin = (settings.origin or "").strip() or origin or DEFAULT_ORIGIN
        fallback = (settings.fallback_url or "").strip() or None
        return cls(
            cache_name=settings.cache_name.strip(),
            origin=raw_origin,
            path_prefix=settings.path_prefix.strip() or DEFAULT_PATH_PREFIX,
            external_urls=tuple(settings.external_urls),
            fallback_url=fallback,
            fetch_timeout_seconds=float(settings.fetch_timeout_seconds),
        )
