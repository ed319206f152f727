"""Request and response records passed between the proxy, its store, and fetchers."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Literal, Optional
from urllib.parse import urlsplit, urlunsplit

ResponseType = Literal["basic", "cors", "opaque", "error"]

RESPONSE_BASIC = "basic"
RESPONSE_CORS = "cors"


@dataclass(frozen=True)
class ProxyRequest:
    """Outbound resource request observed by the proxy."""
    url: str
    method: str = "GET"
    navigate: bool = False


@dataclass(frozen=True)
class ProxyResponse:
    """Buffered response; `type` is `basic` for same-origin responses."""
    url: str
    status: int
    body: bytes = b""
    headers: tuple[tuple[str, str], ...] = ()
    type: ResponseType = RESPONSE_BASIC
    reason: str = "OK"

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    @property
    def content_type(self) -> Optional[str]:
        return self.header("Content-Type")

    def header(self, name: str) -> Optional[str]:
        lowered = name.lower()
        for key, value in self.headers:
            if key.lower() == lowered:
                return value
        return None

    def clone(self) -> "ProxyResponse":
        return replace(self, headers=tuple(self.headers))


def origin_of(url: str) -> str:
    """Return `scheme://host[:port]` lowercased, or an empty string for relative URLs."""
    parts = urlsplit(url)
    if not parts.scheme or not parts.netloc:
        return ""
    return f"{parts.scheme.lower()}://{parts.netloc.lower()}"


def cache_key(url: str) -> str:
    """Cache entries are keyed by URL without fragment."""
    parts = urlsplit(url)
    return urlunsplit((parts.scheme, parts.netloc, parts.path or "/", parts.query, ""))
