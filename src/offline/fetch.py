"""Network fetchers used by the offline proxy on cache misses."""

from __future__ import annotations

import logging
import urllib.error
import urllib.request
from pathlib import Path
from typing import Optional, Protocol
from urllib.parse import unquote, urlsplit

from .config import DEFAULT_FETCH_TIMEOUT_SECONDS, normalize_path_prefix
from .static_files import guess_content_type, resolve_static_file
from .types import RESPONSE_BASIC, RESPONSE_CORS, ProxyRequest, ProxyResponse, origin_of


class FetchError(Exception):
    """Raised when a resource cannot be fetched from the network."""


class Fetcher(Protocol):
    def fetch(self, request: ProxyRequest) -> ProxyResponse:
        ...


class StaticOriginFetcher:
    """Serves same-origin URLs from the web UI directory."""

    def __init__(
        self,
        web_root: Path,
        *,
        origin: str,
        path_prefix: str = "/",
        logger: Optional[logging.Logger] = None,
    ):
        self._web_root = Path(web_root)
        self._origin = origin_of(origin)
        self._prefix = normalize_path_prefix(path_prefix)
        self._logger = logger or logging.getLogger("offline.static")

    def fetch(self, request: ProxyRequest) -> ProxyResponse:
        if origin_of(request.url) != self._origin:
            raise FetchError(f"{request.url} is not served by origin {self._origin}")

        path = unquote(urlsplit(request.url).path) or "/"
        if path + "/" == self._prefix:
            path = self._prefix
        if not path.startswith(self._prefix):
            return _not_found(request.url)

        resolved = resolve_static_file(self._web_root, path[len(self._prefix):])
        if resolved is None:
            return _not_found(request.url)

        try:
            body = resolved.read_bytes()
        except OSError as error:
            raise FetchError(f"Failed to read {resolved}: {error}") from error

        self._logger.debug("Served %s from %s", request.url, resolved)
        return ProxyResponse(
            url=request.url,
            status=200,
            body=body,
            headers=(
                ("Content-Type", guess_content_type(resolved)),
                ("Content-Length", str(len(body))),
            ),
            type=RESPONSE_BASIC,
        )


class HttpFetcher:
    """Fetches absolute URLs with urllib; other origins yield `cors` responses."""

    def __init__(
        self,
        *,
        origin: str,
        timeout_seconds: float = DEFAULT_FETCH_TIMEOUT_SECONDS,
        user_agent: str = "pomo-timer-offline/1.0",
    ):
        self._origin = origin_of(origin)
        self._timeout_seconds = timeout_seconds
        self._user_agent = user_agent

    def fetch(self, request: ProxyRequest) -> ProxyResponse:
        response_type = RESPONSE_BASIC if origin_of(request.url) == self._origin else RESPONSE_CORS
        req = urllib.request.Request(
            request.url,
            headers={"User-Agent": self._user_agent},
            method=request.method,
        )
        try:
            with urllib.request.urlopen(req, timeout=self._timeout_seconds) as resp:
                return ProxyResponse(
                    url=request.url,
                    status=int(resp.status),
                    body=resp.read(),
                    headers=tuple(resp.headers.items()),
                    type=response_type,
                    reason=str(resp.reason or ""),
                )
        except urllib.error.HTTPError as error:
            # HTTP error statuses are still responses; only transport failures raise.
            body = error.read()
            return ProxyResponse(
                url=request.url,
                status=int(error.code),
                body=body,
                headers=tuple(error.headers.items()) if error.headers else (),
                type=response_type,
                reason=str(error.reason or ""),
            )
        except (urllib.error.URLError, OSError, ValueError) as error:
            raise FetchError(f"Network fetch failed for {request.url}: {error}") from error


class OriginRoutingFetcher:
    """Routes same-origin requests to the static origin and the rest to HTTP."""

    def __init__(self, *, origin: str, local: Fetcher, remote: Fetcher):
        self._origin = origin_of(origin)
        self._local = local
        self._remote = remote

    def fetch(self, request: ProxyRequest) -> ProxyResponse:
        if origin_of(request.url) == self._origin:
            return self._local.fetch(request)
        return self._remote.fetch(request)


def _not_found(url: str) -> ProxyResponse:
    body = b"not found\n"
    return ProxyResponse(
        url=url,
        status=404,
        body=body,
        headers=(
            ("Content-Type", "text/plain; charset=utf-8"),
            ("Content-Length", str(len(body))),
        ),
        type=RESPONSE_BASIC,
        reason="Not Found",
    )
