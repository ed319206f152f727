"""Cache-first resource proxy with install and activate lifecycle hooks."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Union

from .config import OfflineCacheConfig
from .fetch import Fetcher, FetchError
from .store import CacheStorage
from .types import RESPONSE_BASIC, ProxyRequest, ProxyResponse


@dataclass(frozen=True)
class InstallReport:
    """Outcome of populating the current cache generation."""
    cache_name: str
    cached: tuple[str, ...]
    failed: tuple[str, ...]

    @property
    def complete(self) -> bool:
        return not self.failed


class OfflineCacheProxy:
    """Serves cached responses first and fills the cache from the network.

    `install()` pre-populates the current generation from the manifest,
    `activate()` purges every other generation, and `fetch()` answers a
    single request. A fetch failure never raises to the caller; it yields
    the fallback page for navigations when one is cached, else None.
    """

    def __init__(
        self,
        config: OfflineCacheConfig,
        fetcher: Fetcher,
        *,
        storage: Optional[CacheStorage] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self._config = config
        self._fetcher = fetcher
        self._storage = storage if storage is not None else CacheStorage()
        self._logger = logger or logging.getLogger("offline")

    @property
    def cache_name(self) -> str:
        return self._config.cache_name

    @property
    def storage(self) -> CacheStorage:
        return self._storage

    def resolve_url(self, path_or_url: str) -> str:
        return self._config.resolve(path_or_url)

    def install(self) -> InstallReport:
        cache = self._storage.open(self._config.cache_name)
        self._logger.info("Opened cache %s", cache.name)

        cached: list[str] = []
        failed: list[str] = []
        for url in self._config.manifest:
            try:
                response = self._fetcher.fetch(ProxyRequest(url))
            except FetchError as error:
                self._logger.warning("Failed to cache %s: %s", url, error)
                failed.append(url)
                continue

            if response.status != 200:
                self._logger.warning(
                    "Failed to cache %s: HTTP %d",
                    url,
                    response.status,
                )
                failed.append(url)
                continue

            cache.put(url, response.clone())
            cached.append(url)

        if failed:
            self._logger.warning(
                "Cache %s installed partially: %d cached, %d failed",
                cache.name,
                len(cached),
                len(failed),
            )
        else:
            self._logger.info("Cache %s installed: %d entries", cache.name, len(cached))
        return InstallReport(
            cache_name=cache.name,
            cached=tuple(cached),
            failed=tuple(failed),
        )

    def activate(self) -> list[str]:
        deleted: list[str] = []
        for name in self._storage.keys():
            if name != self._config.cache_name:
                self._logger.info("Deleting old cache: %s", name)
                if self._storage.delete(name):
                    deleted.append(name)
        return deleted

    def fetch(self, request: Union[ProxyRequest, str]) -> Optional[ProxyResponse]:
        if isinstance(request, str):
            request = ProxyRequest(self.resolve_url(request))

        if request.method.upper() != "GET":
            # Only GET responses are cacheable; other methods pass straight through.
            return self._fetch_network(request)

        cached = self._storage.match(request.url, cache_name=self._config.cache_name)
        if cached is not None:
            self._logger.debug("Cache hit: %s", request.url)
            return cached

        response = self._fetch_network(request)
        if response is None:
            return None

        if response.status == 200 and response.type == RESPONSE_BASIC:
            cache = self._storage.open(self._config.cache_name)
            cache.put(request.url, response.clone())
            self._logger.debug("Cached after network fetch: %s", request.url)
        return response

    def _fetch_network(self, request: ProxyRequest) -> Optional[ProxyResponse]:
        try:
            return self._fetcher.fetch(request)
        except FetchError as error:
            self._logger.error("Fetch failed for %s: %s", request.url, error)
            return self._fallback(request)

    def _fallback(self, request: ProxyRequest) -> Optional[ProxyResponse]:
        if not request.navigate or not self._config.fallback_url:
            return None
        fallback_url = self._config.resolve(self._config.fallback_url)
        fallback = self._storage.match(fallback_url, cache_name=self._config.cache_name)
        if fallback is not None:
            self._logger.info("Serving offline fallback %s for %s", fallback_url, request.url)
        return fallback
