"""Offline cache proxy: named cache generations with cache-first fetching."""

from .config import (
    CACHE_NAME,
    EXTERNAL_URLS,
    OfflineCacheConfig,
    OfflineConfigurationError,
    build_manifest,
)
from .fetch import Fetcher, FetchError, HttpFetcher, OriginRoutingFetcher, StaticOriginFetcher
from .proxy import InstallReport, OfflineCacheProxy
from .store import CacheGeneration, CacheStorage
from .types import ProxyRequest, ProxyResponse

__all__ = [
    "CACHE_NAME",
    "EXTERNAL_URLS",
    "CacheGeneration",
    "CacheStorage",
    "FetchError",
    "Fetcher",
    "HttpFetcher",
    "InstallReport",
    "OfflineCacheConfig",
    "OfflineCacheProxy",
    "OfflineConfigurationError",
    "OriginRoutingFetcher",
    "ProxyRequest",
    "ProxyResponse",
    "StaticOriginFetcher",
    "build_manifest",
]
