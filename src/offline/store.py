"""Thread-safe in-memory cache generations keyed by request URL."""

from __future__ import annotations

import threading
from typing import Optional

from .types import ProxyResponse, cache_key


class CacheGeneration:
    """One named, versioned set of cached responses."""

    def __init__(self, name: str):
        self._name = name
        self._entries: dict[str, ProxyResponse] = {}
        self._lock = threading.Lock()

    @property
    def name(self) -> str:
        return self._name

    def match(self, url: str) -> Optional[ProxyResponse]:
        with self._lock:
            return self._entries.get(cache_key(url))

    def put(self, url: str, response: ProxyResponse) -> None:
        with self._lock:
            self._entries[cache_key(url)] = response

    def delete(self, url: str) -> bool:
        with self._lock:
            return self._entries.pop(cache_key(url), None) is not None

    def keys(self) -> list[str]:
        with self._lock:
            return list(self._entries)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


class CacheStorage:
    """Registry of cache generations, preserving creation order."""

    def __init__(self):
        self._generations: dict[str, CacheGeneration] = {}
        self._lock = threading.Lock()

    def open(self, name: str) -> CacheGeneration:
        if not name:
            raise ValueError("cache name cannot be empty")
        with self._lock:
            generation = self._generations.get(name)
            if generation is None:
                generation = CacheGeneration(name)
                self._generations[name] = generation
            return generation

    def has(self, name: str) -> bool:
        with self._lock:
            return name in self._generations

    def keys(self) -> list[str]:
        with self._lock:
            return list(self._generations)

    def delete(self, name: str) -> bool:
        with self._lock:
            return self._generations.pop(name, None) is not None

    def match(self, url: str, *, cache_name: str) -> Optional[ProxyResponse]:
        with self._lock:
            generation = self._generations.get(cache_name)
        if generation is None:
            return None
        return generation.match(url)
