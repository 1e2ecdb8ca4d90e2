"""
In-process TTL cache.

Entries live in named namespaces so a whole group of keys can be dropped at
once (e.g. every cached news page after a refresh).
"""

import threading
import time
from typing import Any, Callable, Dict, Hashable, Optional, Tuple

import structlog

logger = structlog.get_logger(__name__)

_MISSING = object()


class TTLCache:
    """Thread-safe key/value store with a per-namespace time-to-live."""

    def __init__(self, default_ttl_seconds: float = 3600, clock: Callable[[], float] = time.monotonic):
        self.default_ttl_seconds = default_ttl_seconds
        self._clock = clock
        self._lock = threading.Lock()
        self._entries: Dict[str, Dict[Hashable, Tuple[float, Any]]] = {}
        self._hits = 0
        self._misses = 0

    def get(self, namespace: str, key: Hashable, default: Any = None) -> Any:
        with self._lock:
            bucket = self._entries.get(namespace)
            entry = bucket.get(key, _MISSING) if bucket else _MISSING

            if entry is _MISSING:
                self._misses += 1
                return default

            expires_at, value = entry
            if expires_at <= self._clock():
                del bucket[key]
                self._misses += 1
                return default

            self._hits += 1
            return value

    def set(self, namespace: str, key: Hashable, value: Any, ttl_seconds: Optional[float] = None) -> None:
        ttl = self.default_ttl_seconds if ttl_seconds is None else ttl_seconds
        with self._lock:
            self._entries.setdefault(namespace, {})[key] = (self._clock() + ttl, value)

    def invalidate(self, namespace: str) -> int:
        with self._lock:
            removed = len(self._entries.pop(namespace, {}))
        logger.info("cache_namespace_invalidated", namespace=namespace, entries=removed)
        return removed

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
        logger.info("cache_cleared")

    def stats(self) -> Dict[str, Any]:
        with self._lock:
            return {
                "namespaces": {name: len(bucket) for name, bucket in self._entries.items()},
                "hits": self._hits,
                "misses": self._misses,
            }
