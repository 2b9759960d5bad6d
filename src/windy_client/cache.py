"""Cache adapters used to memoize provider responses."""

from __future__ import annotations

import json
import math
import threading
import time
from dataclasses import dataclass
from typing import Any, Callable, MutableMapping, Protocol

import redis

DEFAULT_TTL_SECONDS = 300


class CacheAdapter(Protocol):
    """Protocol describing the cache backends accepted by the client."""

    def get(self, key: str) -> Any | None:  # pragma: no cover - interface declaration
        """Return the cached value or ``None`` when absent or expired."""

    def set(self, key: str, value: Any, ttl_seconds: float | None = None) -> None:  # pragma: no cover
        """Store ``value`` under ``key`` for ``ttl_seconds`` (adapter default when ``None``)."""

    def delete(self, key: str) -> None:  # pragma: no cover - interface declaration
        """Remove ``key`` if present."""


@dataclass
class _CacheEntry:
    expires_at: float
    value: Any


class InMemoryCache:
    """Process-local TTL cache.

    Expired entries are evicted when read; :meth:`prune` can be called
    periodically to bound memory, but ``get`` never relies on it.
    """

    def __init__(
        self,
        now: Callable[[], float] | None = None,
        *,
        default_ttl: float = DEFAULT_TTL_SECONDS,
    ) -> None:
        if default_ttl <= 0:
            raise ValueError("default_ttl must be positive")
        self._now = now or time.monotonic
        self._default_ttl = float(default_ttl)
        self._lock = threading.Lock()
        self._store: MutableMapping[str, _CacheEntry] = {}

    def get(self, key: str) -> Any | None:
        with self._lock:
            entry = self._store.get(key)
            if entry is None:
                return None

            if entry.expires_at <= self._now():
                self._store.pop(key, None)
                return None

            return entry.value

    def set(self, key: str, value: Any, ttl_seconds: float | None = None) -> None:
        ttl = self._default_ttl if ttl_seconds is None else float(ttl_seconds)
        entry = _CacheEntry(expires_at=self._now() + ttl, value=value)
        with self._lock:
            self._store[key] = entry

    def delete(self, key: str) -> None:
        with self._lock:
            self._store.pop(key, None)

    def prune(self) -> int:
        """Drop every expired entry and return how many were removed."""

        now = self._now()
        with self._lock:
            expired = [key for key, entry in self._store.items() if entry.expires_at <= now]
            for key in expired:
                del self._store[key]
        return len(expired)

    def clear(self) -> None:
        with self._lock:
            self._store.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._store)


class RedisCache:
    """Redis-backed adapter storing JSON values with a server-side expiry."""

    def __init__(self, client: redis.Redis, *, prefix: str = "windy") -> None:
        self._client = client
        self._prefix = prefix

    @classmethod
    def from_url(cls, url: str, *, prefix: str = "windy") -> "RedisCache":
        return cls(redis.Redis.from_url(url, decode_responses=True), prefix=prefix)

    def get(self, key: str) -> Any | None:
        raw = self._client.get(self._qualify(key))
        if raw is None:
            return None
        return json.loads(raw)

    def set(self, key: str, value: Any, ttl_seconds: float | None = None) -> None:
        # Redis expiries are whole seconds and must be positive.
        expiry = max(1, math.ceil(DEFAULT_TTL_SECONDS if ttl_seconds is None else ttl_seconds))
        self._client.set(
            self._qualify(key),
            json.dumps(value, separators=(",", ":")),
            ex=expiry,
        )

    def delete(self, key: str) -> None:
        self._client.delete(self._qualify(key))

    def _qualify(self, key: str) -> str:
        return f"{self._prefix}:{key}" if self._prefix else key


__all__ = ["CacheAdapter", "DEFAULT_TTL_SECONDS", "InMemoryCache", "RedisCache"]
