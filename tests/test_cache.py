from __future__ import annotations

from typing import Any

import pytest

from windy_client.cache import InMemoryCache, RedisCache


class _FakeClock:
    def __init__(self) -> None:
        self.value = 0.0

    def __call__(self) -> float:
        return self.value


def test_get_returns_value_until_expiry() -> None:
    clock = _FakeClock()
    cache = InMemoryCache(now=clock)
    cache.set("forecast:1.0:2.0:gfs", {"ts": [1]}, 60)

    clock.value = 59.0
    assert cache.get("forecast:1.0:2.0:gfs") == {"ts": [1]}

    clock.value = 60.0
    assert cache.get("forecast:1.0:2.0:gfs") is None
    assert len(cache) == 0  # stale entry evicted on read


def test_missing_key_is_absent() -> None:
    assert InMemoryCache().get("missing") is None


def test_set_overwrites_last_write_wins() -> None:
    cache = InMemoryCache(now=_FakeClock())
    cache.set("key", "first", 10)
    cache.set("key", "second", 10)
    assert cache.get("key") == "second"


def test_delete_and_clear() -> None:
    cache = InMemoryCache(now=_FakeClock())
    cache.set("a", 1, 10)
    cache.set("b", 2, 10)

    cache.delete("a")
    cache.delete("does-not-exist")
    assert cache.get("a") is None
    assert cache.get("b") == 2

    cache.clear()
    assert len(cache) == 0


def test_default_ttl_is_five_minutes() -> None:
    clock = _FakeClock()
    cache = InMemoryCache(now=clock)
    cache.set("key", "value")

    clock.value = 299.0
    assert cache.get("key") == "value"
    clock.value = 300.0
    assert cache.get("key") is None


def test_configured_default_ttl_applies_when_ttl_omitted() -> None:
    clock = _FakeClock()
    cache = InMemoryCache(now=clock, default_ttl=30)
    cache.set("key", "value")
    cache.set("explicit", "value", 120)

    clock.value = 30.0
    assert cache.get("key") is None
    assert cache.get("explicit") == "value"


def test_non_positive_default_ttl_is_rejected() -> None:
    with pytest.raises(ValueError):
        InMemoryCache(default_ttl=0)


def test_prune_removes_only_expired_entries() -> None:
    clock = _FakeClock()
    cache = InMemoryCache(now=clock)
    cache.set("short", 1, 5)
    cache.set("long", 2, 50)

    clock.value = 10.0
    assert cache.prune() == 1
    assert len(cache) == 1
    assert cache.get("long") == 2


class _StubRedis:
    def __init__(self) -> None:
        self.data: dict[str, str] = {}
        self.expiries: dict[str, int] = {}

    def get(self, key: str) -> str | None:
        return self.data.get(key)

    def set(self, key: str, value: str, ex: int | None = None) -> None:
        self.data[key] = value
        if ex is not None:
            self.expiries[key] = ex

    def delete(self, key: str) -> int:
        return 1 if self.data.pop(key, None) is not None else 0


def test_redis_cache_stores_json_with_expiry() -> None:
    stub = _StubRedis()
    cache = RedisCache(stub, prefix="test")  # type: ignore[arg-type]
    value: dict[str, Any] = {"ts": [1, 2], "units": {"temp-surface": "K"}}

    cache.set("forecast:1.0:2.0:gfs", value, 300)

    assert stub.expiries == {"test:forecast:1.0:2.0:gfs": 300}
    assert cache.get("forecast:1.0:2.0:gfs") == value

    cache.delete("forecast:1.0:2.0:gfs")
    assert cache.get("forecast:1.0:2.0:gfs") is None


def test_redis_cache_rounds_fractional_ttl_up() -> None:
    stub = _StubRedis()
    cache = RedisCache(stub)  # type: ignore[arg-type]

    cache.set("key", [1], 0.2)

    assert stub.expiries == {"windy:key": 1}
