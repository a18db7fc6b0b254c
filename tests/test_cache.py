import asyncio

import pytest

from trend_engine.cache import TrendCache, make_cache_key


class FakeClock:
    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def test_make_cache_key_is_order_independent():
    assert make_cache_key("trends", {"source": "all", "limit": 10}) == "trends:limit:10|source:all"
    assert make_cache_key("trends", {"limit": 10, "source": "all"}) == "trends:limit:10|source:all"
    assert make_cache_key("trends", {}) == "trends:"


def test_rejects_empty_capacity():
    with pytest.raises(ValueError):
        TrendCache(max_entries=0)


def test_entries_expire_after_ttl():
    clock = FakeClock()
    cache = TrendCache(ttl_seconds=60, clock=clock)
    cache.set("k", ["value"])

    clock.advance(59)
    assert cache.get("k") == ["value"]

    clock.advance(60)
    assert cache.get("k") is None
    assert len(cache) == 0


def test_reads_refresh_entry_age():
    clock = FakeClock()
    cache = TrendCache(ttl_seconds=60, clock=clock)
    cache.set("k", 1)

    for _ in range(3):
        clock.advance(45)
        assert cache.get("k") == 1


def test_least_recently_used_entry_is_evicted():
    cache = TrendCache(max_entries=2, clock=FakeClock())
    cache.set("a", 1)
    cache.set("b", 2)
    cache.get("a")
    cache.set("c", 3)

    assert cache.has("a")
    assert not cache.has("b")
    assert cache.has("c")
    assert len(cache) == 2


def test_delete_clear_and_stats():
    cache = TrendCache(max_entries=5, ttl_seconds=30, clock=FakeClock())
    cache.set("a", 1)
    cache.set("b", 2)

    assert cache.delete("a") is True
    assert cache.delete("a") is False
    assert cache.stats() == {"size": 1, "max_entries": 5, "ttl_seconds": 30}

    cache.clear()
    assert len(cache) == 0


def test_get_or_fetch_only_fetches_on_miss():
    clock = FakeClock()
    cache = TrendCache(ttl_seconds=60, clock=clock)
    calls = []

    async def fetch():
        calls.append(clock.now)
        return [len(calls)]

    assert asyncio.run(cache.get_or_fetch("k", fetch)) == [1]
    assert asyncio.run(cache.get_or_fetch("k", fetch)) == [1]
    assert asyncio.run(cache.get_or_fetch("k", fetch, force_refresh=True)) == [2]

    clock.advance(61)
    assert asyncio.run(cache.get_or_fetch("k", fetch)) == [3]
    assert len(calls) == 3
