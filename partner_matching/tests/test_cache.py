"""
Tests for the eviction cache and the memoize decorator.
"""

import threading

import pytest

from partner_matching.logic.cache import EvictionCache, memoize


def test_get_returns_stored_value(clock):
    cache = EvictionCache(capacity=10, ttl_seconds=60, clock=clock)
    cache.set("a", 1)

    assert cache.get("a") == 1
    assert cache.get("missing") is None
    assert cache.get("missing", "fallback") == "fallback"


def test_entry_expires_after_ttl(clock):
    cache = EvictionCache(capacity=10, ttl_seconds=300, clock=clock)
    cache.set("a", 1)

    clock.advance(300)
    assert cache.get("a") == 1  # exactly at the TTL is still fresh

    clock.advance(1)
    assert cache.get("a") is None
    assert len(cache) == 0


def test_get_does_not_refresh_timestamp(clock):
    cache = EvictionCache(capacity=10, ttl_seconds=10, clock=clock)
    cache.set("a", 1)

    clock.advance(8)
    assert cache.get("a") == 1
    clock.advance(8)
    assert cache.get("a") is None


def test_set_refreshes_existing_entry(clock):
    cache = EvictionCache(capacity=2, ttl_seconds=10, clock=clock)
    cache.set("a", 1)
    cache.set("b", 2)

    clock.advance(8)
    cache.set("a", 3)
    clock.advance(8)

    assert cache.get("a") == 3
    assert cache.get("b") is None
    assert cache.stats().evictions == 0


def test_eviction_removes_least_valuable_entry(clock):
    cache = EvictionCache(capacity=2, ttl_seconds=300, clock=clock)
    cache.set("a", 1)
    cache.set("b", 2)
    cache.get("a")

    cache.set("c", 3)

    assert "a" in cache
    assert "b" not in cache
    assert "c" in cache
    assert len(cache) == 2


def test_eviction_prefers_older_entries(clock):
    cache = EvictionCache(capacity=2, ttl_seconds=300, clock=clock)
    cache.set("old", 1)
    clock.advance(50)
    cache.set("new", 2)

    cache.set("newest", 3)

    assert "old" not in cache
    assert "new" in cache


def test_eviction_tie_removes_first_inserted(clock):
    cache = EvictionCache(capacity=2, ttl_seconds=300, clock=clock)
    cache.set("a", 1)
    cache.set("b", 2)

    cache.set("c", 3)

    assert "a" not in cache
    assert "b" in cache


def test_stats_track_hits_and_misses(clock):
    cache = EvictionCache(capacity=5, ttl_seconds=300, clock=clock)
    cache.set("a", 1)
    cache.get("a")
    cache.get("a")
    cache.get("b")

    stats = cache.stats()
    assert stats.size == 1
    assert stats.capacity == 5
    assert stats.hits == 2
    assert stats.misses == 1
    assert stats.hit_rate == pytest.approx(2 / 3)
    assert stats.average_access_count == 3


def test_purge_expired(clock):
    cache = EvictionCache(capacity=5, ttl_seconds=10, clock=clock)
    cache.set("a", 1)
    clock.advance(5)
    cache.set("b", 2)
    clock.advance(6)

    assert cache.purge_expired() == 1
    assert "b" in cache


def test_delete_and_clear(clock):
    cache = EvictionCache(capacity=5, ttl_seconds=10, clock=clock)
    cache.set("a", 1)
    cache.set("b", 2)

    assert cache.delete("a") is True
    assert cache.delete("a") is False

    cache.clear()
    assert len(cache) == 0
    assert cache.stats().misses == 0


def test_concurrent_writers_respect_capacity():
    cache = EvictionCache(capacity=50, ttl_seconds=300)
    threads_count, writes = 8, 100
    errors = []

    def worker(thread_id):
        try:
            for i in range(writes):
                key = f"{thread_id}-{i}"
                cache.set(key, i)
                cache.get(key)
        except Exception as exc:
            errors.append(exc)

    threads = [threading.Thread(target=worker, args=(t,)) for t in range(threads_count)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    stats = cache.stats()
    assert errors == []
    assert len(cache) == 50
    assert stats.size <= stats.capacity
    assert stats.evictions == threads_count * writes - 50
    assert stats.hits + stats.misses == threads_count * writes


@pytest.mark.parametrize("capacity,ttl", [(0, 10), (-1, 10), (5, 0), (5, -3)])
def test_invalid_configuration_rejected(capacity, ttl):
    with pytest.raises(ValueError):
        EvictionCache(capacity=capacity, ttl_seconds=ttl)


def test_memoize_caches_results_including_none():
    calls = []

    @memoize(ttl_seconds=60, max_size=10)
    def lookup(value):
        calls.append(value)
        return None if value == "nothing" else value.upper()

    assert lookup("x") == "X"
    assert lookup("x") == "X"
    assert lookup("nothing") is None
    assert lookup("nothing") is None

    assert calls == ["x", "nothing"]
    assert len(lookup.cache) == 2


def test_memoize_custom_key():
    calls = []

    @memoize(key=lambda record: record["id"])
    def load(record):
        calls.append(record["id"])
        return record["id"]

    load({"id": 1, "name": "first"})
    load({"id": 1, "name": "renamed"})

    assert calls == [1]
