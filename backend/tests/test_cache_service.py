import json

import pytest

from src.shared.services.cache_service import (
    PROJECT_ACTIVITY_TAGS,
    CachePolicy,
    CacheService,
    CacheTag,
    MemoryCacheStore,
    generate_cache_key,
)


class TestCacheKeys:
    """Deterministic key generation"""

    def test_parameter_order_does_not_matter(self):
        """Same parameters in any order produce the same key"""
        a = generate_cache_key("discover:projects", {"page": 1, "sort": "recent", "limit": 12})
        b = generate_cache_key("discover:projects", {"limit": 12, "page": 1, "sort": "recent"})

        assert a == b
        assert a == "discover:projects:limit=12&page=1&sort=recent"

    def test_none_values_are_dropped(self):
        """Absent optional parameters do not change the key"""
        with_none = generate_cache_key("discover:projects", {"page": 1, "tag": None})
        without = generate_cache_key("discover:projects", {"page": 1})

        assert with_none == without

    def test_prefix_keeps_tags_matchable(self):
        """Invalidation tags are substrings of the keys they cover"""
        key = generate_cache_key("discover:projects", {"viewer": "anonymous"})

        assert CacheTag.DISCOVER in key
        assert CacheTag.PROJECTS in key


class TestMemoryCacheStore:
    """In-process tier"""

    def test_entry_expires_exactly_at_ttl(self, clock):
        """An entry is gone once now - inserted_at reaches the TTL"""
        store = MemoryCacheStore(clock)
        store.set("k", "v", ttl_ms=1000)

        clock.advance(999)
        assert store.get("k") == "v"

        clock.advance(1)
        assert store.get("k") is None
        assert "k" not in store

    def test_sweep_removes_only_expired(self, clock):
        """Sweep purges stale entries and keeps fresh ones"""
        store = MemoryCacheStore(clock)
        store.set("old", 1, ttl_ms=100)
        clock.advance(50)
        store.set("new", 2, ttl_ms=100)
        clock.advance(60)

        assert store.sweep() == 1
        assert "old" not in store
        assert store.get("new") == 2

    def test_delete_containing(self, clock):
        store = MemoryCacheStore(clock)
        store.set("discover:projects:page=1", 1, 1000)
        store.set("discover:projects:page=2", 2, 1000)
        store.set("users:42", 3, 1000)

        assert store.delete_containing("discover") == 2
        assert len(store) == 1


class TestCacheServiceMemoryOnly:
    """CacheService without a remote tier"""

    async def test_cached_runs_producer_once(self, memory_cache):
        """A hit does not call the producer again"""
        calls = []

        async def producer():
            calls.append(1)
            return {"value": len(calls)}

        first = await memory_cache.cached("k", producer)
        second = await memory_cache.cached("k", producer)

        assert first == second == {"value": 1}
        assert len(calls) == 1

    async def test_none_result_is_not_stored(self, memory_cache):
        """A producer returning None is asked again next time"""
        calls = []

        async def producer():
            calls.append(1)
            return None

        assert await memory_cache.cached("k", producer) is None
        assert await memory_cache.cached("k", producer) is None
        assert len(calls) == 2

    async def test_producer_exception_propagates(self, memory_cache):
        """Producer failures reach the caller and nothing is cached"""

        async def producer():
            raise RuntimeError("boom")

        with pytest.raises(RuntimeError):
            await memory_cache.cached("k", producer)
        assert await memory_cache.get("k") is None

    async def test_expiry_follows_policy(self, memory_cache, clock):
        """An entry cached with SHORT is gone a minute later"""

        async def producer():
            return "fresh"

        await memory_cache.cached("k", producer, ttl_ms=CachePolicy.SHORT)
        clock.advance(CachePolicy.SHORT - 1)
        assert await memory_cache.get("k") == "fresh"

        clock.advance(1)
        assert await memory_cache.get("k") is None

    async def test_default_ttl(self, clock):
        """Entries without a TTL use the configured default"""
        cache = CacheService(None, clock=clock, default_ttl_ms=500)
        await cache.set("k", 1)

        clock.advance(499)
        assert await cache.get("k") == 1
        clock.advance(1)
        assert await cache.get("k") is None

    async def test_invalidate_related(self, memory_cache):
        """Every key containing one of the tags is dropped"""
        await memory_cache.set("discover:projects:page=1", 1)
        await memory_cache.set("feed:u1", 2)
        await memory_cache.set("comments:p1", 3)

        await memory_cache.invalidate_related(PROJECT_ACTIVITY_TAGS)

        assert await memory_cache.get("discover:projects:page=1") is None
        assert await memory_cache.get("feed:u1") is None
        assert await memory_cache.get("comments:p1") == 3

    async def test_health_without_remote(self, memory_cache):
        assert await memory_cache.check_health() is True

    async def test_sweeper_start_and_stop(self, memory_cache):
        """The sweep task starts once and stops cleanly"""
        memory_cache.start_sweeper()
        task = memory_cache._sweeper
        memory_cache.start_sweeper()

        assert memory_cache._sweeper is task

        await memory_cache.close()
        assert memory_cache._sweeper is None
        assert task.cancelled()

    async def test_close_drops_memory_entries(self, memory_cache):
        await memory_cache.set("discover:projects:a", [1])
        await memory_cache.close()

        assert await memory_cache.get("discover:projects:a") is None


class TestCacheServiceWithRemote:
    """CacheService backed by a (fake) Redis client"""

    async def test_set_writes_both_tiers(self, remote_cache, redis_client):
        """Remote gets JSON with a whole-second TTL, memory gets the value"""
        await remote_cache.set("k", {"a": 1}, ttl_ms=CachePolicy.MEDIUM)

        assert json.loads(redis_client.store["k"]) == {"a": 1}
        assert redis_client.ttls["k"] == 300
        assert remote_cache.memory.get("k") == {"a": 1}

    async def test_sub_second_ttl_rounds_up_to_one_second(self, remote_cache, redis_client):
        await remote_cache.set("k", 1, ttl_ms=200)

        assert redis_client.ttls["k"] == 1

    async def test_remote_hit_wins(self, remote_cache, redis_client):
        """A value only present remotely is still returned"""
        redis_client.store["k"] = json.dumps({"from": "redis"})

        assert await remote_cache.get("k") == {"from": "redis"}

    async def test_remote_failure_falls_back_to_memory(self, remote_cache, redis_client):
        """A dead remote never reaches the caller"""
        await remote_cache.set("k", "value")
        redis_client.fail = True

        assert await remote_cache.get("k") == "value"

    async def test_remote_failure_on_write_still_fills_memory(self, remote_cache, redis_client):
        redis_client.fail = True

        async def producer():
            return [1, 2, 3]

        assert await remote_cache.cached("k", producer) == [1, 2, 3]
        assert remote_cache.memory.get("k") == [1, 2, 3]

    async def test_malformed_remote_payload_is_a_miss(self, remote_cache, redis_client):
        """A payload that is not JSON is treated as a remote miss"""
        redis_client.store["k"] = "{not json"

        assert await remote_cache.get("k") is None

    async def test_invalidation_reaches_remote(self, remote_cache, redis_client):
        """Pattern invalidation deletes matching remote keys too"""
        await remote_cache.set("discover:projects:page=1", 1)
        await remote_cache.set("users:u1", 2)

        removed = await remote_cache.invalidate_pattern(CacheTag.DISCOVER)

        assert removed == 1
        assert "discover:projects:page=1" not in redis_client.store
        assert "users:u1" in redis_client.store

    async def test_invalidation_clears_memory_when_remote_down(self, remote_cache, redis_client):
        await remote_cache.set("discover:projects:page=1", 1)
        redis_client.fail = True

        await remote_cache.invalidate_related([CacheTag.DISCOVER])

        assert remote_cache.memory.get("discover:projects:page=1") is None

    async def test_health_reports_remote(self, remote_cache, redis_client):
        assert await remote_cache.check_health() is True

        redis_client.fail = True
        assert await remote_cache.check_health() is False

    async def test_close_releases_client(self, remote_cache, redis_client):
        await remote_cache.close()

        assert redis_client.closed is True
