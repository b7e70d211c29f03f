"""
Cache Service

Two-tier TTL cache in front of expensive feed queries.

ARCHITECTURE:
=============
    cached(key, producer)
        │
        ▼
    get(key) ──► Remote (Redis, when configured) ──► hit? return
        │              │ failure / miss
        │              ▼
        └──────► MemoryCacheStore (in-process) ──► hit? return
                       │ miss
                       ▼
                 await producer() ──► set(key, value)
                                        ├── Remote SETEX (best-effort)
                                        └── Memory (always)

- The remote tier is optional. An empty REDIS_URL means memory-only.
- Remote failures (connection, malformed payload) are logged and degrade to
  the memory tier; they never reach the caller.
- Memory entries are absent once now - inserted_at >= ttl. Expired entries
  are deleted on read and by a periodic sweep task owned by the app lifespan.
- All access happens on one event loop, so the memory map needs no lock.
- Concurrent misses for the same key each run the producer (no coalescing).

Usage:
======
    cache = CacheService(remote=build_redis_adapter())

    key = generate_cache_key("discover:projects", {"page": 1, "viewer": "anonymous"})
    payload = await cache.cached(key, produce_page, ttl_ms=CachePolicy.MEDIUM)

    await cache.invalidate_related([CacheTag.DISCOVER, CacheTag.FEED])
"""

import asyncio
import contextlib
import time
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Iterable, Mapping, Optional
from urllib.parse import urlencode

from redis.exceptions import RedisError

from src.config.settings import settings
from src.shared.adapters.redis_adapter import RedisAdapter
from src.shared.core.logging import get_logger

logger = get_logger(__name__)


Clock = Callable[[], float]


def monotonic_ms() -> float:
    """Default clock: monotonic time in milliseconds."""
    return time.monotonic() * 1000


# ═══════════════════════════════════════════════════════════════════════════════
# POLICIES AND TAGS
# ═══════════════════════════════════════════════════════════════════════════════


class CachePolicy:
    """TTL presets in milliseconds."""

    SHORT = 60 * 1000
    MEDIUM = 5 * 60 * 1000
    LONG = 30 * 60 * 1000
    VERY_LONG = 60 * 60 * 1000


class CacheTag:
    """Substrings used to invalidate groups of related keys."""

    PROJECTS = "projects"
    USERS = "users"
    DISCOVER = "discover"
    FEED = "feed"
    SEARCH = "search"
    COMMENTS = "comments"
    NOTIFICATIONS = "notifications"


# Tags touched by any change to a project's engagement
PROJECT_ACTIVITY_TAGS = (CacheTag.DISCOVER, CacheTag.FEED, CacheTag.SEARCH)


def generate_cache_key(prefix: str, params: Mapping[str, Any]) -> str:
    """
    Build a deterministic cache key.

    None values are dropped and the remaining keys sorted, so two requests
    with the same parameters in any order share one key.

    Example:
        >>> generate_cache_key("discover:projects", {"sort": "recent", "page": 1, "tag": None})
        'discover:projects:page=1&sort=recent'
    """
    filtered = sorted((k, v) for k, v in params.items() if v is not None)
    return f"{prefix}:{urlencode(filtered)}"


# ═══════════════════════════════════════════════════════════════════════════════
# MEMORY TIER
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass
class CacheEntry:
    """One in-process cache entry."""

    value: Any
    inserted_at: float
    ttl_ms: float

    def is_expired(self, now: float) -> bool:
        return now - self.inserted_at >= self.ttl_ms


class MemoryCacheStore:
    """In-process key/value map with per-entry TTL."""

    def __init__(self, clock: Clock = monotonic_ms) -> None:
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: str) -> bool:
        return key in self._entries

    def get(self, key: str) -> Optional[Any]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if entry.is_expired(self._clock()):
            del self._entries[key]
            return None
        return entry.value

    def set(self, key: str, value: Any, ttl_ms: float) -> None:
        self._entries[key] = CacheEntry(value=value, inserted_at=self._clock(), ttl_ms=ttl_ms)

    def delete_containing(self, substring: str) -> int:
        """Remove every key containing substring, return how many went."""
        doomed = [key for key in self._entries if substring in key]
        for key in doomed:
            del self._entries[key]
        return len(doomed)

    def sweep(self) -> int:
        """Remove every expired entry, return how many went."""
        now = self._clock()
        expired = [key for key, entry in self._entries.items() if entry.is_expired(now)]
        for key in expired:
            del self._entries[key]
        return len(expired)

    def clear(self) -> None:
        self._entries.clear()


# ═══════════════════════════════════════════════════════════════════════════════
# CACHE SERVICE
# ═══════════════════════════════════════════════════════════════════════════════


class CacheService:
    """
    Two-tier cache with compute-or-fetch wrapper.

    One instance per application, created by the app factory and injected
    into handlers. Tests construct their own with a fake clock and a fake
    remote adapter.
    """

    def __init__(
        self,
        remote: Optional[RedisAdapter] = None,
        clock: Clock = monotonic_ms,
        default_ttl_ms: Optional[int] = None,
        sweep_interval_seconds: Optional[float] = None,
    ) -> None:
        """
        Initialize CacheService.

        Args:
            remote: Remote adapter, None for memory-only mode
            clock: Millisecond clock used for memory-tier expiry
            default_ttl_ms: TTL when a caller gives none
            sweep_interval_seconds: Period of the background sweep
        """
        self.remote = remote
        self.memory = MemoryCacheStore(clock)
        self.default_ttl_ms = default_ttl_ms or settings.CACHE_DEFAULT_TTL_MS
        self.sweep_interval_seconds = (
            sweep_interval_seconds or settings.CACHE_SWEEP_INTERVAL_SECONDS
        )
        self._sweeper: Optional[asyncio.Task] = None

    # ═══════════════════════════════════════════════════════════════════════════
    # READ / WRITE
    # ═══════════════════════════════════════════════════════════════════════════

    async def get(self, key: str) -> Optional[Any]:
        """
        Look a key up, remote tier first.

        Returns:
            Cached value, or None on a miss in both tiers
        """
        if self.remote is not None:
            try:
                value = await self.remote.get_json(key)
                if value is not None:
                    return value
            except (RedisError, ValueError) as e:
                logger.warning("Remote cache get failed", key=key, error=str(e))
        return self.memory.get(key)

    async def set(self, key: str, value: Any, ttl_ms: Optional[int] = None) -> None:
        """
        Store a value in both tiers.

        The memory tier is always written so it stays warm while the remote
        tier is reachable. Remote TTL is rounded down to whole seconds,
        minimum one.
        """
        ttl = ttl_ms or self.default_ttl_ms
        if self.remote is not None:
            try:
                await self.remote.set_json(key, value, max(1, int(ttl) // 1000))
            except (RedisError, TypeError, ValueError) as e:
                logger.warning("Remote cache set failed", key=key, error=str(e))
        self.memory.set(key, value, ttl)

    async def cached(
        self,
        key: str,
        producer: Callable[[], Awaitable[Any]],
        ttl_ms: Optional[int] = None,
    ) -> Any:
        """
        Return the cached value for key, computing it on a miss.

        On a hit the producer is not called. On a miss its result is stored
        and returned; a None result is returned but not stored. Producer
        exceptions propagate unchanged.
        """
        hit = await self.get(key)
        if hit is not None:
            logger.debug("Cache hit", key=key)
            return hit

        logger.debug("Cache miss", key=key)
        value = await producer()
        if value is not None:
            await self.set(key, value, ttl_ms)
        return value

    with_cache = cached

    # ═══════════════════════════════════════════════════════════════════════════
    # INVALIDATION
    # ═══════════════════════════════════════════════════════════════════════════

    async def invalidate_pattern(self, substring: str) -> int:
        """
        Drop every key containing substring from both tiers.

        Remote keys are matched with the glob *substring* and removed via
        SCAN + DEL; a remote failure is logged and the memory tier is still
        cleared.

        Returns:
            Number of memory entries removed
        """
        if self.remote is not None:
            try:
                await self.remote.delete_matching(f"*{substring}*")
            except RedisError as e:
                logger.warning(
                    "Remote cache invalidation failed", pattern=substring, error=str(e)
                )
        removed = self.memory.delete_containing(substring)
        logger.debug("Cache invalidated", pattern=substring, removed=removed)
        return removed

    async def invalidate_related(self, tags: Iterable[str]) -> None:
        """Invalidate each tag in turn; one tag failing does not stop the rest."""
        for tag in tags:
            try:
                await self.invalidate_pattern(tag)
            except Exception as e:
                logger.warning("Cache tag invalidation failed", tag=tag, error=str(e))

    # ═══════════════════════════════════════════════════════════════════════════
    # SWEEPER
    # ═══════════════════════════════════════════════════════════════════════════

    def sweep_expired(self) -> int:
        """Purge expired memory entries, return how many were removed."""
        removed = self.memory.sweep()
        if removed:
            logger.debug("Expired cache entries swept", removed=removed)
        return removed

    async def _sweep_forever(self) -> None:
        while True:
            await asyncio.sleep(self.sweep_interval_seconds)
            self.sweep_expired()

    def start_sweeper(self) -> None:
        """Start the periodic sweep task on the running loop (idempotent)."""
        if self._sweeper is None or self._sweeper.done():
            self._sweeper = asyncio.create_task(self._sweep_forever())

    async def stop_sweeper(self) -> None:
        """Cancel the sweep task and wait for it to finish."""
        if self._sweeper is None:
            return
        self._sweeper.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await self._sweeper
        self._sweeper = None

    async def check_health(self) -> bool:
        """Remote tier reachable, or True in memory-only mode."""
        if self.remote is None:
            return True
        return await self.remote.ping()

    async def close(self) -> None:
        """Stop the sweeper and release cached entries and connections."""
        await self.stop_sweeper()
        self.memory.clear()
        if self.remote is not None:
            await self.remote.close()
