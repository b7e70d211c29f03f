"""
Redis adapter - remote tier of the cache.

Provides:
- JSON get / setex with TTL in whole seconds
- Pattern deletion through SCAN + DEL
- Connectivity ping for the readiness probe

Every method raises RedisError (or ValueError for malformed payloads) to
its caller. CacheService decides how a remote failure degrades; this
adapter only speaks the protocol.
"""

import json
from typing import Any, Optional

import redis.asyncio as redis
from redis.exceptions import RedisError

from src.config.settings import settings
from src.shared.core.logging import get_logger

logger = get_logger(__name__)


SCAN_BATCH_SIZE = 100


class RedisAdapter:
    """
    Async adapter for the remote cache.

    The client is created lazily so that constructing the adapter never
    opens a connection.
    """

    def __init__(
        self,
        url: Optional[str] = None,
        token: Optional[str] = None,
        client: Optional[redis.Redis] = None,
    ):
        """
        Initialize Redis adapter.

        Args:
            url: Redis URL (redis://host:port/db or rediss:// for TLS)
            token: Optional credential, sent as the connection password
            client: Pre-built client (tests pass a fake here)
        """
        self.url = url if url is not None else settings.REDIS_URL
        self.token = token if token is not None else settings.REDIS_TOKEN
        self._client = client

    @property
    def client(self) -> redis.Redis:
        """Lazy-loaded Redis client."""
        if self._client is None:
            if not self.url:
                raise RedisError("Remote cache URL is not configured")
            self._client = redis.from_url(
                self.url,
                password=self.token or None,
                decode_responses=True,
            )
        return self._client

    async def get_json(self, key: str) -> Optional[Any]:
        """
        Get a JSON value.

        Args:
            key: Cache key

        Returns:
            Decoded value, or None if the key is absent

        Raises:
            RedisError: Transport failure
            ValueError: Stored payload is not valid JSON
        """
        raw = await self.client.get(key)
        if raw is None:
            return None
        return json.loads(raw)

    async def set_json(self, key: str, value: Any, ttl_seconds: int) -> None:
        """
        Store a JSON value with SETEX.

        Args:
            key: Cache key
            value: JSON-serializable payload
            ttl_seconds: Time-to-live in seconds (at least 1)
        """
        await self.client.setex(key, max(1, ttl_seconds), json.dumps(value, default=str))

    async def delete_matching(self, pattern: str) -> int:
        """
        Delete every key matching a glob pattern.

        Args:
            pattern: Redis glob, e.g. "*discover*"

        Returns:
            Number of keys deleted
        """
        deleted = 0
        cursor = 0
        while True:
            cursor, keys = await self.client.scan(cursor, match=pattern, count=SCAN_BATCH_SIZE)
            if keys:
                deleted += await self.client.delete(*keys)
            if cursor == 0:
                break
        logger.debug("Remote cache keys deleted", pattern=pattern, deleted=deleted)
        return deleted

    async def ping(self) -> bool:
        """
        Check Redis connectivity.

        Returns:
            True if connected
        """
        try:
            return bool(await self.client.ping())
        except RedisError:
            return False

    async def close(self) -> None:
        """Close the underlying connection pool, if one was opened."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None


def build_redis_adapter() -> Optional[RedisAdapter]:
    """Create the adapter when a remote endpoint is configured, else None."""
    if not settings.remote_cache_enabled:
        logger.info("Remote cache not configured, running memory-only")
        return None
    return RedisAdapter()
