"""Redis implementation of AssetStore.

Each entry is a Redis hash under ``{prefix}:{namespace}:{key}`` holding
the payload and its metadata. Expiry is delegated to Redis through
EXPIRE, using the max-age the caller supplied at write time.
Redis outages degrade to cache misses and dropped writes, both logged.
"""

import logging

import redis.asyncio as redis
from redis.exceptions import RedisError

from ogp_service.config import Settings, get_redis_client, get_settings
from ogp_service.entities import CacheEntry

logger = logging.getLogger(__name__)


class RedisAssetStore:
    """Redis-backed namespaced asset store.

    This class satisfies the AssetStore protocol through structural
    typing - no explicit inheritance needed.
    """

    def __init__(
        self,
        redis_client: redis.Redis | None = None,
        key_prefix: str | None = None,
    ) -> None:
        """Initialize the Redis asset store.

        Args:
            redis_client: Asyncio Redis client. If None, creates default.
            key_prefix: Prefix for every key. If None, uses settings.
        """
        self._client = redis_client or get_redis_client()
        self._prefix = key_prefix or get_settings().cache_key_prefix

    @classmethod
    def create(cls, settings: Settings | None = None) -> "RedisAssetStore":
        """Factory method to create RedisAssetStore from settings.

        Args:
            settings: Connection and key-prefix settings. If None, uses environment settings.

        Returns:
            Configured RedisAssetStore
        """
        settings = settings or get_settings()
        return cls(redis_client=get_redis_client(settings), key_prefix=settings.cache_key_prefix)

    def storage_key(self, namespace: str, key: str) -> str:
        """Build the Redis key for a namespaced entry."""
        return f"{self._prefix}:{namespace}:{key}"

    async def get(self, namespace: str, key: str) -> CacheEntry | None:
        """Read an entry from Redis.

        Args:
            namespace: Logical namespace
            key: Key inside the namespace

        Returns:
            The stored entry, or None when absent
        """
        try:
            data = await self._client.hgetall(self.storage_key(namespace, key))
        except RedisError as e:
            logger.warning(
                "Cache read failed, treating as miss: %s", e, extra={"namespace": namespace, "key": key}
            )
            return None
        if not data:
            return None

        try:
            return CacheEntry(
                key=key,
                payload=data[b"payload"],
                content_type=data[b"content_type"].decode(),
                stored_at=float(data[b"stored_at"]),
                ttl=int(data[b"ttl"]),
            )
        except (KeyError, ValueError) as e:
            logger.warning(
                "Ignoring malformed cache entry: %s",
                e,
                extra={"namespace": namespace, "key": key},
            )
            return None

    async def put(self, namespace: str, entry: CacheEntry) -> None:
        """Write an entry to Redis with its TTL.

        Args:
            namespace: Logical namespace
            entry: The entry to store
        """
        storage_key = self.storage_key(namespace, entry.key)
        pipe = self._client.pipeline()
        pipe.hset(
            storage_key,
            mapping={
                "payload": entry.payload,
                "content_type": entry.content_type,
                "stored_at": str(entry.stored_at),
                "ttl": str(entry.ttl),
            },
        )
        pipe.expire(storage_key, entry.ttl)
        try:
            await pipe.execute()
        except RedisError as e:
            logger.error(
                "Cache write failed: %s", e, extra={"namespace": namespace, "key": entry.key}
            )

    async def health_check(self) -> bool:
        """Check if Redis is accessible.

        Returns:
            True if healthy, False otherwise
        """
        try:
            return bool(await self._client.ping())
        except (RedisError, OSError):
            return False

    async def close(self) -> None:
        """Close the Redis connection pool."""
        await self._client.aclose()
