"""Redis implementation of CacheStore.

Values are stored as JSON strings under ``{key_prefix}{key}`` with a per-entry
expiry. It's the default implementation and satisfies the CacheStore protocol.
"""

import json
import logging
from typing import Any

import redis

from linkeun_api.config import get_redis_client, get_settings
from linkeun_api.errors import CacheBackendError, CacheKeyNotFoundError, CacheSerializationError

logger = logging.getLogger(__name__)


class RedisCacheRepository:
    """Redis key-value cache with a transparent namespace prefix.

    This class satisfies the CacheStore protocol through structural
    typing - no explicit inheritance needed.

    - ``GET``/``SET ... PX`` (millisecond expiry) for single entries
    - ``SCAN MATCH`` + one ``DEL`` for wildcard invalidation
    - Every redis-py error is re-raised as ``CacheBackendError``
    """

    def __init__(
        self,
        redis_client: redis.Redis | None = None,
        key_prefix: str | None = None,
        scan_count: int = 500,
    ) -> None:
        """Initialize the Redis cache repository.

        Args:
            redis_client: Redis client instance. If None, creates default.
            key_prefix: Namespace prepended to every key. Defaults to settings.
            scan_count: COUNT hint for SCAN during pattern deletes.
        """
        self._client = redis_client or get_redis_client()
        self._prefix = get_settings().redis_key_prefix if key_prefix is None else key_prefix
        self._scan_count = scan_count

    @classmethod
    def create(
        cls,
        redis_client: redis.Redis | None = None,
        key_prefix: str | None = None,
    ) -> "RedisCacheRepository":
        """Factory method to create RedisCacheRepository with defaults.

        Args:
            redis_client: Redis client. If None, one is built from settings.
            key_prefix: Key namespace. If None, uses settings.

        Returns:
            Configured RedisCacheRepository
        """
        return cls(redis_client=redis_client, key_prefix=key_prefix)

    def _full_key(self, key: str) -> str:
        return f"{self._prefix}{key}"

    def get(self, key: str) -> Any:
        """Fetch and decode a JSON value.

        Args:
            key: Cache key without prefix

        Returns:
            The decoded value

        Raises:
            CacheKeyNotFoundError: On a miss
            CacheSerializationError: If the stored value is not valid JSON
            CacheBackendError: On connection or command errors
        """
        full_key = self._full_key(key)
        try:
            raw = self._client.get(full_key)
        except redis.RedisError as e:
            raise CacheBackendError(f"redis GET {full_key} failed: {e}") from e

        if raw is None:
            logger.debug("Cache miss", extra={"key": full_key})
            raise CacheKeyNotFoundError(key)

        try:
            value = json.loads(raw)
        except (TypeError, ValueError) as e:
            raise CacheSerializationError(f"failed to decode {full_key}: {e}") from e

        logger.debug("Cache hit", extra={"key": full_key})
        return value

    def set(self, key: str, value: Any, ttl: float) -> None:
        """Encode ``value`` as JSON and store it with an expiry.

        Args:
            key: Cache key without prefix
            value: JSON-serializable value
            ttl: Time-to-live in seconds, truncated to whole milliseconds (minimum 1 ms)
        """
        full_key = self._full_key(key)
        try:
            payload = json.dumps(value)
        except (TypeError, ValueError) as e:
            raise CacheSerializationError(f"failed to encode {full_key}: {e}") from e

        expire_ms = max(int(ttl * 1000), 1)
        try:
            self._client.set(full_key, payload, px=expire_ms)
        except redis.RedisError as e:
            raise CacheBackendError(f"redis SET {full_key} failed: {e}") from e

        logger.debug("Cached value", extra={"key": full_key, "ttl": ttl})

    def delete(self, key: str) -> int:
        """Delete one key, or every key matching a pattern containing ``*``.

        Args:
            key: Exact key or wildcard pattern, without prefix

        Returns:
            Number of keys removed
        """
        full_key = self._full_key(key)
        try:
            if "*" not in key:
                return int(self._client.delete(full_key))  # type: ignore[arg-type]

            keys = list(self._client.scan_iter(match=full_key, count=self._scan_count))
            if not keys:
                return 0
            deleted = int(self._client.delete(*keys))  # type: ignore[arg-type]
        except redis.RedisError as e:
            raise CacheBackendError(f"redis delete {full_key} failed: {e}") from e

        logger.debug("Deleted keys by pattern", extra={"pattern": full_key, "count": deleted})
        return deleted

    def health_check(self) -> bool:
        """Check if Redis is accessible.

        Returns:
            True if healthy, False otherwise
        """
        try:
            return bool(self._client.ping())
        except redis.RedisError:
            return False

    @property
    def key_prefix(self) -> str:
        return self._prefix

    @property
    def client(self) -> redis.Redis:
        """Get the Redis client."""
        return self._client
