"""Cache storage protocol.

Defines the interface for any key-value backend that can hold serialized
entity snapshots with a per-entry TTL.

Implementations can include:
- Redis (default)
- Memcached
- An in-process dictionary for local development
"""

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class CacheStore(Protocol):
    """Protocol for cache storage backends.

    Any type that implements these methods satisfies the protocol, no
    explicit inheritance needed. Keys are opaque strings; the store applies
    its own namespace prefix and owns serialization.

    Example:
        ```python
        from linkeun_api.protocols import CacheStore

        store: CacheStore = RedisCacheRepository(redis_client)
        store.set("v1:animals:item:1", {"id": 1, "name": "Max"}, ttl=900)
        ```
    """

    def get(self, key: str) -> Any:
        """Fetch and decode a value.

        Args:
            key: The cache key (without namespace prefix)

        Returns:
            The decoded value

        Raises:
            CacheKeyNotFoundError: The key is absent (a normal miss)
            CacheSerializationError: The stored bytes could not be decoded
            CacheBackendError: The backend could not be reached
        """
        ...

    def set(self, key: str, value: Any, ttl: float) -> None:
        """Encode and store a value.

        Args:
            key: The cache key (without namespace prefix)
            value: A JSON-serializable value
            ttl: Time-to-live in seconds

        Raises:
            CacheSerializationError: The value could not be encoded
            CacheBackendError: The backend could not be reached
        """
        ...

    def delete(self, key: str) -> int:
        """Delete a key, or every key matching a ``*`` pattern.

        Args:
            key: Exact key or wildcard pattern

        Returns:
            Number of keys removed (zero is not an error)

        Raises:
            CacheBackendError: The backend could not be reached
        """
        ...

    def health_check(self) -> bool:
        """Check if the backend is reachable.

        Returns:
            True if healthy, False otherwise
        """
        ...
