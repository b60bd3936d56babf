"""Error taxonomy.

Only backing-store errors are allowed to fail a request. The cache error
family is raised by cache stores and absorbed by the cached repository.
"""


class LinkeunAPIError(Exception):
    """Base class for all application errors."""


class NotFoundError(LinkeunAPIError):
    """The requested entity does not exist in the backing store."""

    def __init__(self, entity: str, entity_id: int | str) -> None:
        super().__init__(f"{entity} {entity_id} not found")
        self.entity = entity
        self.entity_id = entity_id


class InvalidParametersError(LinkeunAPIError):
    """Malformed identifier, pagination or payload input."""


class BackingStoreError(LinkeunAPIError):
    """Any failure reported by the canonical data store."""


class OperationTimeoutError(BackingStoreError):
    """An operation did not finish within its deadline."""


class CacheError(LinkeunAPIError):
    """Base class for cache-layer failures. Never surfaced to callers."""


class CacheKeyNotFoundError(CacheError):
    """The key is not present in the cache (a plain miss)."""

    def __init__(self, key: str) -> None:
        super().__init__(f"key not found: {key}")
        self.key = key


class CacheSerializationError(CacheError):
    """A value could not be encoded for, or decoded from, the cache."""


class CacheBackendError(CacheError):
    """The cache backend is unreachable or returned an error."""
