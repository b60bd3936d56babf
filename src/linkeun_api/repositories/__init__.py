"""Repository layer for data access.

This layer abstracts external dependencies (Redis, relational databases)
behind protocol-based interfaces. This enables:
- Easy swapping of implementations (Redis → Memcached, MySQL → PostgreSQL, etc.)
- Unit testing with in-memory implementations
- Clear separation of concerns

The repositories are protocol-based (structural typing), not inheritance-based.
Any class implementing the required methods will satisfy the protocol.

Layering:
    CachedEntityRepository -> EntityStore (SQLEntityRepository)
                           -> CacheStore  (RedisCacheRepository)
"""

from linkeun_api.protocols import CacheStore, EntityStore

from .cached_repository import CachedEntityRepository
from .redis_repository import RedisCacheRepository
from .sql_repository import SQLEntityRepository

__all__ = [
    "CacheStore",
    "EntityStore",
    "CachedEntityRepository",
    "RedisCacheRepository",
    "SQLEntityRepository",
]
