"""Protocol interfaces for swappable implementations.

This package contains protocol definitions using structural typing.
Protocols enable:
- Easy swapping of implementations (Redis → Memcached, MySQL → PostgreSQL, etc.)
- Unit testing with in-memory implementations
- Clear separation of concerns

Usage:
    ```python
    from linkeun_api.protocols import CacheStore, EntityStore

    # Type hints work with any implementation
    cache: CacheStore = RedisCacheRepository(client)
    store: EntityStore[AnimalEntity] = SQLEntityRepository(...)
    ```
"""

from .cache_store import CacheStore
from .entity_store import EntityStore

__all__ = [
    "CacheStore",
    "EntityStore",
]
