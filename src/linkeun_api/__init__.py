"""Linkeun API - animal and flower CRUD with a Redis look-aside cache.

This package provides a layered architecture:

Layers:
    - protocols: Interface contracts (CacheStore, EntityStore)
    - repositories: Redis cache, SQL store and the cache-augmented repository
    - services: Business logic (validation, deadlines)
    - handlers: HTTP endpoint handlers
    - dto: Data transfer objects (API contracts)
    - entities: Domain snapshots and read results (internal)

Usage:
    ```python
    from linkeun_api.resources import ANIMALS, build_service

    service = build_service(ANIMALS, session_factory, get_settings(), cache)
    result = await service.get_by_id(42)
    result.cache_info.status  # CacheStatus.MISS, then CacheStatus.HIT
    ```

For HTTP API:
    ```python
    from linkeun_api.api.app import create_app
    ```
"""

from linkeun_api.config import Settings, get_redis_client, get_settings
from linkeun_api.entities import AnimalEntity, CacheInfo, CacheStatus, FlowerEntity, ItemResult, PageResult
from linkeun_api.keys import KeyGenerator
from linkeun_api.pagination import PageParams
from linkeun_api.protocols import CacheStore, EntityStore
from linkeun_api.repositories import CachedEntityRepository, RedisCacheRepository, SQLEntityRepository
from linkeun_api.services import EntityService

__all__ = [
    # Configuration
    "Settings",
    "get_settings",
    "get_redis_client",
    # Protocols
    "CacheStore",
    "EntityStore",
    # Implementations
    "KeyGenerator",
    "PageParams",
    "RedisCacheRepository",
    "SQLEntityRepository",
    "CachedEntityRepository",
    "EntityService",
    # Entities
    "AnimalEntity",
    "FlowerEntity",
    "CacheInfo",
    "CacheStatus",
    "ItemResult",
    "PageResult",
]

__version__ = "0.1.0"
