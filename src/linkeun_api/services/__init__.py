"""Service layer for business logic.

This layer validates input, applies per-operation deadlines and maps
"no record" reads to ``NotFoundError``. Services depend on the cached
repository, which depends on protocols, so every layer is testable with
in-memory implementations.

Architecture:
    Handler -> Service -> CachedEntityRepository -> (CacheStore, EntityStore)
    (HTTP)  -> (Business) -> (Look-aside cache)   -> (Redis, SQL)

Usage:
    ```python
    from linkeun_api.services import EntityService

    service = EntityService(repository=repo, sort_fields={"id", "name"})
    animal = await service.get_by_id("42")
    ```
"""

from .entity_service import EntityService, parse_id

__all__ = [
    "EntityService",
    "parse_id",
]
