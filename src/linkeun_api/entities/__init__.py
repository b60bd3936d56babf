"""Domain entities for internal representation.

Entity snapshots (``AnimalEntity``, ``FlowerEntity``) are frozen pydantic
models: they are built from ORM rows and are the exact shape written to and
read back from the cache. Result and query types are frozen dataclasses
passed between repositories, services and handlers.

API contracts live in the dto package.
"""

from .animal import AnimalEntity
from .flower import FlowerEntity
from .results import (
    SORT_ASC,
    SORT_DESC,
    CacheInfo,
    CacheStatus,
    ItemResult,
    ListQuery,
    PageResult,
    PageSpec,
)

__all__ = [
    "AnimalEntity",
    "FlowerEntity",
    "CacheInfo",
    "CacheStatus",
    "ItemResult",
    "ListQuery",
    "PageResult",
    "PageSpec",
    "SORT_ASC",
    "SORT_DESC",
]
