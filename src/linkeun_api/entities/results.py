"""Read results and query shapes exchanged between layers."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Generic, TypeVar

from linkeun_api.pagination import PageParams

EntityT = TypeVar("EntityT")

SORT_ASC = "asc"
SORT_DESC = "desc"


class CacheStatus(str, Enum):
    """Where a read was served from. Informational only."""

    HIT = "hit"
    MISS = "miss"
    DISABLED = "disabled"


@dataclass(frozen=True)
class CacheInfo:
    """Cache diagnostics attached to every read result.

    Attributes:
        status: hit, miss or disabled
        key: The cache key consulted for the read
        ttl: TTL in seconds that applies to this kind of entry
    """

    status: CacheStatus
    key: str
    ttl: float

    @property
    def enabled(self) -> bool:
        return self.status is not CacheStatus.DISABLED


@dataclass(frozen=True)
class PageSpec:
    """A validated page request as the backing store sees it."""

    params: PageParams
    sort: str = "id"
    direction: str = SORT_ASC

    @property
    def descending(self) -> bool:
        return self.direction == SORT_DESC


@dataclass(frozen=True)
class ListQuery:
    """Raw list parameters as received from a caller, before validation."""

    page: int | None = None
    limit: int | None = None
    sort: str | None = None
    direction: str | None = None


@dataclass(frozen=True)
class ItemResult(Generic[EntityT]):
    """Single-entity read. ``data`` is None when the record does not exist."""

    data: EntityT | None
    cache_info: CacheInfo


@dataclass(frozen=True)
class PageResult(Generic[EntityT]):
    """Collection read, with pagination metadata for paged reads."""

    cache_info: CacheInfo
    data: list[EntityT] = field(default_factory=list)
    pagination: PageParams | None = None
