"""Look-aside cache around a backing entity store.

Reads check the cache first, fall through to the backing store on a miss and
populate the cache with the result. Writes go to the backing store first and
then invalidate the item key and every list page of the entity.

The cache is an optimization only: cache failures are logged and absorbed,
backing-store failures always propagate unchanged.
"""

import logging
from collections.abc import Callable
from typing import Any, Generic, TypeVar

from pydantic import BaseModel

from linkeun_api.entities import (
    SORT_DESC,
    CacheInfo,
    CacheStatus,
    ItemResult,
    PageResult,
    PageSpec,
)
from linkeun_api.errors import (
    CacheBackendError,
    CacheError,
    CacheKeyNotFoundError,
    CacheSerializationError,
)
from linkeun_api.keys import KeyGenerator
from linkeun_api.pagination import PageParams
from linkeun_api.protocols import CacheStore, EntityStore

logger = logging.getLogger(__name__)

EntityT = TypeVar("EntityT", bound=BaseModel)

# Key parameters used for the unpaginated "all records" read
_ALL_SORT = "created_at"
_ALL_DIRECTION = SORT_DESC


class CachedEntityRepository(Generic[EntityT]):
    """Cache-augmented repository for one entity type.

    Holds no per-request state; the cache store and backing store are
    expected to be safe for concurrent use.

    Example:
        ```python
        repo = CachedEntityRepository(
            store=SQLEntityRepository(Animal, AnimalEntity, sessions, ANIMAL_SORT_FIELDS),
            entity_type=AnimalEntity,
            keys=KeyGenerator("v1"),
            cache=RedisCacheRepository.create(),
            ttl=900,
            paginated_ttl=300,
        )
        result = repo.find_by_id(42)
        result.cache_info.status  # CacheStatus.MISS, then HIT
        ```
    """

    def __init__(
        self,
        store: EntityStore[EntityT],
        entity_type: type[EntityT],
        keys: KeyGenerator,
        cache: CacheStore | None = None,
        ttl: float = 900.0,
        paginated_ttl: float = 300.0,
    ) -> None:
        """Initialize the cached repository.

        Args:
            store: Source-of-truth store (required).
            entity_type: Entity snapshot type used to decode cached values.
            keys: Key generator carrying the cache generation.
            cache: Cache store. None disables caching.
            ttl: TTL in seconds for single items and unpaginated lists.
            paginated_ttl: TTL in seconds for paginated list pages.
        """
        self._store = store
        self._entity_type = entity_type
        self._keys = keys
        self._cache = cache
        self._ttl = ttl
        self._paginated_ttl = paginated_ttl

    @property
    def entity_name(self) -> str:
        return self._store.entity_name

    @property
    def cache_enabled(self) -> bool:
        return self._cache is not None

    @property
    def store(self) -> EntityStore[EntityT]:
        """Get the underlying backing store (for testing)."""
        return self._store

    # -- cache plumbing ---------------------------------------------------

    def _cache_get(self, key: str, decode: Callable[[Any], Any]) -> tuple[CacheStatus, Any]:
        """Look up ``key``. Returns the status and the decoded value on a hit."""
        if self._cache is None:
            return CacheStatus.DISABLED, None
        try:
            return CacheStatus.HIT, decode(self._cache.get(key))
        except CacheKeyNotFoundError:
            return CacheStatus.MISS, None
        except CacheSerializationError as e:
            logger.warning("Discarding unreadable cache entry", extra={"key": key, "error": str(e)})
            return CacheStatus.MISS, None
        except CacheBackendError as e:
            logger.warning("Cache unavailable, reading from store", extra={"key": key, "error": str(e)})
            return CacheStatus.DISABLED, None
        except (ValueError, TypeError, KeyError) as e:
            # Entry decoded but does not fit the entity shape (e.g. schema drift)
            logger.warning("Discarding malformed cache entry", extra={"key": key, "error": str(e)})
            return CacheStatus.MISS, None

    def _cache_set(self, key: str, value: Any, ttl: float) -> None:
        if self._cache is None:
            return
        try:
            self._cache.set(key, value, ttl)
        except CacheError as e:
            logger.warning("Failed to populate cache", extra={"key": key, "error": str(e)})

    def _cache_delete(self, key: str) -> None:
        if self._cache is None:
            return
        try:
            self._cache.delete(key)
        except CacheError as e:
            logger.warning("Failed to invalidate cache", extra={"key": key, "error": str(e)})

    def invalidate(self, entity_id: int | None = None, collection: bool = True) -> None:
        """Drop the cached item for ``entity_id`` and/or every cached list page."""
        if entity_id is not None:
            self._cache_delete(self._keys.item_key(self.entity_name, entity_id))
        if collection:
            self._cache_delete(self._keys.list_pattern(self.entity_name))

    def _encode(self, entity: EntityT) -> dict[str, Any]:
        return entity.model_dump(mode="json")

    def _decode(self, data: Any) -> EntityT:
        return self._entity_type.model_validate(data)

    def _decode_list(self, data: Any) -> list[EntityT]:
        return [self._decode(item) for item in data]

    def _decode_page(self, data: Any) -> tuple[list[EntityT], PageParams]:
        return self._decode_list(data["items"]), PageParams.from_dict(data["pagination"])

    # -- reads ------------------------------------------------------------

    def find_by_id(self, entity_id: int) -> ItemResult[EntityT]:
        """Read one entity. ``data`` is None if it does not exist."""
        key = self._keys.item_key(self.entity_name, entity_id)
        status, cached = self._cache_get(key, self._decode)
        info = CacheInfo(status=status, key=key, ttl=self._ttl)
        if status is CacheStatus.HIT:
            return ItemResult(data=cached, cache_info=info)

        entity = self._store.find_by_id(entity_id)
        if entity is not None and status is CacheStatus.MISS:
            self._cache_set(key, self._encode(entity), self._ttl)
        return ItemResult(data=entity, cache_info=info)

    def find_page(self, spec: PageSpec) -> PageResult[EntityT]:
        """Read one page; the page and its totals are cached together."""
        params = spec.params
        key = self._keys.list_key(self.entity_name, params.page, params.limit, spec.sort, spec.direction)
        status, cached = self._cache_get(key, self._decode_page)
        info = CacheInfo(status=status, key=key, ttl=self._paginated_ttl)
        if status is CacheStatus.HIT:
            items, pagination = cached
            logger.debug(
                "Cache hit for paginated query",
                extra={"key": key, "total_items": pagination.total_items, "total_pages": pagination.total_pages},
            )
            return PageResult(data=items, pagination=pagination, cache_info=info)

        items, total = self._store.find_page(spec)
        pagination = params.with_total(total)
        if status is CacheStatus.MISS:
            entry = {
                "items": [self._encode(e) for e in items],
                "pagination": pagination.to_dict(),
            }
            self._cache_set(key, entry, self._paginated_ttl)
        return PageResult(data=items, pagination=pagination, cache_info=info)

    def find_all(self) -> PageResult[EntityT]:
        """Read every entity, newest first."""
        key = self._keys.list_key(self.entity_name, 1, 0, _ALL_SORT, _ALL_DIRECTION)
        status, cached = self._cache_get(key, self._decode_list)
        info = CacheInfo(status=status, key=key, ttl=self._ttl)
        if status is CacheStatus.HIT:
            return PageResult(data=cached, cache_info=info)

        items = self._store.find_all(_ALL_SORT, _ALL_DIRECTION)
        if status is CacheStatus.MISS:
            self._cache_set(key, [self._encode(e) for e in items], self._ttl)
        return PageResult(data=items, cache_info=info)

    # -- writes -----------------------------------------------------------

    def create(self, values: dict[str, Any]) -> EntityT:
        entity = self._store.create(values)
        self.invalidate(collection=True)
        return entity

    def update(self, entity_id: int, values: dict[str, Any]) -> EntityT:
        entity = self._store.update(entity_id, values)
        self.invalidate(entity_id, collection=True)
        return entity

    def delete(self, entity_id: int) -> None:
        self._store.delete(entity_id)
        self.invalidate(entity_id, collection=True)

    def health_check(self) -> dict[str, bool | None]:
        return {
            "store": self._store.health_check(),
            "cache": self._cache.health_check() if self._cache is not None else None,
        }
