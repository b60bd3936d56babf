"""Entity service for core business logic.

This service validates caller input, applies a deadline to reads and
delegates to the cache-augmented repository.
"""

import asyncio
import logging
from collections.abc import Callable, Iterable
from typing import Any, Generic, TypeVar

from pydantic import BaseModel

from linkeun_api.config import get_settings
from linkeun_api.entities import SORT_ASC, SORT_DESC, ItemResult, ListQuery, PageResult, PageSpec
from linkeun_api.errors import InvalidParametersError, NotFoundError, OperationTimeoutError
from linkeun_api.pagination import PageParams
from linkeun_api.repositories import CachedEntityRepository

logger = logging.getLogger(__name__)

EntityT = TypeVar("EntityT", bound=BaseModel)
ResultT = TypeVar("ResultT")

DEFAULT_SORT_FIELD = "id"


def parse_id(raw_id: int | str) -> int:
    """Parse a positive numeric identifier.

    Raises:
        InvalidParametersError: If the id is empty, not an integer or not positive
    """
    if isinstance(raw_id, bool):
        raise InvalidParametersError(f"invalid id: {raw_id!r}")
    if isinstance(raw_id, str):
        raw_id = raw_id.strip()
        if not raw_id.isdecimal():
            raise InvalidParametersError(f"invalid id: {raw_id!r}")
    entity_id = int(raw_id)
    if entity_id < 1:
        raise InvalidParametersError(f"invalid id: {raw_id!r}")
    return entity_id


class EntityService(Generic[EntityT]):
    """Business operations for one entity type.

    The service depends on the cached repository, which in turn depends on
    PROTOCOLS for its cache and backing store. Each public method is a
    coroutine that runs the blocking repository call in a worker thread.
    Reads are abandoned after ``operation_timeout``. Writes always run to
    completion so the reported outcome matches what was stored; their
    deadline comes from the database driver timeouts.

    Example:
        ```python
        service = EntityService(
            repository=cached_animals,
            sort_fields=ANIMAL_SORT_FIELDS,
            required_fields=("name", "species"),
        )
        result = await service.get_by_id("42")
        page = await service.get_page(ListQuery(page=2, limit=20, sort="name"))
        ```
    """

    def __init__(
        self,
        repository: CachedEntityRepository[EntityT],
        sort_fields: Iterable[str],
        required_fields: Iterable[str] = (),
        default_page_size: int | None = None,
        max_page_size: int | None = None,
        operation_timeout: float | None = None,
    ) -> None:
        """Initialize the entity service.

        Args:
            repository: Cache-augmented repository (required).
            sort_fields: Columns a caller may sort by.
            required_fields: Payload fields that must be non-empty on writes.
            default_page_size: Limit used when none is given. Defaults to settings.
            max_page_size: Upper bound for limit. Defaults to settings.
            operation_timeout: Deadline in seconds per read. Defaults to settings.
        """
        settings = get_settings()
        self._repository = repository
        self._sort_fields = frozenset(sort_fields)
        self._required_fields = tuple(required_fields)
        self._default_page_size = default_page_size or settings.default_page_size
        self._max_page_size = max_page_size or settings.max_page_size
        self._timeout = operation_timeout or settings.operation_timeout

    @property
    def entity_name(self) -> str:
        return self._repository.entity_name

    async def _read(self, func: Callable[..., ResultT], *args: Any) -> ResultT:
        try:
            return await asyncio.wait_for(asyncio.to_thread(func, *args), timeout=self._timeout)
        except asyncio.TimeoutError as e:
            logger.error("Read on %s timed out after %ss", self.entity_name, self._timeout)
            raise OperationTimeoutError(
                f"{self.entity_name} read timed out after {self._timeout}s"
            ) from e

    async def _write(self, func: Callable[..., ResultT], *args: Any) -> ResultT:
        # No deadline here; database driver timeouts bound the call
        return await asyncio.to_thread(func, *args)

    def build_page_spec(self, query: ListQuery) -> PageSpec:
        """Normalize raw list parameters.

        Unknown sort fields fall back to ``id``; any direction other than
        ``desc`` means ascending.
        """
        params = PageParams.create(query.page, query.limit, self._default_page_size, self._max_page_size)
        sort = query.sort if query.sort in self._sort_fields else DEFAULT_SORT_FIELD
        direction = SORT_DESC if (query.direction or "").lower() == SORT_DESC else SORT_ASC
        return PageSpec(params=params, sort=sort, direction=direction)

    def _check_payload(self, values: dict[str, Any]) -> None:
        if not values:
            raise InvalidParametersError(f"invalid {self.entity_name} data: empty payload")
        missing = [f for f in self._required_fields if not str(values.get(f) or "").strip()]
        if missing:
            raise InvalidParametersError(
                f"invalid {self.entity_name} data: missing {', '.join(missing)}"
            )
        for protected in ("id", "created_at", "updated_at"):
            values.pop(protected, None)

    async def get_all(self) -> PageResult[EntityT]:
        return await self._read(self._repository.find_all)

    async def get_page(self, query: ListQuery) -> PageResult[EntityT]:
        spec = self.build_page_spec(query)
        return await self._read(self._repository.find_page, spec)

    async def get_by_id(self, raw_id: int | str) -> ItemResult[EntityT]:
        """Fetch one entity.

        Raises:
            InvalidParametersError: Malformed id
            NotFoundError: No such entity
        """
        entity_id = parse_id(raw_id)
        result = await self._read(self._repository.find_by_id, entity_id)
        if result.data is None:
            raise NotFoundError(self.entity_name, entity_id)
        return result

    async def create(self, values: dict[str, Any]) -> EntityT:
        values = dict(values)
        self._check_payload(values)
        entity = await self._write(self._repository.create, values)
        logger.info("Created %s", self.entity_name, extra={"entity_id": entity.id})
        return entity

    async def update(self, raw_id: int | str, values: dict[str, Any]) -> EntityT:
        """Overwrite an entity. ``created_at`` is always preserved.

        Raises:
            InvalidParametersError: Malformed id or payload
            NotFoundError: No such entity
        """
        entity_id = parse_id(raw_id)
        values = dict(values)
        self._check_payload(values)
        entity = await self._write(self._repository.update, entity_id, values)
        logger.info("Updated %s", self.entity_name, extra={"entity_id": entity_id})
        return entity

    async def delete(self, raw_id: int | str) -> None:
        entity_id = parse_id(raw_id)
        await self._write(self._repository.delete, entity_id)
        logger.info("Deleted %s", self.entity_name, extra={"entity_id": entity_id})

    async def is_healthy(self) -> dict[str, bool | None]:
        return await self._read(self._repository.health_check)

    @property
    def repository(self) -> CachedEntityRepository[EntityT]:
        """Get the underlying repository (for testing)."""
        return self._repository
