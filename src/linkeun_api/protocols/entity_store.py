"""Backing data-access protocol.

The canonical store for entities. The cached repository only relies on this
interface, so any relational or document store can sit behind it.
"""

from typing import Any, Protocol, TypeVar, runtime_checkable

from linkeun_api.entities import PageSpec

EntityT = TypeVar("EntityT")


@runtime_checkable
class EntityStore(Protocol[EntityT]):
    """Protocol for the source-of-truth store of one entity type.

    Errors are reported as ``BackingStoreError``; a missing record on a
    write is reported as ``NotFoundError``.
    """

    @property
    def entity_name(self) -> str:
        """Collection name, used as the cache namespace (e.g. ``animals``)."""
        ...

    def find_by_id(self, entity_id: int) -> EntityT | None:
        """Fetch one record, or None if it does not exist."""
        ...

    def find_page(self, spec: PageSpec) -> tuple[list[EntityT], int]:
        """Fetch one sorted page.

        Returns:
            Tuple of (records on the page, total record count)
        """
        ...

    def find_all(self, sort: str, direction: str) -> list[EntityT]:
        """Fetch every record in the given order."""
        ...

    def create(self, values: dict[str, Any]) -> EntityT:
        """Insert a record and return it with its generated id."""
        ...

    def update(self, entity_id: int, values: dict[str, Any]) -> EntityT:
        """Overwrite the given fields of a record and return it."""
        ...

    def delete(self, entity_id: int) -> None:
        """Remove a record."""
        ...

    def health_check(self) -> bool:
        """Check if the store is reachable."""
        ...
