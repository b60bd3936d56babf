"""SQLAlchemy implementation of EntityStore.

One generic repository serves every table: it is parameterized by the ORM
model, the entity snapshot type and the whitelist of sortable columns.
"""

import logging
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import Any, Generic, TypeVar

from pydantic import BaseModel
from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from linkeun_api.entities import PageSpec
from linkeun_api.errors import BackingStoreError, NotFoundError
from linkeun_api.models import Base

logger = logging.getLogger(__name__)

EntityT = TypeVar("EntityT", bound=BaseModel)


class SQLEntityRepository(Generic[EntityT]):
    """Relational store for one entity type.

    This class satisfies the EntityStore protocol through structural
    typing. Every call runs in its own short-lived session; SQLAlchemy
    errors are rolled back and re-raised as ``BackingStoreError``.

    Example:
        ```python
        repo = SQLEntityRepository(
            model=Animal,
            entity_type=AnimalEntity,
            session_factory=create_session_factory(engine),
            sort_fields=ANIMAL_SORT_FIELDS,
        )
        animal = repo.create({"name": "Max", "species": "Dog", "age": 3})
        ```
    """

    def __init__(
        self,
        model: type[Base],
        entity_type: type[EntityT],
        session_factory: sessionmaker[Session] | Callable[[], Session],
        sort_fields: frozenset[str],
    ) -> None:
        self._model = model
        self._entity_type = entity_type
        self._session_factory = session_factory
        self._sort_fields = sort_fields

    @property
    def entity_name(self) -> str:
        return self._model.__tablename__

    @property
    def sort_fields(self) -> frozenset[str]:
        return self._sort_fields

    @contextmanager
    def _session(self, operation: str) -> Iterator[Session]:
        session = self._session_factory()
        try:
            yield session
            session.commit()
        except SQLAlchemyError as e:
            session.rollback()
            logger.error("Failed to %s %s: %s", operation, self.entity_name, e)
            raise BackingStoreError(f"failed to {operation} {self.entity_name}: {e}") from e
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def _to_entity(self, row: Base) -> EntityT:
        return self._entity_type.model_validate(row)

    def _order_by(self, sort: str, descending: bool) -> Any:
        if sort not in self._sort_fields:
            raise ValueError(f"unsupported sort field {sort!r} for {self.entity_name}")
        column = getattr(self._model, sort)
        return column.desc() if descending else column.asc()

    def find_by_id(self, entity_id: int) -> EntityT | None:
        with self._session("find") as session:
            row = session.get(self._model, entity_id)
            return self._to_entity(row) if row is not None else None

    def find_page(self, spec: PageSpec) -> tuple[list[EntityT], int]:
        params = spec.params
        with self._session("list") as session:
            total = session.scalar(select(func.count()).select_from(self._model)) or 0
            stmt = (
                select(self._model)
                .order_by(self._order_by(spec.sort, spec.descending))
                .limit(params.limit)
                .offset(params.offset)
            )
            rows = session.scalars(stmt).all()
            logger.debug(
                "Query returned results",
                extra={
                    "entity": self.entity_name,
                    "count": len(rows),
                    "page": params.page,
                    "limit": params.limit,
                    "offset": params.offset,
                    "total_items": total,
                },
            )
            return [self._to_entity(r) for r in rows], int(total)

    def find_all(self, sort: str, direction: str) -> list[EntityT]:
        with self._session("list") as session:
            stmt = select(self._model).order_by(self._order_by(sort, direction == "desc"))
            return [self._to_entity(r) for r in session.scalars(stmt).all()]

    def create(self, values: dict[str, Any]) -> EntityT:
        with self._session("create") as session:
            row = self._model(**values)
            session.add(row)
            session.flush()
            session.refresh(row)
            return self._to_entity(row)

    def update(self, entity_id: int, values: dict[str, Any]) -> EntityT:
        with self._session("update") as session:
            row = session.get(self._model, entity_id)
            if row is None:
                raise NotFoundError(self.entity_name, entity_id)
            for name, value in values.items():
                setattr(row, name, value)
            session.flush()
            session.refresh(row)
            return self._to_entity(row)

    def delete(self, entity_id: int) -> None:
        with self._session("delete") as session:
            row = session.get(self._model, entity_id)
            if row is None:
                raise NotFoundError(self.entity_name, entity_id)
            session.delete(row)

    def health_check(self) -> bool:
        try:
            with self._session("ping") as session:
                session.execute(select(1))
            return True
        except BackingStoreError:
            return False
