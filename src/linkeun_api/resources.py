"""Per-resource wiring: ORM model, entity snapshot, sortable columns and
request DTO for every entity exposed over the API.
"""

from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel
from sqlalchemy.orm import Session, sessionmaker

from linkeun_api.config import Settings
from linkeun_api.dto import AnimalRequest, FlowerRequest
from linkeun_api.entities import AnimalEntity, FlowerEntity
from linkeun_api.keys import KeyGenerator
from linkeun_api.models import Animal, Base, Flower
from linkeun_api.protocols import CacheStore
from linkeun_api.repositories import CachedEntityRepository, SQLEntityRepository
from linkeun_api.services import EntityService

ANIMAL_SORT_FIELDS = frozenset({"id", "name", "species", "age", "created_at", "updated_at"})
FLOWER_SORT_FIELDS = frozenset(
    {"id", "name", "species", "color", "seasonal", "created_at", "updated_at"}
)


@dataclass(frozen=True)
class Resource:
    """Static description of one CRUD resource."""

    name: str
    label: str
    model: type[Base]
    entity_type: type[BaseModel]
    request_type: type[BaseModel]
    sort_fields: frozenset[str]
    required_fields: tuple[str, ...]


ANIMALS = Resource(
    name="animals",
    label="Animal",
    model=Animal,
    entity_type=AnimalEntity,
    request_type=AnimalRequest,
    sort_fields=ANIMAL_SORT_FIELDS,
    required_fields=("name", "species"),
)

FLOWERS = Resource(
    name="flowers",
    label="Flower",
    model=Flower,
    entity_type=FlowerEntity,
    request_type=FlowerRequest,
    sort_fields=FLOWER_SORT_FIELDS,
    required_fields=("name", "species", "color"),
)

RESOURCES: tuple[Resource, ...] = (ANIMALS, FLOWERS)


def build_store(resource: Resource, session_factory: sessionmaker[Session]) -> SQLEntityRepository[Any]:
    return SQLEntityRepository(
        model=resource.model,
        entity_type=resource.entity_type,
        session_factory=session_factory,
        sort_fields=resource.sort_fields,
    )


def build_service(
    resource: Resource,
    session_factory: sessionmaker[Session],
    settings: Settings,
    cache: CacheStore | None = None,
) -> EntityService[Any]:
    """Wire SQL store -> cached repository -> service for ``resource``.

    Args:
        resource: Resource description
        session_factory: SQLAlchemy session factory
        settings: Application settings (TTLs, cache version, page sizes, deadline)
        cache: Cache store. None disables caching.
    """
    repository = CachedEntityRepository(
        store=build_store(resource, session_factory),
        entity_type=resource.entity_type,
        keys=KeyGenerator(settings.cache_version),
        cache=cache,
        ttl=settings.cache_ttl,
        paginated_ttl=settings.paginated_ttl,
    )
    return EntityService(
        repository=repository,
        sort_fields=resource.sort_fields,
        required_fields=resource.required_fields,
        default_page_size=settings.default_page_size,
        max_page_size=settings.max_page_size,
        operation_timeout=settings.operation_timeout,
    )
