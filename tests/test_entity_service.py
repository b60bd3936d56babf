"""
Tests for the entity service (validation, deadlines, not-found mapping).
"""

import asyncio
import logging
import time

import pytest

from linkeun_api.config import get_settings
from linkeun_api.entities import AnimalEntity, CacheStatus, ListQuery
from linkeun_api.errors import InvalidParametersError, NotFoundError, OperationTimeoutError
from linkeun_api.repositories import CachedEntityRepository
from linkeun_api.resources import ANIMAL_SORT_FIELDS
from linkeun_api.services import EntityService, parse_id


def run(coro):
    return asyncio.run(coro)


@pytest.fixture
def service(animal_repo):
    return EntityService(
        repository=animal_repo,
        sort_fields=ANIMAL_SORT_FIELDS,
        required_fields=("name", "species"),
        default_page_size=10,
        max_page_size=100,
        operation_timeout=5,
    )


@pytest.fixture
def seeded(animal_store):
    for i in range(25):
        animal_store.create({"name": f"Pet {chr(65 + i)}", "species": "Cat", "age": i})
    animal_store.calls.clear()


class SlowRepository:
    entity_name = "animals"

    def find_by_id(self, entity_id):
        time.sleep(0.5)


class SlowWrites:
    """Backing store whose writes take longer than the read deadline."""

    def __init__(self, store):
        self._store = store

    def __getattr__(self, name):
        return getattr(self._store, name)

    def create(self, values):
        time.sleep(0.3)
        return self._store.create(values)

    def delete(self, entity_id):
        time.sleep(0.3)
        return self._store.delete(entity_id)


@pytest.mark.parametrize("raw,expected", [("42", 42), (" 7 ", 7), (1, 1), ("00012", 12)])
def test_parse_id(raw, expected):
    """Test valid ids parse to integers."""
    assert parse_id(raw) == expected


@pytest.mark.parametrize("raw", ["", "abc", "0", "-1", "4.2", "1e3", "²", 0, -5, True])
def test_parse_id_rejects(raw):
    """Test malformed ids are rejected."""
    with pytest.raises(InvalidParametersError):
        parse_id(raw)


def test_build_page_spec_defaults(service):
    """Test list defaults."""
    spec = service.build_page_spec(ListQuery())
    assert (spec.params.page, spec.params.limit, spec.sort, spec.direction) == (1, 10, "id", "asc")


def test_build_page_spec_normalizes(service):
    """Test out-of-range list parameters are normalized."""
    spec = service.build_page_spec(ListQuery(page=0, limit=500, sort="password", direction="sideways"))
    assert (spec.params.page, spec.params.limit, spec.sort, spec.direction) == (1, 100, "id", "asc")

    spec = service.build_page_spec(ListQuery(page=2, limit=5, sort="age", direction="DESC"))
    assert (spec.params.page, spec.params.limit, spec.sort, spec.direction) == (2, 5, "age", "desc")


def test_get_page(service, seeded):
    """Test paginated reads and their cache status."""
    result = run(service.get_page(ListQuery(page=1, limit=10)))
    assert len(result.data) == 10
    assert result.pagination.total_pages == 3
    assert result.pagination.has_next_page is True
    assert result.pagination.has_previous_page is False
    assert result.cache_info.status is CacheStatus.MISS

    again = run(service.get_page(ListQuery(page=1, limit=10)))
    assert again.cache_info.status is CacheStatus.HIT


def test_get_all(service, seeded):
    """Test reading every entity."""
    result = run(service.get_all())
    assert len(result.data) == 25


def test_get_by_id(service):
    """Test reading one entity, then from cache."""
    created = run(service.create({"name": "Max", "species": "Dog", "age": 3}))
    result = run(service.get_by_id(str(created.id)))
    assert result.data == created
    assert result.cache_info.status is CacheStatus.MISS
    assert run(service.get_by_id(created.id)).cache_info.status is CacheStatus.HIT


def test_get_by_id_not_found(service):
    """Test a missing entity raises NotFoundError."""
    with pytest.raises(NotFoundError) as exc_info:
        run(service.get_by_id("404"))
    assert exc_info.value.entity_id == 404


def test_bad_id_never_reaches_store(service, animal_store):
    """Test malformed ids are rejected before the store."""
    with pytest.raises(InvalidParametersError):
        run(service.get_by_id("abc"))
    assert animal_store.calls == []


def test_create_strips_server_managed_fields(service):
    """Test server-managed fields are ignored on create."""
    created = run(
        service.create(
            {"id": 999, "name": "Luna", "species": "Cat", "created_at": "1999-01-01T00:00:00"}
        )
    )
    assert created.id != 999
    assert created.created_at.year != 1999


@pytest.mark.parametrize(
    "payload",
    [{}, {"name": "Luna"}, {"name": "  ", "species": "Cat"}, {"species": "Cat", "name": None}],
)
def test_create_requires_fields(service, payload):
    """Test required fields are enforced."""
    with pytest.raises(InvalidParametersError):
        run(service.create(payload))


def test_update(service):
    """Test update preserves created_at and refreshes the cache."""
    created = run(service.create({"name": "Max", "species": "Dog", "age": 3}))
    run(service.get_by_id(created.id))

    updated = run(service.update(str(created.id), {"name": "Rex", "species": "Dog", "age": 5}))
    assert updated.name == "Rex"
    assert updated.created_at == created.created_at

    result = run(service.get_by_id(created.id))
    assert result.cache_info.status is CacheStatus.MISS
    assert result.data.age == 5


def test_update_not_found(service):
    """Test updating a missing entity raises NotFoundError."""
    with pytest.raises(NotFoundError):
        run(service.update("404", {"name": "Rex", "species": "Dog"}))


def test_delete(service):
    """Test delete removes the entity."""
    created = run(service.create({"name": "Max", "species": "Dog"}))
    run(service.delete(created.id))
    with pytest.raises(NotFoundError):
        run(service.get_by_id(created.id))
    with pytest.raises(NotFoundError):
        run(service.delete(created.id))


def test_operation_timeout():
    """Test a slow read raises OperationTimeoutError."""
    service = EntityService(
        repository=SlowRepository(),
        sort_fields={"id"},
        operation_timeout=0.05,
    )
    with pytest.raises(OperationTimeoutError):
        run(service.get_by_id(1))


def test_operation_timeout_logs_exact_deadline(caplog):
    """Test the timeout log line keeps sub-decisecond deadlines."""
    service_logger = logging.getLogger("linkeun_api.services.entity_service")
    service_logger.addHandler(caplog.handler)
    service = EntityService(repository=SlowRepository(), sort_fields={"id"}, operation_timeout=0.05)
    try:
        with pytest.raises(OperationTimeoutError):
            run(service.get_by_id(1))
    finally:
        service_logger.removeHandler(caplog.handler)
    assert "timed out after 0.05s" in caplog.text


def test_is_healthy(service):
    """Test health of store and cache."""
    assert run(service.is_healthy()) == {"store": True, "cache": True}


def test_page_sizes_default_to_settings(animal_repo):
    """Test page sizes fall back to settings."""
    service = EntityService(repository=animal_repo, sort_fields=ANIMAL_SORT_FIELDS)
    spec = service.build_page_spec(ListQuery(limit=10_000))
    assert spec.params.limit == get_settings().max_page_size
    assert service.repository is animal_repo
    assert service.entity_name == "animals"


@pytest.fixture
def slow_write_service(animal_store, cache, keys):
    repo = CachedEntityRepository(
        store=SlowWrites(animal_store),
        entity_type=AnimalEntity,
        keys=keys,
        cache=cache,
        ttl=900,
        paginated_ttl=300,
    )
    return EntityService(repository=repo, sort_fields=ANIMAL_SORT_FIELDS, operation_timeout=0.05)


def test_slow_create_reports_the_stored_row(slow_write_service, animal_store):
    """Test a create slower than the deadline succeeds and matches the table."""
    created = run(slow_write_service.create({"name": "Ghost", "species": "Dog"}))
    rows = animal_store.find_all("id", "asc")
    assert [r.id for r in rows] == [created.id]


def test_slow_delete_reports_success_only_after_the_row_is_gone(slow_write_service, animal_store):
    """Test a delete slower than the deadline completes before returning."""
    created = animal_store.create({"name": "Ghost", "species": "Dog"})
    run(slow_write_service.delete(created.id))
    assert animal_store.find_all("id", "asc") == []
