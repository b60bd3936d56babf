"""Shared fixtures: fakeredis cache, in-memory SQLite store, wired repositories."""

from typing import Any

import fakeredis
import pytest
from fastapi.testclient import TestClient

from linkeun_api.api.app import create_app
from linkeun_api.config import Settings
from linkeun_api.database import create_db_engine, create_session_factory, create_tables
from linkeun_api.entities import AnimalEntity, FlowerEntity, PageSpec
from linkeun_api.errors import CacheBackendError
from linkeun_api.keys import KeyGenerator
from linkeun_api.models import Animal, Flower
from linkeun_api.repositories import CachedEntityRepository, RedisCacheRepository, SQLEntityRepository
from linkeun_api.resources import ANIMAL_SORT_FIELDS, FLOWER_SORT_FIELDS

TEST_SECRET = "test-secret-key-0123456789abcdefghij"


class SpyStore:
    """EntityStore wrapper that records every call made to the backing store."""

    def __init__(self, store: Any) -> None:
        self._store = store
        self.calls: list[str] = []

    @property
    def entity_name(self) -> str:
        return self._store.entity_name

    def find_by_id(self, entity_id: int):
        self.calls.append("find_by_id")
        return self._store.find_by_id(entity_id)

    def find_page(self, spec: PageSpec):
        self.calls.append("find_page")
        return self._store.find_page(spec)

    def find_all(self, sort: str, direction: str):
        self.calls.append("find_all")
        return self._store.find_all(sort, direction)

    def create(self, values):
        self.calls.append("create")
        return self._store.create(values)

    def update(self, entity_id, values):
        self.calls.append("update")
        return self._store.update(entity_id, values)

    def delete(self, entity_id):
        self.calls.append("delete")
        return self._store.delete(entity_id)

    def health_check(self) -> bool:
        return self._store.health_check()


class UnreachableCache:
    """CacheStore whose backend is always down."""

    def get(self, key: str) -> Any:
        raise CacheBackendError("connection refused")

    def set(self, key: str, value: Any, ttl: float) -> None:
        raise CacheBackendError("connection refused")

    def delete(self, key: str) -> int:
        raise CacheBackendError("connection refused")

    def health_check(self) -> bool:
        return False


@pytest.fixture
def settings():
    """Settings for an isolated test app: in-memory SQLite, cache and auth on."""
    return Settings(
        environment="test",
        database_url="sqlite://",
        redis_enabled=True,
        redis_key_prefix="test:",
        auth_enabled=True,
        jwt_secret=TEST_SECRET,
        log_level="error",
        log_format="text",
    )


@pytest.fixture
def redis_client():
    """In-process Redis double."""
    client = fakeredis.FakeRedis(decode_responses=True)
    yield client
    client.flushall()


@pytest.fixture
def cache(redis_client):
    return RedisCacheRepository(redis_client=redis_client, key_prefix="test:")


@pytest.fixture
def session_factory(settings):
    engine = create_db_engine(settings)
    create_tables(engine)
    yield create_session_factory(engine)
    engine.dispose()


@pytest.fixture
def keys():
    return KeyGenerator("v1")


@pytest.fixture
def animal_store(session_factory):
    return SpyStore(SQLEntityRepository(Animal, AnimalEntity, session_factory, ANIMAL_SORT_FIELDS))


@pytest.fixture
def flower_store(session_factory):
    return SpyStore(SQLEntityRepository(Flower, FlowerEntity, session_factory, FLOWER_SORT_FIELDS))


@pytest.fixture
def animal_repo(animal_store, cache, keys):
    return CachedEntityRepository(
        store=animal_store,
        entity_type=AnimalEntity,
        keys=keys,
        cache=cache,
        ttl=900,
        paginated_ttl=300,
    )


@pytest.fixture
def flower_repo(flower_store, cache, keys):
    return CachedEntityRepository(
        store=flower_store,
        entity_type=FlowerEntity,
        keys=keys,
        cache=cache,
        ttl=900,
        paginated_ttl=300,
    )


@pytest.fixture
def client(settings, redis_client):
    """Test client running the full app lifespan."""
    app = create_app(settings=settings, redis_client=redis_client)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def auth_headers():
    """Bearer headers for a regular user; pass ``role="admin"`` for an admin."""
    from linkeun_api.auth import JWTService

    service = JWTService(secret=TEST_SECRET, expiration=3600)

    def make(role: str = "user") -> dict[str, str]:
        token = service.generate_token(1, "tester", role, "tester@example.com")
        return {"Authorization": f"Bearer {token}"}

    return make


@pytest.fixture
def unreachable_cache():
    return UnreachableCache()
