"""
Tests for settings loading.
"""

import pytest

from linkeun_api.config import Settings, get_redis_client, parse_duration


@pytest.mark.parametrize(
    "value,expected",
    [
        ("15m", 900.0),
        ("30s", 30.0),
        ("1h", 3600.0),
        ("1h30m", 5400.0),
        ("250ms", 0.25),
        ("120", 120.0),
    ],
)
def test_parse_duration(value, expected):
    """Test duration strings parse to seconds."""
    assert parse_duration(value, default=1.0) == pytest.approx(expected)


@pytest.mark.parametrize("value", [None, "", "soon", "15 minutes", "m15"])
def test_parse_duration_falls_back(value):
    """Test invalid durations use the default."""
    assert parse_duration(value, default=42.0) == 42.0


def test_defaults():
    """Test default settings."""
    settings = Settings()
    assert settings.cache_ttl == 900
    assert settings.paginated_ttl == 300
    assert settings.cache_version == "v1"
    assert settings.default_page_size == 10
    assert settings.max_page_size == 100
    assert settings.is_development


def test_paginated_ttl_falls_back_to_a_third():
    """Test paginated TTL defaults to a third of the item TTL."""
    assert Settings(cache_ttl=900, cache_paginated_ttl=0).paginated_ttl == 300


@pytest.mark.parametrize(
    "kwargs",
    [
        {"default_page_size": 0},
        {"default_page_size": 50, "max_page_size": 20},
        {"cache_ttl": 0},
        {"log_rotation": "hourly"},
    ],
)
def test_invalid_settings(kwargs):
    """Test invalid settings are rejected."""
    with pytest.raises(ValueError):
        Settings(**kwargs)


def test_from_env(monkeypatch):
    """Test settings load from environment variables."""
    monkeypatch.setenv("APP_ENV", "production")
    monkeypatch.delenv("DATABASE_URL", raising=False)
    monkeypatch.delenv("DB_HOST", raising=False)
    monkeypatch.delenv("DB_PORT", raising=False)
    monkeypatch.delenv("REDIS_PORT", raising=False)
    monkeypatch.delenv("LOG_LEVEL", raising=False)
    monkeypatch.delenv("DOCKER_ENV", raising=False)
    monkeypatch.delenv("DB_PARAMS", raising=False)
    monkeypatch.setenv("DB_USER", "app")
    monkeypatch.setenv("DB_PASSWORD", "pw")
    monkeypatch.setenv("DB_NAME", "zoo")
    monkeypatch.setenv("REDIS_ENABLED", "true")
    monkeypatch.setenv("REDIS_CACHE_TTL", "10m")
    monkeypatch.setenv("REDIS_PAGINATED_TTL", "2m")
    monkeypatch.setenv("CACHE_VERSION", "v7")
    monkeypatch.setenv("JWT_ALLOWED_ISSUERS", "linkeun-api,partner")
    monkeypatch.setenv("MAX_PAGE_SIZE", "not-a-number")

    settings = Settings.from_env()

    assert settings.is_production
    assert settings.database_url == "mysql+pymysql://app:pw@localhost:3306/zoo?charset=utf8mb4"
    assert settings.redis_enabled is True
    assert settings.redis_port == 6379
    assert settings.cache_ttl == 600
    assert settings.paginated_ttl == 120
    assert settings.cache_version == "v7"
    assert settings.jwt_allowed_issuers == ("linkeun-api", "partner")
    assert settings.max_page_size == 100
    assert settings.log_level == "error"


def test_database_url_override(monkeypatch):
    """Test DATABASE_URL overrides the DB_* variables."""
    monkeypatch.setenv("APP_ENV", "test")
    monkeypatch.setenv("DATABASE_URL", "sqlite://")
    assert Settings.from_env().database_url == "sqlite://"


def test_redis_client_uses_settings():
    """Test the Redis client is built from settings."""
    client = get_redis_client(Settings(redis_host="cache.internal", redis_port=6390, redis_db=2))
    kwargs = client.connection_pool.connection_kwargs
    assert kwargs["host"] == "cache.internal"
    assert kwargs["port"] == 6390
    assert kwargs["db"] == 2
