import os
import re
from dataclasses import dataclass, field
from functools import lru_cache

import redis
from dotenv import load_dotenv


def _load_dotenv() -> None:
    """Load .env only for development (or when APP_ENV is unset)."""
    env = os.getenv("APP_ENV", "")
    if env and env != "development":
        return
    load_dotenv()


_load_dotenv()


_DURATION_RE = re.compile(r"(\d+(?:\.\d+)?)(ms|s|m|h)")
_DURATION_UNITS = {"ms": 0.001, "s": 1.0, "m": 60.0, "h": 3600.0}


def parse_duration(value: str | None, default: float) -> float:
    """Parse a duration such as ``15m``, ``1h30m``, ``30s`` or bare seconds.

    Returns:
        Duration in seconds, or ``default`` if the value is empty or malformed.
    """
    if not value:
        return default
    value = value.strip()
    if value.isdigit():
        return float(value)
    parts = _DURATION_RE.findall(value)
    if not parts or "".join(n + u for n, u in parts) != value:
        return default
    return sum(float(n) * _DURATION_UNITS[u] for n, u in parts)


def _env(key: str, default: str = "") -> str:
    return os.getenv(key, default)


def _env_int(key: str, default: int) -> int:
    try:
        return int(os.getenv(key, ""))
    except ValueError:
        return default


def _env_bool(key: str, default: bool) -> bool:
    value = os.getenv(key, "").strip().lower()
    if value in ("1", "t", "true", "yes"):
        return True
    if value in ("0", "f", "false", "no"):
        return False
    return default


def _env_list(key: str, separator: str = ",") -> tuple[str, ...]:
    return tuple(v for v in os.getenv(key, "").split(separator) if v)


def _build_database_url(env: str) -> str:
    url = _env("DATABASE_URL")
    if url:
        return url

    user = _env("DB_USER", "root")
    password = _env("DB_PASSWORD", "root")
    host = _env("DB_HOST", "localhost")

    # Production prefers the standard port and the compose service name
    if env == "production":
        default_port = 3306
        if host == "localhost" and _env("DOCKER_ENV") == "true":
            host = "mysql"
    else:
        default_port = 3307

    port = _env_int("DB_PORT", default_port)
    name = _env("DB_NAME", "linkeun_api")
    params = _env("DB_PARAMS", "charset=utf8mb4")
    return f"mysql+pymysql://{user}:{password}@{host}:{port}/{name}?{params}"


@dataclass(frozen=True)
class Settings:
    """Application settings loaded from environment variables."""

    environment: str = "development"

    # Database
    database_url: str = "sqlite:///./linkeun_api.db"
    db_max_open_conns: int = 25
    db_max_idle_conns: int = 25
    db_conn_max_lifetime: float = 300.0

    # Redis
    redis_enabled: bool = False
    redis_host: str = "localhost"
    redis_port: int = 6380
    redis_password: str = ""
    redis_db: int = 0
    redis_pool_size: int = 10
    redis_socket_timeout: float = 2.0
    redis_key_prefix: str = "linkeun_api:"

    # Cache
    cache_ttl: float = 900.0  # 15 minutes
    cache_paginated_ttl: float = 300.0  # 5 minutes
    cache_version: str = "v1"

    # Pagination
    default_page_size: int = 10
    max_page_size: int = 100

    # Deadline applied to every service operation
    operation_timeout: float = 5.0

    # Logging
    log_level: str = "info"
    log_format: str = "json"
    log_output_path: str = "stdout"
    log_file_path: str = ""
    log_rotation: str = "size"
    log_file_max_size: int = 100  # megabytes
    log_file_max_backups: int = 3
    log_file_max_age: int = 28  # days
    log_file_compress: bool = True

    # Auth
    auth_enabled: bool = False
    jwt_secret: str = ""
    jwt_expiration: float = 86400.0
    jwt_allowed_issuers: tuple[str, ...] = field(default_factory=tuple)

    # API
    api_host: str = "0.0.0.0"
    api_port: int = 8080
    api_reload: bool = False

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from the current environment."""
        env = _env("APP_ENV", "development")
        return cls(
            environment=env,
            database_url=_build_database_url(env),
            db_max_open_conns=_env_int("DB_MAX_OPEN_CONNS", 25),
            db_max_idle_conns=_env_int("DB_MAX_IDLE_CONNS", 25),
            db_conn_max_lifetime=parse_duration(_env("DB_CONN_MAX_LIFETIME"), 300.0),
            redis_enabled=_env_bool("REDIS_ENABLED", False),
            redis_host=_env("REDIS_HOST", "localhost"),
            redis_port=_env_int("REDIS_PORT", 6379 if env == "production" else 6380),
            redis_password=_env("REDIS_PASSWORD"),
            redis_db=_env_int("REDIS_DB", 0),
            redis_pool_size=_env_int("REDIS_POOL_SIZE", 10),
            redis_socket_timeout=parse_duration(_env("REDIS_SOCKET_TIMEOUT"), 2.0),
            redis_key_prefix=_env("REDIS_KEY_PREFIX", "linkeun_api:"),
            cache_ttl=parse_duration(_env("REDIS_CACHE_TTL"), 900.0),
            cache_paginated_ttl=parse_duration(_env("REDIS_PAGINATED_TTL"), 300.0),
            cache_version=_env("CACHE_VERSION", "v1"),
            default_page_size=_env_int("DEFAULT_PAGE_SIZE", 10),
            max_page_size=_env_int("MAX_PAGE_SIZE", 100),
            operation_timeout=parse_duration(_env("OPERATION_TIMEOUT"), 5.0),
            log_level=_env("LOG_LEVEL", "error" if env == "production" else "info"),
            log_format=_env("LOG_FORMAT", "json"),
            log_output_path=_env("LOG_OUTPUT_PATH", "stdout"),
            log_file_path=_env("LOG_FILE_PATH"),
            log_rotation=_env("LOG_ROTATION", "size"),
            log_file_max_size=_env_int("LOG_FILE_MAX_SIZE", 100),
            log_file_max_backups=_env_int("LOG_FILE_MAX_BACKUPS", 3),
            log_file_max_age=_env_int("LOG_FILE_MAX_AGE", 28),
            log_file_compress=_env_bool("LOG_FILE_COMPRESS", True),
            auth_enabled=_env_bool("AUTH_ENABLED", False),
            jwt_secret=_env("JWT_SECRET"),
            jwt_expiration=parse_duration(_env("JWT_EXPIRATION"), 86400.0),
            jwt_allowed_issuers=_env_list("JWT_ALLOWED_ISSUERS"),
            api_host=_env("API_HOST", "0.0.0.0"),
            api_port=_env_int("API_PORT", _env_int("PORT", 8080)),
            api_reload=_env_bool("API_RELOAD", False),
        )

    @property
    def is_development(self) -> bool:
        return self.environment == "development"

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def is_test(self) -> bool:
        return self.environment == "test"

    @property
    def paginated_ttl(self) -> float:
        """TTL for paginated list entries; a third of the item TTL if unset."""
        if self.cache_paginated_ttl > 0:
            return self.cache_paginated_ttl
        return self.cache_ttl / 3

    def __post_init__(self) -> None:
        """Validate settings after initialization."""
        if self.default_page_size < 1:
            raise ValueError("DEFAULT_PAGE_SIZE must be at least 1")
        if self.max_page_size < self.default_page_size:
            raise ValueError("MAX_PAGE_SIZE must not be smaller than DEFAULT_PAGE_SIZE")
        if self.cache_ttl <= 0:
            raise ValueError("REDIS_CACHE_TTL must be positive")
        if self.log_rotation not in ("size", "daily"):
            raise ValueError(f"LOG_ROTATION must be 'size' or 'daily', got {self.log_rotation!r}")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings.from_env()


def get_redis_client(settings: Settings | None = None) -> redis.Redis:
    """Create a Redis client backed by a process-wide connection pool."""
    settings = settings or get_settings()
    return redis.Redis(
        host=settings.redis_host,
        port=settings.redis_port,
        password=settings.redis_password or None,
        db=settings.redis_db,
        max_connections=settings.redis_pool_size,
        socket_connect_timeout=settings.redis_socket_timeout,
        socket_timeout=settings.redis_socket_timeout,
        decode_responses=True,
    )
