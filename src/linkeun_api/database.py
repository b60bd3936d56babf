"""
Database engine and session management.

The engine and its connection pool are process-wide and sized from settings.
Repositories receive a ``sessionmaker`` and open one short session per call.
"""

import logging

from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from linkeun_api.config import Settings
from linkeun_api.models import Base
from linkeun_api.utils.mask import mask_dsn

logger = logging.getLogger(__name__)


def connect_args(settings: Settings) -> dict:
    """Driver arguments that bound every statement by ``operation_timeout``."""
    url = settings.database_url
    if url.startswith("sqlite"):
        return {"check_same_thread": False, "timeout": settings.operation_timeout}
    if url.startswith("mysql"):
        return {
            "connect_timeout": settings.operation_timeout,
            "read_timeout": settings.operation_timeout,
            "write_timeout": settings.operation_timeout,
        }
    return {}


def create_db_engine(settings: Settings) -> Engine:
    """Create the SQLAlchemy engine for ``settings.database_url``.

    In-memory SQLite uses a single shared connection so that every session
    sees the same database.
    """
    url = settings.database_url
    logger.info("Connecting to database", extra={"dsn": mask_dsn(url)})

    if url.startswith("sqlite"):
        kwargs: dict = {"connect_args": connect_args(settings)}
        if ":memory:" in url or url in ("sqlite://", "sqlite+pysqlite://"):
            kwargs["poolclass"] = StaticPool
        return create_engine(url, **kwargs)

    return create_engine(
        url,
        connect_args=connect_args(settings),
        pool_size=settings.db_max_idle_conns,
        max_overflow=max(settings.db_max_open_conns - settings.db_max_idle_conns, 0),
        pool_recycle=int(settings.db_conn_max_lifetime),
        pool_pre_ping=True,
    )


def create_session_factory(engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


def create_tables(engine: Engine) -> None:
    """Create all tables that do not exist yet."""
    Base.metadata.create_all(engine)
    logger.info("Database schema is up to date", extra={"tables": sorted(Base.metadata.tables)})

