"""Dependency injection configuration for FastAPI app.

Uses FastAPI's app.state pattern for storing service instances.

Pattern:
    - Services stored in app.state during lifespan
    - Dependency functions retrieve from request.app.state
    - Clean separation, no global mutable state
"""

import logging
from collections.abc import Callable
from contextlib import asynccontextmanager
from typing import Annotated

from fastapi import Depends, FastAPI, HTTPException, Request, status

from linkeun_api.auth import (
    AuthError,
    Claims,
    InvalidIssuerError,
    JWTService,
    TokenExpiredError,
    TokenInvalidError,
    extract_token_from_bearer,
)
from linkeun_api.config import Settings, get_redis_client, get_settings
from linkeun_api.database import create_db_engine, create_session_factory, create_tables
from linkeun_api.handlers import EntityHandler
from linkeun_api.log import setup_logging
from linkeun_api.repositories import RedisCacheRepository
from linkeun_api.resources import RESOURCES, build_service
from linkeun_api.utils import mask_credential, mask_email, mask_jwt

logger = logging.getLogger(__name__)


def get_app_settings(request: Request) -> Settings:
    """Settings the app was started with."""
    return getattr(request.app.state, "settings", None) or get_settings()


def get_handler(resource: str) -> Callable[[Request], EntityHandler]:
    """Build a dependency returning the EntityHandler of ``resource``.

    Raises:
        RuntimeError: If handlers are not initialized
    """

    def dependency(request: Request) -> EntityHandler:
        handlers = getattr(request.app.state, "handlers", None)
        if handlers is None:
            raise RuntimeError("Handlers not initialized. Check lifespan setup.")
        return handlers[resource]

    dependency.__name__ = f"get_{resource}_handler"
    return dependency


def get_jwt_service(request: Request) -> JWTService:
    service = getattr(request.app.state, "jwt_service", None)
    if service is None:
        raise RuntimeError("JWTService not initialized. Check lifespan setup.")
    return service


def _unauthorized(message: str, error: Exception | None = None) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail={"message": message, "error": str(error) if error else message},
        headers={"WWW-Authenticate": "Bearer"},
    )


def require_auth(
    request: Request,
    settings: Annotated[Settings, Depends(get_app_settings)],
    jwt_service: Annotated[JWTService, Depends(get_jwt_service)],
) -> Claims | None:
    """Validate the bearer token. Returns None when auth is disabled.

    Raises:
        HTTPException: 401 for a missing, malformed or rejected token
    """
    if not settings.auth_enabled:
        return None

    header = request.headers.get("Authorization")
    if not header:
        raise _unauthorized("Authorization header is required")

    token = extract_token_from_bearer(header)
    if not token:
        raise _unauthorized("Invalid token format, expected 'Bearer <token>'")

    try:
        claims = jwt_service.validate_token(token)
    except TokenExpiredError as e:
        logger.info("Rejected expired token", extra={"token": mask_jwt(token)})
        raise _unauthorized("Token has expired", e) from e
    except InvalidIssuerError as e:
        raise _unauthorized("Invalid token issuer", e) from e
    except TokenInvalidError as e:
        raise _unauthorized("Invalid token", e) from e
    except AuthError as e:
        logger.error("Token validation failed: %s", e, extra={"token": mask_jwt(token)})
        raise _unauthorized("Authentication failed", e) from e

    try:
        user_id = claims.user_id
    except TokenInvalidError as e:
        raise _unauthorized("Invalid token subject", e) from e

    logger.debug(
        "Authenticated request",
        extra={"user_id": user_id, "role": claims.role, "email": mask_email(claims.email)},
    )
    request.state.claims = claims
    return claims


def require_role(*roles: str) -> Callable[..., Claims | None]:
    """Build a dependency that admits only callers holding one of ``roles``.

    Skipped entirely when auth is disabled.
    """

    def dependency(
        claims: Annotated[Claims | None, Depends(require_auth)],
        settings: Annotated[Settings, Depends(get_app_settings)],
    ) -> Claims | None:
        if not settings.auth_enabled:
            return claims
        if claims is None or not claims.role:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail={"message": "User role not found in context", "error": "forbidden"},
            )
        if claims.role not in roles:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail={"message": "Insufficient permissions", "error": "forbidden"},
            )
        return claims

    return dependency


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for FastAPI app.

    Initializes all layers and stores in app.state:
    1. Database engine and schema
    2. Redis cache store (optional, REDIS_ENABLED)
    3. Services and handlers per resource - app.state.handlers
    4. JWT service - app.state.jwt_service

    A pre-set ``app.state.settings`` or ``app.state.redis_client`` is used
    instead of the defaults (tests rely on this).

    Cleanup:
        Disposes the engine, closes Redis and removes services from app.state
    """
    settings: Settings = getattr(app.state, "settings", None) or get_settings()
    app.state.settings = settings
    setup_logging(settings)

    engine = create_db_engine(settings)
    create_tables(engine)
    session_factory = create_session_factory(engine)

    cache = None
    redis_client = getattr(app.state, "redis_client", None)
    owns_redis_client = redis_client is None
    if settings.redis_enabled:
        if redis_client is None:
            redis_client = get_redis_client(settings)
        cache = RedisCacheRepository.create(redis_client=redis_client, key_prefix=settings.redis_key_prefix)
        if cache.health_check():
            logger.info(
                "Redis cache enabled",
                extra={
                    "host": settings.redis_host,
                    "port": settings.redis_port,
                    "password": mask_credential(settings.redis_password),
                },
            )
        else:
            logger.warning("Redis is unreachable; reads will be served from the database")
    else:
        logger.info("Redis cache disabled")

    app.state.engine = engine
    app.state.cache = cache
    app.state.handlers = {
        resource.name: EntityHandler(
            service=build_service(resource, session_factory, settings, cache),
            label=resource.label,
        )
        for resource in RESOURCES
    }
    app.state.jwt_service = JWTService(
        secret=settings.jwt_secret,
        expiration=settings.jwt_expiration,
        allowed_issuers=settings.jwt_allowed_issuers,
    )

    logger.info(
        "Application started",
        extra={"environment": settings.environment, "auth_enabled": settings.auth_enabled},
    )

    yield

    del app.state.handlers
    del app.state.jwt_service
    del app.state.cache
    del app.state.engine
    engine.dispose()
    if redis_client is not None and owns_redis_client:
        redis_client.close()
    logger.info("Application shut down")


# Type aliases for cleaner dependency injection
AnimalHandlerDep = Annotated[EntityHandler, Depends(get_handler("animals"))]
FlowerHandlerDep = Annotated[EntityHandler, Depends(get_handler("flowers"))]
SettingsDep = Annotated[Settings, Depends(get_app_settings)]
ClaimsDep = Annotated[Claims | None, Depends(require_auth)]
AdminDep = Annotated[Claims | None, Depends(require_role("admin"))]
