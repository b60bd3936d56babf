from typing import Any

from fastapi import APIRouter, FastAPI, Request, Response, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from linkeun_api.api.dependencies import (
    AdminDep,
    AnimalHandlerDep,
    ClaimsDep,
    FlowerHandlerDep,
    SettingsDep,
    lifespan,
)
from linkeun_api.config import Settings, get_settings
from linkeun_api.dto import (
    AnimalRequest,
    APIResponse,
    FlowerRequest,
    HealthCheckResponse,
    ValidationErrorItem,
)
from linkeun_api.entities import ListQuery
from linkeun_api.handlers import EntityHandler, health_status

API_TITLE = "Linkeun API"
API_VERSION = "0.1.0"
API_DESCRIPTION = "Animal and flower CRUD API with a Redis look-aside cache"


def _query_int(value: str | None) -> int | None:
    """Lenient integer query parameter: anything unparsable means "not given"."""
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        return None


def _list_query(page: str | None, limit: str | None, sort: str | None, direction: str | None) -> ListQuery:
    return ListQuery(page=_query_int(page), limit=_query_int(limit), sort=sort, direction=direction)


def _envelope(status_code: int, message: str, error: str | None = None, **extra: Any) -> JSONResponse:
    body = APIResponse(success=False, message=message, error=error or message, **extra)
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json", exclude_none=True))


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Render every HTTPException in the response envelope."""
    if isinstance(exc.detail, dict):
        message = exc.detail.get("message", "Request failed")
        error = exc.detail.get("error")
    else:
        message = str(exc.detail)
        error = None
    response = _envelope(exc.status_code, message, error)
    if exc.headers:
        response.headers.update(exc.headers)
    return response


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Turn request validation failures into a 400 with field errors."""
    errors = [
        ValidationErrorItem(
            field=".".join(str(p) for p in err.get("loc", ()) if p != "body"),
            tag=str(err.get("type", "invalid")),
            error=str(err.get("msg", "")),
        )
        for err in exc.errors()
    ]
    return _envelope(status.HTTP_400_BAD_REQUEST, "Validation failed", "invalid request payload", errors=errors)


def _register_crud(
    router: APIRouter,
    path: str,
    handler_dep: Any,
    request_type: type[AnimalRequest] | type[FlowerRequest],
    tag: str,
) -> None:
    """Register list/get/create/update/delete routes for one resource."""

    @router.get(path, response_model=APIResponse, tags=[tag], response_model_exclude_none=True)
    async def list_items(
        handler: handler_dep,
        page: str | None = None,
        limit: str | None = None,
        sort: str | None = None,
        direction: str | None = None,
    ) -> APIResponse:
        return await handler.list(_list_query(page, limit, sort, direction))

    @router.get(f"{path}/{{item_id}}", response_model=APIResponse, tags=[tag], response_model_exclude_none=True)
    async def get_item(item_id: str, handler: handler_dep) -> APIResponse:
        return await handler.get(item_id)

    @router.post(
        path,
        response_model=APIResponse,
        status_code=status.HTTP_201_CREATED,
        tags=[tag],
        response_model_exclude_none=True,
    )
    async def create_item(payload: request_type, handler: handler_dep) -> APIResponse:  # type: ignore[valid-type]
        return await handler.create(payload)

    @router.put(f"{path}/{{item_id}}", response_model=APIResponse, tags=[tag], response_model_exclude_none=True)
    async def update_item(item_id: str, payload: request_type, handler: handler_dep) -> APIResponse:  # type: ignore[valid-type]
        return await handler.update(item_id, payload)

    @router.delete(f"{path}/{{item_id}}", status_code=status.HTTP_204_NO_CONTENT, tags=[tag])
    async def delete_item(item_id: str, handler: handler_dep) -> Response:
        await handler.delete(item_id)
        return Response(status_code=status.HTTP_204_NO_CONTENT)


def create_app(settings: Settings | None = None, redis_client: Any = None) -> FastAPI:
    """Build the FastAPI application.

    Args:
        settings: Settings to start with. Defaults to ``get_settings()``.
        redis_client: Redis client to use instead of one built from settings.
    """
    settings = settings or get_settings()
    app = FastAPI(
        title=API_TITLE,
        description=API_DESCRIPTION,
        version=API_VERSION,
        lifespan=lifespan,
        docs_url="/docs" if settings.is_development else None,
        redoc_url="/redoc" if settings.is_development else None,
    )
    app.state.settings = settings
    app.state.redis_client = redis_client

    app.add_middleware(
        CORSMiddleware,  # type: ignore[arg-type]
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Accept", "Authorization", "Content-Type", "X-CSRF-Token"],
        expose_headers=["Link"],
        max_age=300,
    )
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, validation_exception_handler)  # type: ignore[arg-type]

    @app.get("/")
    async def root() -> dict[str, Any]:
        """Root endpoint with API information."""
        return {
            "name": API_TITLE,
            "version": API_VERSION,
            "description": API_DESCRIPTION,
            "endpoints": {
                "animals": "/api/v1/animals",
                "flowers": "/api/v1/flowers",
                "health": "/health",
                "docs": "/docs",
            },
        }

    @app.get("/health", response_model=HealthCheckResponse)
    async def health(request: Request, app_settings: SettingsDep) -> JSONResponse:
        """Database and cache health."""
        handlers: dict[str, EntityHandler] = request.app.state.handlers
        result = await health_status(list(handlers.values()), app_settings.redis_enabled)
        code = status.HTTP_503_SERVICE_UNAVAILABLE if result["status"] == "unhealthy" else status.HTTP_200_OK
        return JSONResponse(status_code=code, content=HealthCheckResponse(**result).model_dump())

    api = APIRouter(prefix="/api/v1")

    @api.get("/public", response_model=APIResponse, response_model_exclude_none=True)
    async def public() -> APIResponse:
        return APIResponse(
            success=True,
            message="Public API is working",
            data={"message": "This is a public endpoint that doesn't require authentication"},
        )

    @api.get("/protected", response_model=APIResponse, response_model_exclude_none=True)
    async def protected(claims: ClaimsDep) -> APIResponse:
        user = None
        if claims is not None:
            user = {
                "id": claims.user_id,
                "username": claims.username,
                "role": claims.role,
                "email": claims.email,
            }
        return APIResponse(
            success=True,
            message="Protected API is working",
            data={"message": "This endpoint requires authentication", "user": user},
        )

    @api.get("/protected/admin", response_model=APIResponse, response_model_exclude_none=True)
    async def admin(claims: AdminDep) -> APIResponse:
        return APIResponse(
            success=True,
            message="Admin API is working",
            data={"message": "This endpoint requires admin role"},
        )

    _register_crud(api, "/animals", AnimalHandlerDep, AnimalRequest, "animals")
    _register_crud(api, "/flowers", FlowerHandlerDep, FlowerRequest, "flowers")
    app.include_router(api)

    return app


if __name__ == "__main__":
    import uvicorn

    _settings = get_settings()
    uvicorn.run(
        "linkeun_api.api.app:create_app",
        factory=True,
        host=_settings.api_host,
        port=_settings.api_port,
        reload=_settings.api_reload,
    )
