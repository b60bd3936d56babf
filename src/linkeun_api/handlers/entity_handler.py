"""HTTP handlers for entity CRUD.

Handlers convert between DTOs (API contracts) and service calls.
They handle HTTP concerns like status codes, envelopes and error mapping.
"""

import logging
from typing import Any

from fastapi import HTTPException, status
from pydantic import BaseModel

from linkeun_api.dto import APIResponse, CacheInfoItem, PagedData, PaginationMeta
from linkeun_api.entities import ListQuery
from linkeun_api.errors import (
    BackingStoreError,
    InvalidParametersError,
    LinkeunAPIError,
    NotFoundError,
    OperationTimeoutError,
)
from linkeun_api.services import EntityService

logger = logging.getLogger(__name__)


def _http_error(e: LinkeunAPIError, label: str, action: str) -> HTTPException:
    if isinstance(e, InvalidParametersError):
        code, message = status.HTTP_400_BAD_REQUEST, f"Invalid {label.lower()} request"
    elif isinstance(e, NotFoundError):
        code, message = status.HTTP_404_NOT_FOUND, f"{label} not found"
    elif isinstance(e, OperationTimeoutError):
        code, message = status.HTTP_504_GATEWAY_TIMEOUT, f"Timed out trying to {action} {label.lower()}"
    else:
        code, message = status.HTTP_500_INTERNAL_SERVER_ERROR, f"Failed to {action} {label.lower()}"
    return HTTPException(status_code=code, detail={"message": message, "error": str(e)})


class EntityHandler:
    """HTTP handlers for one CRUD resource.

    This handler delegates business logic to EntityService
    and handles HTTP-specific concerns like:
    - Converting entities and read results to DTOs
    - Mapping domain errors to status codes
    - Wrapping payloads in the response envelope

    Example:
        ```python
        handler = EntityHandler(service=animal_service, label="Animal")

        @app.get("/api/v1/animals/{animal_id}", response_model=APIResponse)
        async def get_animal(animal_id: str):
            return await handler.get(animal_id)
        ```
    """

    def __init__(self, service: EntityService[Any], label: str) -> None:
        """Initialize the entity handler.

        Args:
            service: The entity service for business logic (required).
            label: Singular, capitalized name used in messages ("Animal").
        """
        self._service = service
        self._label = label

    @property
    def service(self) -> EntityService[Any]:
        return self._service

    @property
    def plural(self) -> str:
        return self._service.entity_name

    async def list(self, query: ListQuery) -> APIResponse:
        """Handle GET /{resource} requests.

        Returns:
            APIResponse with ``data = {items, meta}`` and cache diagnostics

        Raises:
            HTTPException: 500/504 if the backing store fails
        """
        try:
            result = await self._service.get_page(query)
        except LinkeunAPIError as e:
            raise _http_error(e, self._label, "list") from e

        return APIResponse(
            success=True,
            message=f"{self.plural.capitalize()} retrieved successfully",
            data=PagedData(
                items=[item.model_dump(mode="json") for item in result.data],
                meta=PaginationMeta.from_params(result.pagination),
            ),
            cache_info=CacheInfoItem.from_entity(result.cache_info),
        )

    async def get(self, raw_id: str) -> APIResponse:
        """Handle GET /{resource}/{id} requests.

        Raises:
            HTTPException: 400 bad id, 404 missing, 500/504 store failure
        """
        try:
            result = await self._service.get_by_id(raw_id)
        except LinkeunAPIError as e:
            raise _http_error(e, self._label, "get") from e

        return APIResponse(
            success=True,
            message=f"{self._label} retrieved successfully",
            data=result.data.model_dump(mode="json"),
            cache_info=CacheInfoItem.from_entity(result.cache_info),
        )

    async def create(self, request: BaseModel) -> APIResponse:
        try:
            entity = await self._service.create(request.model_dump())
        except LinkeunAPIError as e:
            raise _http_error(e, self._label, "create") from e

        return APIResponse(
            success=True,
            message=f"{self._label} created successfully",
            data=entity.model_dump(mode="json"),
        )

    async def update(self, raw_id: str, request: BaseModel) -> APIResponse:
        try:
            entity = await self._service.update(raw_id, request.model_dump())
        except LinkeunAPIError as e:
            raise _http_error(e, self._label, "update") from e

        return APIResponse(
            success=True,
            message=f"{self._label} updated successfully",
            data=entity.model_dump(mode="json"),
        )

    async def delete(self, raw_id: str) -> None:
        try:
            await self._service.delete(raw_id)
        except LinkeunAPIError as e:
            raise _http_error(e, self._label, "delete") from e


async def health_status(handlers: list[EntityHandler], cache_enabled: bool) -> dict[str, Any]:
    """Aggregate store and cache health over every resource."""
    database = True
    cache: bool | None = True if cache_enabled else None
    for handler in handlers:
        try:
            checks = await handler.service.is_healthy()
        except BackingStoreError as e:
            logger.warning("Health check failed for %s: %s", handler.plural, e)
            database = False
            continue
        database = database and bool(checks["store"])
        if cache is not None:
            cache = cache and bool(checks["cache"])
    if not database:
        state = "unhealthy"
    elif cache is False:
        state = "degraded"
    else:
        state = "healthy"
    return {
        "status": state,
        "database": database,
        "cache": cache,
    }
