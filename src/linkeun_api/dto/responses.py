"""Response DTOs for API endpoints."""

from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, Field

from linkeun_api.entities import CacheInfo
from linkeun_api.pagination import PageParams


def _now() -> datetime:
    return datetime.now(timezone.utc)


class CacheInfoItem(BaseModel):
    """Cache diagnostics for a read."""

    status: str = Field(..., description="hit, miss or disabled")
    key: str = Field(..., description="Cache key consulted for the read")
    enabled: bool = Field(..., description="Whether caching applied to this read")
    ttl_seconds: float = Field(..., description="TTL applied to this kind of entry", ge=0)

    @classmethod
    def from_entity(cls, info: CacheInfo) -> "CacheInfoItem":
        return cls(status=info.status.value, key=info.key, enabled=info.enabled, ttl_seconds=info.ttl)


class PaginationMeta(BaseModel):
    """Pagination metadata of a list response."""

    page: int = Field(..., ge=1)
    limit: int = Field(..., ge=1)
    total_items: int = Field(..., ge=0)
    total_pages: int = Field(..., ge=0)
    has_next_page: bool
    has_previous_page: bool

    @classmethod
    def from_params(cls, params: PageParams) -> "PaginationMeta":
        return cls(
            page=params.page,
            limit=params.limit,
            total_items=params.total_items,
            total_pages=params.total_pages,
            has_next_page=params.has_next_page,
            has_previous_page=params.has_previous_page,
        )


class PagedData(BaseModel):
    """Items of one page plus its metadata."""

    items: list[Any] = Field(default_factory=list)
    meta: PaginationMeta


class ValidationErrorItem(BaseModel):
    """Single field validation failure."""

    field: str = Field(..., description="Dotted path of the offending field")
    tag: str = Field(..., description="Validation rule that failed")
    error: str = Field(..., description="Human-readable message")


class APIResponse(BaseModel):
    """Standard response envelope for every endpoint."""

    success: bool = Field(..., description="Whether the operation succeeded")
    message: str | None = Field(None, description="Human-readable status message")
    data: Any = Field(None, description="Payload")
    error: str | None = Field(None, description="Error detail for failures")
    errors: list[ValidationErrorItem] | None = Field(None, description="Field errors for validation failures")
    cache_info: CacheInfoItem | None = Field(None, description="Cache diagnostics for reads")
    timestamp: datetime = Field(default_factory=_now)


class HealthCheckResponse(BaseModel):
    """Response DTO for health check."""

    status: str = Field(..., description="healthy, degraded (cache down) or unhealthy")
    database: bool = Field(..., description="Whether the database is reachable")
    cache: bool | None = Field(None, description="Whether Redis is reachable (null when disabled)")
