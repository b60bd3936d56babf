"""Data Transfer Objects for API contracts.

These Pydantic models define the external API contract.
They are used for request/response validation and serialization.

Internal domain logic should use entities from the entities package.
"""

from .requests import AnimalRequest, FlowerRequest, TokenRequest
from .responses import (
    APIResponse,
    CacheInfoItem,
    HealthCheckResponse,
    PagedData,
    PaginationMeta,
    ValidationErrorItem,
)

__all__ = [
    "AnimalRequest",
    "FlowerRequest",
    "TokenRequest",
    "APIResponse",
    "CacheInfoItem",
    "HealthCheckResponse",
    "PagedData",
    "PaginationMeta",
    "ValidationErrorItem",
]
