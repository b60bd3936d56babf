"""Token authentication."""

from .jwt_service import (
    AuthError,
    Claims,
    EmptySecretError,
    InvalidIssuerError,
    JWTService,
    TokenExpiredError,
    TokenInvalidError,
    TokenNotProvidedError,
    extract_token_from_bearer,
)

__all__ = [
    "AuthError",
    "Claims",
    "EmptySecretError",
    "InvalidIssuerError",
    "JWTService",
    "TokenExpiredError",
    "TokenInvalidError",
    "TokenNotProvidedError",
    "extract_token_from_bearer",
]
