"""JWT issuance and validation (HS256)."""

import time
from dataclasses import dataclass
from typing import Any

import jwt

ALGORITHM = "HS256"
ISSUER = "linkeun-api"
BEARER_PREFIX = "Bearer "


class AuthError(Exception):
    """Base class for authentication failures."""


class TokenNotProvidedError(AuthError):
    def __init__(self) -> None:
        super().__init__("token not provided")


class TokenExpiredError(AuthError):
    def __init__(self) -> None:
        super().__init__("token has expired")


class TokenInvalidError(AuthError):
    def __init__(self) -> None:
        super().__init__("token is invalid")


class InvalidIssuerError(AuthError):
    def __init__(self) -> None:
        super().__init__("token has invalid issuer")


class EmptySecretError(AuthError):
    def __init__(self) -> None:
        super().__init__("JWT secret is empty")


@dataclass(frozen=True)
class Claims:
    """Decoded token claims."""

    subject: str
    issuer: str
    issued_at: int
    expires_at: int
    username: str = ""
    role: str = ""
    email: str = ""

    @property
    def user_id(self) -> int:
        """Numeric user id carried in ``sub``.

        Raises:
            TokenInvalidError: If the subject is not a positive integer
        """
        if not self.subject.isdecimal() or int(self.subject) < 1:
            raise TokenInvalidError()
        return int(self.subject)


class JWTService:
    """Sign and verify HS256 tokens.

    Example:
        ```python
        service = JWTService(secret="s3cret", expiration=3600)
        token = service.generate_token(1, "alice", "admin", "alice@example.com")
        claims = service.validate_token(token)
        claims.role  # "admin"
        ```
    """

    def __init__(
        self,
        secret: str,
        expiration: float = 86400.0,
        allowed_issuers: tuple[str, ...] = (),
        issuer: str = ISSUER,
    ) -> None:
        self._secret = secret
        self._expiration = expiration
        self._allowed_issuers = allowed_issuers
        self._issuer = issuer

    def generate_token(self, user_id: int, username: str, role: str, email: str) -> str:
        if not self._secret:
            raise EmptySecretError()

        now = int(time.time())
        claims: dict[str, Any] = {
            "iss": self._issuer,
            "sub": str(user_id),
            "iat": now,
            "exp": now + int(self._expiration),
            "username": username,
            "role": role,
            "email": email,
        }
        return jwt.encode(claims, self._secret, algorithm=ALGORITHM)

    def validate_token(self, token: str) -> Claims:
        """Verify signature, expiry and issuer.

        Raises:
            TokenNotProvidedError: Empty token
            EmptySecretError: No secret configured
            TokenExpiredError: ``exp`` is in the past
            InvalidIssuerError: ``iss`` is not in the allowed issuers
            TokenInvalidError: Anything else wrong with the token
        """
        if not token:
            raise TokenNotProvidedError()
        if not self._secret:
            raise EmptySecretError()

        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[ALGORITHM],
                options={"require": ["exp", "sub", "iat"]},
            )
        except jwt.ExpiredSignatureError as e:
            raise TokenExpiredError() from e
        except jwt.InvalidTokenError as e:
            raise TokenInvalidError() from e

        issuer = str(payload.get("iss", ""))
        if self._allowed_issuers and issuer not in self._allowed_issuers:
            raise InvalidIssuerError()

        return Claims(
            subject=str(payload["sub"]),
            issuer=issuer,
            issued_at=int(payload["iat"]),
            expires_at=int(payload["exp"]),
            username=payload.get("username", ""),
            role=payload.get("role", ""),
            email=payload.get("email", ""),
        )


def extract_token_from_bearer(auth_header: str | None) -> str:
    """Return the token of a ``Bearer <token>`` header, or ``""``."""
    if auth_header and len(auth_header) > len(BEARER_PREFIX) and auth_header.startswith(BEARER_PREFIX):
        return auth_header[len(BEARER_PREFIX):]
    return ""
