"""
Tests for JWT issuance and validation.
"""

import time

import jwt
import pytest

from linkeun_api.auth import (
    EmptySecretError,
    InvalidIssuerError,
    JWTService,
    TokenExpiredError,
    TokenInvalidError,
    TokenNotProvidedError,
    extract_token_from_bearer,
)

SECRET = "unit-test-secret-0123456789abcdefghij"


@pytest.fixture
def service():
    return JWTService(secret=SECRET, expiration=3600)


def test_round_trip(service):
    """Test a generated token validates to the same claims."""
    token = service.generate_token(7, "alice", "admin", "alice@example.com")
    claims = service.validate_token(token)
    assert claims.user_id == 7
    assert claims.subject == "7"
    assert claims.username == "alice"
    assert claims.role == "admin"
    assert claims.email == "alice@example.com"
    assert claims.issuer == "linkeun-api"
    assert claims.expires_at - claims.issued_at == 3600


def test_expired_token():
    """Test expired tokens are rejected."""
    service = JWTService(secret=SECRET, expiration=-10)
    token = service.generate_token(1, "bob", "user", "bob@example.com")
    with pytest.raises(TokenExpiredError):
        service.validate_token(token)


def test_wrong_secret(service):
    """Test tokens signed with another secret are rejected."""
    token = JWTService(secret="another-secret-0123456789abcdefghij").generate_token(1, "bob", "user", "bob@example.com")
    with pytest.raises(TokenInvalidError):
        service.validate_token(token)


def test_garbage_token(service):
    """Test malformed tokens are rejected."""
    with pytest.raises(TokenInvalidError):
        service.validate_token("not.a.jwt")


def test_empty_token(service):
    """Test an empty token is rejected."""
    with pytest.raises(TokenNotProvidedError):
        service.validate_token("")


def test_empty_secret():
    """Test an empty secret is rejected."""
    service = JWTService(secret="")
    with pytest.raises(EmptySecretError):
        service.generate_token(1, "bob", "user", "bob@example.com")
    with pytest.raises(EmptySecretError):
        service.validate_token("abc")


def test_allowed_issuers():
    """Test issuers outside the allow list are rejected."""
    issuer_a = JWTService(secret=SECRET, issuer="service-a")
    token = issuer_a.generate_token(1, "bob", "user", "bob@example.com")

    strict = JWTService(secret=SECRET, allowed_issuers=("linkeun-api",))
    with pytest.raises(InvalidIssuerError):
        strict.validate_token(token)

    lenient = JWTService(secret=SECRET, allowed_issuers=("linkeun-api", "service-a"))
    assert lenient.validate_token(token).issuer == "service-a"


def test_missing_required_claim(service):
    """Test tokens missing required claims are rejected."""
    token = jwt.encode({"sub": "1", "iat": int(time.time())}, SECRET, algorithm="HS256")
    with pytest.raises(TokenInvalidError):
        service.validate_token(token)


def test_non_numeric_subject(service):
    """Test a non-numeric subject is not a user id."""
    now = int(time.time())
    token = jwt.encode({"sub": "abc", "iat": now, "exp": now + 60}, SECRET, algorithm="HS256")
    claims = service.validate_token(token)
    with pytest.raises(TokenInvalidError):
        claims.user_id


@pytest.mark.parametrize(
    "header,expected",
    [
        ("Bearer abc.def.ghi", "abc.def.ghi"),
        ("Bearer ", ""),
        ("Token abc", ""),
        ("bearer abc", ""),
        ("", ""),
        (None, ""),
    ],
)
def test_extract_token_from_bearer(header, expected):
    """Test Bearer header parsing."""
    assert extract_token_from_bearer(header) == expected
