"""Helpers for keeping secrets out of logs."""

import re

_DSN_PASSWORD_RE = re.compile(r"^([^:/@]+(?:://)?[^:/@]*):([^@]+)@")
_URL_CREDENTIALS_RE = re.compile(r"(https?://)([^:/@]+):([^@]+)@")
_SENSITIVE_PARAMS = ("token", "key", "secret", "password", "access_token", "api_key")


def mask_sensitive(value: str, visible_prefix: int, visible_suffix: int) -> str:
    """Replace the middle of ``value`` with asterisks.

    Strings too short to keep both ends visible are masked entirely.
    """
    if not value:
        return ""
    length = len(value)
    if length <= visible_prefix + visible_suffix:
        return "*" * length
    suffix = value[length - visible_suffix:] if visible_suffix > 0 else ""
    return value[:visible_prefix] + "*" * (length - visible_prefix - visible_suffix) + suffix


def mask_credential(credential: str) -> str:
    return mask_sensitive(credential, 2, 2)


def mask_dsn(dsn: str) -> str:
    """Hide the password of a ``user:password@host`` style DSN or URL."""
    return _DSN_PASSWORD_RE.sub(r"\1:******@", dsn)


def mask_email(email: str) -> str:
    """Mask the local part of an address: ``jo******@example.com``."""
    parts = email.split("@")
    if len(parts) != 2:
        return mask_sensitive(email, 2, 2)
    local, domain = parts
    if len(local) <= 2:
        return email
    return local[:2] + "*" * (len(local) - 2) + "@" + domain


def mask_jwt(token: str) -> str:
    """Keep a few characters of each JWT segment: ``eyJh******.eyJz******.SflKx******``."""
    parts = token.split(".")
    if len(parts) != 3:
        return mask_sensitive(token, 4, 3)
    header, payload, signature = parts
    return f"{header[:4]}******.{payload[:4]}******.{signature[:5]}******"


def mask_url(url: str) -> str:
    """Mask basic-auth passwords and secret-looking query parameters."""
    masked = _URL_CREDENTIALS_RE.sub(r"\1\2:******@", url)
    for param in _SENSITIVE_PARAMS:
        masked = re.sub(rf"([?&]{param}=)([^&]+)", r"\1******", masked)
    return masked
