"""Utility modules."""

from .mask import mask_credential, mask_dsn, mask_email, mask_jwt, mask_sensitive, mask_url

__all__ = [
    "mask_credential",
    "mask_dsn",
    "mask_email",
    "mask_jwt",
    "mask_sensitive",
    "mask_url",
]
