"""HTTP handlers."""

from .entity_handler import EntityHandler, health_status

__all__ = ["EntityHandler", "health_status"]
