"""Cache key construction.

Every key starts with a version prefix. Bumping the version orphans all
previously written entries at once; they simply expire by TTL.

Key shapes:
    - item:    ``v1:animals:item:42``
    - list:    ``v1:animals:list:direction=asc:limit=10:page=1:sort=id``
    - hash:    ``v1:animals:1f2e3d4c5b6a7980``
    - query:   ``v1:animals:query:1f2e3d4c5b6a7980``
"""

import hashlib
from collections.abc import Mapping
from typing import Any

DEFAULT_VERSION = "v1"


def _format_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _sorted_pairs(params: Mapping[str, Any]) -> list[str]:
    """Render ``k=v`` pairs sorted by name, dropping None and empty values."""
    return [
        f"{k}={_format_value(params[k])}"
        for k in sorted(params)
        if params[k] is not None and params[k] != ""
    ]


def _short_digest(data: str) -> str:
    return hashlib.sha256(data.encode("utf-8")).digest()[:8].hex()


class KeyGenerator:
    """Deterministic cache key builder for a given cache generation.

    Example:
        ```python
        keys = KeyGenerator(version="v1")
        keys.item_key("animals", 42)      # "v1:animals:item:42"
        keys.list_pattern("animals")      # "v1:animals:list*"
        ```
    """

    def __init__(self, version: str = DEFAULT_VERSION) -> None:
        if not version:
            raise ValueError("cache key version must not be empty")
        self._version = version

    @property
    def version(self) -> str:
        return self._version

    def key(self, entity: str, params: Mapping[str, Any]) -> str:
        """Build a literal key from an entity namespace and parameters."""
        return ":".join([self._version, entity, *_sorted_pairs(params)])

    def hash_key(self, entity: str, params: Mapping[str, Any]) -> str:
        """Build a bounded-length key for arbitrarily large parameter sets."""
        return f"{self._version}:{entity}:{_short_digest(':'.join(_sorted_pairs(params)))}"

    def list_key(
        self,
        entity: str,
        page: int,
        limit: int,
        sort: str | None,
        direction: str | None,
    ) -> str:
        """Build the key of one page of an entity collection."""
        params = {
            "page": page,
            "limit": limit,
            "sort": sort,
            "direction": direction,
        }
        return self.key(f"{entity}:list", params)

    def item_key(self, entity: str, entity_id: int | str) -> str:
        """Build the key of a single entity."""
        return f"{self._version}:{entity}:item:{entity_id}"

    def query_key(self, entity: str, query: str) -> str:
        """Build a key for a custom query string."""
        return f"{self._version}:{entity}:query:{_short_digest(query)}"

    def list_pattern(self, entity: str) -> str:
        """Wildcard matching every list key of an entity."""
        return f"{self._version}:{entity}:list*"
