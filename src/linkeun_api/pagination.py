import math
from dataclasses import dataclass, replace
from typing import Any

DEFAULT_LIMIT = 10
MAX_LIMIT = 100


def calculate_offset(page: int, limit: int) -> int:
    """Offset of the first row of ``page`` (1-based)."""
    return (page - 1) * limit


def calculate_total_pages(total_items: int, limit: int) -> int:
    """Number of pages needed to hold ``total_items`` rows."""
    if limit < 1:
        raise ValueError("limit must be positive")
    return math.ceil(total_items / limit)


def normalize(
    page: int | None,
    limit: int | None,
    default_limit: int = DEFAULT_LIMIT,
    max_limit: int = MAX_LIMIT,
) -> tuple[int, int]:
    """Clamp page/limit into valid bounds.

    Pages below 1 become 1, limits below 1 become ``default_limit`` and limits
    above ``max_limit`` are clamped down. Pages past the end are left alone.
    """
    if page is None or page < 1:
        page = 1
    if limit is None or limit < 1:
        limit = default_limit
    if limit > max_limit:
        limit = max_limit
    return page, limit


@dataclass(frozen=True)
class PageParams:
    """Pagination parameters plus the totals computed for one request."""

    page: int = 1
    limit: int = DEFAULT_LIMIT
    total_items: int = 0
    total_pages: int = 0

    @classmethod
    def create(
        cls,
        page: int | None = None,
        limit: int | None = None,
        default_limit: int = DEFAULT_LIMIT,
        max_limit: int = MAX_LIMIT,
    ) -> "PageParams":
        page, limit = normalize(page, limit, default_limit, max_limit)
        return cls(page=page, limit=limit)

    @property
    def offset(self) -> int:
        return calculate_offset(self.page, self.limit)

    def with_total(self, total_items: int) -> "PageParams":
        """Return a copy carrying totals for ``total_items`` rows."""
        return replace(
            self,
            total_items=total_items,
            total_pages=calculate_total_pages(total_items, self.limit),
        )

    @property
    def has_previous_page(self) -> bool:
        return self.page > 1

    @property
    def has_next_page(self) -> bool:
        return self.page < self.total_pages

    @property
    def previous_page(self) -> int:
        return self.page - 1 if self.has_previous_page else self.page

    @property
    def next_page(self) -> int:
        return self.page + 1 if self.has_next_page else self.page

    def to_dict(self) -> dict[str, int]:
        return {
            "page": self.page,
            "limit": self.limit,
            "total_items": self.total_items,
            "total_pages": self.total_pages,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "PageParams":
        return cls(
            page=int(data["page"]),
            limit=int(data["limit"]),
            total_items=int(data.get("total_items", 0)),
            total_pages=int(data.get("total_pages", 0)),
        )
