"""
Standardized Pagination for all routers.

Usage:
    from admin_api.routers._common.pagination import Pagination, get_pagination

    @router.get("/recipes")
    def list_recipes(pagination: Pagination = Depends(get_pagination), ...):
        items, total = service.list_page(RecipeFilters(limit=pagination.limit, offset=pagination.offset))
        return {"items": items, "pagination": pagination.to_dict(total=total)}
"""

from dataclasses import dataclass
from typing import Any

from fastapi import Query

from shared.config.constants import Limits


@dataclass
class Pagination:
    """
    Page-based pagination parameters.

    Attributes:
        page: 1-indexed page number
        page_size: Items per page (1 to max_page_size)
    """

    page: int = 1
    page_size: int = Limits.DEFAULT_PAGE_SIZE
    max_page_size: int = Limits.MAX_PAGE_SIZE

    def __post_init__(self):
        """Validate and normalize values."""
        self.page = max(1, self.page)
        self.page_size = min(max(1, self.page_size), self.max_page_size)

    @property
    def limit(self) -> int:
        return self.page_size

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size

    def to_dict(self, total: int) -> dict[str, Any]:
        """Pagination metadata for the response."""
        pages = (total + self.page_size - 1) // self.page_size if total else 0
        return {
            "page": self.page,
            "page_size": self.page_size,
            "total": total,
            "pages": pages,
            "has_next": self.offset + self.page_size < total,
            "has_prev": self.page > 1,
        }


def get_pagination(
    page: int = Query(default=1, ge=1, description="Page number, starting at 1"),
    page_size: int = Query(
        default=Limits.DEFAULT_PAGE_SIZE,
        ge=1,
        le=Limits.MAX_PAGE_SIZE,
        description="Items per page",
    ),
) -> Pagination:
    """
    FastAPI dependency for pagination.

    Usage:
        @router.get("/items")
        def list_items(pagination: Pagination = Depends(get_pagination)):
            ...
    """
    return Pagination(page=page, page_size=page_size)


def paginated(items: list[Any], total: int, pagination: Pagination) -> dict[str, Any]:
    """Standard list response body."""
    return {"items": items, "pagination": pagination.to_dict(total=total)}
