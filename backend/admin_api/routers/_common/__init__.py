"""
Common utilities shared across routers.

NOTE: Schemas live in shared/utils/admin_schemas.py so services never
import from routers.
"""

from .base import AdminIdentity, current_admin, parse_id_list, parse_mask
from .pagination import Pagination, get_pagination, paginated

__all__ = [
    # Base utilities
    "AdminIdentity",
    "current_admin",
    "parse_id_list",
    "parse_mask",
    # Pagination
    "Pagination",
    "get_pagination",
    "paginated",
]
