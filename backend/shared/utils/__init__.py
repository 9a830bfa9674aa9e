"""
Utilities module: Masks, exceptions, validators.
"""

from shared.utils.exceptions import (
    NotFoundError,
    ValidationError,
    ConflictError,
    DatabaseError,
)
from shared.utils.masks import (
    encode,
    decode,
    contains,
    count_set_bits,
    matches_all,
)
from shared.utils.validators import (
    escape_like_pattern,
    validate_image_path,
)

__all__ = [
    # exceptions
    "NotFoundError",
    "ValidationError",
    "ConflictError",
    "DatabaseError",
    # masks
    "encode",
    "decode",
    "contains",
    "count_set_bits",
    "matches_all",
    # validators
    "escape_like_pattern",
    "validate_image_path",
]
