"""
HTTP errors raised by services and routers.

Each error logs itself when constructed, at the level its class declares,
with whatever keyword context the caller passes.

Usage:
    from shared.utils.exceptions import NotFoundError, ConflictError, ValidationError

    raise NotFoundError("Ingredient", ingredient_id)
    raise ConflictError("bit_index 3 is already used by 'Vegan'", table="diets")
    raise ValidationError("Unknown reference table", table=table)
"""

from typing import Any

from fastapi import HTTPException, status

from shared.config.logging import get_logger

logger = get_logger(__name__)


class AppException(HTTPException):
    """Base error: subclasses set ``status_code_default`` and ``log_level``."""

    status_code_default: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    log_level: str = "warning"

    def __init__(self, detail: str, headers: dict[str, str] | None = None, **log_context: Any):
        getattr(logger, self.log_level)(detail, status_code=self.status_code_default, **log_context)
        super().__init__(status_code=self.status_code_default, detail=detail, headers=headers)


# =============================================================================
# 4xx
# =============================================================================


class NotFoundError(AppException):
    """
    404 for a missing entity.

    Usage:
        raise NotFoundError("Recipe", 123)
        raise NotFoundError("Recipe in category", recipe_id, category_id=4)
    """

    status_code_default = status.HTTP_404_NOT_FOUND

    def __init__(self, entity: str, entity_id: int | str | None = None, **log_context: Any):
        detail = f"{entity} not found" if entity_id is None else f"{entity} with ID {entity_id} not found"
        super().__init__(detail, entity=entity, entity_id=entity_id, **log_context)


class ValidationError(AppException):
    """400 for input that passed the schema but breaks a business rule."""

    status_code_default = status.HTTP_400_BAD_REQUEST


class ImmutableFieldError(ValidationError):
    """A field that is fixed at creation was changed on update."""

    def __init__(self, entity: str, field: str, **log_context: Any):
        super().__init__(
            f"{entity}.{field} cannot be changed after creation",
            entity=entity,
            field=field,
            **log_context,
        )


class ConflictError(AppException):
    """409: the request clashes with stored state (taken bit, existing membership)."""

    status_code_default = status.HTTP_409_CONFLICT


class DuplicateEntityError(ConflictError):
    """409 for a unique value that already exists."""

    def __init__(self, entity: str, identifier: str | None = None, **log_context: Any):
        if identifier:
            detail = f"{entity} with identifier '{identifier}' already exists"
        else:
            detail = f"{entity} already exists"
        super().__init__(detail, entity=entity, identifier=identifier, **log_context)


# =============================================================================
# 5xx
# =============================================================================


class InternalError(AppException):
    """500, logged at error level."""

    log_level = "error"

    def __init__(self, detail: str = "Internal server error", **log_context: Any):
        super().__init__(detail, **log_context)


class DatabaseError(InternalError):
    """A commit failed and was rolled back."""

    def __init__(self, operation: str, **log_context: Any):
        super().__init__(f"Database error during {operation}. Please try again.", operation=operation, **log_context)


# =============================================================================
# Mask domain errors
# =============================================================================
# Raised by the pure codec in shared.utils.masks. They are plain Python
# errors so the codec stays usable outside a request; routers convert
# them with to_http_error().


class MaskError(Exception):
    """Base class for bitmask codec errors."""


class MaskTypeError(MaskError, TypeError):
    """A mask value is not an integer."""


class MaskValueError(MaskError, ValueError):
    """A mask value is negative."""


class BitIndexRangeError(MaskError, ValueError):
    """A bit_index lies outside the usable range."""


class MissingBitIndexError(MaskError, ValueError):
    """A reference item has no bit_index assigned."""


def to_http_error(exc: MaskError, **log_context: Any) -> AppException:
    """Map a codec error to the HTTP error returned to the client."""
    if isinstance(exc, MissingBitIndexError):
        return InternalError(str(exc), **log_context)
    return ValidationError(str(exc), error_type=type(exc).__name__, **log_context)
