"""
Request helpers shared by every router: admin identity and query parsing.
"""

from dataclasses import dataclass

from fastapi import Header

from shared.config.constants import AdminHeaders
from shared.utils.exceptions import MaskError, MaskTypeError, ValidationError, to_http_error
from shared.utils.masks import normalize_mask


@dataclass(frozen=True)
class AdminIdentity:
    """Admin forwarded by the auth proxy. Both fields may be missing in development."""

    id: str | None = None
    email: str | None = None


def current_admin(
    admin_id: str | None = Header(default=None, alias=AdminHeaders.ADMIN_ID),
    admin_email: str | None = Header(default=None, alias=AdminHeaders.ADMIN_EMAIL),
) -> AdminIdentity:
    """
    FastAPI dependency returning the calling admin.

    Usage:
        @router.post("/diets")
        def create_diet(body: DietCreate, admin: AdminIdentity = Depends(current_admin)):
            ...
    """
    return AdminIdentity(id=admin_id or None, email=admin_email or None)


def parse_mask(raw: str | None) -> int | None:
    """
    Mask from a query string value. Blank means unset (None).

    Raises ValidationError (400) for non-integers and negatives.
    """
    if raw is None or not raw.strip():
        return None
    try:
        value = int(raw.strip())
    except ValueError:
        raise to_http_error(MaskTypeError(f"Mask must be an integer, got {raw!r}"), mask=raw)
    try:
        return normalize_mask(value)
    except MaskError as e:
        raise to_http_error(e, mask=raw)


def parse_id_list(raw: str | None, name: str = "ids") -> list[int]:
    """Comma-separated ids ("1,4,7"). Blank gives an empty list."""
    if raw is None or not raw.strip():
        return []
    try:
        return [int(part) for part in raw.split(",") if part.strip()]
    except ValueError:
        raise ValidationError(f"{name} must be a comma-separated list of integers", **{name: raw})
