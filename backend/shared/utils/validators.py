"""
Shared validators for input sanitization.
"""

import re
from typing import Optional
from urllib.parse import urlparse

from shared.config.constants import Limits

# Image paths are either storage keys ("recipes/42.webp") or absolute URLs
ALLOWED_IMAGE_EXTENSIONS = {".jpg", ".jpeg", ".png", ".gif", ".webp", ".svg"}

BLOCKED_SCHEMES = {"javascript", "data", "file", "ftp", "mailto", "tel"}

HEX_COLOR_RE = re.compile(r"^#(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6})$")


def validate_image_path(path: Optional[str]) -> Optional[str]:
    """
    Validate an image reference stored on an ingredient or recipe.

    Accepts a relative storage key or an http(s) URL. Empty strings are
    normalised to None so that "no image" filters see a single value.

    Raises:
        ValueError: If the path is unusable
    """
    if path is None:
        return None

    path = path.strip()
    if not path:
        return None

    if len(path) > Limits.MAX_URL_LENGTH:
        raise ValueError(f"Image path too long (max {Limits.MAX_URL_LENGTH} characters)")

    parsed = urlparse(path)
    scheme = parsed.scheme.lower()
    if scheme in BLOCKED_SCHEMES:
        raise ValueError(f"URL scheme not allowed: {scheme}")

    if scheme:
        if scheme not in ("http", "https"):
            raise ValueError("Only HTTP/HTTPS image URLs are allowed")
        if not parsed.netloc:
            raise ValueError("Image URL has no host")
        return path

    if path.startswith("/") or ".." in path.split("/"):
        raise ValueError("Image storage key must be relative")

    if not any(path.lower().endswith(ext) for ext in ALLOWED_IMAGE_EXTENSIONS):
        raise ValueError("Image storage key has an unsupported extension")

    return path


def validate_hex_color(color: Optional[str]) -> Optional[str]:
    """Validate a #rgb / #rrggbb color, returned lowercase."""
    if color is None:
        return None
    color = color.strip()
    if not HEX_COLOR_RE.match(color):
        raise ValueError(f"Invalid color: {color!r}")
    return color.lower()


def escape_like_pattern(value: str) -> str:
    """
    Escape special characters in LIKE patterns.

    SQL LIKE uses % and _ as wildcards. This function escapes them
    so user input is matched literally.
    """
    if not value:
        return value

    # Escape the escape character first, then the wildcards
    value = value.replace("\\", "\\\\")
    value = value.replace("%", "\\%")
    value = value.replace("_", "\\_")
    return value


def sanitize_search_term(term: Optional[str], max_length: int = Limits.MAX_SEARCH_TERM_LENGTH) -> str:
    """
    Sanitize search term for safe use in queries.

    Returns an empty string when nothing searchable is left.
    """
    if not term:
        return ""

    term = term.strip()

    if len(term) > max_length:
        term = term[:max_length]

    # Remove null bytes and other control characters
    term = re.sub(r"[\x00-\x1f\x7f-\x9f]", "", term)

    return term


def validate_quantity(quantity: float) -> float:
    """Recipe ingredient quantities must be strictly positive."""
    if quantity <= 0:
        raise ValueError("Quantity must be greater than 0")
    return quantity
