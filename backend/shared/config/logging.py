"""
Structured logging for the admin API, the CLI and migrations.

Loggers accept keyword fields next to the message:

    logger.info("Namespace bit set", ingredient_id=12, bit_index=3)

Fields are rendered as JSON in production (or when LOG_FORMAT=json) and
as ``key=value`` pairs otherwise. Records emitted during a request also
carry its X-Request-ID and the masked admin email.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any

from shared.config.settings import settings

# Record attribute holding the keyword fields passed to a StructuredLogger
_FIELDS_ATTR = "fields"

NOISY_LOGGERS = {
    "uvicorn.access": logging.WARNING,
    "sqlalchemy.engine": logging.WARNING,
    "httpx": logging.WARNING,
}


def _context(record: logging.LogRecord) -> dict[str, str]:
    context = {}
    for attr in ("request_id", "admin"):
        value = getattr(record, attr, None)
        if value and value != "-":
            context[attr] = value
    return context


class JsonFormatter(logging.Formatter):
    """One JSON object per line, for log aggregation."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname.lower(),
            "logger": record.name,
            "msg": record.getMessage(),
            **_context(record),
        }
        fields = getattr(record, _FIELDS_ATTR, None)
        if fields:
            payload["fields"] = fields
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str, ensure_ascii=False)


class ConsoleFormatter(logging.Formatter):
    """Single-line human-readable output for local work."""

    def format(self, record: logging.LogRecord) -> str:
        time_str = datetime.fromtimestamp(record.created).strftime("%H:%M:%S")
        parts = [f"{time_str} {record.levelname:<7} {record.name}"]

        context = _context(record)
        if "request_id" in context:
            parts.append(f"[{context['request_id'][:8]}]")
        if "admin" in context:
            parts.append(f"<{context['admin']}>")

        parts.append(record.getMessage())
        fields = getattr(record, _FIELDS_ATTR, None)
        if fields:
            parts.append(" ".join(f"{key}={value!r}" for key, value in fields.items()))

        line = " ".join(parts)
        if record.exc_info:
            line = f"{line}\n{self.formatException(record.exc_info)}"
        return line


class StructuredLogger(logging.Logger):
    """Logger whose methods take keyword fields instead of an ``extra`` dict."""

    def _log(self, level, msg, args, exc_info=None, extra=None, stack_info=False, stacklevel=1, **fields):
        extra = dict(extra or {})
        if fields:
            extra[_FIELDS_ATTR] = fields
        super()._log(level, msg, args, exc_info=exc_info, extra=extra, stack_info=stack_info, stacklevel=stacklevel)

    def debug(self, msg: str, *args: Any, **fields: Any) -> None:
        if self.isEnabledFor(logging.DEBUG):
            self._log(logging.DEBUG, msg, args, **fields)

    def info(self, msg: str, *args: Any, **fields: Any) -> None:
        if self.isEnabledFor(logging.INFO):
            self._log(logging.INFO, msg, args, **fields)

    def warning(self, msg: str, *args: Any, **fields: Any) -> None:
        if self.isEnabledFor(logging.WARNING):
            self._log(logging.WARNING, msg, args, **fields)

    def error(self, msg: str, *args: Any, **fields: Any) -> None:
        if self.isEnabledFor(logging.ERROR):
            self._log(logging.ERROR, msg, args, **fields)


logging.setLoggerClass(StructuredLogger)


def _use_json() -> bool:
    if settings.log_format == "auto":
        return settings.environment == "production"
    return settings.log_format == "json"


def setup_logging() -> None:
    """Install the stdout handler on the root logger. Safe to call twice."""
    from shared.infrastructure.correlation import RequestContextFilter

    level = logging.getLevelName(settings.log_level.upper()) if settings.log_level else None
    if not isinstance(level, int):
        level = logging.DEBUG if settings.debug else logging.INFO

    handler = logging.StreamHandler(sys.stdout)
    handler.addFilter(RequestContextFilter())
    handler.setFormatter(JsonFormatter() if _use_json() else ConsoleFormatter())

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)

    for name, noisy_level in NOISY_LOGGERS.items():
        logging.getLogger(name).setLevel(noisy_level)


def get_logger(name: str) -> StructuredLogger:
    """
    Logger for ``name``; pass ``__name__``.

    Usage:
        logger = get_logger(__name__)
        logger.warning("bit_index already taken", table="diets", bit_index=4)
        logger.error("Mask update failed", ingredient_id=12, exc_info=True)
    """
    return logging.getLogger(name)  # type: ignore[return-value]


def mask_email(email: str | None) -> str:
    """Mask an email for logs: camille@example.com becomes ca***@example.com."""
    if not email or "@" not in email:
        return "-"
    local, _, domain = email.partition("@")
    return f"{local[:2]}***@{domain}"


api_logger = get_logger("admin_api")
masks_logger = get_logger("admin_api.masks")
subscriptions_logger = get_logger("admin_api.subscriptions")
