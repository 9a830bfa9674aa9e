"""
Request context for logs.

Every request gets an X-Request-ID (the caller's when it is well formed,
a fresh UUID otherwise), echoed back in the response. The admin email
forwarded by the auth proxy is kept masked alongside it so log lines
show who triggered a mask change.
"""

import logging
import re
import uuid
from contextvars import ContextVar
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from shared.config.constants import AdminHeaders
from shared.config.logging import mask_email

REQUEST_ID_HEADER = "X-Request-ID"
_REQUEST_ID_PATTERN = re.compile(r"^[A-Za-z0-9._-]{1,64}$")

request_id_var: ContextVar[str] = ContextVar("request_id", default="")
admin_var: ContextVar[str] = ContextVar("admin", default="")


def get_request_id() -> str:
    return request_id_var.get()


def incoming_request_id(value: str | None) -> str:
    """The caller's request id if usable, else a new one."""
    if value and _REQUEST_ID_PATTERN.match(value):
        return value
    return str(uuid.uuid4())


class CorrelationIdMiddleware(BaseHTTPMiddleware):
    """Binds request id and admin to the context for the request's lifetime."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = incoming_request_id(request.headers.get(REQUEST_ID_HEADER))
        admin_email = request.headers.get(AdminHeaders.ADMIN_EMAIL)

        request_token = request_id_var.set(request_id)
        admin_token = admin_var.set(mask_email(admin_email) if admin_email else "")
        try:
            request.state.request_id = request_id
            response = await call_next(request)
        finally:
            admin_var.reset(admin_token)
            request_id_var.reset(request_token)

        response.headers[REQUEST_ID_HEADER] = request_id
        return response


class RequestContextFilter(logging.Filter):
    """Copies the request context onto each record ("-" outside a request)."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = request_id_var.get() or "-"
        record.admin = admin_var.get() or "-"
        return True
