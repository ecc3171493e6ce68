"""Request ID middleware.

Forwards a client X-Request-ID when it is safe to log, otherwise generates
one. The id is echoed on the response, stored on request.state and bound
to a context variable so log lines carry it (see RequestIdLogFilter).
"""

import logging
import re
import uuid
from contextvars import ContextVar
from typing import Callable

REQUEST_ID_MAX_LENGTH = 64
REQUEST_ID_ALLOWED_PATTERN = re.compile(
    r"^[a-zA-Z0-9_-]{1," + str(REQUEST_ID_MAX_LENGTH) + r"}$"
)

request_id_var: ContextVar[str] = ContextVar("request_id", default="-")


def get_request_id() -> str:
    """Request id of the current request, or "-" outside one."""
    return request_id_var.get()


def sanitize_request_id(raw: str | None) -> str:
    """Return raw when it matches the allowed pattern, else a fresh UUID."""
    if raw:
        raw = raw.strip()
        if REQUEST_ID_ALLOWED_PATTERN.match(raw):
            return raw
    return str(uuid.uuid4())


class RequestIdLogFilter(logging.Filter):
    """Adds request_id to every record (for the %(request_id)s format field)."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = request_id_var.get()
        return True


class RequestIDMiddleware:
    """Raw ASGI middleware; streaming responses and background tasks are untouched."""

    def __init__(self, app: Callable, header_name: str = "X-Request-ID") -> None:
        self.app = app
        self.header_name = header_name
        self._header_key = header_name.lower().encode()

    def _read_header(self, scope: dict) -> str | None:
        for key, value in scope.get("headers", []):
            if key.lower() == self._header_key:
                return value.decode("utf-8", errors="replace")
        return None

    async def __call__(self, scope: dict, receive: Callable, send: Callable) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return
        request_id = sanitize_request_id(self._read_header(scope))
        scope.setdefault("state", {})["request_id"] = request_id
        token = request_id_var.set(request_id)

        async def send_with_id(message: dict) -> None:
            if message["type"] == "http.response.start":
                headers = list(message.get("headers", []))
                headers.append((self._header_key, request_id.encode()))
                message["headers"] = headers
            await send(message)

        try:
            await self.app(scope, receive, send_with_id)
        finally:
            request_id_var.reset(token)
