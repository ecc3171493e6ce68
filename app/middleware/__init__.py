"""HTTP middleware. Installed in app.main."""

from app.middleware.request_id import (
    RequestIDMiddleware,
    RequestIdLogFilter,
    get_request_id,
)

__all__ = ["RequestIDMiddleware", "RequestIdLogFilter", "get_request_id"]
