"""Centralized exception handlers for the FastAPI app.

Register with register_exception_handlers(app). Maps domain error codes and
framework exceptions to HTTP responses with a {success: false, ...} body.
"""

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.config import get_settings
from app.domain.exceptions import SaccoException

logger = logging.getLogger(__name__)

# Map domain error_code to HTTP status; unknown codes are 400.
_ERROR_CODE_STATUS: dict[str, int] = {
    "RESOURCE_NOT_FOUND": 404,
    "VALIDATION_ERROR": 400,
    "INVALID_STATE": 400,
    "NO_RECIPIENTS": 400,
    "RESOURCE_IN_USE": 400,
    "PERMISSION_DENIED": 403,
    "DUPLICATE_ASSIGNMENT": 409,
    "AUTHENTICATION_ERROR": 401,
}


def status_for_error_code(error_code: str) -> int:
    return _ERROR_CODE_STATUS.get(error_code, 400)


def _sacco_exception_handler(request: Request, exc: SaccoException) -> JSONResponse:
    """Return JSON from SaccoException.to_dict() with the mapped status code."""
    status = status_for_error_code(exc.error_code)
    if status == 403:
        logger.info(
            "Permission denied on %s %s: %s",
            request.method,
            request.url.path,
            exc.details.get("required"),
        )
    headers = {"WWW-Authenticate": "Bearer"} if status == 401 else None
    return JSONResponse(status_code=status, content=exc.to_dict(), headers=headers)


def _validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Return 422 with validation error details."""
    return JSONResponse(
        status_code=422,
        content={
            "success": False,
            "error": "VALIDATION_ERROR",
            "message": "Request validation failed",
            "details": jsonable_errors(exc),
        },
    )


def jsonable_errors(exc: RequestValidationError) -> list[dict[str, Any]]:
    """Drop non-serializable ctx values (e.g. exception instances) from errors()."""
    cleaned = []
    for err in exc.errors():
        err = dict(err)
        if "ctx" in err:
            err["ctx"] = {k: str(v) for k, v in err["ctx"].items()}
        cleaned.append(err)
    return cleaned


def _http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    """Return JSON for Starlette HTTP exceptions (status + detail)."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "error": "HTTP_ERROR", "message": exc.detail},
        headers=getattr(exc, "headers", None),
    )


def _generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Return 500; include detail only when debug is True."""
    logger.exception("Unhandled exception: %s", exc)
    settings = get_settings()
    detail: Any = str(exc) if settings.debug else "Internal server error"
    return JSONResponse(
        status_code=500,
        content={"success": False, "error": "INTERNAL_ERROR", "message": detail},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers on the FastAPI app.

    Handlers: SaccoException (and subclasses), RequestValidationError,
    StarletteHTTPException, generic Exception.
    """
    app.add_exception_handler(SaccoException, _sacco_exception_handler)
    app.add_exception_handler(RequestValidationError, _validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    app.add_exception_handler(Exception, _generic_exception_handler)
