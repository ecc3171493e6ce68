"""Logging configuration for the application."""

import logging
import sys

from app.core.config import get_settings
from app.middleware.request_id import RequestIdLogFilter


def setup_logging() -> None:
    """Configure root logging once at startup.

    DEBUG when settings.debug is True, otherwise INFO; output to stdout.
    Every line carries the request id ("-" outside a request).
    """
    settings = get_settings()
    log_level = logging.DEBUG if settings.debug else logging.INFO
    handler = logging.StreamHandler(sys.stdout)
    handler.addFilter(RequestIdLogFilter())
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - [%(request_id)s] %(message)s",
        handlers=[handler],
    )
    # One INFO line per gateway call otherwise.
    logging.getLogger("httpx").setLevel(logging.WARNING)
