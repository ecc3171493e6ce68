"""Core: config, constants, rate limiting, lifespan, dispatch registry and exception handlers."""

from app.core.config import Settings, get_settings

__all__ = ["Settings", "get_settings"]
