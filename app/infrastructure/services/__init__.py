"""Infrastructure services backing application ports."""

from app.infrastructure.services.permission_resolver import PermissionResolver

__all__ = ["PermissionResolver"]
