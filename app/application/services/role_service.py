"""Role application service: roles, their permissions, and user assignments."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any

from app.application.dtos.role import RoleDetail, RoleResult, UserRoleResult
from app.application.interfaces.repositories import (
    IPermissionRepository,
    IRolePermissionRepository,
    IRoleRepository,
    IUserRepository,
    IUserRoleRepository,
)
from app.domain.exceptions import (
    DuplicateAssignmentException,
    ResourceInUseException,
    ResourceNotFoundException,
    ValidationException,
)
from app.shared.telemetry.tracing import traced
from app.shared.utils.datetime import ensure_utc, utc_now

logger = logging.getLogger(__name__)

_ROLE_FIELDS = frozenset({"name", "display_name", "description", "is_active", "level"})
MIN_ROLE_LEVEL = 1
MAX_ROLE_LEVEL = 10


def _validate_role_name(name: str) -> str:
    name = (name or "").strip()
    if not 2 <= len(name) <= 50:
        raise ValidationException("Role name must be 2-50 characters", "name")
    return name


def _validate_level(level: int) -> int:
    if not MIN_ROLE_LEVEL <= level <= MAX_ROLE_LEVEL:
        raise ValidationException(
            f"Role level must be between {MIN_ROLE_LEVEL} and {MAX_ROLE_LEVEL}", "level"
        )
    return level


class RoleService:
    """Role CRUD, role-permission links and user-role assignments."""

    def __init__(
        self,
        role_repo: IRoleRepository,
        permission_repo: IPermissionRepository,
        role_permission_repo: IRolePermissionRepository,
        user_role_repo: IUserRoleRepository,
        user_repo: IUserRepository,
    ) -> None:
        self._role_repo = role_repo
        self._permission_repo = permission_repo
        self._role_permission_repo = role_permission_repo
        self._user_role_repo = user_role_repo
        self._user_repo = user_repo

    async def _get_role_or_404(self, role_id: str) -> RoleResult:
        role = await self._role_repo.get_role(role_id)
        if role is None:
            raise ResourceNotFoundException("role", role_id)
        return role

    async def list_roles(self, *, include_inactive: bool = False) -> list[RoleResult]:
        return await self._role_repo.list_roles(include_inactive=include_inactive)

    async def get_role(self, role_id: str) -> RoleDetail:
        role = await self._get_role_or_404(role_id)
        permissions = await self._permission_repo.list_for_role(role_id)
        assignments = await self._user_role_repo.count_active_for_role(role_id)
        return RoleDetail(
            role=role, permissions=permissions, active_assignments=assignments
        )

    async def create_role_with_permissions(
        self,
        *,
        name: str,
        display_name: str,
        description: str | None = None,
        level: int = 1,
        permission_names: list[str] | None = None,
    ) -> RoleResult:
        """Create role and optionally grant permissions by name.

        Raises:
            ValidationException: Name taken, bad level, or unknown permission name.
        """
        name = _validate_role_name(name)
        _validate_level(level)
        if await self._role_repo.get_by_name(name):
            raise ValidationException(f"Role '{name}' already exists", "name")
        permission_ids: list[str] = []
        for perm_name in permission_names or []:
            perm = await self._permission_repo.get_by_name(perm_name)
            if perm is None:
                raise ValidationException(
                    f"Invalid permission name: {perm_name}", "permission_names"
                )
            permission_ids.append(perm.id)
        created = await self._role_repo.create_role(
            name=name,
            display_name=display_name,
            description=description,
            level=level,
        )
        for permission_id in dict.fromkeys(permission_ids):
            await self._role_permission_repo.assign_permission_to_role(
                created.id, permission_id
            )
        return created

    async def update_role(self, role_id: str, **values: Any) -> RoleResult:
        """Update role fields. A system role's name cannot change."""
        unknown = set(values) - _ROLE_FIELDS
        if unknown:
            raise ValidationException(
                f"Fields cannot be updated: {', '.join(sorted(unknown))}"
            )
        role = await self._get_role_or_404(role_id)
        if "name" in values:
            new_name = _validate_role_name(values["name"])
            if new_name != role.name:
                if role.is_system:
                    raise ValidationException("Cannot rename a system role", "name")
                if await self._role_repo.get_by_name(new_name):
                    raise ValidationException(f"Role '{new_name}' already exists", "name")
            values["name"] = new_name
        if "level" in values:
            _validate_level(values["level"])
        updated = await self._role_repo.update_role(role_id, **values)
        if updated is None:
            raise ResourceNotFoundException("role", role_id)
        return updated

    async def delete_role(self, role_id: str) -> None:
        """Refused for system roles and roles that still have active assignments."""
        role = await self._get_role_or_404(role_id)
        if role.is_system:
            raise ResourceInUseException("role", role_id, "Cannot delete system role")
        active = await self._user_role_repo.count_active_for_role(role_id)
        if active:
            raise ResourceInUseException(
                "role", role_id, f"Cannot delete role assigned to {active} user(s)"
            )
        await self._role_repo.delete_role(role_id)

    async def assign_permission(self, role_id: str, permission_id: str) -> None:
        await self._get_role_or_404(role_id)
        if await self._permission_repo.get_permission(permission_id) is None:
            raise ResourceNotFoundException("permission", permission_id)
        await self._role_permission_repo.assign_permission_to_role(role_id, permission_id)

    async def remove_permission(self, role_id: str, permission_id: str) -> None:
        await self._get_role_or_404(role_id)
        removed = await self._role_permission_repo.remove_permission_from_role(
            role_id, permission_id
        )
        if not removed:
            raise ResourceNotFoundException("role_permission", f"{role_id}/{permission_id}")

    @traced("role.assign")
    async def assign_role(
        self,
        *,
        user_id: str,
        role_id: str,
        assigned_by: str | None,
        expires_at: datetime | None = None,
    ) -> UserRoleResult:
        """Give a user a role, optionally until expires_at.

        Raises:
            ResourceNotFoundException: User or role does not exist.
            ValidationException: expires_at is not in the future.
            DuplicateAssignmentException: The user already holds the role.
        """
        if await self._user_repo.get_user(user_id) is None:
            raise ResourceNotFoundException("user", user_id)
        role = await self._get_role_or_404(role_id)
        if expires_at is not None:
            expires_at = ensure_utc(expires_at)
            if expires_at <= utc_now():
                raise ValidationException("expires_at must be in the future", "expires_at")
        if await self._user_role_repo.get_active_assignment(user_id, role_id):
            raise DuplicateAssignmentException(
                "User already has this role assigned",
                assignment_type="user_role",
                details_extra={"user_id": user_id, "role_id": role_id},
            )
        assignment = await self._user_role_repo.assign_role(
            user_id=user_id,
            role_id=role_id,
            assigned_by=assigned_by,
            expires_at=expires_at,
        )
        logger.info("Role %s assigned to user %s by %s", role.name, user_id, assigned_by)
        return assignment

    @traced("role.remove")
    async def remove_role(self, *, user_id: str, role_id: str) -> None:
        """Deactivate the user's active assignment of the role."""
        if not await self._user_role_repo.deactivate_assignment(user_id, role_id):
            raise ResourceNotFoundException("user_role", f"{user_id}/{role_id}")
        logger.info("Role %s removed from user %s", role_id, user_id)

    async def list_user_roles(
        self, user_id: str, *, include_inactive: bool = False
    ) -> list[UserRoleResult]:
        if await self._user_repo.get_user(user_id) is None:
            raise ResourceNotFoundException("user", user_id)
        return await self._user_role_repo.list_for_user(
            user_id, include_inactive=include_inactive
        )
