"""Reads users, roles and assignments for permission checks (implements IPermissionStore)."""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.dtos.permission import (
    AssignmentGrant,
    PermissionSummary,
    RoleGrant,
    RoleSummary,
)
from app.application.dtos.user import UserAccess
from app.infrastructure.persistence.models.permission import (
    Permission,
    RolePermission,
    UserRole,
)
from app.infrastructure.persistence.models.role import Role
from app.infrastructure.persistence.models.user import User
from app.infrastructure.persistence.repositories.permission_repo import (
    permission_to_summary,
)
from app.shared.utils.datetime import ensure_utc


def _role_summary(role: Role) -> RoleSummary:
    return RoleSummary(
        id=role.id, name=role.name, display_name=role.display_name, level=role.level
    )


class PermissionResolver:
    """Loads raw grants; filtering (active, expiry) happens in AuthorizationService."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def get_user_access(self, user_id: str) -> UserAccess | None:
        result = await self.db.execute(
            select(User.id, User.role, User.is_super_admin).where(User.id == user_id)
        )
        row = result.first()
        if row is None:
            return None
        return UserAccess(id=row.id, role=row.role, is_super_admin=row.is_super_admin)

    async def _permissions_by_role(
        self, role_ids: Iterable[str]
    ) -> dict[str, list[PermissionSummary]]:
        ids = list(set(role_ids))
        if not ids:
            return {}
        result = await self.db.execute(
            select(RolePermission.role_id, Permission)
            .join(Permission, Permission.id == RolePermission.permission_id)
            .where(RolePermission.role_id.in_(ids))
            .order_by(Permission.name)
        )
        by_role: dict[str, list[PermissionSummary]] = defaultdict(list)
        for role_id, permission in result.all():
            by_role[role_id].append(permission_to_summary(permission))
        return by_role

    async def get_role_grant_by_name(self, role_name: str) -> RoleGrant | None:
        result = await self.db.execute(select(Role).where(Role.name == role_name))
        role = result.scalar_one_or_none()
        if role is None:
            return None
        permissions = await self._permissions_by_role([role.id])
        return RoleGrant(
            role=_role_summary(role),
            is_active=role.is_active,
            permissions=tuple(permissions.get(role.id, [])),
        )

    async def list_assignment_grants(self, user_id: str) -> list[AssignmentGrant]:
        result = await self.db.execute(
            select(UserRole, Role)
            .join(Role, Role.id == UserRole.role_id)
            .where(UserRole.user_id == user_id)
            .order_by(UserRole.assigned_at, UserRole.id)
        )
        rows = result.all()
        permissions = await self._permissions_by_role(role.id for _, role in rows)
        return [
            AssignmentGrant(
                assignment_id=assignment.id,
                is_active=assignment.is_active,
                expires_at=ensure_utc(assignment.expires_at),
                grant=RoleGrant(
                    role=_role_summary(role),
                    is_active=role.is_active,
                    permissions=tuple(permissions.get(role.id, [])),
                ),
            )
            for assignment, role in rows
        ]
