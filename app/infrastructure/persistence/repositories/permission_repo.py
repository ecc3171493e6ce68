"""Permission repository. Read methods return PermissionResult / PermissionSummary (DTO)."""

from __future__ import annotations

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.dtos.permission import PermissionResult, PermissionSummary
from app.infrastructure.persistence.models.permission import Permission, RolePermission
from app.infrastructure.persistence.repositories.base import BaseRepository


def _permission_to_result(p: Permission) -> PermissionResult:
    """Map ORM Permission to application PermissionResult."""
    return PermissionResult(
        id=p.id,
        name=p.name,
        display_name=p.display_name,
        description=p.description,
        module=p.module,
        resource=p.resource,
        action=p.action,
        is_system=p.is_system,
    )


def permission_to_summary(p: Permission) -> PermissionSummary:
    return PermissionSummary(
        name=p.name,
        display_name=p.display_name,
        module=p.module,
        resource=p.resource,
        action=p.action,
    )


class PermissionRepository(BaseRepository[Permission]):
    """Permission definitions."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Permission)

    async def get_permission(self, permission_id: str) -> PermissionResult | None:
        perm = await self.get_by_id(permission_id)
        return _permission_to_result(perm) if perm else None

    async def get_by_name(self, name: str) -> PermissionResult | None:
        result = await self.db.execute(select(Permission).where(Permission.name == name))
        row = result.scalar_one_or_none()
        return _permission_to_result(row) if row else None

    async def list_permissions(self, module: str | None = None) -> list[PermissionResult]:
        q = select(Permission)
        if module:
            q = q.where(Permission.module == module)
        q = q.order_by(Permission.module, Permission.resource, Permission.action)
        result = await self.db.execute(q)
        return [_permission_to_result(p) for p in result.scalars().all()]

    async def list_for_role(self, role_id: str) -> list[PermissionSummary]:
        result = await self.db.execute(
            select(Permission)
            .join(RolePermission, RolePermission.permission_id == Permission.id)
            .where(RolePermission.role_id == role_id)
            .order_by(Permission.name)
        )
        return [permission_to_summary(p) for p in result.scalars().all()]

    async def create_permission(
        self,
        *,
        name: str,
        display_name: str,
        module: str,
        resource: str,
        action: str,
        description: str | None = None,
        is_system: bool = False,
    ) -> PermissionResult:
        perm = Permission(
            name=name,
            display_name=display_name,
            module=module,
            resource=resource,
            action=action,
            description=description,
            is_system=is_system,
        )
        created = await self.create(perm)
        return _permission_to_result(created)

    async def delete_permission(self, permission_id: str) -> bool:
        perm = await self.get_by_id(permission_id)
        if perm is None:
            return False
        await self.delete(perm)
        return True

    async def count_role_references(self, permission_id: str) -> int:
        result = await self.db.execute(
            select(func.count())
            .select_from(RolePermission)
            .where(RolePermission.permission_id == permission_id)
        )
        return int(result.scalar_one())
