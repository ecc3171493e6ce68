"""RolePermission repository: role-permission links (single entity responsibility)."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.domain.exceptions import DuplicateAssignmentException
from app.infrastructure.persistence.models.permission import RolePermission


class RolePermissionRepository:
    """Role-permission link table only. Assign and remove."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def assign_permission_to_role(self, role_id: str, permission_id: str) -> None:
        rp = RolePermission(role_id=role_id, permission_id=permission_id)
        try:
            async with self.db.begin_nested():
                self.db.add(rp)
        except IntegrityError:
            raise DuplicateAssignmentException(
                "Permission already assigned to role",
                assignment_type="role_permission",
                details_extra={"role_id": role_id, "permission_id": permission_id},
            ) from None

    async def remove_permission_from_role(self, role_id: str, permission_id: str) -> bool:
        result = await self.db.execute(
            select(RolePermission).where(
                RolePermission.role_id == role_id,
                RolePermission.permission_id == permission_id,
            )
        )
        rp = result.scalar_one_or_none()
        if not rp:
            return False
        await self.db.delete(rp)
        await self.db.flush()
        return True
