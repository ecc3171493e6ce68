"""UserRole repository: user-role assignments (single entity responsibility)."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.dtos.role import UserRoleResult
from app.infrastructure.persistence.models.permission import UserRole
from app.infrastructure.persistence.models.role import Role
from app.infrastructure.persistence.repositories.base import BaseRepository
from app.shared.utils.datetime import ensure_utc


def _assignment_to_result(ur: UserRole, role: Role) -> UserRoleResult:
    return UserRoleResult(
        id=ur.id,
        user_id=ur.user_id,
        role_id=ur.role_id,
        role_name=role.name,
        role_display_name=role.display_name,
        assigned_by=ur.assigned_by,
        assigned_at=ur.assigned_at,
        expires_at=ensure_utc(ur.expires_at),
        is_active=ur.is_active,
    )


class UserRoleRepository(BaseRepository[UserRole]):
    """User-role link rows. Removal deactivates; rows are kept as history."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, UserRole)

    async def get_active_assignment(
        self, user_id: str, role_id: str
    ) -> UserRoleResult | None:
        result = await self.db.execute(
            select(UserRole, Role)
            .join(Role, Role.id == UserRole.role_id)
            .where(
                UserRole.user_id == user_id,
                UserRole.role_id == role_id,
                UserRole.is_active.is_(True),
            )
            .limit(1)
        )
        row = result.first()
        return _assignment_to_result(row[0], row[1]) if row else None

    async def assign_role(
        self,
        *,
        user_id: str,
        role_id: str,
        assigned_by: str | None,
        expires_at: datetime | None = None,
    ) -> UserRoleResult:
        ur = await self.create(
            UserRole(
                user_id=user_id,
                role_id=role_id,
                assigned_by=assigned_by,
                expires_at=expires_at,
                is_active=True,
            )
        )
        role = await self.db.get(Role, role_id)
        return _assignment_to_result(ur, role)

    async def deactivate_assignment(self, user_id: str, role_id: str) -> bool:
        changed = await self.update_where(
            UserRole.user_id == user_id,
            UserRole.role_id == role_id,
            UserRole.is_active.is_(True),
            is_active=False,
        )
        return changed > 0

    async def list_for_user(
        self, user_id: str, *, include_inactive: bool = False
    ) -> list[UserRoleResult]:
        q = (
            select(UserRole, Role)
            .join(Role, Role.id == UserRole.role_id)
            .where(UserRole.user_id == user_id)
        )
        if not include_inactive:
            q = q.where(UserRole.is_active.is_(True))
        q = q.order_by(UserRole.assigned_at.desc(), UserRole.id)
        result = await self.db.execute(q)
        return [_assignment_to_result(ur, role) for ur, role in result.all()]

    async def count_active_for_role(self, role_id: str) -> int:
        return await self.count(UserRole.role_id == role_id, UserRole.is_active.is_(True))
