"""Role repository. Read methods return RoleResult (DTO)."""

from __future__ import annotations

from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.dtos.role import RoleResult
from app.infrastructure.persistence.models.role import Role
from app.infrastructure.persistence.repositories.base import BaseRepository


def _role_to_result(r: Role) -> RoleResult:
    """Map ORM Role to application RoleResult."""
    return RoleResult(
        id=r.id,
        name=r.name,
        display_name=r.display_name,
        description=r.description,
        is_system=r.is_system,
        is_active=r.is_active,
        level=r.level,
    )


class RoleRepository(BaseRepository[Role]):
    """Roles, ordered by level (highest first) when listed."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Role)

    async def get_role(self, role_id: str) -> RoleResult | None:
        role = await self.get_by_id(role_id)
        return _role_to_result(role) if role else None

    async def get_by_name(self, name: str) -> RoleResult | None:
        result = await self.db.execute(select(Role).where(Role.name == name))
        row = result.scalar_one_or_none()
        return _role_to_result(row) if row else None

    async def list_roles(self, *, include_inactive: bool = False) -> list[RoleResult]:
        q = select(Role)
        if not include_inactive:
            q = q.where(Role.is_active.is_(True))
        q = q.order_by(Role.level.desc(), Role.name)
        result = await self.db.execute(q)
        return [_role_to_result(r) for r in result.scalars().all()]

    async def create_role(
        self,
        *,
        name: str,
        display_name: str,
        description: str | None = None,
        level: int = 1,
        is_system: bool = False,
    ) -> RoleResult:
        role = Role(
            name=name,
            display_name=display_name,
            description=description,
            level=level,
            is_system=is_system,
            is_active=True,
        )
        created = await self.create(role)
        return _role_to_result(created)

    async def update_role(self, role_id: str, **values: Any) -> RoleResult | None:
        updated = await self.update_fields(role_id, **values)
        return _role_to_result(updated) if updated else None

    async def delete_role(self, role_id: str) -> bool:
        role = await self.get_by_id(role_id)
        if role is None:
            return False
        await self.delete(role)
        return True
