"""User repository. Read methods return UserResult (DTO); get_by_email returns ORM for login."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.dtos.user import UserResult
from app.infrastructure.persistence.models.user import User
from app.infrastructure.persistence.repositories.base import BaseRepository


def _user_to_result(u: User) -> UserResult:
    """Map ORM User to application UserResult (no password)."""
    return UserResult(
        id=u.id,
        email=u.email,
        first_name=u.first_name,
        last_name=u.last_name,
        phone_number=u.phone_number,
        department=u.department,
        role=u.role,
        status=u.status,
        is_super_admin=u.is_super_admin,
        last_login_at=u.last_login_at,
    )


class UserRepository(BaseRepository[User]):
    """Staff users."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, User)

    async def get_user(self, user_id: str) -> UserResult | None:
        user = await self.get_by_id(user_id)
        return _user_to_result(user) if user else None

    async def get_by_email(self, email: str) -> User | None:
        """Return user ORM (with hashed_password) by email, or None."""
        result = await self.db.execute(select(User).where(User.email == email))
        return result.scalar_one_or_none()

    async def create_user(
        self,
        *,
        email: str,
        first_name: str,
        last_name: str,
        hashed_password: str,
        role: str,
        phone_number: str | None = None,
        department: str | None = None,
        is_super_admin: bool = False,
    ) -> UserResult:
        user = User(
            email=email,
            first_name=first_name,
            last_name=last_name,
            hashed_password=hashed_password,
            role=role,
            phone_number=phone_number,
            department=department,
            is_super_admin=is_super_admin,
        )
        created = await self.create(user)
        return _user_to_result(created)

    async def list_users(
        self, skip: int = 0, limit: int = 100, status: str | None = None
    ) -> list[UserResult]:
        q = select(User)
        if status is not None:
            q = q.where(User.status == status)
        q = q.order_by(User.created_at.desc(), User.id).offset(skip).limit(limit)
        result = await self.db.execute(q)
        return [_user_to_result(u) for u in result.scalars().all()]

    async def set_primary_role(self, user_id: str, role_name: str) -> UserResult | None:
        updated = await self.update_fields(user_id, role=role_name)
        return _user_to_result(updated) if updated else None

    async def record_login(self, user_id: str, at: datetime) -> None:
        await self.update_where(User.id == user_id, last_login_at=at)
