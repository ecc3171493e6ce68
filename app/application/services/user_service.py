"""User application service: authenticate, create users, change primary role."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from app.application.dtos.user import UserResult
from app.application.interfaces.repositories import IRoleRepository, IUserRepository
from app.application.interfaces.services import IPasswordHasher
from app.domain.enums import UserStatus
from app.domain.exceptions import (
    AuthenticationException,
    ResourceNotFoundException,
    ValidationException,
)
from app.shared.utils.datetime import utc_now

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 8


def _user_to_result(u: Any) -> UserResult:
    """Build UserResult from a user entity."""
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


class UserService:
    """Staff accounts: login, creation and primary role changes."""

    def __init__(
        self,
        user_repo: IUserRepository,
        role_repo: IRoleRepository,
        password_hasher: IPasswordHasher,
    ) -> None:
        self._user_repo = user_repo
        self._role_repo = role_repo
        self._hasher = password_hasher

    async def authenticate(self, email: str, password: str) -> UserResult:
        """Check credentials and stamp last_login_at.

        Raises:
            AuthenticationException: Unknown email, wrong password, or the
                account is not active. The message does not say which.
        """
        user = await self._user_repo.get_by_email(email.strip().lower())
        if user is None:
            raise AuthenticationException("Invalid email or password")
        valid = await asyncio.to_thread(
            self._hasher.verify_password, password, user.hashed_password
        )
        if not valid:
            raise AuthenticationException("Invalid email or password")
        if user.status != UserStatus.ACTIVE.value:
            logger.info("Login refused for %s user %s", user.status, user.id)
            raise AuthenticationException("Account is not active")
        await self._user_repo.record_login(user.id, utc_now())
        return _user_to_result(user)

    async def get_user(self, user_id: str) -> UserResult:
        user = await self._user_repo.get_user(user_id)
        if user is None:
            raise ResourceNotFoundException("user", user_id)
        return user

    async def list_users(
        self, *, status: str | None = None, skip: int = 0, limit: int = 100
    ) -> list[UserResult]:
        if status is not None and status not in UserStatus.values():
            raise ValidationException(f"Unknown user status: {status}", "status")
        return await self._user_repo.list_users(skip=skip, limit=limit, status=status)

    async def create_user(
        self,
        *,
        email: str,
        first_name: str,
        last_name: str,
        password: str,
        role: str = "clerk",
        phone_number: str | None = None,
        department: str | None = None,
    ) -> UserResult:
        """Create a staff user with a primary role. Super admins are seeded, not created here."""
        email = email.strip().lower()
        if len(password) < MIN_PASSWORD_LENGTH:
            raise ValidationException(
                f"Password must be at least {MIN_PASSWORD_LENGTH} characters", "password"
            )
        if await self._user_repo.get_by_email(email):
            raise ValidationException(f"User with email '{email}' already exists", "email")
        if await self._role_repo.get_by_name(role) is None:
            raise ValidationException(f"Unknown role: {role}", "role")
        hashed = await asyncio.to_thread(self._hasher.hash_password, password)
        return await self._user_repo.create_user(
            email=email,
            first_name=first_name,
            last_name=last_name,
            hashed_password=hashed,
            role=role,
            phone_number=phone_number,
            department=department,
        )

    async def change_primary_role(self, user_id: str, role_name: str) -> UserResult:
        """Point the user's legacy primary role at another existing role."""
        if await self._role_repo.get_by_name(role_name) is None:
            raise ValidationException(f"Unknown role: {role_name}", "role")
        updated = await self._user_repo.set_primary_role(user_id, role_name)
        if updated is None:
            raise ResourceNotFoundException("user", user_id)
        return updated
