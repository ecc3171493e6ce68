"""User and RBAC (roles, permissions, assignments) dependencies (composition root)."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.services.permission_service import PermissionService
from app.application.services.role_service import RoleService
from app.application.services.user_service import UserService
from app.infrastructure.persistence.database import get_db, get_db_transactional
from app.infrastructure.persistence.repositories import (
    PermissionRepository,
    RolePermissionRepository,
    RoleRepository,
    UserRepository,
    UserRoleRepository,
)
from app.infrastructure.security import BcryptPasswordHasher

from .auth import get_password_hasher


def _role_service(db: AsyncSession) -> RoleService:
    return RoleService(
        RoleRepository(db),
        PermissionRepository(db),
        RolePermissionRepository(db),
        UserRoleRepository(db),
        UserRepository(db),
    )


async def get_user_service(
    db: Annotated[AsyncSession, Depends(get_db)],
    hasher: Annotated[BcryptPasswordHasher, Depends(get_password_hasher)],
) -> UserService:
    """UserService for reads."""
    return UserService(UserRepository(db), RoleRepository(db), hasher)


async def get_user_service_for_write(
    db: Annotated[AsyncSession, Depends(get_db_transactional)],
    hasher: Annotated[BcryptPasswordHasher, Depends(get_password_hasher)],
) -> UserService:
    """UserService for writes (login stamp, create, role change)."""
    return UserService(UserRepository(db), RoleRepository(db), hasher)


async def get_role_service(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> RoleService:
    """RoleService for reads."""
    return _role_service(db)


async def get_role_service_for_write(
    db: Annotated[AsyncSession, Depends(get_db_transactional)],
) -> RoleService:
    """RoleService for writes (transactional)."""
    return _role_service(db)


async def get_permission_service(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> PermissionService:
    return PermissionService(PermissionRepository(db))


async def get_permission_service_for_write(
    db: Annotated[AsyncSession, Depends(get_db_transactional)],
) -> PermissionService:
    return PermissionService(PermissionRepository(db))
