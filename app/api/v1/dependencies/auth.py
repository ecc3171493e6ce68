"""Auth dependencies: current user from JWT and permission guards (composition root)."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Annotated

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.dtos.user import UserResult
from app.application.services.authorization_service import AuthorizationService
from app.domain.enums import UserStatus
from app.domain.exceptions import AuthenticationException, AuthorizationException
from app.infrastructure.persistence.database import get_db
from app.infrastructure.persistence.repositories import UserRepository
from app.infrastructure.security import BcryptPasswordHasher, decode_access_token
from app.infrastructure.services import PermissionResolver

_http_bearer = HTTPBearer(auto_error=False)


def get_password_hasher() -> BcryptPasswordHasher:
    """Password hasher (composition root)."""
    return BcryptPasswordHasher()


async def get_authorization_service(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> AuthorizationService:
    """AuthorizationService over the request's read session."""
    return AuthorizationService(PermissionResolver(db))


async def get_current_user_optional(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(_http_bearer)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> UserResult | None:
    """Return the user behind a valid bearer token; None when no token was sent."""
    if not credentials:
        return None
    payload = decode_access_token(credentials.credentials)
    user = await UserRepository(db).get_user(payload["sub"])
    if user is None or user.status != UserStatus.ACTIVE.value:
        raise AuthenticationException("User not found or inactive")
    return user


async def get_current_user(
    current_user: Annotated[UserResult | None, Depends(get_current_user_optional)],
) -> UserResult:
    """Return current user from JWT; 401 if missing or invalid."""
    if current_user is None:
        raise AuthenticationException("Not authenticated")
    return current_user


def require_permission(permission_name: str):
    """Dependency factory: authenticated user holding permission_name."""

    async def _require(
        current_user: Annotated[UserResult, Depends(get_current_user)],
        auth_svc: Annotated[AuthorizationService, Depends(get_authorization_service)],
    ) -> UserResult:
        decision = await auth_svc.has_permission(
            user_id=current_user.id, permission_name=permission_name
        )
        if not decision:
            raise AuthorizationException(required=[permission_name])
        return current_user

    return _require


def require_any_permission(permission_names: Sequence[str]):
    """Dependency factory: user holds at least one of permission_names."""
    names = list(permission_names)

    async def _require(
        current_user: Annotated[UserResult, Depends(get_current_user)],
        auth_svc: Annotated[AuthorizationService, Depends(get_authorization_service)],
    ) -> UserResult:
        decision = await auth_svc.has_any_permission(
            user_id=current_user.id, permission_names=names
        )
        if not decision:
            raise AuthorizationException(required=names)
        return current_user

    return _require


def require_all_permissions(permission_names: Sequence[str]):
    """Dependency factory: user holds every one of permission_names (assignments only)."""
    names = list(permission_names)

    async def _require(
        current_user: Annotated[UserResult, Depends(get_current_user)],
        auth_svc: Annotated[AuthorizationService, Depends(get_authorization_service)],
    ) -> UserResult:
        decision = await auth_svc.has_all_permissions(
            user_id=current_user.id, permission_names=names
        )
        if not decision:
            raise AuthorizationException(required=names, missing=list(decision.missing))
        return current_user

    return _require
