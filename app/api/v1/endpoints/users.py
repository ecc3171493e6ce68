"""Users API: staff accounts, role assignments and permission introspection."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request

from app.api.v1.dependencies import (
    get_authorization_service,
    get_current_user,
    get_role_service,
    get_role_service_for_write,
    get_user_service,
    get_user_service_for_write,
    require_permission,
)
from app.application.dtos.permission import EffectivePermissions
from app.application.dtos.user import UserResult
from app.application.services.authorization_service import AuthorizationService
from app.application.services.role_service import RoleService
from app.application.services.user_service import UserService
from app.core.constants import (
    PERM_ROLE_ASSIGN,
    PERM_ROLE_READ,
    PERM_USER_MANAGE,
    PERM_USER_READ,
)
from app.core.limiter import limit_writes
from app.schemas.common import ApiResponse, ok
from app.schemas.permission import (
    EffectivePermissionsResponse,
    PermissionCheckResponse,
    PermissionSummaryResponse,
    RoleSummaryResponse,
)
from app.schemas.role import UserRoleAssignRequest, UserRoleResponse
from app.schemas.user import PrimaryRoleUpdate, UserCreateRequest, UserResponse

router = APIRouter()


def _effective_response(effective: EffectivePermissions) -> EffectivePermissionsResponse:
    return EffectivePermissionsResponse(
        roles=[RoleSummaryResponse.model_validate(r) for r in effective.roles],
        permissions=[
            PermissionSummaryResponse.model_validate(p) for p in effective.permissions
        ],
    )


@router.post("", response_model=ApiResponse[UserResponse], status_code=201)
@limit_writes
async def create_user(
    request: Request,
    body: UserCreateRequest,
    user_service: Annotated[UserService, Depends(get_user_service_for_write)],
    _: Annotated[object, Depends(require_permission(PERM_USER_MANAGE))] = None,
):
    """Create a staff user with a primary role."""
    user = await user_service.create_user(**body.model_dump())
    return ok(UserResponse.model_validate(user), "User created")


@router.get("", response_model=ApiResponse[list[UserResponse]])
async def list_users(
    user_service: Annotated[UserService, Depends(get_user_service)],
    status: str | None = None,
    skip: int = Query(default=0, ge=0),
    limit: int = Query(default=100, ge=1, le=500),
    _: Annotated[object, Depends(require_permission(PERM_USER_READ))] = None,
):
    users = await user_service.list_users(status=status, skip=skip, limit=limit)
    return ok([UserResponse.model_validate(u) for u in users])


@router.get("/me/permissions", response_model=ApiResponse[EffectivePermissionsResponse])
async def get_my_permissions(
    current_user: Annotated[UserResult, Depends(get_current_user)],
    auth_svc: Annotated[AuthorizationService, Depends(get_authorization_service)],
):
    """Roles and permissions of the caller, from active unexpired assignments."""
    effective = await auth_svc.get_effective_permissions(user_id=current_user.id)
    return ok(_effective_response(effective))


@router.get("/{user_id}", response_model=ApiResponse[UserResponse])
async def get_user(
    user_id: str,
    user_service: Annotated[UserService, Depends(get_user_service)],
    _: Annotated[object, Depends(require_permission(PERM_USER_READ))] = None,
):
    return ok(UserResponse.model_validate(await user_service.get_user(user_id)))


@router.put("/{user_id}/primary-role", response_model=ApiResponse[UserResponse])
@limit_writes
async def change_primary_role(
    request: Request,
    user_id: str,
    body: PrimaryRoleUpdate,
    user_service: Annotated[UserService, Depends(get_user_service_for_write)],
    _: Annotated[object, Depends(require_permission(PERM_USER_MANAGE))] = None,
):
    """Change the user's primary role (consulted by single and any-of checks)."""
    user = await user_service.change_primary_role(user_id, body.role)
    return ok(UserResponse.model_validate(user), "Primary role updated")


@router.get("/{user_id}/permissions", response_model=ApiResponse[EffectivePermissionsResponse])
async def get_user_permissions(
    user_id: str,
    auth_svc: Annotated[AuthorizationService, Depends(get_authorization_service)],
    _: Annotated[object, Depends(require_permission(PERM_USER_READ))] = None,
):
    effective = await auth_svc.get_effective_permissions(user_id=user_id)
    return ok(_effective_response(effective))


@router.get(
    "/{user_id}/permissions/check", response_model=ApiResponse[PermissionCheckResponse]
)
async def check_user_permission(
    user_id: str,
    auth_svc: Annotated[AuthorizationService, Depends(get_authorization_service)],
    permission: str = Query(..., min_length=1),
    _: Annotated[object, Depends(require_permission(PERM_USER_READ))] = None,
):
    """Whether the user holds the permission, with the reason for the decision."""
    decision = await auth_svc.has_permission(user_id=user_id, permission_name=permission)
    return ok(
        PermissionCheckResponse(
            user_id=user_id,
            permission=permission,
            granted=decision.granted,
            reason=decision.reason,
        )
    )


@router.get("/{user_id}/roles", response_model=ApiResponse[list[UserRoleResponse]])
async def list_user_roles(
    user_id: str,
    role_service: Annotated[RoleService, Depends(get_role_service)],
    include_inactive: bool = False,
    _: Annotated[object, Depends(require_permission(PERM_ROLE_READ))] = None,
):
    roles = await role_service.list_user_roles(user_id, include_inactive=include_inactive)
    return ok([UserRoleResponse.model_validate(r) for r in roles])


@router.post(
    "/{user_id}/roles", response_model=ApiResponse[UserRoleResponse], status_code=201
)
@limit_writes
async def assign_role(
    request: Request,
    user_id: str,
    body: UserRoleAssignRequest,
    current_user: Annotated[UserResult, Depends(require_permission(PERM_ROLE_ASSIGN))],
    role_service: Annotated[RoleService, Depends(get_role_service_for_write)],
):
    """Assign a role to the user, optionally until expires_at."""
    assignment = await role_service.assign_role(
        user_id=user_id,
        role_id=body.role_id,
        assigned_by=current_user.id,
        expires_at=body.expires_at,
    )
    return ok(UserRoleResponse.model_validate(assignment), "Role assigned")


@router.delete("/{user_id}/roles/{role_id}", response_model=ApiResponse[None])
@limit_writes
async def remove_role(
    request: Request,
    user_id: str,
    role_id: str,
    role_service: Annotated[RoleService, Depends(get_role_service_for_write)],
    _: Annotated[object, Depends(require_permission(PERM_ROLE_ASSIGN))] = None,
):
    """Deactivate the user's assignment of the role."""
    await role_service.remove_role(user_id=user_id, role_id=role_id)
    return ok(None, "Role removed")
