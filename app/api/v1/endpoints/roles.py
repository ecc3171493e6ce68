"""Roles API: list, get, create, update, delete, and role permissions."""

from dataclasses import asdict
from typing import Annotated

from fastapi import APIRouter, Depends, Request

from app.api.v1.dependencies import (
    get_role_service,
    get_role_service_for_write,
    require_permission,
)
from app.application.dtos.role import RoleDetail
from app.application.services.role_service import RoleService
from app.core.constants import PERM_ROLE_MANAGE, PERM_ROLE_READ
from app.core.limiter import limit_writes
from app.schemas.common import ApiResponse, ok
from app.schemas.role import (
    RoleCreateRequest,
    RoleDetailResponse,
    RolePermissionAssign,
    RoleResponse,
    RoleUpdate,
)

router = APIRouter()


def _detail_response(detail: RoleDetail) -> RoleDetailResponse:
    return RoleDetailResponse(
        **asdict(detail.role),
        permissions=[asdict(p) for p in detail.permissions],
        active_assignments=detail.active_assignments,
    )


@router.post("", response_model=ApiResponse[RoleResponse], status_code=201)
@limit_writes
async def create_role(
    request: Request,
    body: RoleCreateRequest,
    role_service: Annotated[RoleService, Depends(get_role_service_for_write)],
    _: Annotated[object, Depends(require_permission(PERM_ROLE_MANAGE))] = None,
):
    """Create a role, optionally granting permissions by name."""
    created = await role_service.create_role_with_permissions(**body.model_dump())
    return ok(RoleResponse.model_validate(created), "Role created")


@router.get("", response_model=ApiResponse[list[RoleResponse]])
async def list_roles(
    role_service: Annotated[RoleService, Depends(get_role_service)],
    include_inactive: bool = False,
    _: Annotated[object, Depends(require_permission(PERM_ROLE_READ))] = None,
):
    """List roles, highest level first."""
    roles = await role_service.list_roles(include_inactive=include_inactive)
    return ok([RoleResponse.model_validate(r) for r in roles])


@router.get("/{role_id}", response_model=ApiResponse[RoleDetailResponse])
async def get_role(
    role_id: str,
    role_service: Annotated[RoleService, Depends(get_role_service)],
    _: Annotated[object, Depends(require_permission(PERM_ROLE_READ))] = None,
):
    """Role with its permissions and active assignment count."""
    return ok(_detail_response(await role_service.get_role(role_id)))


@router.patch("/{role_id}", response_model=ApiResponse[RoleResponse])
@limit_writes
async def update_role(
    request: Request,
    role_id: str,
    body: RoleUpdate,
    role_service: Annotated[RoleService, Depends(get_role_service_for_write)],
    _: Annotated[object, Depends(require_permission(PERM_ROLE_MANAGE))] = None,
):
    updated = await role_service.update_role(role_id, **body.model_dump(exclude_unset=True))
    return ok(RoleResponse.model_validate(updated), "Role updated")


@router.delete("/{role_id}", response_model=ApiResponse[None])
@limit_writes
async def delete_role(
    request: Request,
    role_id: str,
    role_service: Annotated[RoleService, Depends(get_role_service_for_write)],
    _: Annotated[object, Depends(require_permission(PERM_ROLE_MANAGE))] = None,
):
    """Delete a role. System roles and roles still assigned are refused."""
    await role_service.delete_role(role_id)
    return ok(None, "Role deleted")


@router.post("/{role_id}/permissions", response_model=ApiResponse[None], status_code=201)
@limit_writes
async def assign_permission_to_role(
    request: Request,
    role_id: str,
    body: RolePermissionAssign,
    role_service: Annotated[RoleService, Depends(get_role_service_for_write)],
    _: Annotated[object, Depends(require_permission(PERM_ROLE_MANAGE))] = None,
):
    await role_service.assign_permission(role_id, body.permission_id)
    return ok(None, "Permission assigned")


@router.delete("/{role_id}/permissions/{permission_id}", response_model=ApiResponse[None])
@limit_writes
async def remove_permission_from_role(
    request: Request,
    role_id: str,
    permission_id: str,
    role_service: Annotated[RoleService, Depends(get_role_service_for_write)],
    _: Annotated[object, Depends(require_permission(PERM_ROLE_MANAGE))] = None,
):
    await role_service.remove_permission(role_id, permission_id)
    return ok(None, "Permission removed")
