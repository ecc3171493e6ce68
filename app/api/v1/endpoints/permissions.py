"""Permissions API: list, get, create, delete permission definitions."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from app.api.v1.dependencies import (
    get_permission_service,
    get_permission_service_for_write,
    require_permission,
)
from app.application.services.permission_service import PermissionService
from app.core.constants import PERM_PERMISSION_MANAGE, PERM_PERMISSION_READ
from app.core.limiter import limit_writes
from app.schemas.common import ApiResponse, ok
from app.schemas.permission import PermissionCreate, PermissionResponse

router = APIRouter()


@router.post("", response_model=ApiResponse[PermissionResponse], status_code=201)
@limit_writes
async def create_permission(
    request: Request,
    body: PermissionCreate,
    permission_service: Annotated[
        PermissionService, Depends(get_permission_service_for_write)
    ],
    _: Annotated[object, Depends(require_permission(PERM_PERMISSION_MANAGE))] = None,
):
    """Create a permission named module.resource.action."""
    created = await permission_service.create_permission(**body.model_dump())
    return ok(PermissionResponse.model_validate(created), "Permission created")


@router.get("", response_model=ApiResponse[list[PermissionResponse]])
async def list_permissions(
    permission_service: Annotated[PermissionService, Depends(get_permission_service)],
    module: str | None = None,
    _: Annotated[object, Depends(require_permission(PERM_PERMISSION_READ))] = None,
):
    permissions = await permission_service.list_permissions(module)
    return ok([PermissionResponse.model_validate(p) for p in permissions])


@router.get("/{permission_id}", response_model=ApiResponse[PermissionResponse])
async def get_permission(
    permission_id: str,
    permission_service: Annotated[PermissionService, Depends(get_permission_service)],
    _: Annotated[object, Depends(require_permission(PERM_PERMISSION_READ))] = None,
):
    perm = await permission_service.get_permission(permission_id)
    return ok(PermissionResponse.model_validate(perm))


@router.delete("/{permission_id}", response_model=ApiResponse[None])
@limit_writes
async def delete_permission(
    request: Request,
    permission_id: str,
    permission_service: Annotated[
        PermissionService, Depends(get_permission_service_for_write)
    ],
    _: Annotated[object, Depends(require_permission(PERM_PERMISSION_MANAGE))] = None,
):
    """Delete a permission. System permissions and ones granted to roles are refused."""
    await permission_service.delete_permission(permission_id)
    return ok(None, "Permission deleted")
