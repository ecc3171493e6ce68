"""Contact groups API: groups and their member links."""

from dataclasses import asdict
from typing import Annotated

from fastapi import APIRouter, Depends, Request

from app.api.v1.dependencies import (
    get_contact_group_service,
    get_contact_group_service_for_write,
    require_permission,
)
from app.application.dtos.user import UserResult
from app.application.services.contact_group_service import ContactGroupService
from app.core.constants import PERM_GROUP_MANAGE, PERM_GROUP_READ
from app.core.limiter import limit_writes
from app.schemas.common import ApiResponse, ok
from app.schemas.contact_group import (
    AddMembersRequest,
    AddMembersResponse,
    ContactGroupCreate,
    ContactGroupDetailResponse,
    ContactGroupResponse,
    ContactGroupUpdate,
    RemoveMemberResponse,
)

router = APIRouter()


@router.post("", response_model=ApiResponse[ContactGroupResponse], status_code=201)
@limit_writes
async def create_group(
    request: Request,
    body: ContactGroupCreate,
    current_user: Annotated[UserResult, Depends(require_permission(PERM_GROUP_MANAGE))],
    group_service: Annotated[
        ContactGroupService, Depends(get_contact_group_service_for_write)
    ],
):
    group = await group_service.create_group(**body.model_dump(), created_by_id=current_user.id)
    return ok(ContactGroupResponse.model_validate(group), "Contact group created")


@router.get("", response_model=ApiResponse[list[ContactGroupResponse]])
async def list_groups(
    group_service: Annotated[ContactGroupService, Depends(get_contact_group_service)],
    include_inactive: bool = False,
    _: Annotated[object, Depends(require_permission(PERM_GROUP_READ))] = None,
):
    """Active groups by default."""
    groups = await group_service.list_groups(include_inactive=include_inactive)
    return ok([ContactGroupResponse.model_validate(g) for g in groups])


@router.get("/{group_id}", response_model=ApiResponse[ContactGroupDetailResponse])
async def get_group(
    group_id: str,
    group_service: Annotated[ContactGroupService, Depends(get_contact_group_service)],
    _: Annotated[object, Depends(require_permission(PERM_GROUP_READ))] = None,
):
    """Group with its active members."""
    detail = await group_service.get_group(group_id)
    return ok(
        ContactGroupDetailResponse(
            **asdict(detail.group), members=[asdict(m) for m in detail.members]
        )
    )


@router.patch("/{group_id}", response_model=ApiResponse[ContactGroupResponse])
@limit_writes
async def update_group(
    request: Request,
    group_id: str,
    body: ContactGroupUpdate,
    group_service: Annotated[
        ContactGroupService, Depends(get_contact_group_service_for_write)
    ],
    _: Annotated[object, Depends(require_permission(PERM_GROUP_MANAGE))] = None,
):
    updated = await group_service.update_group(
        group_id, **body.model_dump(exclude_unset=True)
    )
    return ok(ContactGroupResponse.model_validate(updated), "Contact group updated")


@router.delete("/{group_id}", response_model=ApiResponse[None])
@limit_writes
async def delete_group(
    request: Request,
    group_id: str,
    group_service: Annotated[
        ContactGroupService, Depends(get_contact_group_service_for_write)
    ],
    hard: bool = False,
    _: Annotated[object, Depends(require_permission(PERM_GROUP_MANAGE))] = None,
):
    """Soft delete by default; hard=true removes the group and its links."""
    await group_service.delete_group(group_id, hard=hard)
    return ok(None, "Contact group deleted")


@router.post("/{group_id}/members", response_model=ApiResponse[AddMembersResponse])
@limit_writes
async def add_members(
    request: Request,
    group_id: str,
    body: AddMembersRequest,
    current_user: Annotated[UserResult, Depends(require_permission(PERM_GROUP_MANAGE))],
    group_service: Annotated[
        ContactGroupService, Depends(get_contact_group_service_for_write)
    ],
):
    outcome = await group_service.add_members(
        group_id, body.member_ids, added_by_id=current_user.id
    )
    return ok(
        AddMembersResponse.model_validate(outcome),
        f"{outcome.added + outcome.reactivated} member(s) added",
    )


@router.delete(
    "/{group_id}/members/{member_id}", response_model=ApiResponse[RemoveMemberResponse]
)
@limit_writes
async def remove_member(
    request: Request,
    group_id: str,
    member_id: str,
    group_service: Annotated[
        ContactGroupService, Depends(get_contact_group_service_for_write)
    ],
    _: Annotated[object, Depends(require_permission(PERM_GROUP_MANAGE))] = None,
):
    count = await group_service.remove_member(group_id, member_id)
    return ok(
        RemoveMemberResponse(group_id=group_id, member_id=member_id, member_count=count),
        "Member removed",
    )
