"""Members API: register, list and read cooperative members."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request

from app.api.v1.dependencies import (
    get_member_service,
    get_member_service_for_write,
    require_permission,
)
from app.application.services.member_service import MemberService
from app.core.constants import PERM_MEMBER_CREATE, PERM_MEMBER_READ
from app.core.limiter import limit_writes
from app.schemas.common import ApiResponse, Page, ok
from app.schemas.member import MemberCreate, MemberResponse

router = APIRouter()


@router.post("", response_model=ApiResponse[MemberResponse], status_code=201)
@limit_writes
async def create_member(
    request: Request,
    body: MemberCreate,
    member_service: Annotated[MemberService, Depends(get_member_service_for_write)],
    _: Annotated[object, Depends(require_permission(PERM_MEMBER_CREATE))] = None,
):
    """Register a member. The phone number is stored normalized."""
    member = await member_service.create_member(**body.model_dump())
    return ok(MemberResponse.model_validate(member), "Member created")


@router.get("", response_model=ApiResponse[Page[MemberResponse]])
async def list_members(
    member_service: Annotated[MemberService, Depends(get_member_service)],
    status: str | None = None,
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=50, ge=1, le=200),
    _: Annotated[object, Depends(require_permission(PERM_MEMBER_READ))] = None,
):
    items, total = await member_service.list_members(status=status, page=page, limit=limit)
    return ok(
        Page.build([MemberResponse.model_validate(m) for m in items], total, page, limit)
    )


@router.get("/{member_id}", response_model=ApiResponse[MemberResponse])
async def get_member(
    member_id: str,
    member_service: Annotated[MemberService, Depends(get_member_service)],
    _: Annotated[object, Depends(require_permission(PERM_MEMBER_READ))] = None,
):
    return ok(MemberResponse.model_validate(await member_service.get_member(member_id)))
