"""Campaigns API: drafts, approval, cancellation and sending."""

from dataclasses import asdict
from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request

from app.api.v1.dependencies import (
    get_campaign_dispatcher,
    get_campaign_service,
    get_campaign_service_for_write,
    require_permission,
)
from app.application.dtos.campaign import CampaignCreate
from app.application.dtos.user import UserResult
from app.application.services.campaign_dispatcher import CampaignDispatcher
from app.application.services.campaign_service import CampaignService
from app.core.constants import (
    PERM_CAMPAIGN_APPROVE,
    PERM_CAMPAIGN_CANCEL,
    PERM_CAMPAIGN_CREATE,
    PERM_CAMPAIGN_READ,
    PERM_CAMPAIGN_SEND,
    PERM_CAMPAIGN_UPDATE,
)
from app.core.limiter import limit_writes
from app.schemas.campaign import (
    CampaignCreateRequest,
    CampaignDetailResponse,
    CampaignResponse,
    CampaignUpdateRequest,
    DispatchStartedResponse,
)
from app.schemas.common import ApiResponse, Page, ok

router = APIRouter()


@router.post("", response_model=ApiResponse[CampaignResponse], status_code=201)
@limit_writes
async def create_campaign(
    request: Request,
    body: CampaignCreateRequest,
    current_user: Annotated[UserResult, Depends(require_permission(PERM_CAMPAIGN_CREATE))],
    campaign_service: Annotated[CampaignService, Depends(get_campaign_service_for_write)],
):
    """Create a draft campaign."""
    data = CampaignCreate(**body.model_dump())
    campaign = await campaign_service.create_campaign(data, created_by_id=current_user.id)
    return ok(CampaignResponse.model_validate(campaign), "Campaign created")


@router.get("", response_model=ApiResponse[Page[CampaignResponse]])
async def list_campaigns(
    campaign_service: Annotated[CampaignService, Depends(get_campaign_service)],
    status: str | None = None,
    target_type: str | None = None,
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=20, ge=1, le=100),
    _: Annotated[object, Depends(require_permission(PERM_CAMPAIGN_READ))] = None,
):
    """Newest first."""
    items, total = await campaign_service.list_campaigns(
        status=status, target_type=target_type, page=page, limit=limit
    )
    return ok(
        Page.build([CampaignResponse.model_validate(c) for c in items], total, page, limit)
    )


@router.get("/{campaign_id}", response_model=ApiResponse[CampaignDetailResponse])
async def get_campaign(
    campaign_id: str,
    campaign_service: Annotated[CampaignService, Depends(get_campaign_service)],
    _: Annotated[object, Depends(require_permission(PERM_CAMPAIGN_READ))] = None,
):
    """Campaign with its most recent messages."""
    detail = await campaign_service.get_campaign_details(campaign_id)
    return ok(
        CampaignDetailResponse(
            **asdict(detail.campaign),
            recent_messages=[asdict(m) for m in detail.recent_messages],
        )
    )


@router.patch("/{campaign_id}", response_model=ApiResponse[CampaignResponse])
@limit_writes
async def update_campaign(
    request: Request,
    campaign_id: str,
    body: CampaignUpdateRequest,
    campaign_service: Annotated[CampaignService, Depends(get_campaign_service_for_write)],
    _: Annotated[object, Depends(require_permission(PERM_CAMPAIGN_UPDATE))] = None,
):
    """Edit a draft campaign."""
    updated = await campaign_service.update_campaign(
        campaign_id, **body.model_dump(exclude_unset=True)
    )
    return ok(CampaignResponse.model_validate(updated), "Campaign updated")


@router.post("/{campaign_id}/approve", response_model=ApiResponse[CampaignResponse])
@limit_writes
async def approve_campaign(
    request: Request,
    campaign_id: str,
    current_user: Annotated[UserResult, Depends(require_permission(PERM_CAMPAIGN_APPROVE))],
    campaign_service: Annotated[CampaignService, Depends(get_campaign_service_for_write)],
):
    """draft -> scheduled."""
    approved = await campaign_service.approve_campaign(
        campaign_id, approved_by_id=current_user.id
    )
    return ok(CampaignResponse.model_validate(approved), "Campaign approved")


@router.post("/{campaign_id}/cancel", response_model=ApiResponse[CampaignResponse])
@limit_writes
async def cancel_campaign(
    request: Request,
    campaign_id: str,
    campaign_service: Annotated[CampaignService, Depends(get_campaign_service_for_write)],
    _: Annotated[object, Depends(require_permission(PERM_CAMPAIGN_CANCEL))] = None,
):
    cancelled = await campaign_service.cancel_campaign(campaign_id)
    return ok(CampaignResponse.model_validate(cancelled), "Campaign cancelled")


@router.post(
    "/{campaign_id}/send",
    response_model=ApiResponse[DispatchStartedResponse],
    status_code=202,
)
@limit_writes
async def send_campaign(
    request: Request,
    campaign_id: str,
    dispatcher: Annotated[CampaignDispatcher, Depends(get_campaign_dispatcher)],
    _: Annotated[object, Depends(require_permission(PERM_CAMPAIGN_SEND))] = None,
):
    """Start sending in the background; progress shows on the campaign counters."""
    started = await dispatcher.send_campaign(campaign_id=campaign_id)
    return ok(
        DispatchStartedResponse.model_validate(started),
        f"Campaign sending to {started.total_recipients} recipient(s)",
    )
