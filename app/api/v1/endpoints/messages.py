"""Messages API: single sends, history, delivery reports, stats and gateway balance."""

from datetime import datetime
from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request

from app.api.v1.dependencies import (
    get_messaging_service,
    get_messaging_service_for_write,
    require_any_permission,
    require_permission,
)
from app.application.dtos.user import UserResult
from app.application.services.messaging_service import MessagingService
from app.core.constants import PERM_CAMPAIGN_READ, PERM_SMS_READ, PERM_SMS_SEND
from app.core.limiter import limit_sms_send
from app.domain.enums import MessageStatus
from app.schemas.common import ApiResponse, Page, ok
from app.schemas.message import (
    BalanceResponse,
    DeliveryStatusResponse,
    MessageResponse,
    MessageStatsResponse,
    SendMessageRequest,
)

router = APIRouter()
sms_router = APIRouter()


@router.post("", response_model=ApiResponse[MessageResponse], status_code=201)
@limit_sms_send
async def send_message(
    request: Request,
    body: SendMessageRequest,
    current_user: Annotated[UserResult, Depends(require_permission(PERM_SMS_SEND))],
    messaging_service: Annotated[
        MessagingService, Depends(get_messaging_service_for_write)
    ],
):
    """Send one SMS. A gateway failure comes back as a 'failed' message row."""
    msg = await messaging_service.send_single_message(
        phone_number=body.phone_number,
        message=body.message,
        member_id=body.member_id,
        sent_by_id=current_user.id,
        message_type=body.message_type,
    )
    note = "Message failed" if msg.status == MessageStatus.FAILED.value else "Message sent"
    return ok(MessageResponse.model_validate(msg), note)


@router.get("", response_model=ApiResponse[Page[MessageResponse]])
async def list_messages(
    messaging_service: Annotated[MessagingService, Depends(get_messaging_service)],
    campaign_id: str | None = None,
    status: str | None = None,
    message_type: str | None = None,
    phone: str | None = None,
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=50, ge=1, le=200),
    _: Annotated[object, Depends(require_permission(PERM_SMS_READ))] = None,
):
    """Message history, newest first."""
    items, total = await messaging_service.list_messages(
        campaign_id=campaign_id,
        status=status,
        message_type=message_type,
        phone=phone,
        page=page,
        limit=limit,
    )
    return ok(
        Page.build([MessageResponse.model_validate(m) for m in items], total, page, limit)
    )


@router.get("/{message_id}", response_model=ApiResponse[MessageResponse])
async def get_message(
    message_id: str,
    messaging_service: Annotated[MessagingService, Depends(get_messaging_service)],
    _: Annotated[object, Depends(require_permission(PERM_SMS_READ))] = None,
):
    return ok(MessageResponse.model_validate(await messaging_service.get_message(message_id)))


@router.get("/{message_id}/delivery", response_model=ApiResponse[DeliveryStatusResponse])
async def get_delivery_status(
    message_id: str,
    messaging_service: Annotated[MessagingService, Depends(get_messaging_service)],
    _: Annotated[object, Depends(require_permission(PERM_SMS_READ))] = None,
):
    """Ask the gateway for the delivery report of a sent message."""
    report = await messaging_service.check_delivery(message_id)
    return ok(DeliveryStatusResponse.model_validate(report))


@sms_router.get("/balance", response_model=ApiResponse[BalanceResponse])
async def get_balance(
    messaging_service: Annotated[MessagingService, Depends(get_messaging_service)],
    _: Annotated[object, Depends(require_permission(PERM_SMS_READ))] = None,
):
    """SMS units left on the gateway account."""
    return ok(BalanceResponse.model_validate(await messaging_service.check_balance()))


@sms_router.get("/stats", response_model=ApiResponse[MessageStatsResponse])
async def get_message_stats(
    messaging_service: Annotated[MessagingService, Depends(get_messaging_service)],
    start: datetime | None = None,
    end: datetime | None = None,
    _: Annotated[
        object, Depends(require_any_permission([PERM_SMS_READ, PERM_CAMPAIGN_READ]))
    ] = None,
):
    """Counts and billed units by status and message type, optionally within [start, end]."""
    stats = await messaging_service.get_message_stats(start=start, end=end)
    return ok(MessageStatsResponse.model_validate(stats))
