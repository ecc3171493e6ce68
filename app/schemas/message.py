"""SMS message API schemas."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from app.domain.enums import MessageType


class SendMessageRequest(BaseModel):
    """Request body for sending one SMS."""

    model_config = ConfigDict(use_enum_values=True, validate_default=True)

    phone_number: str = Field(..., min_length=9, max_length=32)
    message: str = Field(..., min_length=1, max_length=1600)
    member_id: str | None = None
    message_type: MessageType = MessageType.GENERAL


class MessageResponse(BaseModel):
    """Message history row."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    recipient_phone: str
    recipient_name: str | None
    message: str
    message_type: str
    status: str
    tracking_id: str | None
    campaign_id: str | None
    member_id: str | None
    sent_by_id: str | None
    sent_at: datetime | None
    delivered_at: datetime | None
    failed_at: datetime | None
    error_message: str | None
    message_length: int
    unit_count: int
    created_at: datetime | None = None


class DeliveryStatusResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    success: bool
    tracking_id: str
    data: dict[str, Any] = Field(default_factory=dict)
    error: str | None = None


class BalanceResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    success: bool
    balance: int | None = None
    error: str | None = None


class MessageStatsBucketResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    status: str
    message_type: str
    count: int
    units: int


class MessageStatsResponse(BaseModel):
    """Message totals over a created_at window; null bounds mean unbounded."""

    model_config = ConfigDict(from_attributes=True)

    total_messages: int
    total_units: int
    breakdown: list[MessageStatsBucketResponse]
    start: datetime | None = None
    end: datetime | None = None
