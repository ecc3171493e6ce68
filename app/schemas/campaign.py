"""Campaign API schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from app.domain.enums import CampaignTargetType
from app.schemas.message import MessageResponse


class CampaignCreateRequest(BaseModel):
    """Request body for creating a draft campaign."""

    model_config = ConfigDict(use_enum_values=True, validate_default=True)

    name: str = Field(..., min_length=1, max_length=200)
    message: str = Field(..., min_length=1, max_length=1600)
    target_type: CampaignTargetType = CampaignTargetType.ALL_MEMBERS
    group_id: str | None = Field(
        default=None, description="Required when target_type is specific_group"
    )
    scheduled_at: datetime | None = None
    notes: str | None = Field(default=None, max_length=1000)


class CampaignUpdateRequest(BaseModel):
    """Request body for editing a draft campaign (partial)."""

    name: str | None = Field(default=None, min_length=1, max_length=200)
    message: str | None = Field(default=None, min_length=1, max_length=1600)
    scheduled_at: datetime | None = None
    notes: str | None = Field(default=None, max_length=1000)


class CampaignResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    message: str
    status: str
    target_type: str
    group_id: str | None
    scheduled_at: datetime | None
    started_at: datetime | None
    completed_at: datetime | None
    total_recipients: int
    sent_count: int
    delivered_count: int
    failed_count: int
    created_by_id: str | None
    approved_by_id: str | None
    approved_at: datetime | None
    notes: str | None
    created_at: datetime | None = None


class CampaignDetailResponse(CampaignResponse):
    """Campaign plus its most recent messages."""

    recent_messages: list[MessageResponse] = Field(default_factory=list)


class DispatchStartedResponse(BaseModel):
    """Returned by POST /campaigns/{id}/send once sending has started."""

    model_config = ConfigDict(from_attributes=True)

    campaign_id: str
    total_recipients: int
    status: str
