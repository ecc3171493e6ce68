"""DTOs for campaign management and dispatch (no dependency on ORM)."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from app.application.dtos.message import MessageResult


@dataclass(frozen=True)
class CampaignResult:
    """Campaign read-model."""

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


@dataclass(frozen=True, kw_only=True)
class CampaignCreate:
    """Input for create_campaign."""

    name: str
    message: str
    target_type: str
    group_id: str | None = None
    scheduled_at: datetime | None = None
    notes: str | None = None


@dataclass(frozen=True)
class CampaignDetail:
    """Campaign with its most recent messages."""

    campaign: CampaignResult
    recent_messages: list[MessageResult] = field(default_factory=list)


@dataclass(frozen=True)
class Recipient:
    """A resolved campaign recipient."""

    member_id: str
    full_name: str
    phone_number: str


@dataclass(frozen=True)
class DispatchStarted:
    """Returned by send_campaign once the background loop is running."""

    campaign_id: str
    total_recipients: int
    status: str


@dataclass(frozen=True)
class DispatchOutcome:
    """Final counters of a dispatch loop."""

    campaign_id: str
    status: str
    sent_count: int
    failed_count: int
