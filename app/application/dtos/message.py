"""DTOs for outbound SMS messages and transport results (no dependency on ORM)."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any


@dataclass(frozen=True)
class SendResult:
    """Outcome of one transport send. A failure is a value, never an exception."""

    success: bool
    tracking_id: str | None = None
    error: str | None = None
    units: int = 0

    @classmethod
    def failed(cls, error: str, units: int = 0) -> SendResult:
        return cls(success=False, error=error, units=units)


@dataclass(frozen=True)
class BalanceResult:
    """SMS units left on the provider account."""

    success: bool
    balance: int | None = None
    error: str | None = None


@dataclass(frozen=True)
class DeliveryStatusResult:
    """Provider delivery report for a tracking id."""

    success: bool
    tracking_id: str
    data: dict[str, Any] = field(default_factory=dict)
    error: str | None = None


@dataclass(frozen=True)
class MessageStatsBucket:
    """Message count and billed units for one (status, message_type) pair."""

    status: str
    message_type: str
    count: int
    units: int


@dataclass
class MessageStats:
    """Totals and per-bucket breakdown over an optional created_at window."""

    total_messages: int
    total_units: int
    breakdown: list[MessageStatsBucket]
    start: datetime | None = None
    end: datetime | None = None


@dataclass(frozen=True)
class MessageResult:
    """Message read-model (history row)."""

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


@dataclass(frozen=True, kw_only=True)
class MessageCreate:
    """Fields for a new pending message row."""

    recipient_phone: str
    recipient_name: str | None
    message: str
    message_type: str
    message_length: int
    unit_count: int
    campaign_id: str | None = None
    member_id: str | None = None
    sent_by_id: str | None = None
