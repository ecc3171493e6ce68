"""Messaging application service: one-off SMS, history, delivery and balance."""

from __future__ import annotations

import logging
from datetime import datetime

from app.application.dtos.message import (
    BalanceResult,
    DeliveryStatusResult,
    MessageCreate,
    MessageResult,
    MessageStats,
)
from app.application.interfaces.repositories import IMemberRepository, IMessageRepository
from app.application.interfaces.services import ISmsTransport
from app.domain.enums import MessageStatus, MessageType
from app.domain.exceptions import ResourceNotFoundException, ValidationException
from app.domain.value_objects import PhoneNumber, calculate_message_units
from app.shared.telemetry.tracing import traced
from app.shared.utils.datetime import ensure_utc, utc_now

logger = logging.getLogger(__name__)


class MessagingService:
    """Single sends recorded the same way campaign messages are."""

    def __init__(
        self,
        message_repo: IMessageRepository,
        member_repo: IMemberRepository,
        transport: ISmsTransport,
        country_code: str = "255",
    ) -> None:
        self._message_repo = message_repo
        self._member_repo = member_repo
        self._transport = transport
        self._country_code = country_code

    @traced("sms.send_single")
    async def send_single_message(
        self,
        *,
        phone_number: str,
        message: str,
        member_id: str | None = None,
        sent_by_id: str | None = None,
        message_type: str = MessageType.GENERAL.value,
    ) -> MessageResult:
        """Send one message and return its recorded row.

        A transport failure is not raised: the row comes back with status
        'failed' and error_message set.

        Raises:
            ValidationException: Empty message, unusable phone number or
                unknown message_type.
            ResourceNotFoundException: member_id names no member.
        """
        if not message or not message.strip():
            raise ValidationException("Message is required", "message")
        if message_type not in MessageType.values():
            raise ValidationException(f"Unknown message type: {message_type}", "message_type")
        phone = PhoneNumber.normalize(phone_number, self._country_code)
        if phone is None:
            raise ValidationException("Invalid phone number", "phone_number")
        recipient_name = None
        if member_id is not None:
            member = await self._member_repo.get_member(member_id)
            if member is None:
                raise ResourceNotFoundException("member", member_id)
            recipient_name = member.full_name

        pending = await self._message_repo.create_pending(
            MessageCreate(
                recipient_phone=phone.value,
                recipient_name=recipient_name,
                message=message,
                message_type=message_type,
                message_length=len(message),
                unit_count=calculate_message_units(message),
                member_id=member_id,
                sent_by_id=sent_by_id,
            )
        )
        result = await self._transport.send(phone.value, message)
        if result.success:
            await self._message_repo.mark_sent(pending.id, result.tracking_id, utc_now())
        else:
            logger.warning("Single send to %s failed: %s", pending.id, result.error)
            await self._message_repo.mark_failed(
                pending.id, result.error or "Unknown error", utc_now()
            )
        return await self.get_message(pending.id)

    async def get_message(self, message_id: str) -> MessageResult:
        msg = await self._message_repo.get_message(message_id)
        if msg is None:
            raise ResourceNotFoundException("message", message_id)
        return msg

    async def list_messages(
        self,
        *,
        campaign_id: str | None = None,
        status: str | None = None,
        message_type: str | None = None,
        phone: str | None = None,
        page: int = 1,
        limit: int = 50,
    ) -> tuple[list[MessageResult], int]:
        if status is not None and status not in MessageStatus.values():
            raise ValidationException(f"Unknown message status: {status}", "status")
        skip = (max(page, 1) - 1) * limit
        return await self._message_repo.list_messages(
            campaign_id=campaign_id,
            status=status,
            message_type=message_type,
            phone=phone,
            skip=skip,
            limit=limit,
        )

    async def check_delivery(self, message_id: str) -> DeliveryStatusResult:
        """Ask the provider about a sent message's delivery."""
        msg = await self.get_message(message_id)
        if not msg.tracking_id:
            raise ValidationException("Message has no tracking id", "tracking_id")
        return await self._transport.check_delivery_status(msg.tracking_id)

    async def check_balance(self) -> BalanceResult:
        return await self._transport.check_balance()

    async def get_message_stats(
        self, *, start: datetime | None = None, end: datetime | None = None
    ) -> MessageStats:
        """Message counts and billed units by status and type, optionally within [start, end].

        Raises:
            ValidationException: start is after end.
        """
        start, end = ensure_utc(start), ensure_utc(end)
        if start is not None and end is not None and start > end:
            raise ValidationException("start must not be after end", "start")
        breakdown = await self._message_repo.get_message_stats(start=start, end=end)
        return MessageStats(
            total_messages=sum(b.count for b in breakdown),
            total_units=sum(b.units for b in breakdown),
            breakdown=breakdown,
            start=start,
            end=end,
        )
