"""Message repository: outbound SMS history rows."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.dtos.message import MessageCreate, MessageResult, MessageStatsBucket
from app.domain.enums import MessageStatus
from app.infrastructure.persistence.models.message import Message
from app.infrastructure.persistence.repositories.base import BaseRepository


def _message_to_result(m: Message) -> MessageResult:
    """Map ORM Message to application MessageResult."""
    return MessageResult(
        id=m.id,
        recipient_phone=m.recipient_phone,
        recipient_name=m.recipient_name,
        message=m.message,
        message_type=m.message_type,
        status=m.status,
        tracking_id=m.tracking_id,
        campaign_id=m.campaign_id,
        member_id=m.member_id,
        sent_by_id=m.sent_by_id,
        sent_at=m.sent_at,
        delivered_at=m.delivered_at,
        failed_at=m.failed_at,
        error_message=m.error_message,
        message_length=m.message_length,
        unit_count=m.unit_count,
        created_at=m.created_at,
    )


class MessageRepository(BaseRepository[Message]):
    """Message rows: created pending, then settled once as sent or failed."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Message)

    async def create_pending(self, data: MessageCreate) -> MessageResult:
        created = await self.create(
            Message(
                recipient_phone=data.recipient_phone,
                recipient_name=data.recipient_name,
                message=data.message,
                message_type=data.message_type,
                status=MessageStatus.PENDING.value,
                campaign_id=data.campaign_id,
                member_id=data.member_id,
                sent_by_id=data.sent_by_id,
                message_length=data.message_length,
                unit_count=data.unit_count,
            )
        )
        return _message_to_result(created)

    async def mark_sent(
        self, message_id: str, tracking_id: str | None, sent_at: datetime
    ) -> None:
        await self.update_where(
            Message.id == message_id,
            status=MessageStatus.SENT.value,
            tracking_id=tracking_id,
            sent_at=sent_at,
        )

    async def mark_failed(
        self, message_id: str, error_message: str, failed_at: datetime
    ) -> None:
        await self.update_where(
            Message.id == message_id,
            status=MessageStatus.FAILED.value,
            error_message=error_message,
            failed_at=failed_at,
        )

    async def get_message(self, message_id: str) -> MessageResult | None:
        result = await self.db.execute(
            select(Message)
            .where(Message.id == message_id)
            .execution_options(populate_existing=True)
        )
        row = result.scalar_one_or_none()
        return _message_to_result(row) if row else None

    async def list_messages(
        self,
        *,
        campaign_id: str | None = None,
        status: str | None = None,
        message_type: str | None = None,
        phone: str | None = None,
        skip: int = 0,
        limit: int = 50,
    ) -> tuple[list[MessageResult], int]:
        criteria = []
        if campaign_id:
            criteria.append(Message.campaign_id == campaign_id)
        if status:
            criteria.append(Message.status == status)
        if message_type:
            criteria.append(Message.message_type == message_type)
        if phone:
            criteria.append(Message.recipient_phone.contains(phone))
        total = await self.count(*criteria)
        result = await self.db.execute(
            select(Message)
            .where(*criteria)
            .order_by(Message.created_at.desc(), Message.id.desc())
            .offset(skip)
            .limit(limit)
        )
        return [_message_to_result(m) for m in result.scalars().all()], total

    async def list_recent_for_campaign(
        self, campaign_id: str, limit: int
    ) -> list[MessageResult]:
        result = await self.db.execute(
            select(Message)
            .where(Message.campaign_id == campaign_id)
            .order_by(Message.created_at.desc(), Message.id.desc())
            .limit(limit)
        )
        return [_message_to_result(m) for m in result.scalars().all()]

    async def get_message_stats(
        self, *, start: datetime | None = None, end: datetime | None = None
    ) -> list[MessageStatsBucket]:
        """Count and unit sum per (status, message_type); window bounds are inclusive."""
        criteria = []
        if start is not None:
            criteria.append(Message.created_at >= start)
        if end is not None:
            criteria.append(Message.created_at <= end)
        result = await self.db.execute(
            select(
                Message.status,
                Message.message_type,
                func.count(Message.id),
                func.coalesce(func.sum(Message.unit_count), 0),
            )
            .where(*criteria)
            .group_by(Message.status, Message.message_type)
            .order_by(Message.status, Message.message_type)
        )
        return [
            MessageStatsBucket(
                status=status, message_type=message_type, count=count, units=int(units)
            )
            for status, message_type, count, units in result.all()
        ]
