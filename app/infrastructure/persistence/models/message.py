"""Message ORM model: one outbound SMS and its delivery outcome."""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.domain.enums import MessageStatus, MessageType
from app.infrastructure.persistence.database import Base
from app.infrastructure.persistence.models.mixins import IdentifiedModel


class Message(IdentifiedModel, Base):
    """Message. Table: sms_message. tracking_id is the gateway's shoot id."""

    __tablename__ = "sms_message"

    recipient_phone: Mapped[str] = mapped_column(String, nullable=False)
    recipient_name: Mapped[str | None] = mapped_column(String, nullable=True)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    message_type: Mapped[str] = mapped_column(
        String, nullable=False, default=MessageType.GENERAL.value
    )
    status: Mapped[str] = mapped_column(
        String, nullable=False, default=MessageStatus.PENDING.value, index=True
    )
    tracking_id: Mapped[str | None] = mapped_column(String, nullable=True)
    campaign_id: Mapped[str | None] = mapped_column(
        String, ForeignKey("campaign.id", ondelete="SET NULL"), nullable=True
    )
    member_id: Mapped[str | None] = mapped_column(
        String, ForeignKey("member.id", ondelete="SET NULL"), nullable=True
    )
    sent_by_id: Mapped[str | None] = mapped_column(
        String, ForeignKey("app_user.id", ondelete="SET NULL"), nullable=True
    )
    sent_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    delivered_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    failed_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    error_message: Mapped[str | None] = mapped_column(Text, nullable=True)
    message_length: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    unit_count: Mapped[int] = mapped_column(Integer, nullable=False, default=1)

    __table_args__ = (Index("ix_sms_message_campaign", "campaign_id", "created_at"),)
