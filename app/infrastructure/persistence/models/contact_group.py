"""ContactGroup and GroupMember ORM models (messaging audiences)."""

from datetime import datetime

from sqlalchemy import (
    Boolean,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from app.core.constants import DEFAULT_GROUP_COLOR
from app.infrastructure.persistence.database import Base
from app.infrastructure.persistence.models.mixins import CuidMixin, IdentifiedModel


class ContactGroup(IdentifiedModel, Base):
    """Named set of members. member_count mirrors the active links."""

    __tablename__ = "contact_group"

    name: Mapped[str] = mapped_column(String, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    color: Mapped[str] = mapped_column(
        String(16), nullable=False, default=DEFAULT_GROUP_COLOR
    )
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    member_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_by_id: Mapped[str | None] = mapped_column(
        String, ForeignKey("app_user.id", ondelete="SET NULL"), nullable=True
    )
    last_used_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )


class GroupMember(CuidMixin, Base):
    """Group membership link. Removal sets is_active=False."""

    __tablename__ = "group_member"

    group_id: Mapped[str] = mapped_column(
        String, ForeignKey("contact_group.id", ondelete="CASCADE"), nullable=False
    )
    member_id: Mapped[str] = mapped_column(
        String, ForeignKey("member.id", ondelete="CASCADE"), nullable=False
    )
    added_by_id: Mapped[str | None] = mapped_column(
        String, ForeignKey("app_user.id", ondelete="SET NULL"), nullable=True
    )
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    added_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    __table_args__ = (
        UniqueConstraint("group_id", "member_id", name="uq_group_member"),
    )
