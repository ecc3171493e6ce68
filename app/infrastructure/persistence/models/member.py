"""Member ORM model: cooperative members (the audience for SMS campaigns)."""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from app.domain.enums import MemberStatus
from app.infrastructure.persistence.database import Base
from app.infrastructure.persistence.models.mixins import IdentifiedModel


class Member(IdentifiedModel, Base):
    """Member. Table: member. Unique member_number."""

    __tablename__ = "member"

    member_number: Mapped[str] = mapped_column(String, nullable=False, unique=True)
    full_name: Mapped[str] = mapped_column(String, nullable=False)
    phone_number: Mapped[str | None] = mapped_column(String, nullable=True)
    email: Mapped[str | None] = mapped_column(String, nullable=True)
    status: Mapped[str] = mapped_column(
        String, nullable=False, default=MemberStatus.ACTIVE.value, index=True
    )
