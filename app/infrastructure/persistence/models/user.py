"""User ORM model: back-office staff accounts."""

from datetime import datetime

from sqlalchemy import Boolean, DateTime, String, text
from sqlalchemy.orm import Mapped, mapped_column

from app.domain.enums import UserStatus
from app.infrastructure.persistence.database import Base
from app.infrastructure.persistence.models.mixins import IdentifiedModel


class User(IdentifiedModel, Base):
    """User. Table: app_user.

    `role` is the legacy primary role name (matched against role.name);
    explicit, time-bounded grants live in user_role.
    """

    __tablename__ = "app_user"

    email: Mapped[str] = mapped_column(String, nullable=False, unique=True)
    first_name: Mapped[str] = mapped_column(String, nullable=False)
    last_name: Mapped[str] = mapped_column(String, nullable=False)
    phone_number: Mapped[str | None] = mapped_column(String, nullable=True)
    department: Mapped[str | None] = mapped_column(String, nullable=True)
    role: Mapped[str] = mapped_column(
        String, nullable=False, server_default=text("'clerk'")
    )
    status: Mapped[str] = mapped_column(
        String, nullable=False, default=UserStatus.ACTIVE.value, index=True
    )
    is_super_admin: Mapped[bool] = mapped_column(
        Boolean, nullable=False, server_default=text("false")
    )
    hashed_password: Mapped[str] = mapped_column(String, nullable=False)
    last_login_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
