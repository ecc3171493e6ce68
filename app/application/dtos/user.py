"""DTOs for user use cases (no dependency on ORM)."""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class UserResult:
    """User read-model (result of get_by_id, create_user, etc.). No password."""

    id: str
    email: str
    first_name: str
    last_name: str
    phone_number: str | None
    department: str | None
    role: str
    status: str
    is_super_admin: bool
    last_login_at: datetime | None = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


@dataclass(frozen=True)
class UserAccess:
    """The parts of a user the permission check needs."""

    id: str
    role: str
    is_super_admin: bool
