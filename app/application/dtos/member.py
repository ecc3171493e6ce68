"""DTOs for member use cases (no dependency on ORM)."""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class MemberResult:
    """Member read-model."""

    id: str
    member_number: str
    full_name: str
    phone_number: str | None
    email: str | None
    status: str
    created_at: datetime | None = None
