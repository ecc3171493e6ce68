"""DTOs for contact group use cases (no dependency on ORM)."""

from dataclasses import dataclass, field
from datetime import datetime

from app.application.dtos.member import MemberResult


@dataclass(frozen=True)
class ContactGroupResult:
    """Contact group read-model."""

    id: str
    name: str
    description: str | None
    color: str
    is_active: bool
    member_count: int
    created_by_id: str | None
    last_used_at: datetime | None
    created_at: datetime | None = None


@dataclass(frozen=True)
class ContactGroupDetail:
    """Contact group with its active members."""

    group: ContactGroupResult
    members: list[MemberResult] = field(default_factory=list)


@dataclass(frozen=True)
class AddMembersOutcome:
    """Result of add_members: how many links were created or reactivated."""

    group_id: str
    added: int
    reactivated: int
    already_present: int
    member_count: int
