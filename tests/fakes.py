"""In-memory implementations of the repository and service protocols for unit tests."""

from __future__ import annotations

import itertools
from collections.abc import Sequence
from dataclasses import dataclass, field, replace
from datetime import UTC, datetime, timedelta
from typing import Any

from app.application.dtos.campaign import CampaignCreate, CampaignResult, Recipient
from app.application.dtos.contact_group import ContactGroupResult
from app.application.dtos.member import MemberResult
from app.application.dtos.message import (
    BalanceResult,
    DeliveryStatusResult,
    MessageCreate,
    MessageResult,
    MessageStatsBucket,
    SendResult,
)
from app.application.dtos.permission import (
    AssignmentGrant,
    EffectivePermissions,
    PermissionDecision,
    PermissionSummary,
    RoleGrant,
    RoleSummary,
)
from app.application.dtos.user import UserAccess
from app.domain.enums import CampaignStatus, MemberStatus, MessageStatus
from app.domain.value_objects import calculate_message_units

BASE_TIME = datetime(2026, 1, 15, 8, 0, tzinfo=UTC)

_ids = itertools.count(1)


def next_id(prefix: str) -> str:
    return f"{prefix}-{next(_ids)}"


def perm(name: str) -> PermissionSummary:
    module, resource, action = name.split(".")
    return PermissionSummary(
        name=name, display_name=name, module=module, resource=resource, action=action
    )


def role_grant(
    name: str, permissions: Sequence[str], *, active: bool = True, level: int = 1
) -> RoleGrant:
    return RoleGrant(
        role=RoleSummary(id=f"role-{name}", name=name, display_name=name.title(), level=level),
        is_active=active,
        permissions=tuple(perm(p) for p in permissions),
    )


class FakePermissionStore:
    """IPermissionStore over plain dicts; counts reads to prove nothing is cached."""

    def __init__(self) -> None:
        self.users: dict[str, UserAccess] = {}
        self.roles: dict[str, RoleGrant] = {}
        self.assignments: dict[str, list[AssignmentGrant]] = {}
        self.reads = 0

    def add_user(
        self, user_id: str, role: str = "clerk", *, super_admin: bool = False
    ) -> None:
        self.users[user_id] = UserAccess(id=user_id, role=role, is_super_admin=super_admin)

    def add_role(self, grant: RoleGrant) -> None:
        self.roles[grant.role.name] = grant

    def assign(
        self,
        user_id: str,
        grant: RoleGrant,
        *,
        active: bool = True,
        expires_at: datetime | None = None,
    ) -> None:
        self.assignments.setdefault(user_id, []).append(
            AssignmentGrant(
                assignment_id=next_id("ur"),
                is_active=active,
                expires_at=expires_at,
                grant=grant,
            )
        )

    async def get_user_access(self, user_id: str) -> UserAccess | None:
        self.reads += 1
        return self.users.get(user_id)

    async def get_role_grant_by_name(self, role_name: str) -> RoleGrant | None:
        self.reads += 1
        return self.roles.get(role_name)

    async def list_assignment_grants(self, user_id: str) -> list[AssignmentGrant]:
        self.reads += 1
        return list(self.assignments.get(user_id, []))


class FakeUnitOfWork:
    def __init__(self) -> None:
        self.commits = 0
        self.rollbacks = 0

    async def commit(self) -> None:
        self.commits += 1

    async def rollback(self) -> None:
        self.rollbacks += 1


@dataclass
class _Link:
    member_id: str
    is_active: bool = True


class FakeMemberStore:
    """Members and group links. Serves IRecipientDirectory and IMemberRepository."""

    def __init__(self) -> None:
        self.members: dict[str, MemberResult] = {}
        self.links: dict[str, list[_Link]] = {}

    def add_member(
        self,
        full_name: str,
        phone_number: str | None = "255712000000",
        status: str = MemberStatus.ACTIVE.value,
    ) -> MemberResult:
        member_id = next_id("mem")
        member = MemberResult(
            id=member_id,
            member_number=f"M{len(self.members) + 1:04d}",
            full_name=full_name,
            phone_number=phone_number,
            email=None,
            status=status,
            created_at=BASE_TIME + timedelta(minutes=len(self.members)),
        )
        self.members[member_id] = member
        return member

    def link(self, group_id: str, member_id: str, *, active: bool = True) -> None:
        self.links.setdefault(group_id, []).append(_Link(member_id, active))

    @staticmethod
    def _reachable(member: MemberResult) -> bool:
        return member.status == MemberStatus.ACTIVE.value and bool(member.phone_number)

    @staticmethod
    def _as_recipients(members: list[MemberResult]) -> list[Recipient]:
        ordered = sorted(members, key=lambda m: (m.created_at, m.id))
        return [Recipient(m.id, m.full_name, m.phone_number or "") for m in ordered]

    async def list_reachable_members(self) -> list[Recipient]:
        return self._as_recipients([m for m in self.members.values() if self._reachable(m)])

    async def list_reachable_group_members(self, group_id: str) -> list[Recipient]:
        linked = [
            self.members[link.member_id]
            for link in self.links.get(group_id, [])
            if link.is_active
        ]
        return self._as_recipients([m for m in linked if self._reachable(m)])

    async def get_member(self, member_id: str) -> MemberResult | None:
        return self.members.get(member_id)

    async def find_existing_ids(self, member_ids: Sequence[str]) -> set[str]:
        return {m for m in member_ids if m in self.members}


class FakeContactGroupRepo:
    def __init__(self) -> None:
        self.groups: dict[str, ContactGroupResult] = {}
        self.touched: list[tuple[str, datetime]] = []

    def add_group(self, name: str = "Board", *, is_active: bool = True) -> ContactGroupResult:
        group = ContactGroupResult(
            id=next_id("grp"),
            name=name,
            description=None,
            color="#3B82F6",
            is_active=is_active,
            member_count=0,
            created_by_id=None,
            last_used_at=None,
        )
        self.groups[group.id] = group
        return group

    async def get_group(self, group_id: str) -> ContactGroupResult | None:
        return self.groups.get(group_id)

    async def touch_last_used(self, group_id: str, at: datetime) -> None:
        self.touched.append((group_id, at))
        if group_id in self.groups:
            self.groups[group_id] = replace(self.groups[group_id], last_used_at=at)


class FakeCampaignRepo:
    """ICampaignRepository with the same compare-and-swap semantics as the SQL one."""

    def __init__(self) -> None:
        self.campaigns: dict[str, CampaignResult] = {}
        self.fail_updates_with: Exception | None = None

    def add_campaign(self, **overrides: Any) -> CampaignResult:
        values: dict[str, Any] = {
            "id": next_id("cmp"),
            "name": "AGM reminder",
            "message": "Dear member, the AGM is on Saturday.",
            "status": CampaignStatus.DRAFT.value,
            "target_type": "all_members",
            "group_id": None,
            "scheduled_at": None,
            "started_at": None,
            "completed_at": None,
            "total_recipients": 0,
            "sent_count": 0,
            "delivered_count": 0,
            "failed_count": 0,
            "created_by_id": "user-1",
            "approved_by_id": None,
            "approved_at": None,
            "notes": None,
            "created_at": BASE_TIME,
        }
        values.update(overrides)
        campaign = CampaignResult(**values)
        self.campaigns[campaign.id] = campaign
        return campaign

    async def get_campaign(self, campaign_id: str) -> CampaignResult | None:
        return self.campaigns.get(campaign_id)

    async def create_campaign(
        self, data: CampaignCreate, created_by_id: str | None
    ) -> CampaignResult:
        return self.add_campaign(
            name=data.name,
            message=data.message,
            target_type=data.target_type,
            group_id=data.group_id,
            scheduled_at=data.scheduled_at,
            notes=data.notes,
            created_by_id=created_by_id,
        )

    async def update_if_status(
        self, campaign_id: str, expected: Sequence[str], **values: Any
    ) -> bool:
        if self.fail_updates_with is not None:
            raise self.fail_updates_with
        current = self.campaigns.get(campaign_id)
        if current is None or current.status not in expected:
            return False
        self.campaigns[campaign_id] = replace(current, **values)
        return True

    async def count_open_for_group(self, group_id: str) -> int:
        open_statuses = {"draft", "scheduled", "sending"}
        return sum(
            1
            for c in self.campaigns.values()
            if c.group_id == group_id and c.status in open_statuses
        )


class FakeMessageRepo:
    def __init__(self) -> None:
        self.messages: dict[str, MessageResult] = {}
        self.fail_on_create_after: int | None = None
        self.stats_window: tuple[datetime | None, datetime | None] | None = None

    def add_message(
        self,
        *,
        status: str = "sent",
        message_type: str = "general",
        unit_count: int = 1,
        created_at: datetime = BASE_TIME,
    ) -> MessageResult:
        msg = MessageResult(
            id=next_id("msg"),
            recipient_phone="255712000000",
            recipient_name=None,
            message="x" * unit_count,
            message_type=message_type,
            status=status,
            tracking_id=None,
            campaign_id=None,
            member_id=None,
            sent_by_id=None,
            sent_at=None,
            delivered_at=None,
            failed_at=None,
            error_message=None,
            message_length=unit_count,
            unit_count=unit_count,
            created_at=created_at,
        )
        self.messages[msg.id] = msg
        return msg

    def for_campaign(self, campaign_id: str) -> list[MessageResult]:
        return [m for m in self.messages.values() if m.campaign_id == campaign_id]

    async def create_pending(self, data: MessageCreate) -> MessageResult:
        if (
            self.fail_on_create_after is not None
            and len(self.messages) >= self.fail_on_create_after
        ):
            raise ConnectionError("database went away")
        msg = MessageResult(
            id=next_id("msg"),
            recipient_phone=data.recipient_phone,
            recipient_name=data.recipient_name,
            message=data.message,
            message_type=data.message_type,
            status=MessageStatus.PENDING.value,
            tracking_id=None,
            campaign_id=data.campaign_id,
            member_id=data.member_id,
            sent_by_id=data.sent_by_id,
            sent_at=None,
            delivered_at=None,
            failed_at=None,
            error_message=None,
            message_length=data.message_length,
            unit_count=data.unit_count,
            created_at=BASE_TIME,
        )
        self.messages[msg.id] = msg
        return msg

    async def mark_sent(
        self, message_id: str, tracking_id: str | None, sent_at: datetime
    ) -> None:
        self.messages[message_id] = replace(
            self.messages[message_id],
            status=MessageStatus.SENT.value,
            tracking_id=tracking_id,
            sent_at=sent_at,
        )

    async def mark_failed(
        self, message_id: str, error_message: str, failed_at: datetime
    ) -> None:
        self.messages[message_id] = replace(
            self.messages[message_id],
            status=MessageStatus.FAILED.value,
            error_message=error_message,
            failed_at=failed_at,
        )

    async def get_message(self, message_id: str) -> MessageResult | None:
        return self.messages.get(message_id)

    async def list_recent_for_campaign(
        self, campaign_id: str, limit: int
    ) -> list[MessageResult]:
        return list(reversed(self.for_campaign(campaign_id)))[:limit]

    async def get_message_stats(
        self, *, start: datetime | None = None, end: datetime | None = None
    ) -> list[MessageStatsBucket]:
        self.stats_window = (start, end)
        buckets: dict[tuple[str, str], list[int]] = {}
        for m in self.messages.values():
            if start is not None and m.created_at < start:
                continue
            if end is not None and m.created_at > end:
                continue
            bucket = buckets.setdefault((m.status, m.message_type), [0, 0])
            bucket[0] += 1
            bucket[1] += m.unit_count
        return [
            MessageStatsBucket(status=s, message_type=t, count=c, units=u)
            for (s, t), (c, u) in sorted(buckets.items())
        ]


@dataclass
class FakeTransport:
    """ISmsTransport that fails for the phone numbers listed in fail_for."""

    fail_for: set[str] = field(default_factory=set)
    sent: list[tuple[str, str]] = field(default_factory=list)

    async def send(self, phone_number: str, message: str) -> SendResult:
        self.sent.append((phone_number, message))
        units = calculate_message_units(message)
        if phone_number in self.fail_for:
            return SendResult.failed("Gateway rejected number", units)
        return SendResult(success=True, tracking_id=f"shoot-{len(self.sent)}", units=units)

    async def check_balance(self) -> BalanceResult:
        return BalanceResult(success=True, balance=1200)

    async def check_delivery_status(self, tracking_id: str) -> DeliveryStatusResult:
        return DeliveryStatusResult(
            success=True, tracking_id=tracking_id, data={"status": "DELIVERED"}
        )


class NoWaitPacer:
    def __init__(self) -> None:
        self.waits = 0

    async def wait(self) -> None:
        self.waits += 1


class StubAuthorization:
    """Grants exactly the permission names it was given."""

    def __init__(self, *granted: str) -> None:
        self.granted = set(granted)

    async def has_permission(self, *, user_id: str, permission_name: str) -> PermissionDecision:
        return await self.has_any_permission(user_id=user_id, permission_names=[permission_name])

    async def has_any_permission(self, *, user_id: str, permission_names) -> PermissionDecision:
        required = tuple(permission_names)
        if any(name in self.granted for name in required):
            return PermissionDecision.allow(required, "assignment")
        return PermissionDecision.deny(required)

    async def has_all_permissions(self, *, user_id: str, permission_names) -> PermissionDecision:
        required = tuple(permission_names)
        missing = tuple(n for n in required if n not in self.granted)
        if missing:
            return PermissionDecision.deny(required, missing)
        return PermissionDecision.allow(required, "assignment")

    async def get_effective_permissions(self, *, user_id: str) -> EffectivePermissions:
        return EffectivePermissions()
