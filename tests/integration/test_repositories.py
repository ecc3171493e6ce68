"""Repository tests against Postgres. Require a migrated database (alembic upgrade head)."""

import uuid
from datetime import timedelta

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.dtos.campaign import CampaignCreate
from app.application.services.authorization_service import AuthorizationService
from app.infrastructure.persistence.repositories import (
    CampaignRepository,
    ContactGroupRepository,
    MemberRepository,
    PermissionRepository,
    RolePermissionRepository,
    RoleRepository,
    UserRepository,
    UserRoleRepository,
)
from app.infrastructure.services import PermissionResolver
from app.shared.utils.datetime import utc_now

pytestmark = pytest.mark.requires_db


def _suffix() -> str:
    return uuid.uuid4().hex[:8]


async def test_resolver_feeds_authorization(db_session: AsyncSession) -> None:
    s = _suffix()
    users = UserRepository(db_session)
    roles = RoleRepository(db_session)
    permissions = PermissionRepository(db_session)
    primary = await roles.create_role(name=f"clerk_{s}", display_name="Clerk")
    extra = await roles.create_role(name=f"auditor_{s}", display_name="Auditor")
    expired = await roles.create_role(name=f"temp_{s}", display_name="Temp")
    read = await permissions.create_permission(
        name=f"members.r{s}.read", display_name="Read", module="members",
        resource=f"r{s}", action="read",
    )
    audit = await permissions.create_permission(
        name=f"system.a{s}.read", display_name="Audit", module="system",
        resource=f"a{s}", action="read",
    )
    approve = await permissions.create_permission(
        name=f"loans.l{s}.approve", display_name="Approve", module="loans",
        resource=f"l{s}", action="approve",
    )
    links = RolePermissionRepository(db_session)
    await links.assign_permission_to_role(primary.id, read.id)
    await links.assign_permission_to_role(extra.id, audit.id)
    await links.assign_permission_to_role(expired.id, approve.id)
    user = await users.create_user(
        email=f"{s}@sacco.test", first_name="A", last_name="B",
        hashed_password="x", role=primary.name,
    )
    assignments = UserRoleRepository(db_session)
    await assignments.assign_role(user_id=user.id, role_id=extra.id, assigned_by=None)
    await assignments.assign_role(
        user_id=user.id, role_id=expired.id, assigned_by=None,
        expires_at=utc_now() + timedelta(minutes=5),
    )

    later = AuthorizationService(
        PermissionResolver(db_session), clock=lambda: utc_now() + timedelta(minutes=10)
    )
    assert (await later.has_permission(user_id=user.id, permission_name=read.name)).reason == (
        "primary_role"
    )
    assert await later.has_permission(user_id=user.id, permission_name=audit.name)
    assert not await later.has_permission(user_id=user.id, permission_name=approve.name)

    effective = await later.get_effective_permissions(user_id=user.id)
    assert [r.name for r in effective.roles] == [extra.name]
    assert [p.name for p in effective.permissions] == [audit.name]


async def test_campaign_compare_and_swap(db_session: AsyncSession) -> None:
    repo = CampaignRepository(db_session)
    campaign = await repo.create_campaign(
        CampaignCreate(name="AGM", message="Hello", target_type="all_members"), None
    )
    assert await repo.update_if_status(campaign.id, ("draft",), status="sending")
    assert not await repo.update_if_status(campaign.id, ("draft",), status="cancelled")
    current = await repo.get_campaign(campaign.id)
    assert current is not None
    assert current.status == "sending"


async def test_reachable_group_members(db_session: AsyncSession) -> None:
    s = _suffix()
    members = MemberRepository(db_session)
    groups = ContactGroupRepository(db_session)
    reachable = await members.create_member(
        member_number=f"A{s}", full_name="Asha", phone_number="255712000001"
    )
    no_phone = await members.create_member(member_number=f"B{s}", full_name="Baraka")
    suspended = await members.create_member(
        member_number=f"C{s}", full_name="Chausiku", phone_number="255712000003",
        status="suspended",
    )
    group = await groups.create_group(
        name=f"Board {s}", description=None, color="#3B82F6", created_by_id=None
    )
    await groups.upsert_links(group.id, [reachable.id, no_phone.id, suspended.id], None)

    recipients = await members.list_reachable_group_members(group.id)

    assert [r.member_id for r in recipients] == [reachable.id]
    assert await groups.recount_members(group.id) == 3
