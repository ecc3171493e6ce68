"""Member repository. Also the recipient directory for campaign audiences."""

from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.dtos.campaign import Recipient
from app.application.dtos.member import MemberResult
from app.domain.enums import MemberStatus
from app.infrastructure.persistence.models.contact_group import GroupMember
from app.infrastructure.persistence.models.member import Member
from app.infrastructure.persistence.repositories.base import BaseRepository


def member_to_result(m: Member) -> MemberResult:
    """Map ORM Member to application MemberResult."""
    return MemberResult(
        id=m.id,
        member_number=m.member_number,
        full_name=m.full_name,
        phone_number=m.phone_number,
        email=m.email,
        status=m.status,
        created_at=m.created_at,
    )


def _reachable():
    """Active members that have a phone number."""
    return (
        Member.status == MemberStatus.ACTIVE.value,
        Member.phone_number.is_not(None),
        Member.phone_number != "",
    )


class MemberRepository(BaseRepository[Member]):
    """Members. Recipient queries return (created_at, id) order."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Member)

    async def get_member(self, member_id: str) -> MemberResult | None:
        member = await self.get_by_id(member_id)
        return member_to_result(member) if member else None

    async def get_by_member_number(self, member_number: str) -> MemberResult | None:
        result = await self.db.execute(
            select(Member).where(Member.member_number == member_number)
        )
        row = result.scalar_one_or_none()
        return member_to_result(row) if row else None

    async def create_member(
        self,
        *,
        member_number: str,
        full_name: str,
        phone_number: str | None = None,
        email: str | None = None,
        status: str = MemberStatus.ACTIVE.value,
    ) -> MemberResult:
        created = await self.create(
            Member(
                member_number=member_number,
                full_name=full_name,
                phone_number=phone_number,
                email=email,
                status=status,
            )
        )
        return member_to_result(created)

    async def list_members(
        self, status: str | None = None, skip: int = 0, limit: int = 50
    ) -> tuple[list[MemberResult], int]:
        criteria = [Member.status == status] if status else []
        total = await self.count(*criteria)
        result = await self.db.execute(
            select(Member)
            .where(*criteria)
            .order_by(Member.full_name, Member.id)
            .offset(skip)
            .limit(limit)
        )
        return [member_to_result(m) for m in result.scalars().all()], total

    async def find_existing_ids(self, member_ids: Sequence[str]) -> set[str]:
        if not member_ids:
            return set()
        result = await self.db.execute(select(Member.id).where(Member.id.in_(member_ids)))
        return set(result.scalars().all())

    async def list_reachable_members(self) -> list[Recipient]:
        result = await self.db.execute(
            select(Member.id, Member.full_name, Member.phone_number)
            .where(*_reachable())
            .order_by(Member.created_at, Member.id)
        )
        return [Recipient(member_id=i, full_name=n, phone_number=p) for i, n, p in result.all()]

    async def list_reachable_group_members(self, group_id: str) -> list[Recipient]:
        result = await self.db.execute(
            select(Member.id, Member.full_name, Member.phone_number)
            .join(GroupMember, GroupMember.member_id == Member.id)
            .where(
                GroupMember.group_id == group_id,
                GroupMember.is_active.is_(True),
                *_reachable(),
            )
            .order_by(Member.created_at, Member.id)
        )
        return [Recipient(member_id=i, full_name=n, phone_number=p) for i, n, p in result.all()]
