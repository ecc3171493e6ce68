"""ContactGroup repository: groups and their member links."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime
from typing import Any

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.dtos.contact_group import ContactGroupResult
from app.application.dtos.member import MemberResult
from app.infrastructure.persistence.models.contact_group import ContactGroup, GroupMember
from app.infrastructure.persistence.models.member import Member
from app.infrastructure.persistence.repositories.base import BaseRepository
from app.infrastructure.persistence.repositories.member_repo import member_to_result


def _group_to_result(g: ContactGroup) -> ContactGroupResult:
    return ContactGroupResult(
        id=g.id,
        name=g.name,
        description=g.description,
        color=g.color,
        is_active=g.is_active,
        member_count=g.member_count,
        created_by_id=g.created_by_id,
        last_used_at=g.last_used_at,
        created_at=g.created_at,
    )


class ContactGroupRepository(BaseRepository[ContactGroup]):
    """Contact groups. member_count is recomputed from active links, never incremented."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, ContactGroup)

    async def get_group(self, group_id: str) -> ContactGroupResult | None:
        group = await self.get_by_id(group_id)
        return _group_to_result(group) if group else None

    async def list_groups(self, *, include_inactive: bool = False) -> list[ContactGroupResult]:
        q = select(ContactGroup)
        if not include_inactive:
            q = q.where(ContactGroup.is_active.is_(True))
        result = await self.db.execute(q.order_by(ContactGroup.name, ContactGroup.id))
        return [_group_to_result(g) for g in result.scalars().all()]

    async def create_group(
        self,
        *,
        name: str,
        description: str | None,
        color: str,
        created_by_id: str | None,
    ) -> ContactGroupResult:
        created = await self.create(
            ContactGroup(
                name=name,
                description=description,
                color=color,
                created_by_id=created_by_id,
                is_active=True,
                member_count=0,
            )
        )
        return _group_to_result(created)

    async def update_group(self, group_id: str, **values: Any) -> ContactGroupResult | None:
        updated = await self.update_fields(group_id, **values)
        return _group_to_result(updated) if updated else None

    async def list_active_members(self, group_id: str) -> list[MemberResult]:
        result = await self.db.execute(
            select(Member)
            .join(GroupMember, GroupMember.member_id == Member.id)
            .where(GroupMember.group_id == group_id, GroupMember.is_active.is_(True))
            .order_by(Member.full_name, Member.id)
        )
        return [member_to_result(m) for m in result.scalars().all()]

    async def upsert_links(
        self, group_id: str, member_ids: Sequence[str], added_by_id: str | None
    ) -> tuple[int, int, int]:
        """Create missing links, reactivate inactive ones.

        Returns (added, reactivated, already_present).
        """
        result = await self.db.execute(
            select(GroupMember).where(
                GroupMember.group_id == group_id,
                GroupMember.member_id.in_(member_ids),
            )
        )
        existing = {link.member_id: link for link in result.scalars().all()}
        added = reactivated = present = 0
        for member_id in member_ids:
            link = existing.get(member_id)
            if link is None:
                self.db.add(
                    GroupMember(
                        group_id=group_id,
                        member_id=member_id,
                        added_by_id=added_by_id,
                        is_active=True,
                    )
                )
                added += 1
            elif not link.is_active:
                link.is_active = True
                link.added_by_id = added_by_id
                link.added_at = func.now()
                reactivated += 1
            else:
                present += 1
        await self.db.flush()
        return added, reactivated, present

    async def deactivate_link(self, group_id: str, member_id: str) -> bool:
        link_repo = BaseRepository(self.db, GroupMember)
        changed = await link_repo.update_where(
            GroupMember.group_id == group_id,
            GroupMember.member_id == member_id,
            GroupMember.is_active.is_(True),
            is_active=False,
        )
        return changed > 0

    async def recount_members(self, group_id: str) -> int:
        result = await self.db.execute(
            select(func.count())
            .select_from(GroupMember)
            .where(GroupMember.group_id == group_id, GroupMember.is_active.is_(True))
        )
        count = int(result.scalar_one())
        await self.update_where(ContactGroup.id == group_id, member_count=count)
        return count

    async def touch_last_used(self, group_id: str, at: datetime) -> None:
        await self.update_where(ContactGroup.id == group_id, last_used_at=at)

    async def delete_group(self, group_id: str) -> None:
        await self.db.execute(delete(GroupMember).where(GroupMember.group_id == group_id))
        group = await self.get_by_id(group_id)
        if group is not None:
            await self.delete(group)
