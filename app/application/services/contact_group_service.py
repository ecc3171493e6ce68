"""Contact group application service: groups and their member links."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

from app.application.dtos.contact_group import (
    AddMembersOutcome,
    ContactGroupDetail,
    ContactGroupResult,
)
from app.application.interfaces.repositories import (
    ICampaignRepository,
    IContactGroupRepository,
    IMemberRepository,
)
from app.core.constants import DEFAULT_GROUP_COLOR
from app.domain.exceptions import (
    ResourceInUseException,
    ResourceNotFoundException,
    ValidationException,
)

logger = logging.getLogger(__name__)

_UPDATABLE_FIELDS = frozenset({"name", "description", "color", "is_active"})


class ContactGroupService:
    """Create, edit and delete contact groups; add and remove members."""

    def __init__(
        self,
        group_repo: IContactGroupRepository,
        member_repo: IMemberRepository,
        campaign_repo: ICampaignRepository,
    ) -> None:
        self._group_repo = group_repo
        self._member_repo = member_repo
        self._campaign_repo = campaign_repo

    async def _get_or_404(self, group_id: str) -> ContactGroupResult:
        group = await self._group_repo.get_group(group_id)
        if group is None:
            raise ResourceNotFoundException("contact_group", group_id)
        return group

    async def create_group(
        self,
        *,
        name: str,
        description: str | None = None,
        color: str | None = None,
        created_by_id: str | None = None,
    ) -> ContactGroupResult:
        if not name or not name.strip():
            raise ValidationException("Group name is required", "name")
        return await self._group_repo.create_group(
            name=name.strip(),
            description=description,
            color=color or DEFAULT_GROUP_COLOR,
            created_by_id=created_by_id,
        )

    async def list_groups(self, *, include_inactive: bool = False) -> list[ContactGroupResult]:
        return await self._group_repo.list_groups(include_inactive=include_inactive)

    async def get_group(self, group_id: str) -> ContactGroupDetail:
        group = await self._get_or_404(group_id)
        members = await self._group_repo.list_active_members(group_id)
        return ContactGroupDetail(group=group, members=members)

    async def update_group(self, group_id: str, **values: Any) -> ContactGroupResult:
        unknown = set(values) - _UPDATABLE_FIELDS
        if unknown:
            raise ValidationException(
                f"Fields cannot be updated: {', '.join(sorted(unknown))}"
            )
        if "name" in values and not (values["name"] or "").strip():
            raise ValidationException("Group name cannot be empty", "name")
        await self._get_or_404(group_id)
        if not values:
            return await self._get_or_404(group_id)
        updated = await self._group_repo.update_group(group_id, **values)
        if updated is None:
            raise ResourceNotFoundException("contact_group", group_id)
        return updated

    async def add_members(
        self,
        group_id: str,
        member_ids: Sequence[str],
        *,
        added_by_id: str | None = None,
    ) -> AddMembersOutcome:
        """Link members to the group. Existing links are kept, inactive ones reactivated.

        Raises:
            ValidationException: member_ids is empty or names unknown members.
            ResourceNotFoundException: Group does not exist.
        """
        unique_ids = list(dict.fromkeys(member_ids))
        if not unique_ids:
            raise ValidationException("member_ids must not be empty", "member_ids")
        await self._get_or_404(group_id)
        existing = await self._member_repo.find_existing_ids(unique_ids)
        unknown = [m for m in unique_ids if m not in existing]
        if unknown:
            raise ValidationException(
                f"Some members not found: {', '.join(unknown)}", "member_ids"
            )
        added, reactivated, present = await self._group_repo.upsert_links(
            group_id, unique_ids, added_by_id
        )
        count = await self._group_repo.recount_members(group_id)
        logger.info(
            "Group %s: %d added, %d reactivated, %d already present",
            group_id,
            added,
            reactivated,
            present,
        )
        return AddMembersOutcome(
            group_id=group_id,
            added=added,
            reactivated=reactivated,
            already_present=present,
            member_count=count,
        )

    async def remove_member(self, group_id: str, member_id: str) -> int:
        """Deactivate the link; returns the new member_count."""
        await self._get_or_404(group_id)
        if not await self._group_repo.deactivate_link(group_id, member_id):
            raise ResourceNotFoundException("group_member", f"{group_id}/{member_id}")
        return await self._group_repo.recount_members(group_id)

    async def delete_group(self, group_id: str, *, hard: bool = False) -> None:
        """Soft (is_active=False) or hard delete.

        Raises:
            ResourceInUseException: A draft, scheduled or sending campaign
                still targets the group.
        """
        await self._get_or_404(group_id)
        open_campaigns = await self._campaign_repo.count_open_for_group(group_id)
        if open_campaigns:
            raise ResourceInUseException(
                "contact_group",
                group_id,
                f"Group is used by {open_campaigns} active campaign(s)",
            )
        if hard:
            await self._group_repo.delete_group(group_id)
        else:
            await self._group_repo.update_group(group_id, is_active=False)
