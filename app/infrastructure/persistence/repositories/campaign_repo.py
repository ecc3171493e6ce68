"""Campaign repository. Status changes go through update_if_status (compare-and-swap)."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.dtos.campaign import CampaignCreate, CampaignResult
from app.domain.enums import OPEN_CAMPAIGN_STATUSES, CampaignStatus
from app.infrastructure.persistence.models.campaign import Campaign
from app.infrastructure.persistence.repositories.base import BaseRepository
from app.shared.utils.datetime import ensure_utc


def _campaign_to_result(c: Campaign) -> CampaignResult:
    """Map ORM Campaign to application CampaignResult."""
    return CampaignResult(
        id=c.id,
        name=c.name,
        message=c.message,
        status=c.status,
        target_type=c.target_type,
        group_id=c.group_id,
        scheduled_at=c.scheduled_at,
        started_at=c.started_at,
        completed_at=c.completed_at,
        total_recipients=c.total_recipients,
        sent_count=c.sent_count,
        delivered_count=c.delivered_count,
        failed_count=c.failed_count,
        created_by_id=c.created_by_id,
        approved_by_id=c.approved_by_id,
        approved_at=c.approved_at,
        notes=c.notes,
        created_at=c.created_at,
    )


class CampaignRepository(BaseRepository[Campaign]):
    """Campaigns. Reads always reload from the database (populate_existing)."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Campaign)

    async def get_campaign(self, campaign_id: str) -> CampaignResult | None:
        result = await self.db.execute(
            select(Campaign)
            .where(Campaign.id == campaign_id)
            .execution_options(populate_existing=True)
        )
        row = result.scalar_one_or_none()
        return _campaign_to_result(row) if row else None

    async def create_campaign(
        self, data: CampaignCreate, created_by_id: str | None
    ) -> CampaignResult:
        created = await self.create(
            Campaign(
                name=data.name,
                message=data.message,
                target_type=data.target_type,
                group_id=data.group_id,
                scheduled_at=ensure_utc(data.scheduled_at),
                notes=data.notes,
                status=CampaignStatus.DRAFT.value,
                created_by_id=created_by_id,
            )
        )
        return _campaign_to_result(created)

    async def list_campaigns(
        self,
        *,
        status: str | None = None,
        target_type: str | None = None,
        skip: int = 0,
        limit: int = 20,
    ) -> tuple[list[CampaignResult], int]:
        criteria = []
        if status:
            criteria.append(Campaign.status == status)
        if target_type:
            criteria.append(Campaign.target_type == target_type)
        total = await self.count(*criteria)
        result = await self.db.execute(
            select(Campaign)
            .where(*criteria)
            .order_by(Campaign.created_at.desc(), Campaign.id.desc())
            .offset(skip)
            .limit(limit)
        )
        return [_campaign_to_result(c) for c in result.scalars().all()], total

    async def update_if_status(
        self, campaign_id: str, expected: Sequence[str], **values: Any
    ) -> bool:
        """UPDATE campaign SET ... WHERE id = :id AND status IN (:expected)."""
        changed = await self.update_where(
            Campaign.id == campaign_id,
            Campaign.status.in_(list(expected)),
            **values,
        )
        return changed == 1

    async def count_open_for_group(self, group_id: str) -> int:
        return await self.count(
            Campaign.group_id == group_id,
            Campaign.status.in_([s.value for s in OPEN_CAMPAIGN_STATUSES]),
        )
