"""Campaign application service: create, list, details, update, approve, cancel.

Sending lives in campaign_dispatcher. Status changes here go through the
repository's compare-and-swap update so they cannot race a dispatch.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from app.application.dtos.campaign import CampaignCreate, CampaignDetail, CampaignResult
from app.application.interfaces.repositories import (
    ICampaignRepository,
    IContactGroupRepository,
    IMessageRepository,
)
from app.core.constants import CAMPAIGN_RECENT_MESSAGES
from app.domain.enums import DISPATCHABLE_STATUSES, CampaignStatus, CampaignTargetType
from app.domain.exceptions import (
    InvalidStateException,
    ResourceNotFoundException,
    ValidationException,
)
from app.shared.telemetry.tracing import traced
from app.shared.utils.datetime import ensure_utc, utc_now

_EDITABLE_FIELDS = frozenset({"name", "message", "scheduled_at", "notes"})


class CampaignService:
    """Campaign lifecycle outside of sending."""

    def __init__(
        self,
        campaign_repo: ICampaignRepository,
        message_repo: IMessageRepository,
        contact_group_repo: IContactGroupRepository,
    ) -> None:
        self._campaign_repo = campaign_repo
        self._message_repo = message_repo
        self._group_repo = contact_group_repo

    async def _get_or_404(self, campaign_id: str) -> CampaignResult:
        campaign = await self._campaign_repo.get_campaign(campaign_id)
        if campaign is None:
            raise ResourceNotFoundException("campaign", campaign_id)
        return campaign

    @traced("campaign.create")
    async def create_campaign(
        self, data: CampaignCreate, *, created_by_id: str | None
    ) -> CampaignResult:
        """Create a draft campaign.

        Raises:
            ValidationException: Missing name/message or unknown target type.
            ResourceNotFoundException: specific_group names a missing or inactive group.
        """
        if not data.name or not data.name.strip():
            raise ValidationException("Campaign name is required", "name")
        if not data.message or not data.message.strip():
            raise ValidationException("Campaign message is required", "message")
        if data.target_type not in CampaignTargetType.values():
            raise ValidationException(
                f"target_type must be one of: {', '.join(CampaignTargetType.values())}",
                "target_type",
            )
        if data.target_type == CampaignTargetType.SPECIFIC_GROUP.value:
            if not data.group_id:
                raise ValidationException(
                    "group_id is required for specific_group campaigns", "group_id"
                )
            group = await self._group_repo.get_group(data.group_id)
            if group is None or not group.is_active:
                raise ResourceNotFoundException("contact_group", data.group_id)
        return await self._campaign_repo.create_campaign(data, created_by_id)

    async def list_campaigns(
        self,
        *,
        status: str | None = None,
        target_type: str | None = None,
        page: int = 1,
        limit: int = 20,
    ) -> tuple[list[CampaignResult], int]:
        """Newest first. Returns (items, total)."""
        if status is not None and status not in CampaignStatus.values():
            raise ValidationException(f"Unknown campaign status: {status}", "status")
        skip = (max(page, 1) - 1) * limit
        return await self._campaign_repo.list_campaigns(
            status=status, target_type=target_type, skip=skip, limit=limit
        )

    async def get_campaign_details(self, campaign_id: str) -> CampaignDetail:
        campaign = await self._get_or_404(campaign_id)
        recent = await self._message_repo.list_recent_for_campaign(
            campaign_id, CAMPAIGN_RECENT_MESSAGES
        )
        return CampaignDetail(campaign=campaign, recent_messages=recent)

    @traced("campaign.update")
    async def update_campaign(
        self, campaign_id: str, **values: Any
    ) -> CampaignResult:
        """Edit name, message, scheduled_at or notes of a draft campaign."""
        unknown = set(values) - _EDITABLE_FIELDS
        if unknown:
            raise ValidationException(
                f"Fields cannot be updated: {', '.join(sorted(unknown))}"
            )
        for field_name in ("name", "message"):
            if field_name in values and not (values[field_name] or "").strip():
                raise ValidationException(f"Campaign {field_name} cannot be empty", field_name)
        if values.get("scheduled_at") is not None:
            values["scheduled_at"] = ensure_utc(values["scheduled_at"])
        campaign = await self._get_or_404(campaign_id)
        if campaign.status != CampaignStatus.DRAFT.value:
            raise InvalidStateException(
                "campaign",
                campaign_id,
                campaign.status,
                message="Can only update draft campaigns",
            )
        if values and not await self._campaign_repo.update_if_status(
            campaign_id, (CampaignStatus.DRAFT.value,), **values
        ):
            raise InvalidStateException(
                "campaign", campaign_id, campaign.status, message="Can only update draft campaigns"
            )
        return await self._get_or_404(campaign_id)

    @traced("campaign.approve")
    async def approve_campaign(
        self,
        campaign_id: str,
        *,
        approved_by_id: str,
        at: datetime | None = None,
    ) -> CampaignResult:
        """draft -> scheduled, stamping approver and time."""
        campaign = await self._get_or_404(campaign_id)
        approved = await self._campaign_repo.update_if_status(
            campaign_id,
            (CampaignStatus.DRAFT.value,),
            status=CampaignStatus.SCHEDULED.value,
            approved_by_id=approved_by_id,
            approved_at=at or utc_now(),
        )
        if not approved:
            raise InvalidStateException(
                "campaign",
                campaign_id,
                campaign.status,
                message="Can only approve draft campaigns",
            )
        return await self._get_or_404(campaign_id)

    @traced("campaign.cancel")
    async def cancel_campaign(self, campaign_id: str) -> CampaignResult:
        """draft | scheduled -> cancelled. A sending campaign cannot be cancelled."""
        campaign = await self._get_or_404(campaign_id)
        cancelled = await self._campaign_repo.update_if_status(
            campaign_id,
            tuple(s.value for s in DISPATCHABLE_STATUSES),
            status=CampaignStatus.CANCELLED.value,
        )
        if not cancelled:
            raise InvalidStateException(
                "campaign",
                campaign_id,
                campaign.status,
                message="Cannot cancel campaign in current status",
            )
        return await self._get_or_404(campaign_id)
