"""Campaign dispatch: start handshake and the sequential background send loop.

send_campaign validates, resolves recipients and flips the campaign to
'sending' with a compare-and-swap update, then hands the loop to the
dispatch launcher and returns. CampaignSendLoop runs afterwards in its own
session: one recipient at a time, paced, one message row per recipient.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Coroutine, Sequence
from datetime import datetime
from typing import Any

from app.application.dtos.campaign import (
    CampaignResult,
    DispatchOutcome,
    DispatchStarted,
    Recipient,
)
from app.application.dtos.message import MessageCreate
from app.application.interfaces.repositories import (
    ICampaignRepository,
    IContactGroupRepository,
    IMessageRepository,
    IRecipientDirectory,
    IUnitOfWork,
)
from app.application.interfaces.services import IDispatchLauncher, IPacer, ISmsTransport
from app.domain.enums import (
    DISPATCHABLE_STATUSES,
    CampaignStatus,
    CampaignTargetType,
    MessageType,
)
from app.domain.exceptions import (
    DispatchAlreadyRunningException,
    InvalidStateException,
    NoRecipientsException,
    ResourceNotFoundException,
    ValidationException,
)
from app.domain.value_objects import calculate_message_units
from app.shared.telemetry.tracing import TracedOperation, add_span_attributes, traced
from app.shared.utils.datetime import utc_now

logger = logging.getLogger(__name__)

_DISPATCHABLE = tuple(s.value for s in DISPATCHABLE_STATUSES)

# Builds the background coroutine for one campaign: (campaign, recipients) -> loop.
DispatchRunner = Callable[[CampaignResult, list[Recipient]], Coroutine[Any, Any, Any]]


class CampaignDispatcher:
    """Starts campaign sends. The send loop itself is CampaignSendLoop."""

    def __init__(
        self,
        campaign_repo: ICampaignRepository,
        recipient_directory: IRecipientDirectory,
        contact_group_repo: IContactGroupRepository,
        uow: IUnitOfWork,
        launcher: IDispatchLauncher,
        runner: DispatchRunner,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.campaign_repo = campaign_repo
        self.recipient_directory = recipient_directory
        self.contact_group_repo = contact_group_repo
        self.uow = uow
        self.launcher = launcher
        self.runner = runner
        self._clock = clock

    async def resolve_recipients(self, campaign: CampaignResult) -> list[Recipient]:
        """Reachable members for the campaign audience, in (created_at, id) order.

        custom_list has no stored audience and resolves to nothing.
        """
        target = campaign.target_type
        if target == CampaignTargetType.ALL_MEMBERS.value:
            return await self.recipient_directory.list_reachable_members()
        if target == CampaignTargetType.SPECIFIC_GROUP.value:
            if not campaign.group_id:
                return []
            return await self.recipient_directory.list_reachable_group_members(
                campaign.group_id
            )
        if target == CampaignTargetType.CUSTOM_LIST.value:
            return []
        raise ValidationException(f"Unknown target type: {target}", "target_type")

    @traced("campaign.send")
    async def send_campaign(self, *, campaign_id: str) -> DispatchStarted:
        """Start sending a draft or scheduled campaign in the background.

        Raises:
            ResourceNotFoundException: Campaign does not exist.
            InvalidStateException: Campaign is not draft/scheduled, or another
                dispatch moved it first.
            NoRecipientsException: Audience is empty. Status is left unchanged.
        """
        campaign = await self.campaign_repo.get_campaign(campaign_id)
        if campaign is None:
            raise ResourceNotFoundException("campaign", campaign_id)
        if campaign.status not in _DISPATCHABLE:
            raise InvalidStateException(
                "campaign",
                campaign_id,
                campaign.status,
                message="Campaign cannot be sent in its current status",
            )
        if self.launcher.is_running(campaign_id):
            raise DispatchAlreadyRunningException(campaign_id)

        recipients = await self.resolve_recipients(campaign)
        if not recipients:
            raise NoRecipientsException(campaign_id, campaign.target_type)

        now = self._clock()
        started = await self.campaign_repo.update_if_status(
            campaign_id,
            _DISPATCHABLE,
            status=CampaignStatus.SENDING.value,
            started_at=now,
            total_recipients=len(recipients),
        )
        if not started:
            await self.uow.rollback()
            current = await self.campaign_repo.get_campaign(campaign_id)
            raise InvalidStateException(
                "campaign",
                campaign_id,
                current.status if current else "unknown",
                message="Campaign status changed before sending could start",
            )
        if campaign.group_id and campaign.target_type == CampaignTargetType.SPECIFIC_GROUP.value:
            await self.contact_group_repo.touch_last_used(campaign.group_id, now)
        await self.uow.commit()

        self.launcher.start(campaign_id, self.runner(campaign, recipients))
        add_span_attributes(total_recipients=len(recipients))
        logger.info(
            "Campaign %s sending started: %d recipients", campaign_id, len(recipients)
        )
        return DispatchStarted(
            campaign_id=campaign_id,
            total_recipients=len(recipients),
            status=CampaignStatus.SENDING.value,
        )


class CampaignSendLoop:
    """Sends one campaign to its recipients, strictly in order.

    Transport failures are recorded on the message row and counted; they
    never stop the loop. Any other exception stops it and marks the
    campaign failed. Messages already recorded are kept.
    """

    def __init__(
        self,
        campaign_repo: ICampaignRepository,
        message_repo: IMessageRepository,
        transport: ISmsTransport,
        pacer: IPacer,
        uow: IUnitOfWork,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.campaign_repo = campaign_repo
        self.message_repo = message_repo
        self.transport = transport
        self.pacer = pacer
        self.uow = uow
        self._clock = clock

    async def run(
        self, campaign: CampaignResult, recipients: Sequence[Recipient]
    ) -> DispatchOutcome:
        sent = failed = 0
        length = len(campaign.message)
        units = calculate_message_units(campaign.message)
        async with TracedOperation(
            "campaign.dispatch",
            {"campaign_id": campaign.id, "recipients": len(recipients)},
        ):
            try:
                for recipient in recipients:
                    await self.pacer.wait()
                    if await self._send_one(campaign, recipient, length, units):
                        sent += 1
                    else:
                        failed += 1
                await self.campaign_repo.update_if_status(
                    campaign.id,
                    (CampaignStatus.SENDING.value,),
                    status=CampaignStatus.COMPLETED.value,
                    completed_at=self._clock(),
                    sent_count=sent,
                    failed_count=failed,
                )
                await self.uow.commit()
            except asyncio.CancelledError:
                logger.warning(
                    "Campaign %s dispatch cancelled after %d sent, %d failed",
                    campaign.id,
                    sent,
                    failed,
                )
                await self._mark_failed(campaign.id, sent, failed)
                raise
            except Exception:
                logger.exception(
                    "Campaign %s dispatch aborted after %d sent, %d failed",
                    campaign.id,
                    sent,
                    failed,
                )
                await self._mark_failed(campaign.id, sent, failed)
                return DispatchOutcome(
                    campaign.id, CampaignStatus.FAILED.value, sent, failed
                )

        logger.info(
            "Campaign %s completed: %d sent, %d failed", campaign.id, sent, failed
        )
        return DispatchOutcome(campaign.id, CampaignStatus.COMPLETED.value, sent, failed)

    async def _send_one(
        self, campaign: CampaignResult, recipient: Recipient, length: int, units: int
    ) -> bool:
        """Record, send and settle one message. Returns True when sent."""
        pending = await self.message_repo.create_pending(
            MessageCreate(
                recipient_phone=recipient.phone_number,
                recipient_name=recipient.full_name,
                message=campaign.message,
                message_type=MessageType.CAMPAIGN.value,
                message_length=length,
                unit_count=units,
                campaign_id=campaign.id,
                member_id=recipient.member_id,
                sent_by_id=campaign.created_by_id,
            )
        )
        await self.uow.commit()

        result = await self.transport.send(recipient.phone_number, campaign.message)
        if result.success:
            await self.message_repo.mark_sent(
                pending.id, result.tracking_id, self._clock()
            )
        else:
            logger.warning(
                "Campaign %s: send to member %s failed: %s",
                campaign.id,
                recipient.member_id,
                result.error,
            )
            await self.message_repo.mark_failed(
                pending.id, result.error or "Unknown error", self._clock()
            )
        await self.uow.commit()
        return result.success

    async def _mark_failed(self, campaign_id: str, sent: int, failed: int) -> None:
        try:
            await self.uow.rollback()
            await self.campaign_repo.update_if_status(
                campaign_id,
                (CampaignStatus.SENDING.value,),
                status=CampaignStatus.FAILED.value,
                completed_at=self._clock(),
                sent_count=sent,
                failed_count=failed,
            )
            await self.uow.commit()
        except Exception:
            logger.exception("Could not mark campaign %s as failed", campaign_id)
