"""Members, contact groups, campaigns and SMS dependencies (composition root)."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.dtos.campaign import CampaignResult, DispatchOutcome, Recipient
from app.application.interfaces.services import ISmsTransport
from app.application.services.campaign_dispatcher import (
    CampaignDispatcher,
    CampaignSendLoop,
    DispatchRunner,
)
from app.application.services.campaign_service import CampaignService
from app.application.services.contact_group_service import ContactGroupService
from app.application.services.member_service import MemberService
from app.application.services.messaging_service import MessagingService
from app.application.services.pacing import FixedIntervalPacer
from app.core.config import get_settings
from app.core.dispatch_registry import CampaignDispatchRegistry
from app.core.lifespan import build_sms_transport
from app.infrastructure.persistence.database import (
    get_db,
    get_db_transactional,
    session_scope,
)
from app.infrastructure.persistence.repositories import (
    CampaignRepository,
    ContactGroupRepository,
    MemberRepository,
    MessageRepository,
)


def get_sms_transport(request: Request) -> ISmsTransport:
    """Transport built in lifespan; a client-less one when lifespan did not run."""
    transport = getattr(request.app.state, "sms_transport", None)
    if transport is None:
        transport = build_sms_transport(None)
        request.app.state.sms_transport = transport
    return transport


def get_dispatch_registry(request: Request) -> CampaignDispatchRegistry:
    """Process-wide registry of running campaign dispatches."""
    registry = getattr(request.app.state, "dispatch_registry", None)
    if registry is None:
        registry = CampaignDispatchRegistry()
        request.app.state.dispatch_registry = registry
    return registry


def get_dispatch_runner(
    transport: Annotated[ISmsTransport, Depends(get_sms_transport)],
) -> DispatchRunner:
    """Background send loop factory; each run opens its own session."""
    interval_ms = get_settings().campaign_send_interval_ms

    async def _run(campaign: CampaignResult, recipients: list[Recipient]) -> DispatchOutcome:
        async with session_scope() as session:
            loop = CampaignSendLoop(
                CampaignRepository(session),
                MessageRepository(session),
                transport,
                FixedIntervalPacer.from_milliseconds(interval_ms),
                session,
            )
            return await loop.run(campaign, recipients)

    return _run


async def get_member_service(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> MemberService:
    return MemberService(MemberRepository(db), get_settings().sms_country_code)


async def get_member_service_for_write(
    db: Annotated[AsyncSession, Depends(get_db_transactional)],
) -> MemberService:
    return MemberService(MemberRepository(db), get_settings().sms_country_code)


def _group_service(db: AsyncSession) -> ContactGroupService:
    return ContactGroupService(
        ContactGroupRepository(db), MemberRepository(db), CampaignRepository(db)
    )


async def get_contact_group_service(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> ContactGroupService:
    return _group_service(db)


async def get_contact_group_service_for_write(
    db: Annotated[AsyncSession, Depends(get_db_transactional)],
) -> ContactGroupService:
    return _group_service(db)


def _campaign_service(db: AsyncSession) -> CampaignService:
    return CampaignService(
        CampaignRepository(db), MessageRepository(db), ContactGroupRepository(db)
    )


async def get_campaign_service(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> CampaignService:
    return _campaign_service(db)


async def get_campaign_service_for_write(
    db: Annotated[AsyncSession, Depends(get_db_transactional)],
) -> CampaignService:
    return _campaign_service(db)


async def get_campaign_dispatcher(
    db: Annotated[AsyncSession, Depends(get_db)],
    registry: Annotated[CampaignDispatchRegistry, Depends(get_dispatch_registry)],
    runner: Annotated[DispatchRunner, Depends(get_dispatch_runner)],
) -> CampaignDispatcher:
    """Dispatcher on a plain session: it commits the 'sending' flip itself
    before the background loop starts."""
    return CampaignDispatcher(
        CampaignRepository(db),
        MemberRepository(db),
        ContactGroupRepository(db),
        db,
        registry,
        runner,
    )


def _messaging_service(db: AsyncSession, transport: ISmsTransport) -> MessagingService:
    return MessagingService(
        MessageRepository(db), MemberRepository(db), transport, get_settings().sms_country_code
    )


async def get_messaging_service(
    db: Annotated[AsyncSession, Depends(get_db)],
    transport: Annotated[ISmsTransport, Depends(get_sms_transport)],
) -> MessagingService:
    """MessagingService for history reads, delivery checks and balance."""
    return _messaging_service(db, transport)


async def get_messaging_service_for_write(
    db: Annotated[AsyncSession, Depends(get_db_transactional)],
    transport: Annotated[ISmsTransport, Depends(get_sms_transport)],
) -> MessagingService:
    """MessagingService for sends; the message row commits with the request."""
    return _messaging_service(db, transport)
