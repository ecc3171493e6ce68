"""Unit tests for CampaignService: draft validation, editing, approval, cancellation."""

from datetime import datetime, timedelta, timezone

import pytest

from app.application.dtos.campaign import CampaignCreate
from app.application.services.campaign_service import CampaignService
from app.domain.exceptions import (
    InvalidStateException,
    ResourceNotFoundException,
    ValidationException,
)
from tests.fakes import BASE_TIME, FakeCampaignRepo, FakeContactGroupRepo, FakeMessageRepo


@pytest.fixture
def campaigns() -> FakeCampaignRepo:
    return FakeCampaignRepo()


@pytest.fixture
def groups() -> FakeContactGroupRepo:
    return FakeContactGroupRepo()


@pytest.fixture
def service(campaigns: FakeCampaignRepo, groups: FakeContactGroupRepo) -> CampaignService:
    return CampaignService(campaigns, FakeMessageRepo(), groups)


class TestCreate:
    async def test_creates_draft(self, service: CampaignService) -> None:
        created = await service.create_campaign(
            CampaignCreate(name="AGM", message="See you Saturday", target_type="all_members"),
            created_by_id="u1",
        )
        assert created.status == "draft"
        assert created.created_by_id == "u1"

    @pytest.mark.parametrize(
        ("name", "message", "field"),
        [("  ", "Hi", "name"), ("AGM", "", "message")],
    )
    async def test_blank_fields_rejected(
        self, service: CampaignService, name: str, message: str, field: str
    ) -> None:
        with pytest.raises(ValidationException) as exc_info:
            await service.create_campaign(
                CampaignCreate(name=name, message=message, target_type="all_members"),
                created_by_id="u1",
            )
        assert exc_info.value.details["field"] == field

    async def test_unknown_target_type(self, service: CampaignService) -> None:
        with pytest.raises(ValidationException):
            await service.create_campaign(
                CampaignCreate(name="AGM", message="Hi", target_type="everyone"),
                created_by_id="u1",
            )

    async def test_group_required_for_specific_group(self, service: CampaignService) -> None:
        with pytest.raises(ValidationException) as exc_info:
            await service.create_campaign(
                CampaignCreate(name="AGM", message="Hi", target_type="specific_group"),
                created_by_id="u1",
            )
        assert exc_info.value.details["field"] == "group_id"

    async def test_inactive_group_not_found(
        self, service: CampaignService, groups: FakeContactGroupRepo
    ) -> None:
        group = groups.add_group(is_active=False)
        with pytest.raises(ResourceNotFoundException):
            await service.create_campaign(
                CampaignCreate(
                    name="AGM", message="Hi", target_type="specific_group", group_id=group.id
                ),
                created_by_id="u1",
            )


class TestLifecycle:
    async def test_update_draft(
        self, service: CampaignService, campaigns: FakeCampaignRepo
    ) -> None:
        campaign = campaigns.add_campaign()
        updated = await service.update_campaign(campaign.id, message="New text")
        assert updated.message == "New text"

    async def test_update_normalizes_scheduled_at_to_utc(
        self, service: CampaignService, campaigns: FakeCampaignRepo
    ) -> None:
        campaign = campaigns.add_campaign()
        nairobi = timezone(timedelta(hours=3))
        updated = await service.update_campaign(
            campaign.id, scheduled_at=datetime(2026, 2, 1, 12, 0, tzinfo=nairobi)
        )
        assert updated.scheduled_at == datetime(2026, 2, 1, 9, 0, tzinfo=timezone.utc)
        assert updated.scheduled_at.utcoffset() == timedelta(0)

        naive = await service.update_campaign(
            campaign.id, scheduled_at=datetime(2026, 2, 2, 7, 30)
        )
        assert naive.scheduled_at == datetime(2026, 2, 2, 7, 30, tzinfo=timezone.utc)

    async def test_update_non_draft_rejected(
        self, service: CampaignService, campaigns: FakeCampaignRepo
    ) -> None:
        campaign = campaigns.add_campaign(status="scheduled")
        with pytest.raises(InvalidStateException):
            await service.update_campaign(campaign.id, name="Renamed")

    async def test_update_status_field_rejected(
        self, service: CampaignService, campaigns: FakeCampaignRepo
    ) -> None:
        campaign = campaigns.add_campaign()
        with pytest.raises(ValidationException):
            await service.update_campaign(campaign.id, status="completed")

    async def test_approve_stamps_approver(
        self, service: CampaignService, campaigns: FakeCampaignRepo
    ) -> None:
        campaign = campaigns.add_campaign()
        approved = await service.approve_campaign(
            campaign.id, approved_by_id="manager-1", at=BASE_TIME
        )
        assert approved.status == "scheduled"
        assert approved.approved_by_id == "manager-1"
        assert approved.approved_at == BASE_TIME

    async def test_approve_twice_rejected(
        self, service: CampaignService, campaigns: FakeCampaignRepo
    ) -> None:
        campaign = campaigns.add_campaign(status="scheduled")
        with pytest.raises(InvalidStateException):
            await service.approve_campaign(campaign.id, approved_by_id="manager-1")

    @pytest.mark.parametrize("status", ["draft", "scheduled"])
    async def test_cancel(
        self, service: CampaignService, campaigns: FakeCampaignRepo, status: str
    ) -> None:
        campaign = campaigns.add_campaign(status=status)
        assert (await service.cancel_campaign(campaign.id)).status == "cancelled"

    async def test_cancel_sending_rejected(
        self, service: CampaignService, campaigns: FakeCampaignRepo
    ) -> None:
        campaign = campaigns.add_campaign(status="sending")
        with pytest.raises(InvalidStateException):
            await service.cancel_campaign(campaign.id)
        assert campaigns.campaigns[campaign.id].status == "sending"

    async def test_details_include_recent_messages(
        self, campaigns: FakeCampaignRepo, groups: FakeContactGroupRepo
    ) -> None:
        messages = FakeMessageRepo()
        service = CampaignService(campaigns, messages, groups)
        campaign = campaigns.add_campaign()
        detail = await service.get_campaign_details(campaign.id)
        assert detail.campaign == campaign
        assert detail.recent_messages == []

    async def test_missing_campaign(self, service: CampaignService) -> None:
        with pytest.raises(ResourceNotFoundException):
            await service.get_campaign_details("missing")

    async def test_list_rejects_unknown_status(self, service: CampaignService) -> None:
        with pytest.raises(ValidationException):
            await service.list_campaigns(status="paused")
