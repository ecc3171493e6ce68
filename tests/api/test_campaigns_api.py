"""Campaign API tests with services replaced through dependency overrides."""

import pytest
from httpx import AsyncClient

from app.api.v1.dependencies import (
    get_authorization_service,
    get_campaign_dispatcher,
    get_campaign_service,
    get_campaign_service_for_write,
    get_current_user,
)
from app.application.dtos.campaign import DispatchStarted
from app.application.dtos.user import UserResult
from app.application.services.campaign_service import CampaignService
from app.core.constants import (
    PERM_CAMPAIGN_CREATE,
    PERM_CAMPAIGN_READ,
    PERM_CAMPAIGN_SEND,
)
from app.domain.exceptions import NoRecipientsException
from app.main import app
from tests.fakes import (
    FakeCampaignRepo,
    FakeContactGroupRepo,
    FakeMessageRepo,
    StubAuthorization,
)

AUTH = {"Authorization": "Bearer test"}


@pytest.fixture
def campaigns() -> FakeCampaignRepo:
    return FakeCampaignRepo()


class PagedCampaignRepo(FakeCampaignRepo):
    async def list_campaigns(self, *, status=None, target_type=None, skip=0, limit=20):
        items = list(self.campaigns.values())
        return items[skip : skip + limit], len(items)


@pytest.fixture
def signed_in(staff_user: UserResult):
    """Authenticated caller; grant permissions with signed_in(*names)."""

    def _grant(*permissions: str) -> None:
        app.dependency_overrides[get_current_user] = lambda: staff_user
        app.dependency_overrides[get_authorization_service] = lambda: StubAuthorization(
            *permissions
        )

    return _grant


def _use_service(repo: FakeCampaignRepo) -> None:
    service = CampaignService(repo, FakeMessageRepo(), FakeContactGroupRepo())
    app.dependency_overrides[get_campaign_service] = lambda: service
    app.dependency_overrides[get_campaign_service_for_write] = lambda: service


async def test_list_without_token_401(client: AsyncClient) -> None:
    _use_service(FakeCampaignRepo())
    response = await client.get("/api/v1/campaigns")
    assert response.status_code == 401
    assert response.json() == {
        "success": False,
        "error": "AUTHENTICATION_ERROR",
        "message": "Not authenticated",
        "details": {},
    }


async def test_list_without_permission_403(client: AsyncClient, signed_in) -> None:
    signed_in()
    _use_service(FakeCampaignRepo())
    response = await client.get("/api/v1/campaigns", headers=AUTH)
    assert response.status_code == 403
    body = response.json()
    assert body["error"] == "PERMISSION_DENIED"
    assert body["details"]["required"] == [PERM_CAMPAIGN_READ]


async def test_list_envelope_and_page(client: AsyncClient, signed_in) -> None:
    signed_in(PERM_CAMPAIGN_READ)
    repo = PagedCampaignRepo()
    for i in range(3):
        repo.add_campaign(name=f"Campaign {i}")
    _use_service(repo)

    response = await client.get("/api/v1/campaigns?limit=2", headers=AUTH)

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    page = body["data"]
    assert page["total"] == 3
    assert page["pages"] == 2
    assert len(page["items"]) == 2
    assert page["items"][0]["status"] == "draft"


async def test_create_campaign_201(
    client: AsyncClient, signed_in, staff_user: UserResult, campaigns: FakeCampaignRepo
) -> None:
    signed_in(PERM_CAMPAIGN_CREATE)
    _use_service(campaigns)
    response = await client.post(
        "/api/v1/campaigns",
        headers=AUTH,
        json={"name": "Dividends", "message": "Dividends are paid out on Friday."},
    )
    assert response.status_code == 201
    data = response.json()["data"]
    assert data["target_type"] == "all_members"
    assert data["created_by_id"] == staff_user.id
    assert data["id"] in campaigns.campaigns


async def test_create_campaign_validation_422(client: AsyncClient, signed_in) -> None:
    signed_in(PERM_CAMPAIGN_CREATE)
    _use_service(FakeCampaignRepo())
    response = await client.post(
        "/api/v1/campaigns",
        headers=AUTH,
        json={"message": "No name", "target_type": "everyone"},
    )
    assert response.status_code == 422
    locations = {tuple(err["loc"]) for err in response.json()["details"]}
    assert ("body", "name") in locations
    assert ("body", "target_type") in locations


async def test_get_missing_campaign_404(client: AsyncClient, signed_in) -> None:
    signed_in(PERM_CAMPAIGN_READ)
    _use_service(FakeCampaignRepo())
    response = await client.get("/api/v1/campaigns/nope", headers=AUTH)
    assert response.status_code == 404
    assert response.json()["error"] == "RESOURCE_NOT_FOUND"


async def test_cancel_sending_campaign_400(
    client: AsyncClient, signed_in, campaigns: FakeCampaignRepo
) -> None:
    signed_in("communications.campaigns.cancel")
    _use_service(campaigns)
    campaign = campaigns.add_campaign(status="sending")
    response = await client.post(f"/api/v1/campaigns/{campaign.id}/cancel", headers=AUTH)
    assert response.status_code == 400
    assert response.json()["error"] == "INVALID_STATE"


class StubDispatcher:
    def __init__(self, error: Exception | None = None) -> None:
        self.error = error
        self.calls: list[str] = []

    async def send_campaign(self, *, campaign_id: str) -> DispatchStarted:
        self.calls.append(campaign_id)
        if self.error is not None:
            raise self.error
        return DispatchStarted(campaign_id=campaign_id, total_recipients=3, status="sending")


async def test_send_campaign_202(client: AsyncClient, signed_in) -> None:
    signed_in(PERM_CAMPAIGN_SEND)
    dispatcher = StubDispatcher()
    app.dependency_overrides[get_campaign_dispatcher] = lambda: dispatcher
    response = await client.post("/api/v1/campaigns/cmp-1/send", headers=AUTH)
    assert response.status_code == 202
    body = response.json()
    assert body["data"] == {"campaign_id": "cmp-1", "total_recipients": 3, "status": "sending"}
    assert "3 recipient" in body["message"]
    assert dispatcher.calls == ["cmp-1"]


async def test_send_campaign_no_recipients_400(client: AsyncClient, signed_in) -> None:
    signed_in(PERM_CAMPAIGN_SEND)
    app.dependency_overrides[get_campaign_dispatcher] = lambda: StubDispatcher(
        NoRecipientsException("cmp-1", "specific_group")
    )
    response = await client.post("/api/v1/campaigns/cmp-1/send", headers=AUTH)
    assert response.status_code == 400
    assert response.json()["error"] == "NO_RECIPIENTS"


async def test_send_requires_send_permission(client: AsyncClient, signed_in) -> None:
    signed_in(PERM_CAMPAIGN_READ, PERM_CAMPAIGN_CREATE)
    dispatcher = StubDispatcher()
    app.dependency_overrides[get_campaign_dispatcher] = lambda: dispatcher
    response = await client.post("/api/v1/campaigns/cmp-1/send", headers=AUTH)
    assert response.status_code == 403
    assert dispatcher.calls == []
