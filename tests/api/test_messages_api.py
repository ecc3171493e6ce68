"""Messages API tests: usage stats with an any-of permission guard."""

import pytest
from httpx import AsyncClient

from app.api.v1.dependencies import (
    get_authorization_service,
    get_current_user,
    get_messaging_service,
)
from app.application.dtos.user import UserResult
from app.application.services.messaging_service import MessagingService
from app.core.constants import PERM_CAMPAIGN_READ, PERM_MEMBER_READ, PERM_SMS_READ
from app.main import app
from tests.fakes import (
    BASE_TIME,
    FakeMemberStore,
    FakeMessageRepo,
    FakeTransport,
    StubAuthorization,
)

AUTH = {"Authorization": "Bearer test"}


@pytest.fixture
def messages(staff_user: UserResult) -> FakeMessageRepo:
    repo = FakeMessageRepo()
    service = MessagingService(repo, FakeMemberStore(), FakeTransport())
    app.dependency_overrides[get_current_user] = lambda: staff_user
    app.dependency_overrides[get_messaging_service] = lambda: service
    return repo


def _grant(*permissions: str) -> None:
    app.dependency_overrides[get_authorization_service] = lambda: StubAuthorization(
        *permissions
    )


@pytest.mark.parametrize("permission", [PERM_SMS_READ, PERM_CAMPAIGN_READ])
async def test_stats_open_to_either_read_permission(
    client: AsyncClient, messages: FakeMessageRepo, permission: str
) -> None:
    _grant(permission)
    messages.add_message(status="sent", message_type="campaign", unit_count=2)
    messages.add_message(status="failed", message_type="general", unit_count=1)

    response = await client.get("/api/v1/sms/stats", headers=AUTH)

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["total_messages"] == 2
    assert data["total_units"] == 3
    assert data["breakdown"] == [
        {"status": "failed", "message_type": "general", "count": 1, "units": 1},
        {"status": "sent", "message_type": "campaign", "count": 1, "units": 2},
    ]
    assert data["start"] is None


async def test_stats_denied_without_either_permission(
    client: AsyncClient, messages: FakeMessageRepo
) -> None:
    _grant(PERM_MEMBER_READ)
    response = await client.get("/api/v1/sms/stats", headers=AUTH)
    assert response.status_code == 403
    body = response.json()
    assert body["error"] == "PERMISSION_DENIED"
    assert body["details"]["required"] == [PERM_SMS_READ, PERM_CAMPAIGN_READ]


async def test_stats_window_passed_through(
    client: AsyncClient, messages: FakeMessageRepo
) -> None:
    _grant(PERM_SMS_READ)
    messages.add_message(created_at=BASE_TIME)
    response = await client.get(
        "/api/v1/sms/stats",
        params={"start": "2026-01-15T00:00:00Z", "end": "2026-01-15T23:59:59Z"},
        headers=AUTH,
    )
    assert response.status_code == 200
    assert response.json()["data"]["total_messages"] == 1
    start, end = messages.stats_window
    assert start.isoformat() == "2026-01-15T00:00:00+00:00"
    assert end.isoformat() == "2026-01-15T23:59:59+00:00"


async def test_stats_reversed_window_400(
    client: AsyncClient, messages: FakeMessageRepo
) -> None:
    _grant(PERM_SMS_READ)
    response = await client.get(
        "/api/v1/sms/stats",
        params={"start": "2026-02-01T00:00:00Z", "end": "2026-01-01T00:00:00Z"},
        headers=AUTH,
    )
    assert response.status_code == 400
    assert response.json()["error"] == "VALIDATION_ERROR"
