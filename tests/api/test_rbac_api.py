"""Users/roles API tests: permission introspection and role assignment guards.

The real AuthorizationService runs over an in-memory permission store, so
the route guards and the introspection endpoints use the same rules.
"""

from datetime import timedelta
from typing import Annotated

import pytest
from fastapi import Depends, FastAPI
from httpx import ASGITransport, AsyncClient

from app.api.v1.dependencies import (
    get_authorization_service,
    get_current_user,
    get_role_service_for_write,
    require_all_permissions,
    require_any_permission,
)
from app.application.dtos.role import UserRoleResult
from app.application.dtos.user import UserResult
from app.application.services.authorization_service import AuthorizationService
from app.core.constants import (
    PERM_CAMPAIGN_SEND,
    PERM_ROLE_ASSIGN,
    PERM_SMS_SEND,
    PERM_USER_READ,
)
from app.core.exception_handlers import register_exception_handlers
from app.domain.exceptions import DuplicateAssignmentException
from app.main import app
from app.shared.utils.datetime import utc_now
from tests.fakes import FakePermissionStore, role_grant

AUTH = {"Authorization": "Bearer test"}


@pytest.fixture
def store(staff_user: UserResult) -> FakePermissionStore:
    store = FakePermissionStore()
    store.add_role(role_grant("clerk", ["members.members.read"]))
    store.add_user(staff_user.id, role="clerk")
    app.dependency_overrides[get_current_user] = lambda: staff_user
    app.dependency_overrides[get_authorization_service] = lambda: AuthorizationService(store)
    return store


async def test_my_permissions_lists_assignments_only(
    client: AsyncClient, store: FakePermissionStore, staff_user: UserResult
) -> None:
    store.assign(staff_user.id, role_grant("auditor", ["system.users.read", "a.b.read"]))
    response = await client.get("/api/v1/users/me/permissions", headers=AUTH)
    assert response.status_code == 200
    data = response.json()["data"]
    assert [r["name"] for r in data["roles"]] == ["auditor"]
    assert [p["name"] for p in data["permissions"]] == ["a.b.read", "system.users.read"]


async def test_primary_role_alone_does_not_open_user_routes(
    client: AsyncClient, store: FakePermissionStore, staff_user: UserResult
) -> None:
    response = await client.get(f"/api/v1/users/{staff_user.id}/permissions", headers=AUTH)
    assert response.status_code == 403
    assert response.json()["details"]["required"] == [PERM_USER_READ]


async def test_expired_assignment_denied(
    client: AsyncClient, store: FakePermissionStore, staff_user: UserResult
) -> None:
    store.assign(
        staff_user.id,
        role_grant("auditor", [PERM_USER_READ]),
        expires_at=utc_now() - timedelta(seconds=1),
    )
    response = await client.get(f"/api/v1/users/{staff_user.id}/permissions", headers=AUTH)
    assert response.status_code == 403


async def test_permission_check_reports_reason(
    client: AsyncClient, store: FakePermissionStore, staff_user: UserResult
) -> None:
    store.assign(staff_user.id, role_grant("auditor", [PERM_USER_READ]))
    response = await client.get(
        f"/api/v1/users/{staff_user.id}/permissions/check",
        params={"permission": "members.members.read"},
        headers=AUTH,
    )
    assert response.status_code == 200
    assert response.json()["data"] == {
        "user_id": staff_user.id,
        "permission": "members.members.read",
        "granted": True,
        "reason": "primary_role",
    }


async def test_permission_check_unknown_user_404(
    client: AsyncClient, store: FakePermissionStore, staff_user: UserResult
) -> None:
    store.assign(staff_user.id, role_grant("auditor", [PERM_USER_READ]))
    response = await client.get(
        "/api/v1/users/ghost/permissions/check",
        params={"permission": "x.y.z"},
        headers=AUTH,
    )
    assert response.status_code == 404


class StubRoleService:
    def __init__(self, error: Exception | None = None) -> None:
        self.error = error

    async def assign_role(self, *, user_id, role_id, assigned_by, expires_at=None):
        if self.error is not None:
            raise self.error
        return UserRoleResult(
            id="ur-1",
            user_id=user_id,
            role_id=role_id,
            role_name="teller",
            role_display_name="Teller",
            assigned_by=assigned_by,
            assigned_at=utc_now(),
            expires_at=expires_at,
            is_active=True,
        )


async def test_assign_role_records_assigner(
    client: AsyncClient, store: FakePermissionStore, staff_user: UserResult
) -> None:
    store.assign(staff_user.id, role_grant("admin", [PERM_ROLE_ASSIGN]))
    app.dependency_overrides[get_role_service_for_write] = lambda: StubRoleService()
    response = await client.post(
        "/api/v1/users/u-2/roles", json={"role_id": "role-teller"}, headers=AUTH
    )
    assert response.status_code == 201
    data = response.json()["data"]
    assert data["assigned_by"] == staff_user.id
    assert data["user_id"] == "u-2"


async def test_assign_duplicate_role_409(
    client: AsyncClient, store: FakePermissionStore, staff_user: UserResult
) -> None:
    store.assign(staff_user.id, role_grant("admin", [PERM_ROLE_ASSIGN]))
    app.dependency_overrides[get_role_service_for_write] = lambda: StubRoleService(
        DuplicateAssignmentException("Already assigned", assignment_type="user_role")
    )
    response = await client.post(
        "/api/v1/users/u-2/roles", json={"role_id": "role-teller"}, headers=AUTH
    )
    assert response.status_code == 409
    assert response.json()["error"] == "DUPLICATE_ASSIGNMENT"


async def test_super_admin_passes_every_guard(
    client: AsyncClient, store: FakePermissionStore, staff_user: UserResult
) -> None:
    store.add_user(staff_user.id, role="clerk", super_admin=True)
    response = await client.get(f"/api/v1/users/{staff_user.id}/permissions", headers=AUTH)
    assert response.status_code == 200


SEND_NAMES = [PERM_CAMPAIGN_SEND, PERM_SMS_SEND]


def _guarded_app(store: FakePermissionStore, user: UserResult) -> FastAPI:
    """Minimal app with one route per multi-permission guard."""
    guarded = FastAPI()
    register_exception_handlers(guarded)

    @guarded.get("/any")
    async def any_route(
        caller: Annotated[UserResult, Depends(require_any_permission(SEND_NAMES))],
    ) -> dict[str, str]:
        return {"user_id": caller.id}

    @guarded.get("/all")
    async def all_route(
        caller: Annotated[UserResult, Depends(require_all_permissions(SEND_NAMES))],
    ) -> dict[str, str]:
        return {"user_id": caller.id}

    guarded.dependency_overrides[get_current_user] = lambda: user
    guarded.dependency_overrides[get_authorization_service] = lambda: AuthorizationService(
        store
    )
    return guarded


@pytest.fixture
async def guarded_client(store: FakePermissionStore, staff_user: UserResult):
    transport = ASGITransport(app=_guarded_app(store, staff_user))
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


async def test_any_guard_accepts_primary_role(
    guarded_client: AsyncClient, store: FakePermissionStore, staff_user: UserResult
) -> None:
    store.add_role(role_grant("sender", [PERM_SMS_SEND]))
    store.add_user(staff_user.id, role="sender")
    response = await guarded_client.get("/any")
    assert response.status_code == 200
    assert response.json() == {"user_id": staff_user.id}


async def test_any_guard_denies_without_any_name(guarded_client: AsyncClient) -> None:
    response = await guarded_client.get("/any")
    assert response.status_code == 403
    body = response.json()
    assert body["error"] == "PERMISSION_DENIED"
    assert body["details"] == {"required": SEND_NAMES}


async def test_all_guard_ignores_primary_role(
    guarded_client: AsyncClient, store: FakePermissionStore, staff_user: UserResult
) -> None:
    store.add_role(role_grant("sender", SEND_NAMES))
    store.add_user(staff_user.id, role="sender")
    response = await guarded_client.get("/all")
    assert response.status_code == 403
    details = response.json()["details"]
    assert details["required"] == SEND_NAMES
    assert details["missing"] == SEND_NAMES


async def test_all_guard_reports_only_missing_names(
    guarded_client: AsyncClient, store: FakePermissionStore, staff_user: UserResult
) -> None:
    store.assign(staff_user.id, role_grant("campaigner", [PERM_CAMPAIGN_SEND]))
    response = await guarded_client.get("/all")
    assert response.status_code == 403
    body = response.json()
    assert body["details"]["missing"] == [PERM_SMS_SEND]
    assert body["message"] == f"Missing permissions: {PERM_SMS_SEND}"


async def test_all_guard_passes_with_assignments_covering_every_name(
    guarded_client: AsyncClient, store: FakePermissionStore, staff_user: UserResult
) -> None:
    store.assign(staff_user.id, role_grant("campaigner", [PERM_CAMPAIGN_SEND]))
    store.assign(staff_user.id, role_grant("texter", [PERM_SMS_SEND]))
    response = await guarded_client.get("/all")
    assert response.status_code == 200
