"""Auth API tests: login, token use and per-email throttling."""

from httpx import AsyncClient

from app.api.v1.dependencies import get_current_user, get_user_service_for_write
from app.application.dtos.user import UserResult
from app.domain.exceptions import AuthenticationException
from app.infrastructure.security import create_access_token, decode_access_token
from app.main import app


class StubUserService:
    def __init__(self, user: UserResult | None) -> None:
        self.user = user
        self.attempts = 0

    async def authenticate(self, email: str, password: str) -> UserResult:
        self.attempts += 1
        if self.user is None or password != "correct-horse":
            raise AuthenticationException("Invalid email or password")
        return self.user


async def test_login_returns_token(client: AsyncClient, staff_user: UserResult) -> None:
    app.dependency_overrides[get_user_service_for_write] = lambda: StubUserService(staff_user)
    response = await client.post(
        "/api/v1/auth/login",
        json={"email": staff_user.email, "password": "correct-horse"},
    )
    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    data = body["data"]
    assert data["token_type"] == "bearer"
    assert data["expires_in"] > 0
    assert data["user"]["id"] == staff_user.id
    claims = decode_access_token(data["access_token"])
    assert claims["sub"] == staff_user.id
    assert claims["role"] == "clerk"


async def test_login_wrong_password_401(client: AsyncClient, staff_user: UserResult) -> None:
    app.dependency_overrides[get_user_service_for_write] = lambda: StubUserService(staff_user)
    response = await client.post(
        "/api/v1/auth/login", json={"email": staff_user.email, "password": "wrong"}
    )
    assert response.status_code == 401
    assert response.json()["error"] == "AUTHENTICATION_ERROR"
    assert response.headers["www-authenticate"] == "Bearer"


async def test_login_invalid_email_422(client: AsyncClient) -> None:
    app.dependency_overrides[get_user_service_for_write] = lambda: StubUserService(None)
    response = await client.post(
        "/api/v1/auth/login", json={"email": "not-an-email", "password": "x"}
    )
    assert response.status_code == 422
    assert response.json()["error"] == "VALIDATION_ERROR"


async def test_login_throttled_per_email(client: AsyncClient, staff_user: UserResult) -> None:
    service = StubUserService(staff_user)
    app.dependency_overrides[get_user_service_for_write] = lambda: service
    statuses = []
    for _ in range(6):
        response = await client.post(
            "/api/v1/auth/login", json={"email": staff_user.email, "password": "wrong"}
        )
        statuses.append(response.status_code)
    assert statuses == [401] * 5 + [429]
    assert service.attempts == 5


async def test_me_requires_token(client: AsyncClient) -> None:
    response = await client.get("/api/v1/auth/me")
    assert response.status_code == 401


async def test_me_rejects_garbage_token(client: AsyncClient) -> None:
    response = await client.get(
        "/api/v1/auth/me", headers={"Authorization": "Bearer not-a-jwt"}
    )
    assert response.status_code == 401
    assert response.json()["success"] is False


async def test_me_returns_current_user(client: AsyncClient, staff_user: UserResult) -> None:
    app.dependency_overrides[get_current_user] = lambda: staff_user
    token = create_access_token(staff_user.id)
    response = await client.get(
        "/api/v1/auth/me", headers={"Authorization": f"Bearer {token}"}
    )
    assert response.status_code == 200
    assert response.json()["data"]["email"] == staff_user.email
