"""Auth API: login (email + password -> JWT) and current user."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from app.api.v1.dependencies import get_current_user, get_user_service_for_write
from app.application.dtos.user import UserResult
from app.application.services.user_service import UserService
from app.core.config import get_settings
from app.core.limiter import check_login_rate_per_email, limit_auth
from app.infrastructure.security import create_access_token
from app.schemas.auth import LoginRequest, TokenResponse
from app.schemas.common import ApiResponse, ok
from app.schemas.user import UserResponse

router = APIRouter()


@router.post("/login", response_model=ApiResponse[TokenResponse])
@limit_auth
async def login(
    request: Request,
    body: LoginRequest,
    user_service: Annotated[UserService, Depends(get_user_service_for_write)],
):
    """Authenticate with email and password; return a bearer token."""
    check_login_rate_per_email(body.email)
    user = await user_service.authenticate(body.email, body.password)
    settings = get_settings()
    token = create_access_token(user.id, {"email": user.email, "role": user.role})
    return ok(
        TokenResponse(
            access_token=token,
            expires_in=settings.access_token_expire_minutes * 60,
            user=UserResponse.model_validate(user),
        ),
        "Login successful",
    )


@router.get("/me", response_model=ApiResponse[UserResponse])
async def get_me(current_user: Annotated[UserResult, Depends(get_current_user)]):
    """Return the authenticated user."""
    return ok(UserResponse.model_validate(current_user))
