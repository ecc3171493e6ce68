"""User API schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class UserCreateRequest(BaseModel):
    """Request body for creating a staff user."""

    email: EmailStr
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    password: str = Field(..., min_length=8, description="Password (min 8 characters)")
    role: str = Field(default="clerk", min_length=2, max_length=50)
    phone_number: str | None = Field(default=None, max_length=32)
    department: str | None = Field(default=None, max_length=100)


class PrimaryRoleUpdate(BaseModel):
    """Request body for PUT /users/{id}/primary-role."""

    role: str = Field(..., min_length=2, max_length=50)


class UserResponse(BaseModel):
    """User detail (no password)."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    email: str
    first_name: str
    last_name: str
    phone_number: str | None
    department: str | None
    role: str
    status: str
    is_super_admin: bool
    last_login_at: datetime | None = None
