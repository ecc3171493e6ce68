"""Member API schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class MemberCreate(BaseModel):
    """Request body for registering a cooperative member."""

    member_number: str = Field(..., min_length=1, max_length=50)
    full_name: str = Field(..., min_length=1, max_length=200)
    phone_number: str | None = Field(default=None, max_length=32)
    email: EmailStr | None = None


class MemberResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    member_number: str
    full_name: str
    phone_number: str | None
    email: str | None
    status: str
    created_at: datetime | None = None
