"""Contact group API schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from app.schemas.member import MemberResponse

_COLOR_PATTERN = r"^#[0-9A-Fa-f]{6}$"


class ContactGroupCreate(BaseModel):
    """Request body for creating a contact group."""

    name: str = Field(..., min_length=1, max_length=100)
    description: str | None = Field(default=None, max_length=500)
    color: str | None = Field(default=None, pattern=_COLOR_PATTERN)


class ContactGroupUpdate(BaseModel):
    """Request body for updating a contact group (partial)."""

    name: str | None = Field(default=None, min_length=1, max_length=100)
    description: str | None = Field(default=None, max_length=500)
    color: str | None = Field(default=None, pattern=_COLOR_PATTERN)
    is_active: bool | None = None


class AddMembersRequest(BaseModel):
    member_ids: list[str] = Field(..., min_length=1, max_length=1000)


class ContactGroupResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    description: str | None
    color: str
    is_active: bool
    member_count: int
    created_by_id: str | None
    last_used_at: datetime | None
    created_at: datetime | None = None


class ContactGroupDetailResponse(ContactGroupResponse):
    """Group with its active members."""

    members: list[MemberResponse] = Field(default_factory=list)


class AddMembersResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    group_id: str
    added: int
    reactivated: int
    already_present: int
    member_count: int


class RemoveMemberResponse(BaseModel):
    group_id: str
    member_id: str
    member_count: int
