"""Role and role-assignment API schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from app.schemas.permission import PermissionSummaryResponse


class RoleCreateRequest(BaseModel):
    """Request body for creating a role."""

    name: str = Field(..., min_length=2, max_length=50)
    display_name: str = Field(..., min_length=1, max_length=100)
    description: str | None = Field(default=None, max_length=500)
    level: int = Field(default=1, ge=1, le=10)
    permission_names: list[str] = Field(default_factory=list, max_length=200)


class RoleUpdate(BaseModel):
    """Request body for updating a role (partial)."""

    name: str | None = Field(default=None, min_length=2, max_length=50)
    display_name: str | None = Field(default=None, min_length=1, max_length=100)
    description: str | None = Field(default=None, max_length=500)
    level: int | None = Field(default=None, ge=1, le=10)
    is_active: bool | None = None


class RolePermissionAssign(BaseModel):
    """Request body for granting a permission to a role."""

    permission_id: str


class RoleResponse(BaseModel):
    """Role list/detail response."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    display_name: str
    description: str | None
    is_system: bool
    is_active: bool
    level: int


class RoleDetailResponse(RoleResponse):
    """Role with permissions and active assignment count."""

    permissions: list[PermissionSummaryResponse] = Field(default_factory=list)
    active_assignments: int = 0


class UserRoleAssignRequest(BaseModel):
    """Request body for POST /users/{id}/roles."""

    role_id: str
    expires_at: datetime | None = Field(
        default=None, description="Assignment stops counting at this instant"
    )


class UserRoleResponse(BaseModel):
    """A user-role assignment."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    role_id: str
    role_name: str
    role_display_name: str
    assigned_by: str | None
    assigned_at: datetime
    expires_at: datetime | None
    is_active: bool
