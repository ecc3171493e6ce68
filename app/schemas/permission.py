"""Permission API schemas (definitions, checks, effective permissions)."""

from pydantic import BaseModel, ConfigDict, Field


class PermissionCreate(BaseModel):
    """Request body for creating a permission. Parts default to the name's segments."""

    name: str = Field(..., min_length=5, max_length=150, examples=["members.loans.approve"])
    display_name: str = Field(..., min_length=1, max_length=100)
    description: str | None = Field(default=None, max_length=500)
    module: str | None = None
    resource: str | None = None
    action: str | None = None


class PermissionResponse(BaseModel):
    """Permission definition."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    display_name: str
    description: str | None
    module: str
    resource: str
    action: str
    is_system: bool


class PermissionSummaryResponse(BaseModel):
    """Permission as listed in effective permissions."""

    model_config = ConfigDict(from_attributes=True)

    name: str
    display_name: str
    module: str
    resource: str
    action: str


class RoleSummaryResponse(BaseModel):
    """Role as listed in effective permissions."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    display_name: str
    level: int


class EffectivePermissionsResponse(BaseModel):
    """Roles from active assignments and the union of their permissions."""

    roles: list[RoleSummaryResponse]
    permissions: list[PermissionSummaryResponse]


class PermissionCheckResponse(BaseModel):
    """Result of GET /users/{id}/permissions/check."""

    user_id: str
    permission: str
    granted: bool
    reason: str | None = None
