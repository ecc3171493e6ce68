"""DTOs for role use cases (no dependency on ORM)."""

from dataclasses import dataclass, field
from datetime import datetime

from app.application.dtos.permission import PermissionSummary


@dataclass(frozen=True)
class RoleResult:
    """Role read-model (result of get_by_id, list_roles, create_role, etc.)."""

    id: str
    name: str
    display_name: str
    description: str | None
    is_system: bool
    is_active: bool
    level: int


@dataclass(frozen=True)
class RoleDetail:
    """Role with its granted permissions and number of active assignments."""

    role: RoleResult
    permissions: list[PermissionSummary] = field(default_factory=list)
    active_assignments: int = 0


@dataclass(frozen=True)
class UserRoleResult:
    """A role assignment as returned by assign_role and list_user_roles."""

    id: str
    user_id: str
    role_id: str
    role_name: str
    role_display_name: str
    assigned_by: str | None
    assigned_at: datetime
    expires_at: datetime | None
    is_active: bool
