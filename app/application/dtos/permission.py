"""DTOs for permission checks and permission management (no dependency on ORM)."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime


@dataclass(frozen=True)
class PermissionResult:
    """Permission read-model (result of get_by_name, create_permission, etc.)."""

    id: str
    name: str
    display_name: str
    description: str | None
    module: str
    resource: str
    action: str
    is_system: bool


@dataclass(frozen=True)
class PermissionSummary:
    """Permission as listed in a user's effective permissions."""

    name: str
    display_name: str
    module: str
    resource: str
    action: str


@dataclass(frozen=True)
class RoleSummary:
    """Role as listed in a user's effective permissions."""

    id: str
    name: str
    display_name: str
    level: int


@dataclass(frozen=True)
class RoleGrant:
    """A role together with the permissions it grants."""

    role: RoleSummary
    is_active: bool
    permissions: tuple[PermissionSummary, ...] = ()

    @property
    def permission_names(self) -> frozenset[str]:
        return frozenset(p.name for p in self.permissions)


@dataclass(frozen=True)
class AssignmentGrant:
    """One user-role assignment row and the role it points at."""

    assignment_id: str
    is_active: bool
    expires_at: datetime | None
    grant: RoleGrant

    def is_effective(self, now: datetime) -> bool:
        """Active, unexpired (expires_at > now) and pointing at an active role."""
        if not self.is_active or not self.grant.is_active:
            return False
        return self.expires_at is None or self.expires_at > now


@dataclass(frozen=True)
class PermissionDecision:
    """Outcome of a permission check. Truthy when granted.

    A denial carries error_code PERMISSION_DENIED, the names that were
    required and, for all-of checks, the names the user lacks.
    """

    granted: bool
    required: tuple[str, ...] = ()
    missing: tuple[str, ...] = ()
    reason: str | None = None
    error_code: str | None = None

    def __bool__(self) -> bool:
        return self.granted

    @classmethod
    def allow(cls, required: tuple[str, ...], reason: str) -> PermissionDecision:
        return cls(granted=True, required=required, reason=reason)

    @classmethod
    def deny(
        cls, required: tuple[str, ...], missing: tuple[str, ...] = ()
    ) -> PermissionDecision:
        return cls(
            granted=False,
            required=required,
            missing=missing,
            error_code="PERMISSION_DENIED",
        )


@dataclass(frozen=True)
class EffectivePermissions:
    """Roles from effective assignments and the union of their permissions."""

    roles: list[RoleSummary] = field(default_factory=list)
    permissions: list[PermissionSummary] = field(default_factory=list)

    @property
    def permission_names(self) -> set[str]:
        return {p.name for p in self.permissions}
