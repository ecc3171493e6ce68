"""Authorization service: effective-permission checks over an IPermissionStore.

A user's permissions come from three places: the super-admin flag (grants
everything), the legacy primary role named on the user row, and explicit
role assignments that are active and unexpired. Nothing is cached; every
check reads the store again.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from datetime import datetime

from app.application.dtos.permission import (
    AssignmentGrant,
    EffectivePermissions,
    PermissionDecision,
    PermissionSummary,
    RoleSummary,
)
from app.application.dtos.user import UserAccess
from app.application.interfaces.repositories import IPermissionStore
from app.domain.exceptions import ResourceNotFoundException
from app.shared.telemetry.tracing import add_span_attributes, traced
from app.shared.utils.datetime import utc_now

logger = logging.getLogger(__name__)


class AuthorizationService:
    """Answers has/any/all permission questions and lists effective permissions."""

    def __init__(
        self,
        permission_store: IPermissionStore,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.permission_store = permission_store
        self._clock = clock

    async def _get_user(self, user_id: str) -> UserAccess:
        user = await self.permission_store.get_user_access(user_id)
        if user is None:
            raise ResourceNotFoundException("user", user_id)
        return user

    async def _primary_role_permissions(self, user: UserAccess) -> frozenset[str]:
        """Permission names of the user's primary role; empty if missing or inactive."""
        grant = await self.permission_store.get_role_grant_by_name(user.role)
        if grant is None or not grant.is_active:
            return frozenset()
        return grant.permission_names

    async def _effective_assignments(self, user_id: str) -> list[AssignmentGrant]:
        now = self._clock()
        grants = await self.permission_store.list_assignment_grants(user_id)
        return [g for g in grants if g.is_effective(now)]

    async def _assigned_permission_names(self, user_id: str) -> set[str]:
        names: set[str] = set()
        for assignment in await self._effective_assignments(user_id):
            names |= assignment.grant.permission_names
        return names

    @traced("authorization.has_permission")
    async def has_permission(
        self, *, user_id: str, permission_name: str
    ) -> PermissionDecision:
        """Single-permission check (primary role, then assignments)."""
        return await self.has_any_permission(
            user_id=user_id, permission_names=[permission_name]
        )

    @traced("authorization.has_any_permission")
    async def has_any_permission(
        self, *, user_id: str, permission_names: Sequence[str]
    ) -> PermissionDecision:
        """Granted when the user holds at least one of permission_names.

        Raises:
            ResourceNotFoundException: If the user does not exist.
        """
        required = tuple(permission_names)
        user = await self._get_user(user_id)
        if user.is_super_admin:
            add_span_attributes(granted_by="super_admin")
            return PermissionDecision.allow(required, "super_admin")

        primary = await self._primary_role_permissions(user)
        if any(name in primary for name in required):
            add_span_attributes(granted_by="primary_role")
            return PermissionDecision.allow(required, "primary_role")

        assigned = await self._assigned_permission_names(user_id)
        if any(name in assigned for name in required):
            add_span_attributes(granted_by="assignment")
            return PermissionDecision.allow(required, "assignment")

        logger.debug("Permission denied: user=%s required=%s", user_id, required)
        return PermissionDecision.deny(required)

    @traced("authorization.has_all_permissions")
    async def has_all_permissions(
        self, *, user_id: str, permission_names: Sequence[str]
    ) -> PermissionDecision:
        """Granted when explicit assignments cover every name.

        The primary role is not consulted here, unlike has_any_permission.
        The denial lists the missing names.

        Raises:
            ResourceNotFoundException: If the user does not exist.
        """
        required = tuple(permission_names)
        user = await self._get_user(user_id)
        if user.is_super_admin:
            return PermissionDecision.allow(required, "super_admin")

        assigned = await self._assigned_permission_names(user_id)
        missing = tuple(name for name in required if name not in assigned)
        if missing:
            logger.debug("Permission denied: user=%s missing=%s", user_id, missing)
            return PermissionDecision.deny(required, missing)
        return PermissionDecision.allow(required, "assignment")

    @traced("authorization.get_effective_permissions")
    async def get_effective_permissions(self, *, user_id: str) -> EffectivePermissions:
        """Roles and permissions from active, unexpired assignments.

        Roles keep assignment order; permissions are deduplicated by name,
        first occurrence wins, sorted by name.

        Raises:
            ResourceNotFoundException: If the user does not exist.
        """
        await self._get_user(user_id)
        roles: dict[str, RoleSummary] = {}
        permissions: dict[str, PermissionSummary] = {}
        for assignment in await self._effective_assignments(user_id):
            role = assignment.grant.role
            roles.setdefault(role.id, role)
            for permission in assignment.grant.permissions:
                permissions.setdefault(permission.name, permission)
        return EffectivePermissions(
            roles=list(roles.values()),
            permissions=sorted(permissions.values(), key=lambda p: p.name),
        )
