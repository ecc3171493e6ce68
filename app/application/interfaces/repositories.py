"""Repository interfaces (ports) for the application layer.

Protocols define contracts that infrastructure implementations must fulfill (DIP).
All types reference application DTOs only; no infrastructure imports.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from app.application.dtos.campaign import (
        CampaignCreate,
        CampaignResult,
        Recipient,
    )
    from app.application.dtos.contact_group import ContactGroupResult
    from app.application.dtos.member import MemberResult
    from app.application.dtos.message import (
        MessageCreate,
        MessageResult,
        MessageStatsBucket,
    )
    from app.application.dtos.permission import (
        AssignmentGrant,
        PermissionResult,
        PermissionSummary,
        RoleGrant,
    )
    from app.application.dtos.role import RoleResult, UserRoleResult
    from app.application.dtos.user import UserAccess, UserResult


class IUnitOfWork(Protocol):
    """Commit/rollback boundary. AsyncSession satisfies this structurally."""

    async def commit(self) -> None: ...

    async def rollback(self) -> None: ...


# Permission store (read side of RBAC)
class IPermissionStore(Protocol):
    """Read access to users, roles and assignments for permission checks."""

    async def get_user_access(self, user_id: str) -> UserAccess | None:
        """Return the user's primary role name and super-admin flag, or None."""

    async def get_role_grant_by_name(self, role_name: str) -> RoleGrant | None:
        """Return the role with this name and its permissions, or None."""

    async def list_assignment_grants(self, user_id: str) -> list[AssignmentGrant]:
        """Return every assignment row of the user (active or not) with its role grant."""


class IUserRepository(Protocol):
    """Protocol for user repository (DIP)."""

    async def get_user(self, user_id: str) -> UserResult | None: ...

    async def get_by_email(self, email: str) -> Any: ...

    async def create_user(
        self,
        *,
        email: str,
        first_name: str,
        last_name: str,
        hashed_password: str,
        role: str,
        phone_number: str | None = None,
        department: str | None = None,
        is_super_admin: bool = False,
    ) -> UserResult: ...

    async def list_users(
        self, skip: int = 0, limit: int = 100, status: str | None = None
    ) -> list[UserResult]: ...

    async def set_primary_role(self, user_id: str, role_name: str) -> UserResult | None: ...

    async def record_login(self, user_id: str, at: datetime) -> None: ...


class IRoleRepository(Protocol):
    """Protocol for role repository (DIP)."""

    async def get_role(self, role_id: str) -> RoleResult | None: ...

    async def get_by_name(self, name: str) -> RoleResult | None: ...

    async def list_roles(self, *, include_inactive: bool = False) -> list[RoleResult]: ...

    async def create_role(
        self,
        *,
        name: str,
        display_name: str,
        description: str | None = None,
        level: int = 1,
        is_system: bool = False,
    ) -> RoleResult: ...

    async def update_role(self, role_id: str, **values: Any) -> RoleResult | None: ...

    async def delete_role(self, role_id: str) -> bool: ...


class IPermissionRepository(Protocol):
    """Protocol for permission repository (DIP)."""

    async def get_permission(self, permission_id: str) -> PermissionResult | None: ...

    async def get_by_name(self, name: str) -> PermissionResult | None: ...

    async def list_permissions(
        self, module: str | None = None
    ) -> list[PermissionResult]: ...

    async def list_for_role(self, role_id: str) -> list[PermissionSummary]: ...

    async def create_permission(
        self,
        *,
        name: str,
        display_name: str,
        module: str,
        resource: str,
        action: str,
        description: str | None = None,
        is_system: bool = False,
    ) -> PermissionResult: ...

    async def delete_permission(self, permission_id: str) -> bool: ...

    async def count_role_references(self, permission_id: str) -> int: ...


class IRolePermissionRepository(Protocol):
    """Protocol for role-permission links (DIP)."""

    async def assign_permission_to_role(self, role_id: str, permission_id: str) -> None:
        """Raises DuplicateAssignmentException if the link exists."""

    async def remove_permission_from_role(
        self, role_id: str, permission_id: str
    ) -> bool: ...


class IUserRoleRepository(Protocol):
    """Protocol for user-role assignments (DIP)."""

    async def get_active_assignment(
        self, user_id: str, role_id: str
    ) -> UserRoleResult | None: ...

    async def assign_role(
        self,
        *,
        user_id: str,
        role_id: str,
        assigned_by: str | None,
        expires_at: datetime | None = None,
    ) -> UserRoleResult: ...

    async def deactivate_assignment(self, user_id: str, role_id: str) -> bool: ...

    async def list_for_user(
        self, user_id: str, *, include_inactive: bool = False
    ) -> list[UserRoleResult]: ...

    async def count_active_for_role(self, role_id: str) -> int: ...


class IMemberRepository(Protocol):
    """Protocol for member repository (DIP)."""

    async def get_member(self, member_id: str) -> MemberResult | None: ...

    async def get_by_member_number(self, member_number: str) -> MemberResult | None: ...

    async def create_member(
        self,
        *,
        member_number: str,
        full_name: str,
        phone_number: str | None = None,
        email: str | None = None,
        status: str = "active",
    ) -> MemberResult: ...

    async def list_members(
        self, status: str | None = None, skip: int = 0, limit: int = 50
    ) -> tuple[list[MemberResult], int]: ...

    async def find_existing_ids(self, member_ids: Sequence[str]) -> set[str]: ...


class IRecipientDirectory(Protocol):
    """Resolves campaign audiences to reachable members in (created_at, id) order."""

    async def list_reachable_members(self) -> list[Recipient]:
        """Active members with a phone number."""

    async def list_reachable_group_members(self, group_id: str) -> list[Recipient]:
        """Active members with a phone number and an active link to the group."""


class IContactGroupRepository(Protocol):
    """Protocol for contact group repository (DIP)."""

    async def get_group(self, group_id: str) -> ContactGroupResult | None: ...

    async def list_groups(
        self, *, include_inactive: bool = False
    ) -> list[ContactGroupResult]: ...

    async def create_group(
        self,
        *,
        name: str,
        description: str | None,
        color: str,
        created_by_id: str | None,
    ) -> ContactGroupResult: ...

    async def update_group(
        self, group_id: str, **values: Any
    ) -> ContactGroupResult | None: ...

    async def list_active_members(self, group_id: str) -> list[MemberResult]: ...

    async def upsert_links(
        self, group_id: str, member_ids: Sequence[str], added_by_id: str | None
    ) -> tuple[int, int, int]:
        """Create or reactivate links. Returns (added, reactivated, already_present)."""

    async def deactivate_link(self, group_id: str, member_id: str) -> bool: ...

    async def recount_members(self, group_id: str) -> int:
        """Recompute member_count from active links and store it."""

    async def touch_last_used(self, group_id: str, at: datetime) -> None: ...

    async def delete_group(self, group_id: str) -> None:
        """Hard delete: links then group."""


class ICampaignRepository(Protocol):
    """Protocol for campaign repository (DIP)."""

    async def get_campaign(self, campaign_id: str) -> CampaignResult | None: ...

    async def create_campaign(
        self, data: CampaignCreate, created_by_id: str | None
    ) -> CampaignResult: ...

    async def list_campaigns(
        self,
        *,
        status: str | None = None,
        target_type: str | None = None,
        skip: int = 0,
        limit: int = 20,
    ) -> tuple[list[CampaignResult], int]: ...

    async def update_if_status(
        self, campaign_id: str, expected: Sequence[str], **values: Any
    ) -> bool:
        """Apply values only while status is one of expected (compare-and-swap).

        Returns False when no row matched.
        """

    async def count_open_for_group(self, group_id: str) -> int:
        """Count draft, scheduled or sending campaigns targeting the group."""


class IMessageRepository(Protocol):
    """Protocol for message repository (DIP)."""

    async def create_pending(self, data: MessageCreate) -> MessageResult: ...

    async def mark_sent(
        self, message_id: str, tracking_id: str | None, sent_at: datetime
    ) -> None: ...

    async def mark_failed(
        self, message_id: str, error_message: str, failed_at: datetime
    ) -> None: ...

    async def get_message(self, message_id: str) -> MessageResult | None: ...

    async def list_messages(
        self,
        *,
        campaign_id: str | None = None,
        status: str | None = None,
        message_type: str | None = None,
        phone: str | None = None,
        skip: int = 0,
        limit: int = 50,
    ) -> tuple[list[MessageResult], int]: ...

    async def list_recent_for_campaign(
        self, campaign_id: str, limit: int
    ) -> list[MessageResult]: ...

    async def get_message_stats(
        self, *, start: datetime | None = None, end: datetime | None = None
    ) -> list[MessageStatsBucket]: ...
