"""Application DTOs (no ORM dependency)."""

from app.application.dtos.campaign import (
    CampaignCreate,
    CampaignDetail,
    CampaignResult,
    DispatchOutcome,
    DispatchStarted,
    Recipient,
)
from app.application.dtos.contact_group import (
    AddMembersOutcome,
    ContactGroupDetail,
    ContactGroupResult,
)
from app.application.dtos.member import MemberResult
from app.application.dtos.message import (
    BalanceResult,
    DeliveryStatusResult,
    MessageCreate,
    MessageResult,
    MessageStats,
    MessageStatsBucket,
    SendResult,
)
from app.application.dtos.permission import (
    AssignmentGrant,
    EffectivePermissions,
    PermissionDecision,
    PermissionResult,
    PermissionSummary,
    RoleGrant,
    RoleSummary,
)
from app.application.dtos.role import RoleDetail, RoleResult, UserRoleResult
from app.application.dtos.user import UserAccess, UserResult

__all__ = [
    "AddMembersOutcome",
    "AssignmentGrant",
    "BalanceResult",
    "CampaignCreate",
    "CampaignDetail",
    "CampaignResult",
    "ContactGroupDetail",
    "ContactGroupResult",
    "DeliveryStatusResult",
    "DispatchOutcome",
    "DispatchStarted",
    "EffectivePermissions",
    "MemberResult",
    "MessageCreate",
    "MessageResult",
    "MessageStats",
    "MessageStatsBucket",
    "PermissionDecision",
    "PermissionResult",
    "PermissionSummary",
    "Recipient",
    "RoleDetail",
    "RoleGrant",
    "RoleResult",
    "RoleSummary",
    "SendResult",
    "UserAccess",
    "UserResult",
    "UserRoleResult",
]
