"""Pydantic request/response schemas for the HTTP API."""

from app.schemas.auth import LoginRequest, TokenResponse
from app.schemas.campaign import (
    CampaignCreateRequest,
    CampaignDetailResponse,
    CampaignResponse,
    CampaignUpdateRequest,
    DispatchStartedResponse,
)
from app.schemas.common import ApiResponse, Page, ok
from app.schemas.contact_group import (
    AddMembersRequest,
    AddMembersResponse,
    ContactGroupCreate,
    ContactGroupDetailResponse,
    ContactGroupResponse,
    ContactGroupUpdate,
    RemoveMemberResponse,
)
from app.schemas.health import (
    HealthResponse,
    ReadinessErrorResponse,
    ReadinessResponse,
)
from app.schemas.member import MemberCreate, MemberResponse
from app.schemas.message import (
    BalanceResponse,
    DeliveryStatusResponse,
    MessageResponse,
    MessageStatsBucketResponse,
    MessageStatsResponse,
    SendMessageRequest,
)
from app.schemas.permission import (
    EffectivePermissionsResponse,
    PermissionCheckResponse,
    PermissionCreate,
    PermissionResponse,
    PermissionSummaryResponse,
    RoleSummaryResponse,
)
from app.schemas.role import (
    RoleCreateRequest,
    RoleDetailResponse,
    RolePermissionAssign,
    RoleResponse,
    RoleUpdate,
    UserRoleAssignRequest,
    UserRoleResponse,
)
from app.schemas.user import PrimaryRoleUpdate, UserCreateRequest, UserResponse

__all__ = [
    "AddMembersRequest",
    "AddMembersResponse",
    "ApiResponse",
    "BalanceResponse",
    "CampaignCreateRequest",
    "CampaignDetailResponse",
    "CampaignResponse",
    "CampaignUpdateRequest",
    "ContactGroupCreate",
    "ContactGroupDetailResponse",
    "ContactGroupResponse",
    "ContactGroupUpdate",
    "DeliveryStatusResponse",
    "DispatchStartedResponse",
    "EffectivePermissionsResponse",
    "HealthResponse",
    "LoginRequest",
    "MemberCreate",
    "MemberResponse",
    "MessageResponse",
    "MessageStatsBucketResponse",
    "MessageStatsResponse",
    "Page",
    "PermissionCheckResponse",
    "PermissionCreate",
    "PermissionResponse",
    "PermissionSummaryResponse",
    "PrimaryRoleUpdate",
    "ReadinessErrorResponse",
    "ReadinessResponse",
    "RemoveMemberResponse",
    "RoleCreateRequest",
    "RoleDetailResponse",
    "RolePermissionAssign",
    "RoleResponse",
    "RoleSummaryResponse",
    "RoleUpdate",
    "SendMessageRequest",
    "UserCreateRequest",
    "UserResponse",
    "UserRoleAssignRequest",
    "UserRoleResponse",
    "ok",
]
