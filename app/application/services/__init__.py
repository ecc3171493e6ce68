"""Application services: authorization, campaign dispatch and management, RBAC admin."""

from app.application.services.authorization_service import AuthorizationService
from app.application.services.campaign_dispatcher import (
    CampaignDispatcher,
    CampaignSendLoop,
)
from app.application.services.campaign_service import CampaignService
from app.application.services.contact_group_service import ContactGroupService
from app.application.services.member_service import MemberService
from app.application.services.messaging_service import MessagingService
from app.application.services.pacing import FixedIntervalPacer
from app.application.services.permission_service import PermissionService
from app.application.services.role_service import RoleService
from app.application.services.user_service import UserService

__all__ = [
    "AuthorizationService",
    "CampaignDispatcher",
    "CampaignSendLoop",
    "CampaignService",
    "ContactGroupService",
    "FixedIntervalPacer",
    "MemberService",
    "MessagingService",
    "PermissionService",
    "RoleService",
    "UserService",
]
