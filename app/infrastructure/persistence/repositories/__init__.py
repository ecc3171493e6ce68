"""Persistence repositories. Re-exports for dependency injection."""

from app.infrastructure.persistence.repositories.base import BaseRepository
from app.infrastructure.persistence.repositories.campaign_repo import CampaignRepository
from app.infrastructure.persistence.repositories.contact_group_repo import (
    ContactGroupRepository,
)
from app.infrastructure.persistence.repositories.member_repo import MemberRepository
from app.infrastructure.persistence.repositories.message_repo import MessageRepository
from app.infrastructure.persistence.repositories.permission_repo import (
    PermissionRepository,
)
from app.infrastructure.persistence.repositories.role_permission_repo import (
    RolePermissionRepository,
)
from app.infrastructure.persistence.repositories.role_repo import RoleRepository
from app.infrastructure.persistence.repositories.user_repo import UserRepository
from app.infrastructure.persistence.repositories.user_role_repo import (
    UserRoleRepository,
)

__all__ = [
    "BaseRepository",
    "CampaignRepository",
    "ContactGroupRepository",
    "MemberRepository",
    "MessageRepository",
    "PermissionRepository",
    "RolePermissionRepository",
    "RoleRepository",
    "UserRepository",
    "UserRoleRepository",
]
