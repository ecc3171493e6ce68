"""Persistence models: ORM entities and mixins."""

from app.infrastructure.persistence.models.campaign import Campaign
from app.infrastructure.persistence.models.contact_group import ContactGroup, GroupMember
from app.infrastructure.persistence.models.member import Member
from app.infrastructure.persistence.models.message import Message
from app.infrastructure.persistence.models.mixins import (
    CuidMixin,
    IdentifiedModel,
    TimestampMixin,
)
from app.infrastructure.persistence.models.permission import (
    Permission,
    RolePermission,
    UserRole,
)
from app.infrastructure.persistence.models.role import Role
from app.infrastructure.persistence.models.user import User

__all__ = [
    "Campaign",
    "ContactGroup",
    "GroupMember",
    "Member",
    "Message",
    "Permission",
    "Role",
    "RolePermission",
    "User",
    "UserRole",
    "CuidMixin",
    "IdentifiedModel",
    "TimestampMixin",
]
