"""Domain layer: enums, value objects and exceptions.

No dependencies on infrastructure or presentation.
"""

from app.domain.enums import (
    CampaignStatus,
    CampaignTargetType,
    MemberStatus,
    MessageStatus,
    MessageType,
    UserStatus,
)
from app.domain.exceptions import (
    AuthenticationException,
    AuthorizationException,
    DuplicateAssignmentException,
    InvalidStateException,
    NoRecipientsException,
    ResourceInUseException,
    ResourceNotFoundException,
    SaccoException,
    ValidationException,
)
from app.domain.value_objects import PermissionName, PhoneNumber, calculate_message_units

__all__ = [
    "CampaignStatus",
    "CampaignTargetType",
    "MemberStatus",
    "MessageStatus",
    "MessageType",
    "UserStatus",
    "AuthenticationException",
    "AuthorizationException",
    "DuplicateAssignmentException",
    "InvalidStateException",
    "NoRecipientsException",
    "ResourceInUseException",
    "ResourceNotFoundException",
    "SaccoException",
    "ValidationException",
    "PermissionName",
    "PhoneNumber",
    "calculate_message_units",
]
