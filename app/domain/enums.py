"""Domain enumerations: fixed sets of lifecycle and type values."""

from enum import Enum


class _ValuesMixin:
    """Adds values() to str Enums (validation messages, query filters)."""

    @classmethod
    def values(cls) -> list[str]:
        return [member.value for member in cls]


class UserStatus(_ValuesMixin, str, Enum):
    """Staff account status. Users are never physically deleted."""

    ACTIVE = "active"
    INACTIVE = "inactive"
    SUSPENDED = "suspended"


class MemberStatus(_ValuesMixin, str, Enum):
    """Cooperative member status. Only ACTIVE members receive campaigns."""

    ACTIVE = "active"
    INACTIVE = "inactive"
    SUSPENDED = "suspended"
    DECEASED = "deceased"


class CampaignStatus(_ValuesMixin, str, Enum):
    """Campaign lifecycle.

    draft -> scheduled (approve) -> sending -> completed | failed;
    draft | scheduled -> cancelled.
    """

    DRAFT = "draft"
    SCHEDULED = "scheduled"
    SENDING = "sending"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    FAILED = "failed"


# Statuses from which a campaign may start sending or be cancelled.
DISPATCHABLE_STATUSES = (CampaignStatus.DRAFT, CampaignStatus.SCHEDULED)
# Statuses that keep a contact group from being deleted.
OPEN_CAMPAIGN_STATUSES = (
    CampaignStatus.DRAFT,
    CampaignStatus.SCHEDULED,
    CampaignStatus.SENDING,
)


class CampaignTargetType(_ValuesMixin, str, Enum):
    """Who a campaign is addressed to."""

    ALL_MEMBERS = "all_members"
    SPECIFIC_GROUP = "specific_group"
    CUSTOM_LIST = "custom_list"


class MessageStatus(_ValuesMixin, str, Enum):
    """Outbound message delivery status."""

    PENDING = "pending"
    SENT = "sent"
    DELIVERED = "delivered"
    FAILED = "failed"
    EXPIRED = "expired"


class MessageType(_ValuesMixin, str, Enum):
    """Why a message was sent."""

    OTP = "otp"
    NOTIFICATION = "notification"
    CAMPAIGN = "campaign"
    UNLOCK = "unlock"
    GENERAL = "general"
