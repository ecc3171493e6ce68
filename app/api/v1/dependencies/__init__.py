"""API v1 dependencies (composition root).

Routes import from here; services and repositories are built only in
these modules.
"""

from .auth import (
    get_authorization_service,
    get_current_user,
    get_current_user_optional,
    get_password_hasher,
    require_all_permissions,
    require_any_permission,
    require_permission,
)
from .messaging import (
    get_campaign_dispatcher,
    get_campaign_service,
    get_campaign_service_for_write,
    get_contact_group_service,
    get_contact_group_service_for_write,
    get_dispatch_registry,
    get_dispatch_runner,
    get_member_service,
    get_member_service_for_write,
    get_messaging_service,
    get_messaging_service_for_write,
    get_sms_transport,
)
from .user_rbac import (
    get_permission_service,
    get_permission_service_for_write,
    get_role_service,
    get_role_service_for_write,
    get_user_service,
    get_user_service_for_write,
)

__all__ = [
    "get_authorization_service",
    "get_campaign_dispatcher",
    "get_campaign_service",
    "get_campaign_service_for_write",
    "get_contact_group_service",
    "get_contact_group_service_for_write",
    "get_current_user",
    "get_current_user_optional",
    "get_dispatch_registry",
    "get_dispatch_runner",
    "get_member_service",
    "get_member_service_for_write",
    "get_messaging_service",
    "get_messaging_service_for_write",
    "get_password_hasher",
    "get_permission_service",
    "get_permission_service_for_write",
    "get_role_service",
    "get_role_service_for_write",
    "get_sms_transport",
    "get_user_service",
    "get_user_service_for_write",
    "require_all_permissions",
    "require_any_permission",
    "require_permission",
]
