"""API v1 router aggregation.

Includes all endpoint modules with consistent prefix and tags. All routes
use dependencies from app.api.v1.dependencies (no manual repo/service construction).
"""

from fastapi import APIRouter

from app.api.v1.endpoints import (
    auth,
    campaigns,
    contact_groups,
    health,
    members,
    messages,
    permissions,
    roles,
    users,
)

api_router = APIRouter()

api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(users.router, prefix="/users", tags=["users"])
api_router.include_router(roles.router, prefix="/roles", tags=["roles"])
api_router.include_router(permissions.router, prefix="/permissions", tags=["permissions"])
api_router.include_router(members.router, prefix="/members", tags=["members"])
api_router.include_router(
    contact_groups.router, prefix="/contact-groups", tags=["contact-groups"]
)
api_router.include_router(campaigns.router, prefix="/campaigns", tags=["campaigns"])
api_router.include_router(messages.router, prefix="/messages", tags=["messages"])
api_router.include_router(messages.sms_router, prefix="/sms", tags=["messages"])
