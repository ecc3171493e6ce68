"""Seed system permissions and roles, optionally with a super admin user.

Usage:
    python -m scripts.seed_rbac [<admin_email> <admin_password>]

Idempotent: existing permissions, roles and links are left as they are.
Requires Postgres (DATABASE_URL) with migrations applied.
"""

import asyncio
import sys
from typing import TypedDict

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core import constants as c
from app.infrastructure.persistence.database import dispose_engine, session_scope
from app.infrastructure.persistence.models import (
    Permission,
    Role,
    RolePermission,
    User,
)
from app.infrastructure.security import BcryptPasswordHasher


class RoleData(TypedDict):
    """Default role configuration."""

    display_name: str
    description: str
    level: int
    permissions: list[str]


SYSTEM_PERMISSIONS: list[tuple[str, str]] = [
    (c.PERM_CAMPAIGN_READ, "View campaigns"),
    (c.PERM_CAMPAIGN_CREATE, "Create campaigns"),
    (c.PERM_CAMPAIGN_UPDATE, "Edit draft campaigns"),
    (c.PERM_CAMPAIGN_APPROVE, "Approve campaigns"),
    (c.PERM_CAMPAIGN_SEND, "Send campaigns"),
    (c.PERM_CAMPAIGN_CANCEL, "Cancel campaigns"),
    (c.PERM_GROUP_READ, "View contact groups"),
    (c.PERM_GROUP_MANAGE, "Manage contact groups"),
    (c.PERM_SMS_READ, "View SMS history and balance"),
    (c.PERM_SMS_SEND, "Send single SMS"),
    (c.PERM_MEMBER_READ, "View members"),
    (c.PERM_MEMBER_CREATE, "Register members"),
    (c.PERM_USER_READ, "View users"),
    (c.PERM_USER_MANAGE, "Manage users"),
    (c.PERM_ROLE_READ, "View roles"),
    (c.PERM_ROLE_MANAGE, "Manage roles"),
    (c.PERM_ROLE_ASSIGN, "Assign roles to users"),
    (c.PERM_PERMISSION_READ, "View permissions"),
    (c.PERM_PERMISSION_MANAGE, "Manage permissions"),
]

_COMMUNICATIONS_READ = [
    c.PERM_CAMPAIGN_READ,
    c.PERM_GROUP_READ,
    c.PERM_SMS_READ,
    c.PERM_MEMBER_READ,
]

DEFAULT_ROLES: dict[str, RoleData] = {
    "admin": {
        "display_name": "Administrator",
        "description": "Full access to back-office administration",
        "level": 9,
        "permissions": [name for name, _ in SYSTEM_PERMISSIONS],
    },
    "manager": {
        "display_name": "Manager",
        "description": "Approves and sends campaigns",
        "level": 7,
        "permissions": _COMMUNICATIONS_READ
        + [
            c.PERM_CAMPAIGN_APPROVE,
            c.PERM_CAMPAIGN_SEND,
            c.PERM_CAMPAIGN_CANCEL,
            c.PERM_USER_READ,
            c.PERM_ROLE_READ,
        ],
    },
    "marketing_officer": {
        "display_name": "Marketing Officer",
        "description": "Drafts campaigns and manages contact groups",
        "level": 5,
        "permissions": _COMMUNICATIONS_READ
        + [
            c.PERM_CAMPAIGN_CREATE,
            c.PERM_CAMPAIGN_UPDATE,
            c.PERM_GROUP_MANAGE,
            c.PERM_SMS_SEND,
        ],
    },
    "clerk": {
        "display_name": "Clerk",
        "description": "Registers and looks up members",
        "level": 1,
        "permissions": [c.PERM_MEMBER_READ, c.PERM_MEMBER_CREATE],
    },
}


async def _seed_permissions(session: AsyncSession) -> dict[str, str]:
    existing = {
        p.name: p.id for p in (await session.execute(select(Permission))).scalars()
    }
    for name, display_name in SYSTEM_PERMISSIONS:
        if name in existing:
            continue
        module, resource, action = name.split(".")
        perm = Permission(
            name=name,
            display_name=display_name,
            module=module,
            resource=resource,
            action=action,
            is_system=True,
        )
        session.add(perm)
        await session.flush()
        existing[name] = perm.id
    return existing


async def _seed_roles(session: AsyncSession, permission_ids: dict[str, str]) -> None:
    for role_name, data in DEFAULT_ROLES.items():
        role = (
            await session.execute(select(Role).where(Role.name == role_name))
        ).scalar_one_or_none()
        if role is None:
            role = Role(
                name=role_name,
                display_name=data["display_name"],
                description=data["description"],
                level=data["level"],
                is_system=True,
                is_active=True,
            )
            session.add(role)
            await session.flush()
        linked = set(
            (
                await session.execute(
                    select(RolePermission.permission_id).where(
                        RolePermission.role_id == role.id
                    )
                )
            ).scalars()
        )
        for perm_name in data["permissions"]:
            perm_id = permission_ids[perm_name]
            if perm_id not in linked:
                session.add(RolePermission(role_id=role.id, permission_id=perm_id))
        await session.flush()


async def _seed_super_admin(session: AsyncSession, email: str, password: str) -> None:
    email = email.strip().lower()
    found = (await session.execute(select(User).where(User.email == email))).scalar_one_or_none()
    if found is not None:
        found.is_super_admin = True
        print(f"Marked existing user {email} as super admin")
        return
    session.add(
        User(
            email=email,
            first_name="Super",
            last_name="Admin",
            role="admin",
            is_super_admin=True,
            hashed_password=BcryptPasswordHasher().hash_password(password),
        )
    )
    print(f"Created super admin {email}")


async def main() -> None:
    """Seed permissions and roles; create the super admin when credentials are given."""
    args = sys.argv[1:]
    if len(args) not in (0, 2):
        print(
            "Usage: python -m scripts.seed_rbac [<admin_email> <admin_password>]",
            file=sys.stderr,
        )
        sys.exit(1)
    try:
        async with session_scope() as session:
            permission_ids = await _seed_permissions(session)
            await _seed_roles(session, permission_ids)
            if args:
                await _seed_super_admin(session, args[0], args[1])
            await session.commit()
    finally:
        await dispose_engine()
    print(
        f"Seeded {len(SYSTEM_PERMISSIONS)} permissions and {len(DEFAULT_ROLES)} roles"
    )


if __name__ == "__main__":
    asyncio.run(main())
