"""Unit tests for the default permission and role tables used by the seed script."""

import pytest

from app.core import constants
from app.domain.value_objects import PermissionName
from scripts.seed_rbac import DEFAULT_ROLES, SYSTEM_PERMISSIONS

SEEDED = {name for name, _ in SYSTEM_PERMISSIONS}


def test_every_route_permission_is_seeded() -> None:
    route_permissions = {
        value for key, value in vars(constants).items() if key.startswith("PERM_")
    }
    assert route_permissions == SEEDED


@pytest.mark.parametrize("name", sorted(SEEDED))
def test_seeded_names_are_well_formed(name: str) -> None:
    assert PermissionName(name).value == name


def test_roles_only_reference_seeded_permissions() -> None:
    for role, data in DEFAULT_ROLES.items():
        unknown = set(data["permissions"]) - SEEDED
        assert not unknown, f"{role} references {unknown}"


def test_admin_gets_everything_and_clerk_cannot_send() -> None:
    assert set(DEFAULT_ROLES["admin"]["permissions"]) == SEEDED
    assert constants.PERM_CAMPAIGN_SEND not in DEFAULT_ROLES["clerk"]["permissions"]
    assert constants.PERM_SMS_SEND not in DEFAULT_ROLES["clerk"]["permissions"]


def test_levels_within_range() -> None:
    assert all(1 <= data["level"] <= 10 for data in DEFAULT_ROLES.values())
