"""Domain value objects."""

from app.domain.value_objects.core import (
    PermissionName,
    PhoneNumber,
    calculate_message_units,
    requires_wide_encoding,
)

__all__ = [
    "PermissionName",
    "PhoneNumber",
    "calculate_message_units",
    "requires_wide_encoding",
]
