"""Domain value objects: immutable, self-validating values with no identity."""

import math
import re
from dataclasses import dataclass

_PERMISSION_NAME_RE = re.compile(r"^[a-z]+\.[a-z_]+\.[a-z_]+$")
_PERMISSION_PART_RE = re.compile(r"^[a-z_]+$")
_NON_DIGITS_RE = re.compile(r"\D")

# Message unit sizes: 7-bit text vs. text needing a wide (UCS-2) encoding.
SINGLE_BYTE_UNIT_CHARS = 160
WIDE_UNIT_CHARS = 70


@dataclass(frozen=True)
class PermissionName:
    """Dotted permission name module.resource.action (e.g. members.loans.approve).

    Matching is exact and case-sensitive; there are no wildcards.
    """

    value: str

    def __post_init__(self) -> None:
        if not self.value or not _PERMISSION_NAME_RE.match(self.value):
            raise ValueError(
                f"Permission name '{self.value}' must match module.resource.action "
                "(lowercase letters, underscores in resource and action)"
            )

    @classmethod
    def from_parts(cls, module: str, resource: str, action: str) -> "PermissionName":
        for label, part in (("module", module), ("resource", resource), ("action", action)):
            if not part or not _PERMISSION_PART_RE.match(part):
                raise ValueError(f"Permission {label} '{part}' must be lowercase letters or '_'")
        return cls(f"{module}.{resource}.{action}")

    @property
    def module(self) -> str:
        return self.value.split(".")[0]

    @property
    def resource(self) -> str:
        return self.value.split(".")[1]

    @property
    def action(self) -> str:
        return self.value.split(".")[2]

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class PhoneNumber:
    """International MSISDN without '+', as the SMS gateway expects it.

    Normalization: drop every non-digit, replace a leading national trunk
    '0' with the country code, then prefix the country code if it is still
    missing. "0712 345 678" -> "255712345678".
    """

    value: str

    @classmethod
    def normalize(cls, raw: str | None, country_code: str = "255") -> "PhoneNumber | None":
        """Return the normalized number, or None when raw has no digits."""
        if not raw:
            return None
        digits = _NON_DIGITS_RE.sub("", raw)
        if not digits:
            return None
        if digits.startswith("0"):
            digits = country_code + digits[1:]
        if not digits.startswith(country_code):
            digits = country_code + digits
        return cls(digits)

    def __str__(self) -> str:
        return self.value


def requires_wide_encoding(text: str) -> bool:
    """True when any character falls outside 7-bit ASCII."""
    return any(ord(ch) > 0x7F for ch in text)


def calculate_message_units(text: str) -> int:
    """Number of billable units for an outbound text.

    160 characters per unit for pure 7-bit ASCII, 70 as soon as one
    character is outside that range; ceil(len / unit size).
    """
    unit = WIDE_UNIT_CHARS if requires_wide_encoding(text) else SINGLE_BYTE_UNIT_CHARS
    return math.ceil(len(text) / unit)
