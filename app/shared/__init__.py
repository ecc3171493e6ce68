"""Shared helpers used across layers: UTC time, ID generation, telemetry.

No business logic lives here.
"""

from app.shared.utils import ensure_utc, generate_cuid, utc_now

__all__ = ["ensure_utc", "generate_cuid", "utc_now"]
