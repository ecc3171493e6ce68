"""Service interfaces (ports) for the application layer.

Protocols define contracts for outbound services (DIP).
"""

from __future__ import annotations

from collections.abc import Coroutine
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    import asyncio

    from app.application.dtos.message import (
        BalanceResult,
        DeliveryStatusResult,
        SendResult,
    )


class ISmsTransport(Protocol):
    """Sends one SMS. Failures come back as SendResult(success=False)."""

    async def send(self, phone_number: str, message: str) -> SendResult: ...

    async def check_balance(self) -> BalanceResult: ...

    async def check_delivery_status(self, tracking_id: str) -> DeliveryStatusResult: ...


class IPacer(Protocol):
    """Spaces consecutive sends by at least a fixed interval."""

    async def wait(self) -> None: ...


class IDispatchLauncher(Protocol):
    """Runs a campaign dispatch coroutine in the background and keeps its handle."""

    def start(
        self, campaign_id: str, coro: Coroutine[Any, Any, Any]
    ) -> asyncio.Task[Any]: ...

    def is_running(self, campaign_id: str) -> bool: ...


class IPasswordHasher(Protocol):
    """Hashes and verifies login passwords."""

    def hash_password(self, password: str) -> str: ...

    def verify_password(self, password: str, hashed_password: str) -> bool: ...
