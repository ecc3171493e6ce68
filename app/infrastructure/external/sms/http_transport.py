"""HTTP SMS gateway client (Kilakona vendor API) over httpx.

Implements ISmsTransport. Every failure, including network errors, comes
back as a result object with success=False; nothing here raises to the
caller.
"""

import logging
from contextlib import asynccontextmanager
from typing import Any

import httpx

from app.application.dtos.message import (
    BalanceResult,
    DeliveryStatusResult,
    SendResult,
)
from app.domain.value_objects import PhoneNumber, calculate_message_units
from app.shared.telemetry.tracing import traced

logger = logging.getLogger(__name__)

NOT_CONFIGURED = "SMS service not configured"


def _is_ok(body: Any) -> bool:
    """Gateway success: success == true and code == 200 in the JSON body."""
    return isinstance(body, dict) and body.get("success") is True and body.get("code") == 200


def _data(body: Any) -> dict[str, Any]:
    """The body's data object; anything else (string, list, missing) reads as empty."""
    data = body.get("data") if isinstance(body, dict) else None
    return data if isinstance(data, dict) else {}


def _error_message(body: Any, default: str) -> str:
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return default


class HttpSmsTransport:
    """Sends SMS through the vendor HTTP API."""

    def __init__(
        self,
        *,
        api_key: str | None,
        api_secret: str | None,
        sender_id: str,
        base_url: str,
        country_code: str = "255",
        timeout_seconds: float = 15.0,
        delivery_report_url: str = "",
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self._api_key = api_key
        self._api_secret = api_secret
        self.sender_id = sender_id
        self.base_url = base_url.rstrip("/")
        self.country_code = country_code
        self.timeout_seconds = timeout_seconds
        self.delivery_report_url = delivery_report_url
        self._shared_http = http_client

    @property
    def is_configured(self) -> bool:
        return bool(self._api_key and self._api_secret)

    @asynccontextmanager
    async def _http_cm(self):
        """Yield shared HTTP client or a short-lived one (connection reuse when shared)."""
        if self._shared_http is not None:
            yield self._shared_http
            return
        async with httpx.AsyncClient() as client:
            yield client

    def _headers(self) -> dict[str, str]:
        return {
            "Content-Type": "application/json",
            "api_key": self._api_key or "",
            "api_secret": self._api_secret or "",
        }

    async def _request(self, method: str, path: str, **kwargs: Any) -> tuple[int, Any]:
        """Perform one call; returns (status_code, parsed JSON or None).

        4xx bodies are returned for inspection; 5xx raises httpx.HTTPStatusError.
        """
        async with self._http_cm() as client:
            response = await client.request(
                method,
                f"{self.base_url}{path}",
                headers=self._headers(),
                timeout=self.timeout_seconds,
                **kwargs,
            )
        if response.status_code >= 500:
            response.raise_for_status()
        try:
            body = response.json()
        except ValueError:
            body = None
        return response.status_code, body

    @traced("sms.send")
    async def send(self, phone_number: str, message: str) -> SendResult:
        units = calculate_message_units(message)
        if not self.is_configured:
            return SendResult.failed(NOT_CONFIGURED, units)
        phone = PhoneNumber.normalize(phone_number, self.country_code)
        if phone is None:
            return SendResult.failed("Invalid phone number", units)
        payload = {
            "senderId": self.sender_id,
            "messageType": "text",
            "message": message,
            "contacts": phone.value,
            "deliveryReportUrl": self.delivery_report_url,
        }
        try:
            status_code, body = await self._request("POST", "/send", json=payload)
        except httpx.HTTPError as e:
            logger.warning("SMS send to %s failed: %s", phone.value, e)
            return SendResult.failed(str(e) or e.__class__.__name__, units)
        except Exception as e:
            logger.exception("Unexpected SMS transport error for %s", phone.value)
            return SendResult.failed(str(e) or e.__class__.__name__, units)
        if not _is_ok(body):
            error = _error_message(body, f"Unknown API error (HTTP {status_code})")
            logger.warning("SMS gateway rejected message to %s: %s", phone.value, error)
            return SendResult.failed(error, units)
        shoot_id = _data(body).get("shootId")
        return SendResult(
            success=True,
            tracking_id=str(shoot_id) if shoot_id is not None else None,
            units=units,
        )

    async def check_balance(self) -> BalanceResult:
        if not self.is_configured:
            return BalanceResult(success=False, balance=0, error=NOT_CONFIGURED)
        try:
            _, body = await self._request("GET", "/balance")
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.warning("SMS balance check failed: %s", e)
            return BalanceResult(success=False, balance=0, error=str(e))
        if not _is_ok(body):
            return BalanceResult(
                success=False, balance=0, error=_error_message(body, "Failed to check balance")
            )
        total = _data(body).get("totalSms")
        try:
            balance = int(total) if total is not None else 0
        except (TypeError, ValueError):
            logger.warning("SMS gateway returned a non-numeric balance: %r", total)
            return BalanceResult(success=False, balance=0, error="Invalid balance in response")
        return BalanceResult(success=True, balance=balance)

    async def check_delivery_status(self, tracking_id: str) -> DeliveryStatusResult:
        if not self.is_configured:
            return DeliveryStatusResult(
                success=False, tracking_id=tracking_id, error=NOT_CONFIGURED
            )
        try:
            _, body = await self._request("GET", f"/deliver/{tracking_id}")
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.warning("SMS delivery check for %s failed: %s", tracking_id, e)
            return DeliveryStatusResult(success=False, tracking_id=tracking_id, error=str(e))
        if not _is_ok(body):
            return DeliveryStatusResult(
                success=False,
                tracking_id=tracking_id,
                error=_error_message(body, "Failed to check delivery status"),
            )
        data = body.get("data")
        return DeliveryStatusResult(
            success=True,
            tracking_id=tracking_id,
            data=data if isinstance(data, dict) else {"result": data},
        )
