"""Unit tests for HttpSmsTransport against httpx.MockTransport."""

import json

import httpx
import pytest

from app.infrastructure.external.sms import HttpSmsTransport

BASE_URL = "https://sms.example.test/api/v1/vendor/message"


def _transport(handler, **overrides) -> HttpSmsTransport:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    values = {
        "api_key": "key",
        "api_secret": "secret",
        "sender_id": "SACCO",
        "base_url": BASE_URL,
        "http_client": client,
    }
    values.update(overrides)
    return HttpSmsTransport(**values)


class TestSend:
    async def test_success_returns_shoot_id(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(
                200, json={"success": True, "code": 200, "data": {"shootId": 4711}}
            )

        result = await _transport(handler).send("0712 345 678", "Hello")

        assert result.success
        assert result.tracking_id == "4711"
        assert result.units == 1
        request = seen[0]
        assert request.url == f"{BASE_URL}/send"
        assert request.headers["api_key"] == "key"
        assert request.headers["api_secret"] == "secret"
        body = json.loads(request.content)
        assert body == {
            "senderId": "SACCO",
            "messageType": "text",
            "message": "Hello",
            "contacts": "255712345678",
            "deliveryReportUrl": "",
        }

    async def test_body_code_other_than_200_is_failure(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(
                200, json={"success": True, "code": 401, "message": "Bad credentials"}
            )

        result = await _transport(handler).send("255712345678", "Hello")
        assert not result.success
        assert result.error == "Bad credentials"

    async def test_client_error_without_message(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(400, json={"success": False})

        result = await _transport(handler).send("255712345678", "Hello")
        assert not result.success
        assert "HTTP 400" in (result.error or "")

    async def test_server_error_is_a_value(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(503, text="unavailable")

        result = await _transport(handler).send("255712345678", "Hello")
        assert not result.success
        assert result.error

    async def test_network_error_is_a_value(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        result = await _transport(handler).send("255712345678", "Hello")
        assert not result.success
        assert "connection refused" in (result.error or "")

    async def test_not_configured_makes_no_call(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            pytest.fail("no HTTP call expected")

        transport = _transport(handler, api_key=None)
        assert not transport.is_configured
        result = await transport.send("255712345678", "Hello")
        assert result.error == "SMS service not configured"

    async def test_invalid_phone(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            pytest.fail("no HTTP call expected")

        result = await _transport(handler).send("n/a", "Hello")
        assert result.error == "Invalid phone number"

    async def test_wide_text_units(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"success": True, "code": 200, "data": {}})

        result = await _transport(handler).send("255712345678", "Habari 😀" + "a" * 70)
        assert result.success
        assert result.tracking_id is None
        assert result.units == 2

    async def test_non_object_data_is_still_a_success(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"success": True, "code": 200, "data": "queued"})

        result = await _transport(handler).send("255712345678", "Hello")
        assert result.success
        assert result.tracking_id is None

    async def test_unexpected_client_error_is_a_value(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise RuntimeError("socket closed mid-read")

        result = await _transport(handler).send("255712345678", "Hello")
        assert not result.success
        assert result.error == "socket closed mid-read"
        assert result.units == 1


class TestBalanceAndDelivery:
    async def test_balance(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.path.endswith("/balance")
            return httpx.Response(
                200, json={"success": True, "code": 200, "data": {"totalSms": "930"}}
            )

        result = await _transport(handler).check_balance()
        assert result.success
        assert result.balance == 930

    async def test_non_numeric_balance_is_a_failure(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(
                200, json={"success": True, "code": 200, "data": {"totalSms": "lots"}}
            )

        result = await _transport(handler).check_balance()
        assert not result.success
        assert result.balance == 0
        assert result.error == "Invalid balance in response"

    async def test_balance_with_non_object_data(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"success": True, "code": 200, "data": []})

        result = await _transport(handler).check_balance()
        assert result.success
        assert result.balance == 0

    async def test_balance_not_configured(self) -> None:
        result = await _transport(lambda r: httpx.Response(500), api_secret="").check_balance()
        assert not result.success
        assert result.balance == 0

    async def test_delivery_status(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.path.endswith("/deliver/4711")
            return httpx.Response(
                200,
                json={"success": True, "code": 200, "data": {"status": "DELIVERED"}},
            )

        result = await _transport(handler).check_delivery_status("4711")
        assert result.success
        assert result.data == {"status": "DELIVERED"}

    async def test_delivery_status_rejected(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(404, json={"success": False, "message": "Unknown shoot"})

        result = await _transport(handler).check_delivery_status("1")
        assert not result.success
        assert result.error == "Unknown shoot"
