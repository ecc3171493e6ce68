"""Unit tests for MessagingService single sends and MemberService normalization."""

from datetime import UTC, datetime, timedelta
from unittest.mock import AsyncMock

import pytest

from app.application.services.member_service import MemberService
from app.application.services.messaging_service import MessagingService
from app.domain.exceptions import ResourceNotFoundException, ValidationException
from tests.fakes import BASE_TIME, FakeMemberStore, FakeMessageRepo, FakeTransport


@pytest.fixture
def messages() -> FakeMessageRepo:
    return FakeMessageRepo()


@pytest.fixture
def members() -> FakeMemberStore:
    return FakeMemberStore()


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def service(
    messages: FakeMessageRepo, members: FakeMemberStore, transport: FakeTransport
) -> MessagingService:
    return MessagingService(messages, members, transport)


async def test_send_records_sent_row(
    service: MessagingService, transport: FakeTransport
) -> None:
    msg = await service.send_single_message(
        phone_number="0712 345 678", message="Your loan is approved", sent_by_id="u1"
    )
    assert msg.status == "sent"
    assert msg.recipient_phone == "255712345678"
    assert msg.message_type == "general"
    assert msg.unit_count == 1
    assert msg.tracking_id
    assert transport.sent == [("255712345678", "Your loan is approved")]


async def test_transport_failure_returned_as_failed_row(
    service: MessagingService, transport: FakeTransport
) -> None:
    transport.fail_for = {"255712345678"}
    msg = await service.send_single_message(phone_number="255712345678", message="Hi")
    assert msg.status == "failed"
    assert msg.error_message == "Gateway rejected number"


async def test_member_name_recorded(
    service: MessagingService, members: FakeMemberStore
) -> None:
    member = members.add_member("Asha Juma")
    msg = await service.send_single_message(
        phone_number="255712000000", message="Hi", member_id=member.id
    )
    assert msg.recipient_name == "Asha Juma"
    assert msg.member_id == member.id


async def test_unknown_member(service: MessagingService) -> None:
    with pytest.raises(ResourceNotFoundException):
        await service.send_single_message(
            phone_number="255712000000", message="Hi", member_id="ghost"
        )


@pytest.mark.parametrize(
    ("kwargs", "field"),
    [
        ({"phone_number": "255712000000", "message": "   "}, "message"),
        ({"phone_number": "none", "message": "Hi"}, "phone_number"),
        ({"phone_number": "255712000000", "message": "Hi", "message_type": "spam"}, "message_type"),
    ],
)
async def test_rejected_input_sends_nothing(
    service: MessagingService, transport: FakeTransport, kwargs: dict, field: str
) -> None:
    with pytest.raises(ValidationException) as exc_info:
        await service.send_single_message(**kwargs)
    assert exc_info.value.details["field"] == field
    assert transport.sent == []


async def test_delivery_needs_tracking_id(
    service: MessagingService, transport: FakeTransport
) -> None:
    transport.fail_for = {"255712000000"}
    msg = await service.send_single_message(phone_number="255712000000", message="Hi")
    with pytest.raises(ValidationException):
        await service.check_delivery(msg.id)


async def test_delivery_uses_tracking_id(service: MessagingService) -> None:
    msg = await service.send_single_message(phone_number="255712000000", message="Hi")
    result = await service.check_delivery(msg.id)
    assert result.tracking_id == msg.tracking_id


async def test_stats_group_counts_and_units(
    service: MessagingService, messages: FakeMessageRepo
) -> None:
    messages.add_message(status="sent", message_type="campaign", unit_count=2)
    messages.add_message(status="sent", message_type="campaign", unit_count=1)
    messages.add_message(status="failed", message_type="campaign", unit_count=3)
    messages.add_message(status="sent", message_type="general", unit_count=1)

    stats = await service.get_message_stats()

    assert stats.total_messages == 4
    assert stats.total_units == 7
    assert [(b.status, b.message_type, b.count, b.units) for b in stats.breakdown] == [
        ("failed", "campaign", 1, 3),
        ("sent", "campaign", 2, 3),
        ("sent", "general", 1, 1),
    ]
    assert (stats.start, stats.end) == (None, None)


async def test_stats_window_is_inclusive(
    service: MessagingService, messages: FakeMessageRepo
) -> None:
    messages.add_message(created_at=BASE_TIME - timedelta(days=1))
    messages.add_message(created_at=BASE_TIME, unit_count=2)
    messages.add_message(created_at=BASE_TIME + timedelta(hours=1), unit_count=4)
    messages.add_message(created_at=BASE_TIME + timedelta(days=2))

    stats = await service.get_message_stats(
        start=BASE_TIME, end=BASE_TIME + timedelta(hours=1)
    )

    assert (stats.total_messages, stats.total_units) == (2, 6)


async def test_stats_window_normalized_to_utc(
    service: MessagingService, messages: FakeMessageRepo
) -> None:
    stats = await service.get_message_stats(start=datetime(2026, 1, 1, 0, 0))
    assert stats.start == datetime(2026, 1, 1, tzinfo=UTC)
    assert messages.stats_window == (datetime(2026, 1, 1, tzinfo=UTC), None)
    assert stats.total_messages == 0
    assert stats.breakdown == []


async def test_stats_reversed_window_rejected(
    service: MessagingService, messages: FakeMessageRepo
) -> None:
    with pytest.raises(ValidationException):
        await service.get_message_stats(start=BASE_TIME, end=BASE_TIME - timedelta(days=1))
    assert messages.stats_window is None


async def test_member_phone_stored_normalized() -> None:
    repo = AsyncMock()
    repo.get_by_member_number.return_value = None
    await MemberService(repo).create_member(
        member_number="M0001", full_name="Asha", phone_number="0712-000-111"
    )
    assert repo.create_member.await_args.kwargs["phone_number"] == "255712000111"


async def test_member_number_unique() -> None:
    repo = AsyncMock()
    repo.get_by_member_number.return_value = object()
    with pytest.raises(ValidationException):
        await MemberService(repo).create_member(member_number="M0001", full_name="Asha")
