"""Unit tests for CampaignDispatchRegistry (task bookkeeping and shutdown)."""

import asyncio

import pytest

from app.core.dispatch_registry import CampaignDispatchRegistry
from app.domain.exceptions import DispatchAlreadyRunningException


async def _finish() -> str:
    return "done"


async def test_task_removed_when_finished() -> None:
    registry = CampaignDispatchRegistry()
    task = registry.start("c1", _finish())
    assert registry.is_running("c1")
    assert await task == "done"
    await asyncio.sleep(0)
    assert registry.get("c1") is None
    assert registry.running() == []


async def test_duplicate_start_refused_and_coroutine_closed() -> None:
    registry = CampaignDispatchRegistry()
    registry.start("c1", asyncio.sleep(10))
    second = _finish()
    with pytest.raises(DispatchAlreadyRunningException):
        registry.start("c1", second)
    assert second.cr_frame is None
    await registry.shutdown(timeout=1)


async def test_start_after_finish_allowed() -> None:
    registry = CampaignDispatchRegistry()
    await registry.start("c1", _finish())
    await asyncio.sleep(0)
    assert await registry.start("c1", _finish()) == "done"


async def test_shutdown_cancels_running_tasks() -> None:
    registry = CampaignDispatchRegistry()
    slow = registry.start("c1", asyncio.sleep(10))
    registry.start("c2", asyncio.sleep(10))
    assert sorted(registry.running()) == ["c1", "c2"]
    await registry.shutdown(timeout=1)
    assert slow.cancelled()
    assert registry.running() == []


async def test_crash_is_logged(caplog: pytest.LogCaptureFixture) -> None:
    async def boom() -> None:
        raise RuntimeError("kaput")

    registry = CampaignDispatchRegistry()
    task = registry.start("c1", boom())
    with pytest.raises(RuntimeError):
        await task
    await asyncio.sleep(0)
    assert "Campaign dispatch c1 crashed" in caplog.text


async def test_shutdown_with_nothing_running() -> None:
    await CampaignDispatchRegistry().shutdown()
