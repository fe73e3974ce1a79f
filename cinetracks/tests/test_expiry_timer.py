from __future__ import annotations

import asyncio

import pytest

from cinetracks.application import ExpiryTimer


@pytest.mark.asyncio
async def test_timer_fires_once() -> None:
    fired: list[int] = []
    timer = ExpiryTimer(lambda: fired.append(1))

    timer.arm(0.01)
    assert timer.armed is True
    await asyncio.sleep(0.05)

    assert fired == [1]
    assert timer.armed is False
    assert timer.delay is None


@pytest.mark.asyncio
async def test_cancel_prevents_fire() -> None:
    fired: list[int] = []
    timer = ExpiryTimer(lambda: fired.append(1))

    timer.arm(0.01)
    assert timer.cancel() is True
    assert timer.cancel() is False
    await asyncio.sleep(0.05)

    assert fired == []


@pytest.mark.asyncio
async def test_rearm_replaces_previous_schedule() -> None:
    fired: list[str] = []
    timer = ExpiryTimer(lambda: fired.append("x"))

    timer.arm(0.01)
    timer.arm(10.0)
    await asyncio.sleep(0.05)

    assert fired == []
    assert timer.delay == 10.0
    timer.cancel()


@pytest.mark.asyncio
async def test_callback_errors_are_contained() -> None:
    def boom() -> None:
        raise RuntimeError("boom")

    timer = ExpiryTimer(boom)
    timer.arm(0.01)
    await asyncio.sleep(0.05)

    assert timer.armed is False


def test_non_positive_delay_is_rejected() -> None:
    timer = ExpiryTimer(lambda: None)

    with pytest.raises(ValueError):
        timer.arm(0)
