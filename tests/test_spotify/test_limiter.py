"""Tests for OutboundCallLimiter."""

import asyncio
import time

import pytest

from beatdrops.settings import AppSettings
from beatdrops.spotify.limiter import OutboundCallLimiter

INTERVAL = 0.05
# Allowance for the gap between the limiter recording a start and the operation observing it.
CLOCK_SLACK = 0.002


async def test_first_operation_runs_immediately() -> None:
    limiter = OutboundCallLimiter(1.0)

    async def op() -> str:
        return "done"

    started = time.monotonic()
    assert await limiter.schedule(op) == "done"
    assert time.monotonic() - started < 0.5


async def test_concurrent_operations_are_spaced() -> None:
    """Ten operations submitted together start at least one interval apart."""
    limiter = OutboundCallLimiter(INTERVAL)
    starts: list[float] = []

    async def op() -> None:
        starts.append(time.monotonic())

    await asyncio.gather(*(limiter.schedule(op) for _ in range(10)))

    assert len(starts) == 10
    gaps = [later - earlier for earlier, later in zip(starts, starts[1:], strict=False)]
    assert min(gaps) >= INTERVAL - CLOCK_SLACK


async def test_operations_run_in_submission_order() -> None:
    limiter = OutboundCallLimiter(0.01)
    order: list[int] = []

    def make_op(index: int):  # type: ignore[no-untyped-def]
        async def op() -> int:
            order.append(index)
            return index

        return op

    results = await asyncio.gather(*(limiter.schedule(make_op(i)) for i in range(5)))

    assert order == [0, 1, 2, 3, 4]
    assert results == [0, 1, 2, 3, 4]


async def test_one_operation_in_flight_at_a_time() -> None:
    limiter = OutboundCallLimiter(0)
    in_flight = 0
    peak = 0

    async def op() -> None:
        nonlocal in_flight, peak
        in_flight += 1
        peak = max(peak, in_flight)
        await asyncio.sleep(0.01)
        in_flight -= 1

    await asyncio.gather(*(limiter.schedule(op) for _ in range(5)))
    assert peak == 1


async def test_failure_does_not_stall_queue() -> None:
    """A failing operation raises to its caller and later operations still run."""
    limiter = OutboundCallLimiter(0.01)

    async def failing() -> None:
        raise RuntimeError("boom")

    async def ok() -> str:
        return "ok"

    results = await asyncio.gather(
        limiter.schedule(failing),
        limiter.schedule(ok),
        limiter.schedule(ok),
        return_exceptions=True,
    )

    assert isinstance(results[0], RuntimeError)
    assert results[1:] == ["ok", "ok"]


async def test_failed_operation_still_counts_as_a_start() -> None:
    limiter = OutboundCallLimiter(INTERVAL)
    starts: list[float] = []

    async def failing() -> None:
        starts.append(time.monotonic())
        raise RuntimeError("boom")

    async def ok() -> None:
        starts.append(time.monotonic())

    with pytest.raises(RuntimeError):
        await limiter.schedule(failing)
    await limiter.schedule(ok)

    assert starts[1] - starts[0] >= INTERVAL - CLOCK_SLACK


def test_negative_interval_rejected() -> None:
    with pytest.raises(ValueError, match="non-negative"):
        OutboundCallLimiter(-1)


def test_from_settings_converts_milliseconds() -> None:
    limiter = OutboundCallLimiter.from_settings(AppSettings(OUTBOUND_MIN_INTERVAL_MS=333))
    assert limiter.min_interval == pytest.approx(0.333)
