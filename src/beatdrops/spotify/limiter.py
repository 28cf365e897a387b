"""Serializing throttle for every outbound Spotify call."""

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable
from typing import Self, TypeVar

from beatdrops.settings import AppSettings

logger = logging.getLogger(__name__)

T = TypeVar("T")


class OutboundCallLimiter:
    """Runs outbound calls one at a time, spaced by a minimum interval.

    Callers queue on an :class:`asyncio.Lock`, which wakes waiters in FIFO
    order. The holder sleeps until ``min_interval`` seconds have passed since
    the previous operation *started*, records its own start, then awaits the
    operation while still holding the lock, so at most one call is in flight.

    A failing operation raises to its own caller only; the lock is released
    and the next queued operation proceeds normally.

    One instance is shared per process and injected into every component that
    talks to Spotify.
    """

    def __init__(self, min_interval: float) -> None:
        if min_interval < 0:
            raise ValueError("min_interval must be non-negative")
        self._min_interval = min_interval
        self._lock = asyncio.Lock()
        self._last_start: float | None = None

    @classmethod
    def from_settings(cls, settings: AppSettings) -> Self:
        """Create a limiter spaced by ``OUTBOUND_MIN_INTERVAL_MS``."""
        return cls(settings.OUTBOUND_MIN_INTERVAL_MS / 1000)

    @property
    def min_interval(self) -> float:
        """Minimum spacing between operation starts, in seconds."""
        return self._min_interval

    async def schedule(self, operation: Callable[[], Awaitable[T]]) -> T:
        """Queue *operation* and return its result once it has run."""
        async with self._lock:
            wait = self._remaining()
            if wait > 0:
                logger.debug("Outbound call delayed %.3fs by limiter", wait)
            # The event loop may wake a timer up to one clock tick early.
            while wait > 0:
                await asyncio.sleep(wait)
                wait = self._remaining()
            self._last_start = time.monotonic()
            return await operation()

    def _remaining(self) -> float:
        """Seconds left before the next operation may start."""
        if self._last_start is None:
            return 0.0
        return self._min_interval - (time.monotonic() - self._last_start)
