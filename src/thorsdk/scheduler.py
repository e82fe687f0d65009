"""Recurring timer bound to an asyncio event loop.

Each firing schedules the next one before spawning its callback as a task, so
a slow callback never delays the cadence. Callbacks may overlap when they run
longer than the interval.
"""

import asyncio
import logging
from typing import Awaitable, Callable, Optional

logger = logging.getLogger(__name__)


def _check_interval(interval_ms: int) -> None:
    if interval_ms <= 0:
        raise ValueError(f"Timer interval must be positive, got {interval_ms}ms")


class IntervalTimer:
    """Owned handle for one recurring callback.

    Usage:
        timer = IntervalTimer(refresh, interval_ms=60_000)
        timer.start()
        timer.reschedule(30_000)
        await timer.close()
    """

    def __init__(self, callback: Callable[[], Awaitable[None]], interval_ms: int, name: str = "timer"):
        """Initialize the timer (stopped).

        Args:
            callback: Coroutine function run on every firing
            interval_ms: Milliseconds between firings
            name: Name used in logs and task names

        Raises:
            ValueError: If interval_ms is not positive
        """
        _check_interval(interval_ms)
        self._callback = callback
        self._interval_ms = interval_ms
        self.name = name
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._handle: Optional[asyncio.TimerHandle] = None
        self._tasks: set[asyncio.Task] = set()

    @property
    def interval_ms(self) -> int:
        return self._interval_ms

    @property
    def is_scheduled(self) -> bool:
        return self._handle is not None

    @property
    def in_flight(self) -> int:
        """Number of callbacks currently running."""
        return len(self._tasks)

    def start(self) -> None:
        """Schedule the first firing one interval from now.

        Raises:
            RuntimeError: If called outside a running event loop
        """
        self._loop = asyncio.get_running_loop()
        self.cancel()
        self._schedule()
        logger.debug(f"{self.name} started (interval: {self._interval_ms}ms)")

    def cancel(self) -> None:
        """Cancel the pending firing; running callbacks are left to finish."""
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def reschedule(self, interval_ms: int) -> None:
        """Change the interval and restart the countdown from now."""
        _check_interval(interval_ms)
        self._interval_ms = interval_ms
        if self._loop is None:
            return
        self.cancel()
        self._schedule()
        logger.debug(f"{self.name} rescheduled (interval: {self._interval_ms}ms)")

    async def close(self) -> None:
        """Cancel the pending firing and any running callbacks."""
        self.cancel()
        tasks = list(self._tasks)
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        self._loop = None

    def _schedule(self) -> None:
        self._handle = self._loop.call_later(self._interval_ms / 1000, self._fire)

    def _fire(self) -> None:
        self._schedule()
        task = self._loop.create_task(self._callback(), name=f"{self.name}-run")
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
