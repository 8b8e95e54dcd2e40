"""Repeating asyncio timer.

每次触发都在独立 Task 中运行回调；取消定时器只阻止后续触发，
不会中断已经在运行的回调。
"""

import asyncio
from collections.abc import Awaitable, Callable

from loguru import logger

# Strong references for callback tasks; the event loop only keeps weak ones.
_running_tasks: set[asyncio.Task[None]] = set()


class PeriodicTimer:
    """Fire an async callback every ``interval_sec`` seconds on the running loop."""

    def __init__(
        self,
        interval_sec: float,
        callback: Callable[[], Awaitable[None]],
        *,
        name: str = "periodic-timer",
    ) -> None:
        if interval_sec <= 0:
            raise ValueError("interval_sec must be positive")
        self.interval_sec = interval_sec
        self.name = name
        self._callback = callback
        self._loop: asyncio.AbstractEventLoop | None = None
        self._handle: asyncio.TimerHandle | None = None
        self._next_at: float = 0.0
        self._ticks = 0

    @property
    def is_active(self) -> bool:
        return self._handle is not None

    @property
    def ticks(self) -> int:
        """Number of times the timer has fired (``fire_now`` excluded)."""
        return self._ticks

    def start(self) -> None:
        """Arm the timer. Must be called from a running event loop."""
        if self._handle is not None:
            return
        self._loop = asyncio.get_running_loop()
        self._next_at = self._loop.time() + self.interval_sec
        self._handle = self._loop.call_at(self._next_at, self._tick)

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def fire_now(
        self, callback: Callable[[], Awaitable[None]] | None = None
    ) -> asyncio.Task[None]:
        """Run a callback once, out of band, without touching the schedule.

        Defaults to the timer's own callback.
        """
        return self._spawn(callback or self._callback)

    def _tick(self) -> None:
        if self._handle is None or self._loop is None:
            return
        self._ticks += 1
        # Re-arm from the previous deadline so the period does not drift.
        self._next_at += self.interval_sec
        self._handle = self._loop.call_at(self._next_at, self._tick)
        self._spawn(self._callback)

    def _spawn(self, callback: Callable[[], Awaitable[None]]) -> asyncio.Task[None]:
        task = asyncio.ensure_future(callback())
        _running_tasks.add(task)
        task.add_done_callback(self._on_task_done)
        return task

    def _on_task_done(self, task: asyncio.Task[None]) -> None:
        _running_tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.opt(exception=exc).error(
                f"[{self.name}] Timer callback raised: {exc}"
            )
