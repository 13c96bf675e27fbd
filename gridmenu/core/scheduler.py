"""Tick-based task scheduler running on the asyncio event loop.

Gives menus the host scheduling primitives they need (next-tick callbacks,
delayed callbacks and repeating callbacks measured in ticks) on top of a
single event loop, so every callback runs serially on the loop thread.
"""

from __future__ import annotations

import asyncio
import itertools
import logging
import threading
from typing import Callable, Optional

logger = logging.getLogger(__name__)

DEFAULT_TICK_SECONDS = 0.05  # 20 ticks per second


class ScheduledTask:
    """Handle for a one-shot or repeating callback."""

    __slots__ = (
        "task_id",
        "callback",
        "interval",
        "handle",
        "_cancelled",
    )

    def __init__(self, task_id: int, callback: Callable[[], None], interval: Optional[int]):
        self.task_id = task_id
        self.callback = callback
        self.interval = interval
        self.handle: Optional[asyncio.TimerHandle] = None
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    @property
    def repeating(self) -> bool:
        return self.interval is not None

    def cancel(self) -> None:
        """Stop the task. Safe to call from inside its own callback."""
        self._cancelled = True
        if self.handle is not None:
            self.handle.cancel()
            self.handle = None

    def __repr__(self) -> str:
        state = "cancelled" if self._cancelled else "pending"
        return f"ScheduledTask(id={self.task_id}, interval={self.interval}, {state})"


class TickScheduler:
    """Runs callbacks on *loop* with delays measured in ticks.

    Usage::

        scheduler = TickScheduler(loop, tick_seconds=0.05)
        scheduler.run_next_tick(show_menu)
        task = scheduler.run_repeating(animate, initial_delay=0, interval=20)
        ...
        scheduler.cancel(task)
        scheduler.stop()

    Thread-safe: scheduling from another thread hops onto the loop via
    ``call_soon_threadsafe`` before any timer is armed.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop, tick_seconds: float = DEFAULT_TICK_SECONDS):
        if tick_seconds <= 0:
            raise ValueError("tick_seconds must be positive")
        self._loop = loop
        self.tick_seconds = tick_seconds
        self._tasks: dict[int, ScheduledTask] = {}
        self._ids = itertools.count(1)
        self._lock = threading.Lock()
        self._running = True

    @property
    def running(self) -> bool:
        return self._running

    @property
    def pending(self) -> int:
        """Number of tasks not yet finished or cancelled."""
        with self._lock:
            return len(self._tasks)

    # ------------------------------------------------------------------
    # Scheduling primitives
    # ------------------------------------------------------------------

    def run_next_tick(self, fn: Callable[[], None]) -> ScheduledTask:
        """Run *fn* once, one tick from now."""
        return self.run_later(fn, 1)

    def run_later(self, fn: Callable[[], None], delay: int) -> ScheduledTask:
        """Run *fn* once after *delay* ticks."""
        return self._submit(fn, delay, None)

    def run_repeating(self, fn: Callable[[], None], initial_delay: int, interval: int) -> ScheduledTask:
        """Run *fn* after *initial_delay* ticks, then every *interval* ticks until cancelled."""
        if interval <= 0:
            raise ValueError("interval must be a positive number of ticks")
        return self._submit(fn, initial_delay, interval)

    def cancel(self, task: ScheduledTask) -> None:
        """Cancel *task*. Cancelling twice or after completion is a no-op."""
        task.cancel()
        with self._lock:
            self._tasks.pop(task.task_id, None)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def stop(self) -> None:
        """Cancel all outstanding tasks and refuse new ones."""
        self._running = False
        with self._lock:
            tasks = list(self._tasks.values())
            self._tasks.clear()
        for task in tasks:
            task.cancel()
        logger.info("Scheduler stopped, cancelled %d tasks", len(tasks))

    # ------------------------------------------------------------------
    # Internal scheduling
    # ------------------------------------------------------------------

    def _submit(self, fn: Callable[[], None], delay: int, interval: Optional[int]) -> ScheduledTask:
        task = ScheduledTask(next(self._ids), fn, interval)
        if not self._running:
            logger.debug("Scheduler stopped, dropping %r", task)
            task.cancel()
            return task
        with self._lock:
            self._tasks[task.task_id] = task
        self._loop.call_soon_threadsafe(self._arm, task, max(0, delay))
        return task

    def _arm(self, task: ScheduledTask, delay: int) -> None:
        """Start the timer for *task* (must be called on the event loop thread)."""
        if task.cancelled or not self._running:
            return
        task.handle = self._loop.call_later(delay * self.tick_seconds, self._fire, task)

    def _fire(self, task: ScheduledTask) -> None:
        """Timer callback: run the task and reschedule repeating ones."""
        task.handle = None
        if task.cancelled or not self._running:
            return

        try:
            task.callback()
        except Exception:
            logger.exception("Scheduled task %d failed", task.task_id)

        if task.repeating and not task.cancelled and self._running:
            self._arm(task, task.interval)
        else:
            with self._lock:
                self._tasks.pop(task.task_id, None)
