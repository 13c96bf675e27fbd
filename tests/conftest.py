"""Shared test fixtures."""

import itertools

import pytest

from gridmenu.core.signals import SignalBus
from gridmenu.display.grid import Color, Item, MemoryDisplay
from gridmenu.menu import MenuRegistry


class ManualTask:
    """Task handle for ManualScheduler."""

    def __init__(self, seq, fn, due, interval):
        self.seq = seq
        self.fn = fn
        self.due = due
        self.interval = interval
        self.cancelled = False
        self.runs = 0

    def cancel(self):
        self.cancelled = True


class ManualScheduler:
    """Deterministic TaskScheduler: nothing runs until ``tick()`` is called."""

    def __init__(self):
        self.now = 0
        self.tasks = []
        self._seq = itertools.count()

    def run_next_tick(self, fn):
        return self._add(fn, 1, None)

    def run_repeating(self, fn, initial_delay, interval):
        return self._add(fn, initial_delay, interval)

    def cancel(self, task):
        task.cancel()

    @property
    def pending(self):
        return [t for t in self.tasks if not t.cancelled]

    def tick(self, n=1):
        """Advance *n* ticks, running everything that comes due."""
        for _ in range(n):
            self.now += 1
            self._run_due()

    def _add(self, fn, delay, interval):
        task = ManualTask(next(self._seq), fn, self.now + delay, interval)
        self.tasks.append(task)
        return task

    def _run_due(self):
        while True:
            due = sorted(
                (t for t in self.tasks if not t.cancelled and t.due <= self.now),
                key=lambda t: (t.due, t.seq),
            )
            if not due:
                break
            for task in due:
                if task.cancelled:
                    continue
                task.runs += 1
                task.fn()
                if task.interval is not None and not task.cancelled:
                    task.due = self.now + task.interval
                else:
                    task.cancelled = True
            self.tasks = [t for t in self.tasks if not t.cancelled]


class FakeClock:
    """Millisecond clock moved by hand."""

    def __init__(self, start=1_000_000.0):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, ms):
        self.now += ms


@pytest.fixture
def scheduler():
    return ManualScheduler()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def bus():
    """Signal bus delivering inline (no event loop)."""
    return SignalBus()


@pytest.fixture
def display(bus):
    return MemoryDisplay(bus=bus)


@pytest.fixture
def registry(display, scheduler, clock, bus):
    """Registry wired to the in-memory display and the bus."""
    registry = MenuRegistry(display, scheduler, clock=clock)
    registry.attach(bus)
    return registry


@pytest.fixture
def item_a():
    return Item("A", Color.RED, label="A")


@pytest.fixture
def item_b():
    return Item("B", Color.BLUE, label="B")
