"""Core utilities - scheduling, signals and shared tables."""

from .scheduler import ScheduledTask, TickScheduler
from .signals import CLICK_SIGNAL, CLOSE_SIGNAL, DRAG_SIGNAL, SignalBus
from .state import ConcurrentTable

__all__ = [
    # Scheduling
    "TickScheduler",
    "ScheduledTask",
    # Signals
    "SignalBus",
    "CLICK_SIGNAL",
    "DRAG_SIGNAL",
    "CLOSE_SIGNAL",
    # State
    "ConcurrentTable",
]
