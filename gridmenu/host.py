"""Host-side collaborators: surface kinds, event payloads and protocols.

The framework never draws, schedules or listens by itself. Whatever owns the
real display (a game server, a terminal, a test double) implements these
protocols and feeds events in through the registry.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Hashable, Optional, Protocol, Sequence


class SurfaceKind(Enum):
    """Surface types the host can create."""

    CHEST = "chest"
    BARREL = "barrel"
    DISPENSER = "dispenser"
    DROPPER = "dropper"
    HOPPER = "hopper"

    @property
    def intrinsic_size(self) -> int:
        return _KIND_GEOMETRY[self][0]

    @property
    def width(self) -> int:
        return _KIND_GEOMETRY[self][1]

    @property
    def caller_sized(self) -> bool:
        """Whether templates of this kind may choose their own size."""
        return self is SurfaceKind.CHEST


# (intrinsic size, row width)
_KIND_GEOMETRY = {
    SurfaceKind.CHEST: (27, 9),
    SurfaceKind.BARREL: (27, 9),
    SurfaceKind.DISPENSER: (9, 3),
    SurfaceKind.DROPPER: (9, 3),
    SurfaceKind.HOPPER: (5, 5),
}


# =============================================================================
# Protocols
# =============================================================================

class Surface(Protocol):
    """A fixed-size grid of cells addressed by linear index."""

    owner: Any
    title: str

    @property
    def size(self) -> int: ...

    @property
    def width(self) -> int: ...

    def clear(self) -> None: ...

    def set_cell(self, index: int, item: Any) -> None: ...


class DisplayHost(Protocol):
    """Creates surfaces and shows/hides them for users."""

    def create(self, owner: Any, size_or_kind: int | SurfaceKind, title: str) -> Surface: ...

    def current_top_surface(self, user: Hashable) -> Optional[Surface]: ...

    def show(self, user: Hashable, surface: Surface) -> None: ...

    def hide(self, user: Hashable) -> None: ...


class TaskHandle(Protocol):
    @property
    def cancelled(self) -> bool: ...

    def cancel(self) -> None: ...


class TaskScheduler(Protocol):
    """One-shot and repeating callbacks on the host's serial context."""

    def run_next_tick(self, fn: Callable[[], None]) -> TaskHandle: ...

    def run_repeating(self, fn: Callable[[], None], initial_delay: int, interval: int) -> TaskHandle: ...

    def cancel(self, handle: TaskHandle) -> None: ...


# =============================================================================
# Events
# =============================================================================

@dataclass
class ClickEvent:
    """A click on a raw slot of a surface. Setting ``cancelled`` blocks host defaults."""

    user: Hashable
    surface: Any
    raw_slot: int
    cancelled: bool = False


@dataclass
class DragEvent:
    """A drag gesture touching one or more raw slots."""

    user: Hashable
    surface: Any
    raw_slots: Sequence[int] = field(default_factory=tuple)
    cancelled: bool = False


@dataclass
class CloseEvent:
    """The host closed a surface for a user (possibly just before opening another)."""

    user: Hashable
    surface: Any
