"""
In-memory grid display for menus.

Core design:
- Item: content of one cell (symbol, colors, label), cloned on every stamp
- GridSurface: fixed-size row-major grid of cells addressed by linear index
- MemoryDisplay: DisplayHost that tracks which surface each user is looking at

Used as the reference host for tests and the terminal demo. Real hosts
provide their own surfaces that satisfy ``gridmenu.host.Surface``.
"""

import logging
import threading
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Hashable, Optional, Union

from ..core.signals import CLOSE_SIGNAL, SignalBus
from ..host import CloseEvent, SurfaceKind

logger = logging.getLogger(__name__)


# =============================================================================
# Colors
# =============================================================================

class Color(Enum):
    """ANSI 256-color codes for cells. Value is the color number."""
    RESET = -1

    BLACK = 0
    RED = 1
    GREEN = 2
    YELLOW = 3
    BLUE = 4
    MAGENTA = 5
    WHITE = 7
    GRAY = 8

    def ansi_fg(self) -> str:
        """Get ANSI foreground escape code."""
        if self == Color.RESET:
            return "\033[0m"
        return f"\033[38;5;{self.value}m"

    def ansi_bg(self) -> str:
        """Get ANSI background escape code."""
        if self == Color.RESET:
            return "\033[0m"
        return f"\033[48;5;{self.value}m"


# =============================================================================
# Item and GridSurface
# =============================================================================

@dataclass
class Item:
    """What a single cell displays."""
    symbol: str = " "
    fg: Color = Color.WHITE
    bg: Optional[Color] = None
    label: str = ""

    def clone(self) -> "Item":
        return replace(self)

    def render(self) -> str:
        """Render item to ANSI string."""
        parts = []
        if self.bg:
            parts.append(self.bg.ansi_bg())
        parts.append(self.fg.ansi_fg())
        parts.append(self.symbol)
        parts.append(Color.RESET.ansi_fg())
        return "".join(parts)


class GridSurface:
    """Row-major grid of optional items."""

    def __init__(self, owner: Any, size: int, width: int, title: str = ""):
        self.owner = owner
        self.title = title
        self._size = size
        self._width = width
        self.cells: list[Optional[Item]] = [None] * size

    @property
    def size(self) -> int:
        return self._size

    @property
    def width(self) -> int:
        return self._width

    @property
    def rows(self) -> int:
        return -(-self._size // self._width)

    def __getitem__(self, index: int) -> Optional[Item]:
        if 0 <= index < self._size:
            return self.cells[index]
        return None  # Out of bounds reads as empty

    def set_cell(self, index: int, item: Optional[Item]) -> None:
        """Place an item at *index*. Out-of-bounds writes are ignored."""
        if 0 <= index < self._size:
            self.cells[index] = item

    def clear(self) -> None:
        self.cells = [None] * self._size

    def _row_items(self):
        for row in range(self.rows):
            start = row * self._width
            yield self.cells[start:start + self._width]

    def render(self) -> str:
        """Render grid to ANSI string."""
        lines = []
        for row in self._row_items():
            lines.append("".join(item.render() if item else " " for item in row))
        return "\n".join(lines)

    def render_plain(self) -> str:
        """Render grid without colors (plain text)."""
        lines = []
        for row in self._row_items():
            lines.append("".join(item.symbol if item else " " for item in row))
        return "\n".join(lines)

    def __repr__(self) -> str:
        return f"GridSurface(title={self.title!r}, size={self._size}, width={self._width})"


# =============================================================================
# MemoryDisplay
# =============================================================================

class MemoryDisplay:
    """DisplayHost keeping each user's top surface in memory.

    Behaves like an interactive host: replacing or hiding a user's surface
    emits ``surface:close`` for the surface that went away, on *bus* if one
    is given. Showing the surface a user already has open is a no-op.
    """

    def __init__(self, row_width: int = 9, bus: Optional[SignalBus] = None):
        self.row_width = row_width
        self._top: dict[Hashable, GridSurface] = {}
        self._lock = threading.Lock()
        self._bus = bus

    def create(self, owner: Any, size_or_kind: Union[int, SurfaceKind], title: str) -> GridSurface:
        if isinstance(size_or_kind, SurfaceKind):
            return GridSurface(owner, size_or_kind.intrinsic_size, size_or_kind.width, title)
        return GridSurface(owner, size_or_kind, self.row_width, title)

    def current_top_surface(self, user: Hashable) -> Optional[GridSurface]:
        with self._lock:
            return self._top.get(user)

    def show(self, user: Hashable, surface: GridSurface) -> None:
        with self._lock:
            previous = self._top.get(user)
            if previous is surface:
                return
            self._top[user] = surface
        if previous is not None:
            self._emit_close(user, previous)
        logger.debug("Showing %r to %r", surface, user)

    def hide(self, user: Hashable) -> None:
        with self._lock:
            surface = self._top.pop(user, None)
        if surface is not None:
            logger.debug("Hid %r from %r", surface, user)
            self._emit_close(user, surface)

    def _emit_close(self, user: Hashable, surface: GridSurface) -> None:
        if self._bus is not None:
            self._bus.emit(CLOSE_SIGNAL, event=CloseEvent(user, surface))
