"""Reusable menu definitions."""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable, Optional, Union

from ..errors import InvalidArgument
from ..host import SurfaceKind
from .button import Button
from .pattern import Pattern

if TYPE_CHECKING:
    from .session import Session

SessionHandler = Callable[["Session"], None]

ROW_WIDTH = 9
MAX_ROWS = 6


class Template:
    """
    Layout and behavior shared by every session opened from it.

    Built with chained setters before it is first opened::

        registry.create_sized_template("shop", "Shop", 3) \\
            .add_pattern(border) \\
            .set_button(13, Button(Item("$"), buy)) \\
            .set_close_handler(on_close)

    Sessions read a template concurrently and never copy it, so it must not
    be changed once a session has been opened from it.
    """

    def __init__(self, id: str, title: str, kind: SurfaceKind = SurfaceKind.CHEST):
        self.id = id
        self.title = title
        self.kind = kind
        self.size = -1
        self.patterns: list[Pattern] = []
        self.buttons: dict[int, Button] = {}
        self.update_handler: Optional[SessionHandler] = None
        self.close_handler: Optional[SessionHandler] = None

    @property
    def effective_size(self) -> int:
        """Cell count sessions will get: ``size`` if set, else the kind's own size."""
        return self.size if self.size > 0 else self.kind.intrinsic_size

    @property
    def surface_request(self) -> Union[int, SurfaceKind]:
        """What to ask the display host for when creating a surface."""
        if self.kind.caller_sized and self.size > 0:
            return self.size
        return self.kind

    def set_size(self, size: int) -> "Template":
        if not self.kind.caller_sized:
            raise InvalidArgument(f"Size can only be set for {SurfaceKind.CHEST.name} templates")
        if size <= 0 or size % ROW_WIDTH != 0:
            raise InvalidArgument(f"Size must be a positive multiple of {ROW_WIDTH}, got {size}")
        self.size = size
        return self

    def set_button(self, index: int, button: Button) -> "Template":
        if index < 0:
            raise InvalidArgument(f"Button index must be non-negative, got {index}")
        self.buttons[index] = button
        return self

    def add_pattern(self, pattern: Pattern) -> "Template":
        self.patterns.append(pattern)
        return self

    def set_update_handler(self, handler: Optional[SessionHandler]) -> "Template":
        self.update_handler = handler
        return self

    def set_close_handler(self, handler: Optional[SessionHandler]) -> "Template":
        self.close_handler = handler
        return self

    @property
    def animated(self) -> bool:
        return any(button.animation for button in self.buttons.values())

    def __repr__(self) -> str:
        return f"Template(id={self.id!r}, kind={self.kind.name}, size={self.effective_size})"


def rows_to_size(rows: int) -> int:
    """Cell count for a caller-sized template with *rows* rows."""
    if rows < 1 or rows > MAX_ROWS:
        raise InvalidArgument(f"Rows must be between 1 and {MAX_ROWS}, got {rows}")
    return rows * ROW_WIDTH
