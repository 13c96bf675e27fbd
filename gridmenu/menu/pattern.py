"""Static character-grid layouts stamped onto menu surfaces."""

from __future__ import annotations

import copy
from typing import Any, Union

from ..display.grid import Item
from ..errors import InvalidArgument
from ..host import Surface


def clone_item(item: Any) -> Any:
    """Fresh copy of a display item so stamps never share state."""
    clone = getattr(item, "clone", None)
    if callable(clone):
        return clone()
    return copy.deepcopy(item)


class Pattern:
    """Rows of layout symbols plus a glyph for each symbol.

    Usage::

        border = Pattern(
            "#########",
            "#       #",
            "#########",
        ).set("#", Item("#", Color.GRAY))

    Row ``r``, column ``c`` lands on index ``r * surface.width + c``.
    Characters without a glyph are left untouched, and anything that would
    fall outside the surface is skipped.
    """

    def __init__(self, *rows: str):
        self.rows: tuple[str, ...] = tuple(rows)
        self.glyphs: dict[str, Any] = {}

    def set(self, char: str, item: Union[Item, str, Any]) -> "Pattern":
        """Map *char* to a display item. A bare string becomes ``Item(string)``."""
        if len(char) != 1:
            raise InvalidArgument(f"Pattern symbols are single characters, got {char!r}")
        if isinstance(item, str):
            item = Item(item)
        self.glyphs[char] = item
        return self

    def apply(self, surface: Surface) -> None:
        width = surface.width
        size = surface.size
        for row, line in enumerate(self.rows):
            for col, char in enumerate(line):
                glyph = self.glyphs.get(char)
                if glyph is None or col >= width:
                    continue
                index = row * width + col
                if index < size:
                    surface.set_cell(index, clone_item(glyph))

    def __repr__(self) -> str:
        return f"Pattern(rows={len(self.rows)}, glyphs={''.join(sorted(self.glyphs))!r})"
