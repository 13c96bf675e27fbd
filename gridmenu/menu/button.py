"""Interactive menu cells."""

from __future__ import annotations

from typing import Any, Callable, Optional, Sequence

from ..errors import InvalidArgument
from ..host import ClickEvent
from .pattern import clone_item

ClickHandler = Callable[[ClickEvent], None]

DEFAULT_ANIMATION_SPEED = 20  # ticks


class Button:
    """One clickable cell: an icon, a click handler and optional extras.

    Configure with the fluent setters::

        Button(Item("!"), on_buy).set_click_cooldown(500).set_updatable(True)

    ``click_cooldown`` is in milliseconds. When animated, ``icon`` always
    mirrors ``animation_frames[current_frame]``.
    """

    def __init__(self, icon: Any, click_handler: Optional[ClickHandler] = None):
        self.icon = icon
        self.click_handler = click_handler
        self.updatable = False
        self.click_cooldown = 0
        self.animation = False
        self.animation_frames: list[Any] = []
        self.animation_speed = DEFAULT_ANIMATION_SPEED
        self.current_frame = 0

    def set_updatable(self, updatable: bool) -> "Button":
        self.updatable = updatable
        return self

    def set_click_cooldown(self, cooldown_ms: int) -> "Button":
        if cooldown_ms < 0:
            raise InvalidArgument("Click cooldown cannot be negative")
        self.click_cooldown = cooldown_ms
        return self

    def set_animation(self, frames: Sequence[Any], speed: int = DEFAULT_ANIMATION_SPEED) -> "Button":
        """Animate through *frames*, one step every *speed* ticks."""
        if not frames:
            raise InvalidArgument("Animation frames cannot be empty")
        if speed <= 0:
            raise InvalidArgument("Animation speed must be a positive number of ticks")
        self.animation = True
        self.animation_frames = list(frames)
        self.animation_speed = speed
        self.current_frame = 0
        self.icon = clone_item(self.animation_frames[0])
        return self

    def advance_animation(self) -> None:
        """Step to the next frame, wrapping around. No-op for static buttons."""
        if not self.animation or not self.animation_frames:
            return
        self.current_frame = (self.current_frame + 1) % len(self.animation_frames)
        self.icon = clone_item(self.animation_frames[self.current_frame])

    def __repr__(self) -> str:
        extras = []
        if self.click_cooldown:
            extras.append(f"cooldown={self.click_cooldown}ms")
        if self.animation:
            extras.append(f"frames={len(self.animation_frames)}")
        if self.updatable:
            extras.append("updatable")
        return f"Button({self.icon!r}{', ' if extras else ''}{', '.join(extras)})"
