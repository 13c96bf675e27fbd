"""Live menu instances: one template bound to one user."""

from __future__ import annotations

import logging
import time
from typing import Any, Callable, Hashable, Mapping, Optional

from ..host import ClickEvent, DisplayHost, DragEvent, Surface, TaskHandle, TaskScheduler
from .button import DEFAULT_ANIMATION_SPEED
from .pattern import clone_item
from .template import Template

logger = logging.getLogger(__name__)

Clock = Callable[[], float]


def monotonic_ms() -> float:
    """Default click clock, in milliseconds."""
    return time.monotonic() * 1000


class AnimationTicker:
    """Repeating animation step owned by one session.

    Holds its own task handle so a tick that finds the session closed can
    cancel itself.
    """

    def __init__(self, session: "Session", scheduler: TaskScheduler):
        self._session = session
        self._scheduler = scheduler
        self.handle: Optional[TaskHandle] = None

    def __call__(self) -> None:
        session = self._session
        if session.closed:
            self.cancel()
            return

        for button in session.template.buttons.values():
            if button.animation:
                button.advance_animation()
        session.render()

    def cancel(self) -> None:
        if self.handle is not None:
            self._scheduler.cancel(self.handle)
            self.handle = None


class Session:
    """
    One open menu: a template, the user looking at it and private data.

    Sessions are created by ``MenuRegistry.open``. The session owns its
    surface (``surface.owner is session``), redraws it from the template on
    every ``render`` and closes exactly once.
    """

    def __init__(
        self,
        user: Hashable,
        template: Template,
        data: Optional[Mapping[str, Any]],
        *,
        display: DisplayHost,
        scheduler: TaskScheduler,
        clock: Clock = monotonic_ms,
    ):
        self._user = user
        self._template = template
        self._data: dict[str, Any] = dict(data) if data else {}
        self._display = display
        self._scheduler = scheduler
        self._clock = clock
        self._cooldowns: dict[int, float] = {}
        self._closed = False
        self._ticker: Optional[AnimationTicker] = None
        self._surface = display.create(self, template.surface_request, template.title)

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def user(self) -> Hashable:
        return self._user

    @property
    def template(self) -> Template:
        return self._template

    @property
    def data(self) -> dict[str, Any]:
        return self._data

    @property
    def surface(self) -> Surface:
        return self._surface

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def animation_running(self) -> bool:
        return self._ticker is not None

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def render(self) -> None:
        """Redraw the whole surface: patterns, then buttons, then the update hook.

        The update handler runs once before each updatable button is placed
        and once more at the end, so it may run several times per render.
        """
        if self._closed:
            return

        surface = self._surface
        template = self._template
        surface.clear()

        for pattern in template.patterns:
            pattern.apply(surface)

        handler = template.update_handler
        for index, button in list(template.buttons.items()):
            if button.updatable and handler is not None:
                handler(self)
                if self._closed:
                    return
            if index < surface.size:
                surface.set_cell(index, clone_item(button.icon))

        if handler is not None:
            handler(self)

        if self._closed:
            return
        if self._display.current_top_surface(self._user) is not surface:
            self._scheduler.run_next_tick(self._show)

    update_inventory = render

    def _show(self) -> None:
        if self._closed:
            return
        if self._display.current_top_surface(self._user) is not self._surface:
            self._display.show(self._user, self._surface)

    def _hide(self) -> None:
        if self._display.current_top_surface(self._user) is self._surface:
            self._display.hide(self._user)

    # ------------------------------------------------------------------
    # Input
    # ------------------------------------------------------------------

    def handle_click(self, event: ClickEvent) -> None:
        """Run the button under the click, honoring its cooldown.

        Clicks on cells without a button are left alone so the host's
        default handling still applies.
        """
        if self._closed:
            return

        slot = event.raw_slot
        if slot < 0 or slot >= self._surface.size:
            return

        button = self._template.buttons.get(slot)
        if button is None:
            logger.debug("Click on empty slot %d of %r", slot, self._template.id)
            return

        if button.click_cooldown > 0:
            now = self._clock()
            last = self._cooldowns.get(slot)
            if last is not None and now - last < button.click_cooldown:
                logger.debug("Click on slot %d of %r still cooling down", slot, self._template.id)
                event.cancelled = True
                return
            self._cooldowns[slot] = now

        try:
            if button.click_handler is not None:
                button.click_handler(event)
        finally:
            event.cancelled = True

    def handle_drag(self, event: DragEvent) -> None:
        """Cancel the whole drag if it touches any cell of this surface."""
        size = self._surface.size
        for slot in event.raw_slots:
            if 0 <= slot < size:
                event.cancelled = True
                return

    # ------------------------------------------------------------------
    # Animation
    # ------------------------------------------------------------------

    def start_animation(self, interval: Optional[int] = None) -> None:
        """Advance animated buttons and redraw every *interval* ticks.

        Without an interval, uses the fastest ``animation_speed`` among the
        template's animated buttons. Replaces any running animation.
        """
        self.stop_animation()
        if self._closed:
            return
        if interval is None:
            interval = DEFAULT_ANIMATION_SPEED
            if self._template.animated:
                interval = min(b.animation_speed for b in self._template.buttons.values() if b.animation)

        ticker = AnimationTicker(self, self._scheduler)
        ticker.handle = self._scheduler.run_repeating(ticker, 0, interval)
        self._ticker = ticker

    def stop_animation(self) -> None:
        ticker = self._ticker
        if ticker is not None:
            self._ticker = None
            ticker.cancel()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def close(self) -> None:
        """Close once: stop animating, fire the close handler, hide the surface."""
        if self._closed:
            return
        self._closed = True

        self.stop_animation()

        handler = self._template.close_handler
        if handler is not None:
            try:
                handler(self)
            except Exception:
                logger.exception("Close handler failed for menu %r", self._template.id)

        if self._display.current_top_surface(self._user) is self._surface:
            self._scheduler.run_next_tick(self._hide)
        logger.info("Closed menu %r for %r", self._template.id, self._user)

    def __repr__(self) -> str:
        state = "closed" if self._closed else "open"
        return f"Session(user={self._user!r}, template={self._template.id!r}, {state})"
