"""Template table, active-session table and host event routing."""

from __future__ import annotations

import logging
from typing import Any, Hashable, Mapping, Optional

from ..core.signals import CLICK_SIGNAL, CLOSE_SIGNAL, DRAG_SIGNAL, SignalBus
from ..core.state import ConcurrentTable
from ..errors import NotFound
from ..host import ClickEvent, CloseEvent, DisplayHost, DragEvent, SurfaceKind, TaskScheduler
from .session import Clock, Session, monotonic_ms
from .template import Template, rows_to_size

logger = logging.getLogger(__name__)


class MenuRegistry:
    """
    Owns every template and every open session.

    Each user has at most one open session: opening another menu closes the
    previous one first. Host input reaches sessions through ``handle_click``,
    ``handle_drag`` and ``handle_close``, or through a ``SignalBus`` after
    ``attach``.

    Usage:
        registry = MenuRegistry(display, scheduler)
        registry.create_sized_template("shop", "Shop", 3).set_button(13, buy)
        registry.attach(bus)

        session = registry.open(user, "shop", {"coins": 10})
    """

    def __init__(self, display: DisplayHost, scheduler: TaskScheduler, clock: Clock = monotonic_ms):
        self._display = display
        self._scheduler = scheduler
        self._clock = clock
        self._templates: ConcurrentTable[str, Template] = ConcurrentTable("templates")
        self._sessions: ConcurrentTable[Hashable, Session] = ConcurrentTable("sessions")

    # ------------------------------------------------------------------
    # Templates
    # ------------------------------------------------------------------

    def create_template(self, id: str, title: str, kind: SurfaceKind) -> Template:
        """Create and register a template. Re-using an id replaces the old template."""
        template = Template(id, title, kind)
        if self._templates.replace(id, template) is not None:
            logger.warning("Template %r redefined", id)
        return template

    def create_sized_template(self, id: str, title: str, rows: int) -> Template:
        """Create a chest template with *rows* rows of nine cells (1-6 rows)."""
        size = rows_to_size(rows)
        return self.create_template(id, title, SurfaceKind.CHEST).set_size(size)

    def get_template(self, id: str) -> Optional[Template]:
        return self._templates.get(id)

    @property
    def templates(self) -> dict[str, Template]:
        return self._templates.snapshot()

    # ------------------------------------------------------------------
    # Sessions
    # ------------------------------------------------------------------

    def open(self, user: Hashable, template_id: str, data: Optional[Mapping[str, Any]] = None) -> Session:
        """Open *template_id* for *user*, replacing any menu they already have open.

        Raises:
            NotFound: If no template is registered under *template_id*.
        """
        template = self._templates.get(template_id)
        if template is None:
            raise NotFound(f"Template not found: {template_id}")

        self.close(user)

        session = Session(
            user,
            template,
            data,
            display=self._display,
            scheduler=self._scheduler,
            clock=self._clock,
        )
        displaced = self._sessions.replace(user, session)
        if displaced is not None:
            # Another open raced in between close() and here
            displaced.close()
        logger.info("Opened menu %r for %r", template_id, user)
        session.render()
        return session

    def close(self, user: Hashable) -> None:
        session = self._sessions.pop(user)
        if session is not None:
            session.close()

    def close_all(self) -> None:
        """Close every open session, e.g. on host shutdown."""
        sessions = self._sessions.drain()
        for session in sessions.values():
            session.close()
        if sessions:
            logger.info("Closed %d open menus", len(sessions))

    def get_session(self, user: Hashable) -> Optional[Session]:
        return self._sessions.get(user)

    @property
    def sessions(self) -> dict[Hashable, Session]:
        return self._sessions.snapshot()

    # ------------------------------------------------------------------
    # Host event routing
    # ------------------------------------------------------------------

    def _owning_session(self, user: Hashable, surface: Any) -> Optional[Session]:
        """The user's session, only if it is the exact owner of *surface*."""
        session = self._sessions.get(user)
        if session is None or getattr(surface, "owner", None) is not session:
            return None
        return session

    def handle_click(self, event: ClickEvent) -> None:
        session = self._owning_session(event.user, event.surface)
        if session is not None:
            session.handle_click(event)

    def handle_drag(self, event: DragEvent) -> None:
        session = self._owning_session(event.user, event.surface)
        if session is not None:
            session.handle_drag(event)

    def handle_close(self, event: CloseEvent) -> None:
        """Tear the session down one tick later, unless its surface is back on top.

        Hosts may report a close for the old surface right before opening a
        new one, so the decision waits for the next tick.
        """
        session = self._owning_session(event.user, event.surface)
        if session is None:
            return
        logger.debug("Close reported for %r, rechecking next tick", session)
        self._scheduler.run_next_tick(lambda: self._recheck_closed(event.user, session))

    def _recheck_closed(self, user: Hashable, session: Session) -> None:
        top = self._display.current_top_surface(user)
        if top is not None and getattr(top, "owner", None) is session:
            logger.debug("%r is still displayed, keeping it", session)
            return
        if self._sessions.pop_if(user, session):
            logger.info("Menu %r closed by %r", session.template.id, user)
        session.close()

    # ------------------------------------------------------------------
    # Signal bus wiring
    # ------------------------------------------------------------------

    def attach(self, bus: SignalBus) -> None:
        """Subscribe to the host's click, drag and close signals on *bus*."""
        bus.on(CLICK_SIGNAL, self._on_click_signal)
        bus.on(DRAG_SIGNAL, self._on_drag_signal)
        bus.on(CLOSE_SIGNAL, self._on_close_signal)

    def detach(self, bus: SignalBus) -> None:
        bus.off(CLICK_SIGNAL, self._on_click_signal)
        bus.off(DRAG_SIGNAL, self._on_drag_signal)
        bus.off(CLOSE_SIGNAL, self._on_close_signal)

    def _on_click_signal(self, signal: str, event: ClickEvent, **_) -> None:
        self.handle_click(event)

    def _on_drag_signal(self, signal: str, event: DragEvent, **_) -> None:
        self.handle_drag(event)

    def _on_close_signal(self, signal: str, event: CloseEvent, **_) -> None:
        self.handle_close(event)
