"""Delivery of host surface events to the menu registry.

A host reports each click, drag or close on a surface by emitting one of the
signals below with the event object as the ``event`` keyword::

    bus.emit(CLICK_SIGNAL, event=ClickEvent(user, surface, slot))

``MenuRegistry.attach`` subscribes to all three.
"""

from __future__ import annotations

import asyncio
import logging
import threading
from collections import defaultdict
from typing import Any, Callable, Optional

logger = logging.getLogger(__name__)

CLICK_SIGNAL = "surface:click"
DRAG_SIGNAL = "surface:drag"
CLOSE_SIGNAL = "surface:close"

Listener = Callable[..., Any]


class SignalBus:
    """Routes surface events from host threads to menu listeners.

    Bound to a loop, events emitted off that loop are handed over with
    ``call_soon_threadsafe`` so listeners always run on the loop thread.
    Unbound, or when emitted on the loop already, listeners run before
    ``emit`` returns, which is what lets a listener cancel a click in time
    for the host to honor it. A failing listener is logged and the rest
    still see the event.
    """

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        self._loop = loop
        self._listeners: dict[str, list[Listener]] = defaultdict(list)
        self._lock = threading.Lock()

    def on(self, signal: str, listener: Listener) -> None:
        """Call *listener* as ``listener(signal, event=...)`` for each *signal*."""
        with self._lock:
            self._listeners[signal].append(listener)

    def off(self, signal: str, listener: Listener) -> None:
        """Drop *listener* from *signal*. Unknown listeners are ignored."""
        with self._lock:
            listeners = self._listeners.get(signal)
            if listeners and listener in listeners:
                listeners.remove(listener)

    def emit(self, signal: str, **data) -> None:
        with self._lock:
            listeners = tuple(self._listeners.get(signal, ()))
        if not listeners:
            return

        if self._loop is None or self._on_loop():
            self._dispatch(signal, listeners, data)
        else:
            self._loop.call_soon_threadsafe(self._dispatch, signal, listeners, data)

    def _on_loop(self) -> bool:
        try:
            return asyncio.get_running_loop() is self._loop
        except RuntimeError:
            return False

    def _dispatch(self, signal: str, listeners: tuple[Listener, ...], data: dict) -> None:
        for listener in listeners:
            try:
                listener(signal, **data)
            except Exception:
                logger.exception("Listener for %r failed on %r", signal, data.get("event"))
