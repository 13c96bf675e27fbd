"""Terminal demo: a shop menu driven by scripted clicks.

Run with ``python -m gridmenu.demo``. Uses the in-memory display, so the
"screen" is the plain-text render of the user's top surface.
"""

from __future__ import annotations

import asyncio
import logging
import sys

from .config import FrameworkConfig, get_config
from .core.scheduler import TickScheduler
from .core.signals import CLICK_SIGNAL, SignalBus
from .display.grid import Color, Item, MemoryDisplay
from .host import ClickEvent
from .menu import Button, MenuRegistry, Pattern, Session

logger = logging.getLogger(__name__)

USER = "steve"

BORDER = Pattern(
    "#########",
    "#       #",
    "#########",
).set("#", Item("#", Color.GRAY))

SPINNER = [Item(c, Color.YELLOW) for c in "|/-\\"]


def build_registry(display: MemoryDisplay, scheduler) -> MenuRegistry:
    """Registry with a single 3-row "shop" template."""
    registry = MenuRegistry(display, scheduler)

    def buy(event: ClickEvent) -> None:
        session: Session = event.surface.owner
        if session.data["coins"] > 0:
            session.data["coins"] -= 1
            session.data["bought"] += 1
        session.render()

    def show_coins(session: Session) -> None:
        session.surface.set_cell(10, Item(str(min(session.data["coins"], 9)), Color.GREEN))

    def on_close(session: Session) -> None:
        logger.info("Shop closed, %d bought", session.data["bought"])

    registry.create_sized_template("shop", "Shop", 3) \
        .add_pattern(BORDER) \
        .set_button(13, Button(Item("$", Color.GREEN, label="Buy"), buy).set_click_cooldown(200)) \
        .set_button(16, Button(SPINNER[0]).set_animation(SPINNER, 4)) \
        .set_update_handler(show_coins) \
        .set_close_handler(on_close)
    return registry


async def run_demo(config: FrameworkConfig) -> None:
    loop = asyncio.get_running_loop()
    bus = SignalBus(loop)
    scheduler = TickScheduler(loop, config.scheduler.tick_seconds)
    display = MemoryDisplay(config.menu.row_width, bus)
    registry = build_registry(display, scheduler)
    registry.attach(bus)

    session = registry.open(USER, "shop", {"coins": 3, "bought": 0})
    session.start_animation()

    tick = config.scheduler.tick_seconds
    for step in range(6):
        await asyncio.sleep(tick * 5)
        bus.emit(CLICK_SIGNAL, event=ClickEvent(USER, session.surface, 13))
        top = display.current_top_surface(USER)
        if top is not None:
            print(f"--- step {step}\n{top.render_plain()}")

    display.hide(USER)
    await asyncio.sleep(tick * 3)
    registry.close_all()
    scheduler.stop()


def main():
    """Entry point for the demo."""
    config = get_config()
    logging.basicConfig(
        level=getattr(logging, config.logging.level.upper(), logging.INFO),
        stream=sys.stderr,
        format="%(name)s %(levelname)s: %(message)s",
    )
    asyncio.run(run_demo(config))


if __name__ == "__main__":
    main()
