"""Template-driven interactive grid menus for stateful hosts."""

from .errors import InvalidArgument, NotFound
from .host import ClickEvent, CloseEvent, DragEvent, SurfaceKind
from .menu import Button, MenuRegistry, Pattern, Session, Template

__all__ = [
    # Errors
    "InvalidArgument",
    "NotFound",
    # Host events
    "ClickEvent",
    "DragEvent",
    "CloseEvent",
    "SurfaceKind",
    # Menus
    "Button",
    "Pattern",
    "Template",
    "Session",
    "MenuRegistry",
]
