"""In-memory display host - items, grid surfaces and per-user top surface."""

from .grid import Color, GridSurface, Item, MemoryDisplay

__all__ = [
    "Color",
    "Item",
    "GridSurface",
    "MemoryDisplay",
]
