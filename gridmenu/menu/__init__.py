"""
Menu definitions and live sessions.

Templates describe a menu once (patterns, buttons, hooks); sessions bind a
template to one user; the registry owns both and routes host input.
"""

from .button import Button
from .pattern import Pattern
from .registry import MenuRegistry
from .session import Session
from .template import Template

__all__ = ["Button", "Pattern", "Template", "Session", "MenuRegistry"]
