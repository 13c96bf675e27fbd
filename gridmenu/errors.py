"""Exceptions raised by the menu framework."""


class InvalidArgument(ValueError):
    """Bad template or button configuration, raised at configuration time."""


class NotFound(LookupError):
    """Lookup of an unregistered template id."""
