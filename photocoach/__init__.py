"""Photo Coach - local session history and prompt quota for the AI photography coach."""

__version__ = "1.0.0"
