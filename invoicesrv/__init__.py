"""Invoice registration and listing for partner-company payments."""

__version__ = "0.1.0"