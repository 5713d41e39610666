"""Command implementations for the corpsite CLI."""

from .migrate import (
    format_status,
    handle_down,
    handle_reset,
    handle_status,
    handle_up,
    truncate,
)

__all__ = [
    "handle_up",
    "handle_down",
    "handle_status",
    "handle_reset",
    "format_status",
    "truncate",
]
