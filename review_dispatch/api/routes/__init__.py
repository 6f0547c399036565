"""API route modules."""

from . import (
    events,
    health,
    internal,
)

__all__ = [
    "events",
    "health",
    "internal",
]
