"""Database models."""

from review_dispatch.db.models.directory import (
    Base,
    Team,
    TeamRegion,
    User,
)
from review_dispatch.db.models.events import (
    EventRecord,
)

__all__ = [
    "Base",
    "Team",
    "TeamRegion",
    "User",
    "EventRecord",
]
