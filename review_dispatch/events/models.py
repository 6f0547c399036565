"""Value types shared by the assignment, review and requeue services."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import datetime
from enum import Enum
from typing import Any

from review_dispatch.kernel.time import isoformat_z


class EventStatus(str, Enum):
    PENDING = "Pending"
    ASSIGNED = "Assigned"
    COMPLETED = "Completed"


class ReviewDecision(str, Enum):
    APPROVED = "Approved"
    REJECTED = "Rejected"


@dataclass(frozen=True)
class AssignedEvent:
    event_id: str
    external_event_id: str | None
    region: str
    payload: dict[str, Any]
    status: str
    assigned_to: str
    assigned_at: datetime
    ingested_at: datetime | None = None


@dataclass(frozen=True)
class ReviewNotification:
    """Body posted to a regional authority when a review is submitted."""

    reviewed_by: str
    decision: ReviewDecision
    timestamp: datetime
    rating: float | None = None
    comment: str | None = None

    def to_wire(self) -> dict[str, Any]:
        return {
            "reviewedBy": self.reviewed_by,
            "decision": self.decision.value,
            "rating": self.rating,
            "comment": self.comment,
            "timestamp": isoformat_z(self.timestamp),
        }


@dataclass(frozen=True)
class CompletedReview:
    event_id: str
    external_event_id: str
    region: str
    reviewer_id: str
    decision: ReviewDecision
    completed_at: datetime


@dataclass
class RequeueResult:
    processed: int = 0
    requeued: int = 0
    errors: int = 0

    def to_dict(self) -> dict[str, int]:
        return asdict(self)
