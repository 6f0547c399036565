"""
Event Distribution Engine

Lease-based hand-out of regional review events:
- claim: batch assignment under FOR UPDATE SKIP LOCKED
- review: completion confirmed by the origin region before it is recorded
- requeue: sweep of expired leases back to Pending
"""

from review_dispatch.events.assignment import AssignmentService
from review_dispatch.events.models import (
    AssignedEvent,
    CompletedReview,
    EventStatus,
    RequeueResult,
    ReviewDecision,
    ReviewNotification,
)
from review_dispatch.events.regional import RegionalAuthorityClient
from review_dispatch.events.requeue import RequeueService, resolve_lease_ttl
from review_dispatch.events.review import ReviewService

__all__ = [
    "AssignedEvent",
    "AssignmentService",
    "CompletedReview",
    "EventStatus",
    "RegionalAuthorityClient",
    "RequeueResult",
    "RequeueService",
    "ReviewDecision",
    "ReviewNotification",
    "ReviewService",
    "resolve_lease_ttl",
]
