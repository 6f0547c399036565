"""
Event Assignment & Review API Routes

- request a batch of events for the calling reviewer
- submit a review decision for an event the caller holds
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

import structlog
from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from review_dispatch.api.deps import (
    get_assignment_service,
    get_caller_id,
    get_caller_team_id,
    get_review_service,
    get_team_directory,
)
from review_dispatch.events import AssignedEvent, AssignmentService, ReviewService
from review_dispatch.identity import TeamDirectory

logger = structlog.get_logger()

router = APIRouter(prefix="/events", tags=["Events"])


class AssignedEventResponse(BaseModel):
    event_id: str
    external_event_id: str | None = None
    region: str
    payload: dict[str, Any]
    status: str
    assigned_to: str
    assigned_at: datetime


class BatchResponse(BaseModel):
    events: list[AssignedEventResponse]
    message: str | None = None


class ReviewRequest(BaseModel):
    # Validated by the review service so missing/invalid values share one error shape.
    decision: str | None = None
    rating: float | None = None
    comment: str | None = Field(default=None, max_length=10_000)


class ReviewResponse(BaseModel):
    message: str
    event_id: str
    status: str
    completed_at: datetime


def _to_response(event: AssignedEvent) -> AssignedEventResponse:
    return AssignedEventResponse(
        event_id=event.event_id,
        external_event_id=event.external_event_id,
        region=event.region,
        payload=event.payload,
        status=event.status,
        assigned_to=event.assigned_to,
        assigned_at=event.assigned_at,
    )


@router.post("/batch", response_model=BatchResponse)
async def request_batch(
    user_id: str = Depends(get_caller_id),
    team_id: str | None = Depends(get_caller_team_id),
    directory: TeamDirectory = Depends(get_team_directory),
    assignment_service: AssignmentService = Depends(get_assignment_service),
) -> BatchResponse:
    """Claim up to the team's batch size of Pending events from the team's regions."""
    logger.info("Batch requested", user_id=user_id, team_id=team_id)

    profile = await directory.get_assignment_profile(user_id, team_id)
    batch = await assignment_service.claim_batch(user_id, profile.regions, profile.batch_size)

    if not batch:
        return BatchResponse(events=[], message="No events currently available for assignment.")
    return BatchResponse(events=[_to_response(event) for event in batch])


@router.post("/{event_id}/review", response_model=ReviewResponse)
async def submit_review(
    event_id: str,
    request: ReviewRequest,
    user_id: str = Depends(get_caller_id),
    review_service: ReviewService = Depends(get_review_service),
) -> ReviewResponse:
    logger.info("Review submitted", user_id=user_id, event_id=event_id, decision=request.decision)

    completed = await review_service.submit_review(
        user_id,
        event_id,
        request.decision,
        rating=request.rating,
        comment=request.comment,
    )
    return ReviewResponse(
        message=f"Review submitted successfully for event {event_id}",
        event_id=completed.event_id,
        status="Completed",
        completed_at=completed.completed_at,
    )
