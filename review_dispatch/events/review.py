"""
Review submission.

A review is recorded centrally only after the event's origin region has
acknowledged it. The event row stays locked (`FOR UPDATE`) for the whole
exchange, so neither a lease sweep nor another submission can touch it
mid-flight. Any failure rolls the transaction back and leaves the lease as it
was.
"""

from __future__ import annotations

from numbers import Real
from typing import Any

import asyncpg
import structlog

from review_dispatch.events.models import (
    CompletedReview,
    EventStatus,
    ReviewDecision,
    ReviewNotification,
)
from review_dispatch.events.regional import RegionalAuthorityClient
from review_dispatch.kernel.errors import (
    DataIntegrityError,
    DispatchError,
    EventNotAssignedError,
    StorageError,
    ValidationError,
)
from review_dispatch.kernel.ids import parse_uuid
from review_dispatch.kernel.time import utc_now
from review_dispatch.monitoring import metrics

logger = structlog.get_logger()

_LOCK_ASSIGNED_SQL = """
    SELECT event_id::text AS event_id, region_code, external_event_id
    FROM events
    WHERE event_id = $1 AND assigned_user_id = $2 AND status = $3
    FOR UPDATE
"""

# No status re-check needed: the row is held under FOR UPDATE.
_COMPLETE_SQL = """
    UPDATE events
    SET status = $1,
        completed_at = $2,
        assigned_user_id = NULL,
        assigned_at = NULL,
        review_user_id = $3,
        reviewed_at = $2,
        review_decision = $4,
        review_comment = $5,
        updated_at = $2
    WHERE event_id = $6
"""


def parse_decision(value: Any) -> ReviewDecision:
    if value is None or value == "":
        raise ValidationError(
            code="request.missing_decision",
            message='Missing required field: decision (e.g., "Approved", "Rejected").',
        )
    try:
        return ReviewDecision(value)
    except ValueError as exc:
        raise ValidationError(
            code="request.invalid_decision",
            message='Invalid value for decision. Must be "Approved" or "Rejected".',
            meta={"decision": str(value)},
        ) from exc


def _parse_rating(value: Any) -> float | None:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, Real):
        raise ValidationError(
            code="request.invalid_rating",
            message="Invalid value for rating. Must be a number.",
        )
    return float(value)


class ReviewService:
    def __init__(self, pool: asyncpg.Pool, regional_client: RegionalAuthorityClient) -> None:
        self._pool = pool
        self._regional_client = regional_client

    async def submit_review(
        self,
        reviewer_id: str,
        event_id: str,
        decision: ReviewDecision | str,
        rating: float | None = None,
        comment: str | None = None,
    ) -> CompletedReview:
        """Complete an Assigned event on behalf of its lease holder.

        Raises:
            ValidationError: malformed input, before any storage access.
            EventNotAssignedError: unknown event, lease held by someone else, or
                not in 'Assigned' state.
            DataIntegrityError: the event has no external id to address it by.
            UpstreamError: the regional authority failed, timed out, or rejected
                the review. The lease is preserved.
            StorageError: the transaction could not be completed.
        """
        event_uuid = parse_uuid(event_id, field="event_id")
        reviewer_uuid = parse_uuid(reviewer_id, field="user_id")
        review_decision = parse_decision(decision)
        review_rating = _parse_rating(rating)
        if comment is not None and not isinstance(comment, str):
            raise ValidationError(
                code="request.invalid_comment",
                message="Invalid value for comment. Must be a string.",
            )

        logger.info(
            "Processing review",
            event_id=event_id,
            reviewer_id=reviewer_id,
            decision=review_decision.value,
        )

        try:
            async with self._pool.acquire() as conn:
                async with conn.transaction():
                    row = await conn.fetchrow(
                        _LOCK_ASSIGNED_SQL,
                        event_uuid,
                        reviewer_uuid,
                        EventStatus.ASSIGNED.value,
                    )
                    if row is None:
                        raise EventNotAssignedError(event_id=event_id, user_id=reviewer_id)

                    region = row["region_code"]
                    external_event_id = row["external_event_id"]
                    if not external_event_id:
                        raise DataIntegrityError(
                            code="event.missing_external_id",
                            message=(
                                f"Cannot process review for event {event_id}: missing "
                                "external_event_id needed for regional API call."
                            ),
                            meta={"event_id": event_id, "region": region},
                        )

                    now = utc_now()
                    await self._regional_client.submit_review(
                        event_id=event_id,
                        region=region,
                        external_event_id=external_event_id,
                        notification=ReviewNotification(
                            reviewed_by=reviewer_id,
                            decision=review_decision,
                            rating=review_rating,
                            comment=comment,
                            timestamp=now,
                        ),
                    )

                    await conn.execute(
                        _COMPLETE_SQL,
                        EventStatus.COMPLETED.value,
                        now,
                        reviewer_uuid,
                        review_decision.value,
                        comment,
                        event_uuid,
                    )
        except DispatchError as exc:
            logger.warning(
                "Review rolled back",
                event_id=event_id,
                reviewer_id=reviewer_id,
                code=exc.code,
                error=exc.message,
            )
            metrics.reviews_total.labels(decision=review_decision.value, outcome=exc.code).inc()
            raise
        except Exception as exc:
            logger.error(
                "Review transaction failed, rolled back",
                event_id=event_id,
                reviewer_id=reviewer_id,
                error=str(exc),
            )
            metrics.reviews_total.labels(decision=review_decision.value, outcome="storage.unavailable").inc()
            raise StorageError(
                message=f"Failed to process review for event {event_id}.",
                meta={"operation": "complete", "event_id": event_id},
            ) from exc

        metrics.reviews_total.labels(decision=review_decision.value, outcome="completed").inc()
        logger.info(
            "Review committed, event completed",
            event_id=event_id,
            reviewer_id=reviewer_id,
            region=region,
        )
        return CompletedReview(
            event_id=event_id,
            external_event_id=external_event_id,
            region=region,
            reviewer_id=reviewer_id,
            decision=review_decision,
            completed_at=now,
        )
