"""Batch assignment: hand out Pending events under an exclusive lease."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

import asyncpg
import structlog

from review_dispatch.events.models import AssignedEvent, EventStatus
from review_dispatch.kernel.errors import DispatchError, StorageError
from review_dispatch.kernel.ids import parse_uuid
from review_dispatch.kernel.time import utc_now
from review_dispatch.monitoring import metrics

logger = structlog.get_logger()

_LOCK_PENDING_SQL = """
    SELECT event_id
    FROM events
    WHERE status = $1 AND region_code = ANY($2::varchar[])
    ORDER BY ingested_at ASC
    LIMIT $3
    FOR UPDATE SKIP LOCKED
"""

_ASSIGN_SQL = """
    UPDATE events
    SET status = $1,
        assigned_user_id = $2,
        assigned_at = $3,
        updated_at = $3
    WHERE event_id = ANY($4::uuid[])
"""

_SELECT_ASSIGNED_SQL = """
    SELECT
        event_id::text AS event_id,
        external_event_id,
        region_code,
        event_payload,
        status,
        assigned_user_id::text AS assigned_user_id,
        assigned_at,
        ingested_at
    FROM events
    WHERE event_id = ANY($1::uuid[])
    ORDER BY ingested_at ASC
"""


def _row_to_event(row: Any) -> AssignedEvent:
    return AssignedEvent(
        event_id=str(row["event_id"]),
        external_event_id=row["external_event_id"],
        region=row["region_code"],
        payload=row["event_payload"] or {},
        status=row["status"],
        assigned_to=str(row["assigned_user_id"]),
        assigned_at=row["assigned_at"],
        ingested_at=row["ingested_at"],
    )


class AssignmentService:
    """Claims batches of Pending events for a reviewer.

    Exclusivity comes from `FOR UPDATE SKIP LOCKED`: concurrent claims never
    select the same row and never wait on each other, they just see fewer rows.
    """

    def __init__(self, pool: asyncpg.Pool, *, default_batch_size: int = 10) -> None:
        self._pool = pool
        self._default_batch_size = default_batch_size

    async def claim_batch(
        self,
        requester_id: str,
        permitted_regions: Iterable[str],
        max_count: int | None = None,
    ) -> list[AssignedEvent]:
        regions = sorted({region for region in permitted_regions if region})
        limit = self._default_batch_size if max_count is None else int(max_count)

        if not regions:
            logger.info("No permitted regions, nothing to assign", requester_id=requester_id)
            metrics.claim_requests_total.labels(outcome="no_regions").inc()
            return []
        if limit <= 0:
            logger.info("Non-positive batch size, nothing to assign", requester_id=requester_id, max_count=limit)
            metrics.claim_requests_total.labels(outcome="no_capacity").inc()
            return []

        requester_uuid = parse_uuid(requester_id, field="user_id")
        now = utc_now()

        try:
            async with self._pool.acquire() as conn:
                async with conn.transaction():
                    locked = await conn.fetch(
                        _LOCK_PENDING_SQL,
                        EventStatus.PENDING.value,
                        regions,
                        limit,
                    )
                    event_ids = [row["event_id"] for row in locked]

                    if not event_ids:
                        logger.info(
                            "No assignable events found or all eligible were locked",
                            requester_id=requester_id,
                            regions=regions,
                        )
                        metrics.claim_requests_total.labels(outcome="empty").inc()
                        return []

                    await conn.execute(
                        _ASSIGN_SQL,
                        EventStatus.ASSIGNED.value,
                        requester_uuid,
                        now,
                        event_ids,
                    )
                    rows = await conn.fetch(_SELECT_ASSIGNED_SQL, event_ids)
        except DispatchError:
            raise
        except Exception as exc:
            logger.error(
                "Batch assignment transaction failed, rolled back",
                requester_id=requester_id,
                error=str(exc),
            )
            metrics.claim_requests_total.labels(outcome="error").inc()
            raise StorageError(
                message="Failed to assign event batch due to database error.",
                meta={"operation": "claim"},
            ) from exc

        events = [_row_to_event(row) for row in rows]
        metrics.claim_requests_total.labels(outcome="assigned").inc()
        metrics.events_claimed_total.inc(len(events))
        logger.info(
            "Assigned event batch",
            requester_id=requester_id,
            regions=regions,
            requested=limit,
            assigned=len(events),
        )
        return events
