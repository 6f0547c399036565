"""
Lease sweep.

Returns Assigned events whose lease has outlived the TTL to Pending so they
can be claimed again. Safe to run from several processes at once and safe to
re-run: the update only touches rows that are still Assigned.
"""

from __future__ import annotations

import math
from datetime import timedelta
from typing import Any

import asyncpg
import structlog

from review_dispatch.config import DEFAULT_LEASE_TTL_MINUTES
from review_dispatch.events.models import EventStatus, RequeueResult
from review_dispatch.kernel.time import utc_now
from review_dispatch.monitoring import metrics

logger = structlog.get_logger()

DEFAULT_LEASE_TTL = timedelta(minutes=DEFAULT_LEASE_TTL_MINUTES)
# Upper bound for a valid TTL; `now - ttl` stays within the datetime range.
MAX_LEASE_TTL = timedelta(days=365)

_FIND_EXPIRED_SQL = """
    SELECT event_id
    FROM events
    WHERE status = $1 AND assigned_at < $2
"""

_REQUEUE_SQL = """
    UPDATE events
    SET status = $1,
        assigned_user_id = NULL,
        assigned_at = NULL,
        updated_at = $4
    WHERE event_id = ANY($2::uuid[]) AND status = $3
"""


def _parse_ttl(value: Any) -> timedelta | None:
    """Interpret a TTL given as a timedelta or as minutes (number or numeric string)."""
    if isinstance(value, timedelta):
        ttl = value
    elif isinstance(value, bool) or value is None:
        return None
    elif isinstance(value, (int, float, str)):
        try:
            minutes = float(value.strip()) if isinstance(value, str) else float(value)
            if not math.isfinite(minutes):
                return None
            ttl = timedelta(minutes=minutes)
        except (ValueError, OverflowError):
            return None
    else:
        return None
    if ttl <= timedelta(0) or ttl > MAX_LEASE_TTL:
        return None
    return ttl


def resolve_lease_ttl(value: Any, *, fallback: Any = DEFAULT_LEASE_TTL) -> timedelta:
    """Resolve a lease TTL, falling back instead of failing on bad input.

    Order: `value`, then `fallback`, then the built-in 30 minute default.
    """
    ttl = _parse_ttl(value)
    if ttl is not None:
        return ttl
    fallback_ttl = _parse_ttl(fallback) or DEFAULT_LEASE_TTL
    if value is not None:
        logger.error(
            "Invalid lease TTL, using fallback",
            lease_ttl=str(value),
            fallback_minutes=fallback_ttl.total_seconds() / 60,
        )
    return fallback_ttl


def _rows_affected(status: str) -> int:
    # asyncpg returns strings like "UPDATE 3"
    try:
        return int(str(status).split()[-1])
    except (IndexError, ValueError):
        return 0


class RequeueService:
    def __init__(self, pool: asyncpg.Pool, *, lease_ttl: Any = DEFAULT_LEASE_TTL) -> None:
        self._pool = pool
        self._lease_ttl = resolve_lease_ttl(lease_ttl)

    @property
    def lease_ttl(self) -> timedelta:
        return self._lease_ttl

    async def requeue_timed_out_events(self, lease_ttl: Any = None) -> RequeueResult:
        """Sweep expired leases back to Pending.

        Never raises for storage failures: they are rolled back and counted in
        `errors`. `requeued < processed` means some events changed state
        between the read and the update, which is expected under concurrency.
        """
        result = RequeueResult()
        ttl = resolve_lease_ttl(lease_ttl, fallback=self._lease_ttl)
        now = utc_now()
        cutoff = now - ttl

        logger.info("Checking for expired leases", ttl_minutes=ttl.total_seconds() / 60, cutoff=cutoff.isoformat())

        try:
            async with self._pool.acquire() as conn:
                rows = await conn.fetch(_FIND_EXPIRED_SQL, EventStatus.ASSIGNED.value, cutoff)
                expired_ids = [row["event_id"] for row in rows]
                result.processed = len(expired_ids)

                if not expired_ids:
                    logger.info("No timed-out events found")
                    return result

                logger.info("Found timed-out events, requeuing", count=result.processed)
                async with conn.transaction():
                    status = await conn.execute(
                        _REQUEUE_SQL,
                        EventStatus.PENDING.value,
                        expired_ids,
                        EventStatus.ASSIGNED.value,
                        now,
                    )
                result.requeued = _rows_affected(status)
        except Exception as exc:
            logger.error("Lease sweep failed, rolled back", error=str(exc), processed=result.processed)
            result.errors += 1
            metrics.requeue_errors_total.inc()
            return result
        finally:
            metrics.requeue_events_total.labels(kind="processed").inc(result.processed)
            metrics.requeue_events_total.labels(kind="requeued").inc(result.requeued)

        logger.info("Requeued timed-out events", requeued=result.requeued)
        if result.requeued != result.processed:
            logger.warning(
                "Mismatch in processed vs requeued count; some events changed status concurrently",
                processed=result.processed,
                requeued=result.requeued,
            )
        return result
