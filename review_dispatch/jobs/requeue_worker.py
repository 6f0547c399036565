"""
Lease Sweep Scheduler

Runs the lease sweep on a fixed interval. Embedded in the API process by
default; can also run on its own:

    python -m review_dispatch.jobs.requeue_worker
"""

from __future__ import annotations

import asyncio
import signal

import structlog
from apscheduler.schedulers.asyncio import AsyncIOScheduler

from review_dispatch.config import get_settings
from review_dispatch.db.client import close_db_pool, get_db_pool
from review_dispatch.events.models import RequeueResult
from review_dispatch.events.requeue import RequeueService
from review_dispatch.kernel.logging import configure_logging

logger = structlog.get_logger()


class RequeueScheduler:
    """Scheduler wrapper for the periodic lease sweep."""

    def __init__(self, requeue_service: RequeueService, *, interval_seconds: int) -> None:
        self._requeue_service = requeue_service
        self._interval_seconds = max(5, int(interval_seconds))
        self._scheduler = AsyncIOScheduler()

    @property
    def running(self) -> bool:
        return self._scheduler.running

    async def start(self) -> None:
        if not self._scheduler.running:
            self._scheduler.start()
            self._scheduler.add_job(
                self.sweep,
                "interval",
                seconds=self._interval_seconds,
                id="lease_sweep",
                max_instances=1,
                coalesce=True,
                replace_existing=True,
            )
            logger.info("Lease sweep scheduler started", interval_seconds=self._interval_seconds)

    async def shutdown(self) -> None:
        if self._scheduler.running:
            self._scheduler.shutdown(wait=False)
            # AsyncIOScheduler stops via call_soon_threadsafe; let that callback run.
            await asyncio.sleep(0)
            logger.info("Lease sweep scheduler stopped")

    async def sweep(self) -> RequeueResult:
        result = await self._requeue_service.requeue_timed_out_events()
        if result.errors:
            logger.warning("Scheduled lease sweep failed", **result.to_dict())
        elif result.processed:
            logger.info("Scheduled lease sweep finished", **result.to_dict())
        return result


async def _run() -> None:
    configure_logging()
    settings = get_settings()
    pool = await get_db_pool()
    scheduler = RequeueScheduler(
        RequeueService(pool, lease_ttl=settings.lease_ttl_minutes),
        interval_seconds=settings.requeue_interval_seconds,
    )
    stop = asyncio.Event()

    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, stop.set)
        except NotImplementedError:
            signal.signal(sig, lambda *_: loop.call_soon_threadsafe(stop.set))

    await scheduler.start()
    # Run once immediately on startup.
    await scheduler.sweep()
    try:
        await stop.wait()
    finally:
        await scheduler.shutdown()
        await close_db_pool()


def main() -> None:
    asyncio.run(_run())


if __name__ == "__main__":
    main()
