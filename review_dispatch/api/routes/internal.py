"""
Internal Operations API Routes

Endpoints for schedulers and operators (e.g. a CronJob triggering the lease
sweep when the in-process scheduler is disabled).
"""

from __future__ import annotations

import structlog
from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from review_dispatch.api.deps import get_requeue_service
from review_dispatch.events import RequeueService

logger = structlog.get_logger()

router = APIRouter(prefix="/internal", tags=["Internal"])


class TriggerRequeueRequest(BaseModel):
    lease_ttl_minutes: float | str | None = Field(
        default=None,
        description="Override the configured lease TTL; invalid values fall back to it",
    )


class RequeueDetails(BaseModel):
    processed: int
    requeued: int
    errors: int


class TriggerRequeueResponse(BaseModel):
    message: str
    details: RequeueDetails


@router.post("/trigger-requeue", response_model=TriggerRequeueResponse)
async def trigger_requeue(
    request: TriggerRequeueRequest | None = None,
    requeue_service: RequeueService = Depends(get_requeue_service),
) -> TriggerRequeueResponse:
    logger.info("Received request to trigger event re-queue")
    lease_ttl = request.lease_ttl_minutes if request else None
    result = await requeue_service.requeue_timed_out_events(lease_ttl)

    if result.errors:
        message = "Re-queue process failed; changes were rolled back."
    elif result.processed == 0:
        message = "No timed-out events found."
    else:
        message = "Re-queue process triggered successfully."
    return TriggerRequeueResponse(message=message, details=RequeueDetails(**result.to_dict()))
