"""API tests for the internal lease sweep trigger."""

from __future__ import annotations

import pytest

from review_dispatch.events import RequeueResult, RequeueService

pytestmark = [pytest.mark.api, pytest.mark.asyncio]


class TestTriggerRequeue:
    @pytest.mark.parametrize(
        ("result", "message"),
        [
            (RequeueResult(processed=1, requeued=1), "Re-queue process triggered successfully."),
            (RequeueResult(), "No timed-out events found."),
            (RequeueResult(processed=2, errors=1), "Re-queue process failed; changes were rolled back."),
        ],
    )
    async def test_trigger_reports_counts(self, async_client, engine_services, result, message):
        engine_services["requeue_service"].requeue_timed_out_events.return_value = result

        response = await async_client.post("/api/v1/internal/trigger-requeue")

        assert response.status_code == 200
        assert response.json() == {"message": message, "details": result.to_dict()}
        engine_services["requeue_service"].requeue_timed_out_events.assert_awaited_once_with(None)

    async def test_trigger_forwards_ttl_override(self, async_client, engine_services):
        requeue = engine_services["requeue_service"]
        requeue.requeue_timed_out_events.return_value = RequeueResult()

        response = await async_client.post("/api/v1/internal/trigger-requeue", json={"lease_ttl_minutes": 5})

        assert response.status_code == 200
        assert requeue.requeue_timed_out_events.await_args.args[0] == 5

    async def test_trigger_with_non_finite_ttl_falls_back(self, async_client, app, mock_db_pool):
        app.state.requeue_service = RequeueService(mock_db_pool)

        response = await async_client.post("/api/v1/internal/trigger-requeue", json={"lease_ttl_minutes": "inf"})

        assert response.status_code == 200
        assert response.json() == {
            "message": "No timed-out events found.",
            "details": {"processed": 0, "requeued": 0, "errors": 0},
        }
