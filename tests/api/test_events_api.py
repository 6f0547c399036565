"""
API tests for the event batch and review endpoints.

Services are AsyncMock stand-ins injected on app.state.
"""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from review_dispatch.events import AssignedEvent, CompletedReview, ReviewDecision
from review_dispatch.kernel.errors import (
    DataIntegrityError,
    EventNotAssignedError,
    NotFoundError,
    StorageError,
    UpstreamError,
    ValidationError,
)

pytestmark = [pytest.mark.api, pytest.mark.asyncio]

USER_ID = "11111111-1111-1111-1111-111111111111"
EVENT_ID = "33333333-3333-3333-3333-333333333333"
NOW = datetime(2026, 1, 1, tzinfo=timezone.utc)


def _assigned(event_id: str, region: str = "r1") -> AssignedEvent:
    return AssignedEvent(
        event_id=event_id,
        external_event_id=f"ext-{event_id[:4]}",
        region=region,
        payload={"type": "test"},
        status="Assigned",
        assigned_to=USER_ID,
        assigned_at=NOW,
    )


class TestRequestBatch:
    async def test_batch_claims_with_team_regions_and_size(self, async_client, engine_services):
        assignment = engine_services["assignment_service"]
        assignment.claim_batch.return_value = [_assigned(EVENT_ID), _assigned("44444444-4444-4444-4444-444444444444", "r2")]

        response = await async_client.post("/api/v1/events/batch", headers={"X-User-ID": USER_ID})

        assert response.status_code == 200
        data = response.json()
        assert [event["event_id"] for event in data["events"]] == [
            EVENT_ID,
            "44444444-4444-4444-4444-444444444444",
        ]
        assert data["events"][0]["status"] == "Assigned"
        assert data["events"][0]["assigned_to"] == USER_ID
        assert data["message"] is None

        engine_services["team_directory"].get_assignment_profile.assert_awaited_once_with(USER_ID, None)
        user_id, regions, batch_size = assignment.claim_batch.await_args.args
        assert user_id == USER_ID
        assert regions == frozenset({"r1", "r2"})
        assert batch_size == 2

    async def test_batch_forwards_team_header(self, async_client, engine_services):
        team_id = "22222222-2222-2222-2222-222222222222"

        await async_client.post("/api/v1/events/batch", headers={"X-User-ID": USER_ID, "X-Team-ID": team_id})

        engine_services["team_directory"].get_assignment_profile.assert_awaited_once_with(USER_ID, team_id)

    async def test_empty_batch_has_message(self, async_client):
        response = await async_client.post("/api/v1/events/batch", headers={"X-User-ID": USER_ID})

        assert response.status_code == 200
        assert response.json() == {
            "events": [],
            "message": "No events currently available for assignment.",
        }

    async def test_missing_user_header_is_400(self, async_client, engine_services):
        response = await async_client.post("/api/v1/events/batch")

        assert response.status_code == 400
        assert response.json()["code"] == "request.missing_user_id"
        engine_services["assignment_service"].claim_batch.assert_not_called()

    async def test_unknown_user_is_404(self, async_client, engine_services):
        engine_services["team_directory"].get_assignment_profile.side_effect = NotFoundError(
            code="user.not_found", message="User not found or not a member of any team."
        )

        response = await async_client.post("/api/v1/events/batch", headers={"X-User-ID": USER_ID})

        assert response.status_code == 404
        assert response.json()["code"] == "user.not_found"

    async def test_storage_failure_is_503_retryable(self, async_client, engine_services):
        engine_services["assignment_service"].claim_batch.side_effect = StorageError()

        response = await async_client.post("/api/v1/events/batch", headers={"X-User-ID": USER_ID})

        assert response.status_code == 503
        assert response.headers["Retry-After"] == "1"


class TestSubmitReview:
    async def test_review_success(self, async_client, engine_services):
        review = engine_services["review_service"]
        review.submit_review.return_value = CompletedReview(
            event_id=EVENT_ID,
            external_event_id="ext-001",
            region="r1",
            reviewer_id=USER_ID,
            decision=ReviewDecision.APPROVED,
            completed_at=NOW,
        )

        response = await async_client.post(
            f"/api/v1/events/{EVENT_ID}/review",
            headers={"X-User-ID": USER_ID},
            json={"decision": "Approved", "rating": 5, "comment": "ok"},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["event_id"] == EVENT_ID
        assert data["status"] == "Completed"
        assert data["message"] == f"Review submitted successfully for event {EVENT_ID}"
        review.submit_review.assert_awaited_once_with(
            USER_ID, EVENT_ID, "Approved", rating=5.0, comment="ok"
        )

    @pytest.mark.parametrize(
        ("error", "status_code", "code"),
        [
            (ValidationError(code="request.invalid_decision", message="bad"), 400, "request.invalid_decision"),
            (EventNotAssignedError(event_id=EVENT_ID, user_id=USER_ID), 404, "event.not_assigned"),
            (DataIntegrityError(code="event.missing_external_id", message="missing"), 422, "event.missing_external_id"),
            (UpstreamError(code="upstream.regional_api_failed", message="rejected"), 502, "upstream.regional_api_failed"),
            (StorageError(), 503, "storage.unavailable"),
        ],
    )
    async def test_review_errors_map_to_status(self, async_client, engine_services, error, status_code, code):
        engine_services["review_service"].submit_review.side_effect = error

        response = await async_client.post(
            f"/api/v1/events/{EVENT_ID}/review",
            headers={"X-User-ID": USER_ID},
            json={"decision": "Approved"},
        )

        assert response.status_code == status_code
        assert response.json()["code"] == code

    async def test_review_missing_user_header_is_400(self, async_client, engine_services):
        response = await async_client.post(f"/api/v1/events/{EVENT_ID}/review", json={"decision": "Approved"})

        assert response.status_code == 400
        engine_services["review_service"].submit_review.assert_not_called()
