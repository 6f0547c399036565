from __future__ import annotations

import pytest

from review_dispatch.kernel.errors import (
    DataIntegrityError,
    DispatchError,
    EventNotAssignedError,
    NotFoundError,
    StorageError,
    UpstreamError,
    ValidationError,
)


@pytest.mark.unit
def test_error_code_must_be_dotted_lowercase():
    with pytest.raises(ValueError):
        DispatchError(code="Bad Code", message="nope")


@pytest.mark.unit
@pytest.mark.parametrize(
    ("error", "status_code", "retryable"),
    [
        (ValidationError(), 400, False),
        (NotFoundError(), 404, False),
        (EventNotAssignedError(event_id="e", user_id="u"), 404, False),
        (DataIntegrityError(), 422, False),
        (UpstreamError(), 502, True),
        (StorageError(), 503, True),
    ],
)
def test_error_taxonomy_status_and_retryability(error, status_code, retryable):
    assert error.status_code == status_code
    assert error.retryable is retryable


@pytest.mark.unit
def test_not_assigned_is_a_not_found():
    assert isinstance(EventNotAssignedError(event_id="e", user_id="u"), NotFoundError)


@pytest.mark.unit
def test_public_dict_omits_empty_fields():
    error = ValidationError(code="request.invalid_decision", message="Bad decision")
    assert error.to_public_dict(request_id=None) == {"detail": "Bad decision", "code": "request.invalid_decision"}

    error = UpstreamError(code="upstream.regional_api_failed", message="x", meta={"status_code": 500})
    assert error.to_public_dict(request_id="req_1") == {
        "detail": "x",
        "code": "upstream.regional_api_failed",
        "request_id": "req_1",
        "meta": {"status_code": 500},
    }
