from __future__ import annotations

import re
from typing import Any


_ERROR_CODE_RE = re.compile(r"^[a-z][a-z0-9_]*(\.[a-z][a-z0-9_]*)*$")


class DispatchError(Exception):
    """Base typed error for the review dispatch service.

    - Stable `code` for programmatic handling across clients.
    - Human-readable `message` for operators and reviewers.
    - Optional `meta` payload for debugging (safe-to-expose only).
    - `retryable` tells the caller whether repeating the call can succeed.
    """

    retryable: bool = False

    def __init__(
        self,
        *,
        code: str,
        message: str,
        status_code: int = 500,
        meta: dict[str, Any] | None = None,
    ) -> None:
        if not _ERROR_CODE_RE.fullmatch(code):
            raise ValueError(
                "Invalid error code. Expected dot-separated lowercase tokens, "
                f"got: {code!r}"
            )
        super().__init__(message)
        self.code = code
        self.message = message
        self.status_code = int(status_code)
        self.meta = dict(meta or {})

    def to_public_dict(self, *, request_id: str | None) -> dict[str, Any]:
        payload: dict[str, Any] = {
            # Keep `detail` for compatibility with FastAPI error surfaces.
            "detail": self.message,
            "code": self.code,
        }
        if request_id:
            payload["request_id"] = request_id
        if self.meta:
            payload["meta"] = self.meta
        return payload


class NotFoundError(DispatchError):
    def __init__(self, *, message: str = "Not found", code: str = "resource.not_found", meta: dict[str, Any] | None = None):
        super().__init__(code=code, message=message, status_code=404, meta=meta)


class ValidationError(DispatchError):
    def __init__(
        self,
        *,
        message: str = "Validation error",
        code: str = "request.validation_error",
        meta: dict[str, Any] | None = None,
        status_code: int = 400,
    ):
        super().__init__(code=code, message=message, status_code=status_code, meta=meta)


class EventNotAssignedError(NotFoundError):
    """The event is unknown, leased to someone else, or no longer Assigned.

    The three causes share one remedy for the caller: claim again and retry.
    """

    def __init__(self, *, event_id: str, user_id: str):
        super().__init__(
            code="event.not_assigned",
            message=(
                f"Event {event_id} not found, not assigned to user {user_id}, "
                "or not in 'Assigned' state."
            ),
            meta={"event_id": event_id},
        )


class DataIntegrityError(DispatchError):
    def __init__(
        self,
        *,
        message: str = "Stored data is inconsistent",
        code: str = "data.integrity_error",
        meta: dict[str, Any] | None = None,
    ):
        super().__init__(code=code, message=message, status_code=422, meta=meta)


class UpstreamError(DispatchError):
    retryable = True

    def __init__(
        self,
        *,
        message: str = "Upstream service error",
        code: str = "upstream.error",
        meta: dict[str, Any] | None = None,
        status_code: int = 502,
    ):
        super().__init__(code=code, message=message, status_code=status_code, meta=meta)


class StorageError(DispatchError):
    retryable = True

    def __init__(
        self,
        *,
        message: str = "Storage unavailable",
        code: str = "storage.unavailable",
        meta: dict[str, Any] | None = None,
    ):
        super().__init__(code=code, message=message, status_code=503, meta=meta)
