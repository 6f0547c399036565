from __future__ import annotations

from typing import Any

import structlog
from fastapi import FastAPI, HTTPException
from fastapi.exceptions import RequestValidationError
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from review_dispatch.kernel.errors import DispatchError

logger = structlog.get_logger()

# Seconds a client should wait before repeating a retryable request.
RETRY_AFTER_SECONDS = 1


def _request_id(request: Request) -> str | None:
    return getattr(getattr(request, "state", None), "request_id", None)


def _error_response(
    request: Request,
    *,
    status_code: int,
    code: str,
    detail: Any,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    payload: dict[str, Any] = {"detail": detail, "code": code}
    request_id = _request_id(request)
    if request_id:
        payload["request_id"] = request_id
    return JSONResponse(status_code=status_code, content=payload, headers=headers)


def register_exception_handlers(app: FastAPI) -> None:
    """Map typed dispatch errors and framework errors onto one JSON error shape.

    Every body carries FastAPI's `detail` plus a stable `code`; `request_id`
    is added when the request passed through `RequestIDMiddleware`.
    """

    @app.exception_handler(DispatchError)
    async def _dispatch_error_handler(request: Request, exc: DispatchError) -> Response:
        headers = {"Retry-After": str(RETRY_AFTER_SECONDS)} if exc.retryable else None
        if exc.status_code >= 500:
            logger.warning(
                "Request failed with dependency error",
                path=request.url.path,
                code=exc.code,
                status_code=exc.status_code,
            )
        return JSONResponse(
            status_code=exc.status_code,
            content=exc.to_public_dict(request_id=_request_id(request)),
            headers=headers,
        )

    @app.exception_handler(HTTPException)
    async def _http_exception_handler(request: Request, exc: HTTPException) -> Response:
        # Preserve existing shapes: FastAPI sometimes uses `detail` as str or list/dict.
        return _error_response(
            request,
            status_code=int(exc.status_code),
            code=f"http.{exc.status_code}",
            detail=exc.detail,
            headers=dict(exc.headers or {}),
        )

    @app.exception_handler(RequestValidationError)
    async def _validation_error_handler(request: Request, exc: RequestValidationError) -> Response:
        return _error_response(
            request,
            status_code=422,
            code="http.validation_error",
            detail=exc.errors(),
        )

    @app.exception_handler(Exception)
    async def _unhandled_exception_handler(request: Request, exc: Exception) -> Response:
        logger.exception("Unhandled exception", request_id=_request_id(request), error=str(exc))
        return _error_response(
            request,
            status_code=500,
            code="internal.unhandled",
            detail="Internal Server Error",
        )
