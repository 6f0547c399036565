"""FastAPI dependencies: engine services and caller identity."""

from __future__ import annotations

from fastapi import Header, Request

from review_dispatch.events import AssignmentService, RequeueService, ReviewService
from review_dispatch.identity import TeamDirectory
from review_dispatch.kernel.errors import ValidationError


def _state_attr(request: Request, name: str):
    service = getattr(request.app.state, name, None)
    if service is None:
        raise RuntimeError(f"{name} not initialized. Is the application lifespan running?")
    return service


def get_assignment_service(request: Request) -> AssignmentService:
    return _state_attr(request, "assignment_service")


def get_review_service(request: Request) -> ReviewService:
    return _state_attr(request, "review_service")


def get_requeue_service(request: Request) -> RequeueService:
    return _state_attr(request, "requeue_service")


def get_team_directory(request: Request) -> TeamDirectory:
    return _state_attr(request, "team_directory")


async def get_caller_id(x_user_id: str | None = Header(default=None)) -> str:
    if not x_user_id or not x_user_id.strip():
        raise ValidationError(code="request.missing_user_id", message="Missing X-User-ID header.")
    return x_user_id.strip()


async def get_caller_team_id(x_team_id: str | None = Header(default=None)) -> str | None:
    if x_team_id and x_team_id.strip():
        return x_team_id.strip()
    return None
