"""Resolve a reviewer's assignment profile (team regions and batch size)."""

from __future__ import annotations

from dataclasses import dataclass

import structlog
from sqlalchemy import text

from review_dispatch.db.client import get_db_session
from review_dispatch.kernel.errors import NotFoundError
from review_dispatch.kernel.ids import parse_uuid

logger = structlog.get_logger()


@dataclass(frozen=True)
class AssignmentProfile:
    user_id: str
    team_id: str
    regions: frozenset[str]
    batch_size: int


class TeamDirectory:
    def __init__(self, *, default_batch_size: int = 10) -> None:
        self._default_batch_size = default_batch_size

    async def get_assignment_profile(self, user_id: str, team_id: str | None = None) -> AssignmentProfile:
        """
        Look up the team a reviewer draws work for.

        Uses `team_id` when given, otherwise the user's own team.
        """
        user_uuid = parse_uuid(user_id, field="user_id")

        async with get_db_session() as session:
            if team_id:
                team_uuid = parse_uuid(team_id, field="team_id")
            else:
                result = await session.execute(
                    text("SELECT team_id FROM users WHERE user_id = :user_id"),
                    {"user_id": user_uuid},
                )
                user_row = result.mappings().first()
                if not user_row or user_row["team_id"] is None:
                    raise NotFoundError(
                        code="user.not_found",
                        message=f"User {user_id} not found or not a member of any team.",
                    )
                team_uuid = user_row["team_id"]

            result = await session.execute(
                text("SELECT team_id, batch_size FROM teams WHERE team_id = :team_id"),
                {"team_id": team_uuid},
            )
            team_row = result.mappings().first()
            if not team_row:
                raise NotFoundError(code="team.not_found", message=f"Team {team_uuid} not found.")

            result = await session.execute(
                text("SELECT region_code FROM team_regions WHERE team_id = :team_id"),
                {"team_id": team_uuid},
            )
            regions = frozenset(row["region_code"] for row in result.mappings().all())

        batch_size = int(team_row["batch_size"] or 0)
        if batch_size <= 0:
            batch_size = self._default_batch_size

        if not regions:
            logger.info("Team has no configured regions", team_id=str(team_uuid))

        return AssignmentProfile(
            user_id=user_id,
            team_id=str(team_uuid),
            regions=regions,
            batch_size=batch_size,
        )
