"""Reviewer identity and team directory lookups."""

from review_dispatch.identity.teams import AssignmentProfile, TeamDirectory

__all__ = ["AssignmentProfile", "TeamDirectory"]
