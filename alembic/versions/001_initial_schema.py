"""Create teams, users, team_regions and events tables.

Revision ID: 001_initial_schema
Revises:
Create Date: 2025-05-02

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import UUID, JSONB

# revision identifiers, used by Alembic.
revision: str = "001_initial_schema"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    ]


def upgrade() -> None:
    op.execute('CREATE EXTENSION IF NOT EXISTS "uuid-ossp"')

    # ==========================================================================
    # Teams
    # ==========================================================================
    op.create_table(
        "teams",
        sa.Column("team_id", UUID(as_uuid=True), primary_key=True, server_default=sa.text("uuid_generate_v4()")),
        sa.Column("team_name", sa.String(100), nullable=False, unique=True),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("batch_size", sa.Integer, nullable=False, server_default="10"),
        *_timestamps(),
    )

    # ==========================================================================
    # Users
    # ==========================================================================
    op.create_table(
        "users",
        sa.Column("user_id", UUID(as_uuid=True), primary_key=True, server_default=sa.text("uuid_generate_v4()")),
        sa.Column("username", sa.String(100), nullable=False, unique=True),
        sa.Column("email", sa.String(255), nullable=True, unique=True),
        sa.Column(
            "team_id",
            UUID(as_uuid=True),
            sa.ForeignKey("teams.team_id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("display_name", sa.String(255), nullable=True),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default=sa.text("true")),
        *_timestamps(),
    )

    # ==========================================================================
    # Team regions (junction table)
    # ==========================================================================
    op.create_table(
        "team_regions",
        sa.Column(
            "team_id",
            UUID(as_uuid=True),
            sa.ForeignKey("teams.team_id", ondelete="CASCADE"),
            primary_key=True,
        ),
        sa.Column("region_code", sa.String(50), primary_key=True),
        sa.Column("assigned_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )

    # ==========================================================================
    # Events
    # ==========================================================================
    op.create_table(
        "events",
        sa.Column("event_id", UUID(as_uuid=True), primary_key=True, server_default=sa.text("uuid_generate_v4()")),
        sa.Column("external_event_id", sa.String(255), nullable=True),
        sa.Column("region_code", sa.String(50), nullable=False),
        sa.Column(
            "event_payload",
            JSONB,
            nullable=False,
            comment="Stores non-sensitive metadata or a reference to the full regional event payload.",
        ),
        sa.Column("status", sa.String(20), nullable=False),
        sa.Column(
            "assigned_user_id",
            UUID(as_uuid=True),
            sa.ForeignKey("users.user_id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("assigned_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column(
            "review_user_id",
            UUID(as_uuid=True),
            sa.ForeignKey("users.user_id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("reviewed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("review_decision", sa.String(10), nullable=True),
        sa.Column("review_comment", sa.Text, nullable=True),
        sa.Column("ingested_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.CheckConstraint(
            "status IN ('Pending', 'Assigned', 'Completed')",
            name="events_status_check",
        ),
        sa.CheckConstraint(
            "review_decision IN ('Approved', 'Rejected') OR review_decision IS NULL",
            name="events_review_decision_check",
        ),
    )
    op.create_index("ix_events_status", "events", ["status"])
    op.create_index("ix_events_region_code", "events", ["region_code"])
    op.create_index("ix_events_assigned_user_id", "events", ["assigned_user_id"])
    op.create_index("ix_events_assigned_at", "events", ["assigned_at"])
    op.create_index("ix_events_external_event_id", "events", ["external_event_id"])
    op.create_index("idx_events_pending_fifo", "events", ["status", "region_code", "ingested_at"])


def downgrade() -> None:
    op.drop_table("events")
    op.drop_table("team_regions")
    op.drop_table("users")
    op.drop_table("teams")
