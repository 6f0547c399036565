"""Review event model (the unit of work handed out to reviewers)."""

from uuid import uuid4

from sqlalchemy import (
    JSON,
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Index,
    String,
    Text,
    func,
)
from sqlalchemy.dialects.postgresql import JSONB, UUID

from review_dispatch.db.models.directory import Base


class EventRecord(Base):
    __tablename__ = "events"

    event_id = Column(UUID(as_uuid=True), primary_key=True, default=uuid4)
    external_event_id = Column(String(255), nullable=True, index=True)
    region_code = Column(String(50), nullable=False, index=True)
    event_payload = Column(JSON().with_variant(JSONB(), "postgresql"), nullable=False)

    status = Column(String(20), nullable=False, index=True)  # Pending, Assigned, Completed
    assigned_user_id = Column(
        UUID(as_uuid=True),
        ForeignKey("users.user_id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    assigned_at = Column(DateTime(timezone=True), nullable=True, index=True)

    completed_at = Column(DateTime(timezone=True), nullable=True)
    review_user_id = Column(
        UUID(as_uuid=True),
        ForeignKey("users.user_id", ondelete="SET NULL"),
        nullable=True,
    )
    reviewed_at = Column(DateTime(timezone=True), nullable=True)
    review_decision = Column(String(10), nullable=True)
    review_comment = Column(Text, nullable=True)

    ingested_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    __table_args__ = (
        CheckConstraint(
            "status IN ('Pending', 'Assigned', 'Completed')",
            name="events_status_check",
        ),
        CheckConstraint(
            "review_decision IN ('Approved', 'Rejected') OR review_decision IS NULL",
            name="events_review_decision_check",
        ),
        Index("idx_events_pending_fifo", "status", "region_code", "ingested_at"),
    )
