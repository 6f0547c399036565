"""
Reviewer Directory Database Models

Teams, their permitted regions, and the users that belong to them.
The assignment engine only ever reads these tables.
"""

from uuid import uuid4

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    func,
)
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import declarative_base, relationship

Base = declarative_base()


class Team(Base):
    """
    A group of reviewers sharing a batch size and a set of regions.

    Attributes:
        batch_size: Maximum number of events handed out per batch request
    """

    __tablename__ = "teams"

    team_id = Column(UUID(as_uuid=True), primary_key=True, default=uuid4)
    team_name = Column(String(100), nullable=False, unique=True)
    description = Column(Text, nullable=True)
    batch_size = Column(Integer, nullable=False, default=10, server_default="10")

    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    regions = relationship("TeamRegion", back_populates="team", cascade="all, delete-orphan")
    users = relationship("User", back_populates="team")

    def __repr__(self) -> str:
        return f"<Team {self.team_name}>"


class TeamRegion(Base):
    __tablename__ = "team_regions"

    team_id = Column(
        UUID(as_uuid=True),
        ForeignKey("teams.team_id", ondelete="CASCADE"),
        primary_key=True,
    )
    region_code = Column(String(50), primary_key=True)
    assigned_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    team = relationship("Team", back_populates="regions")


class User(Base):
    __tablename__ = "users"

    user_id = Column(UUID(as_uuid=True), primary_key=True, default=uuid4)
    username = Column(String(100), nullable=False, unique=True)
    email = Column(String(255), nullable=True, unique=True)
    team_id = Column(
        UUID(as_uuid=True),
        ForeignKey("teams.team_id", ondelete="SET NULL"),
        nullable=True,
    )
    display_name = Column(String(255), nullable=True)
    is_active = Column(Boolean, nullable=False, default=True, server_default="true")

    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    team = relationship("Team", back_populates="users")

    def __repr__(self) -> str:
        return f"<User {self.username}>"
