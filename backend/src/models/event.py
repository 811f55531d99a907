"""
Event model.

Events are the scoping root of the dashboard: budget categories, staff
assignments, sponsors, speakers and agenda sessions all belong to exactly
one event and are removed with it.
"""

import enum
from datetime import datetime

from sqlalchemy import Column, Integer, String, DateTime, Text
from sqlalchemy.orm import relationship

from backend.src.models import Base
from backend.src.models.mixins import GuidMixin


class EventStatus(str, enum.Enum):
    """Event lifecycle status."""
    DRAFT = "draft"
    PLANNING = "planning"
    OPEN = "open"
    ONGOING = "ongoing"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class Event(Base, GuidMixin):
    """
    Event model.

    Attributes:
        id: Primary key (internal, never exposed)
        uuid: UUIDv7 for external identification (inherited from GuidMixin)
        guid: GUID string property (evt_xxx, inherited from GuidMixin)
        title: Event title
        description: Free-form description
        start_date: First day of the event
        end_date: Last day of the event
        location: Venue name or address
        status: Lifecycle status (see EventStatus)
        created_at: Creation timestamp
        updated_at: Last update timestamp

    Relationships:
        budget_categories: Budget categories (one-to-many, CASCADE on delete)
        staff_assignments: Staff assignments (one-to-many, CASCADE on delete)
        sponsors: Sponsors (one-to-many, CASCADE on delete)
        speakers: Speakers (one-to-many, CASCADE on delete)
        agenda_sessions: Agenda sessions (one-to-many, CASCADE on delete)
    """

    __tablename__ = "events"

    GUID_PREFIX = "evt"

    id = Column(Integer, primary_key=True, autoincrement=True)

    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    start_date = Column(DateTime, nullable=False, index=True)
    end_date = Column(DateTime, nullable=False)
    location = Column(String(255), nullable=True)
    status = Column(String(50), default=EventStatus.DRAFT.value, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(
        DateTime,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
        nullable=False
    )

    budget_categories = relationship(
        "BudgetCategory",
        back_populates="event",
        cascade="all, delete-orphan",
        passive_deletes=True
    )
    staff_assignments = relationship(
        "StaffAssignment",
        back_populates="event",
        cascade="all, delete-orphan",
        passive_deletes=True
    )
    sponsors = relationship(
        "Sponsor",
        back_populates="event",
        cascade="all, delete-orphan",
        passive_deletes=True
    )
    speakers = relationship(
        "Speaker",
        back_populates="event",
        cascade="all, delete-orphan",
        passive_deletes=True
    )
    agenda_sessions = relationship(
        "AgendaSession",
        back_populates="event",
        cascade="all, delete-orphan",
        passive_deletes=True
    )

    def __repr__(self) -> str:
        return f"<Event(id={self.id}, title='{self.title}', status='{self.status}')>"

    def __str__(self) -> str:
        return self.title
