"""
Agenda session model.

Sessions are the building blocks of an event's timeline. Display order is
always derived from ``start_time``; there is deliberately no position
column, so a drag-reorder in the timeline never reaches the database.
"""

import enum
from datetime import datetime
from typing import Optional

from sqlalchemy import Column, Integer, String, DateTime, Text, ForeignKey, Index
from sqlalchemy.orm import relationship

from backend.src.models import Base
from backend.src.models.mixins import GuidMixin


class SessionType(str, enum.Enum):
    """Kind of agenda session."""
    KEYNOTE = "keynote"
    TALK = "talk"
    WORKSHOP = "workshop"
    PANEL = "panel"
    BREAK = "break"
    NETWORKING = "networking"
    OTHER = "other"


class SessionStatus(str, enum.Enum):
    """Agenda session status."""
    SCHEDULED = "scheduled"
    ONGOING = "ongoing"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class AgendaSession(Base, GuidMixin):
    """
    Agenda session model.

    Attributes:
        id: Primary key (internal, never exposed)
        guid: GUID string property (ses_xxx, inherited from GuidMixin)
        event_id: FK to Event
        title: Session title (at least 3 characters)
        description: Optional abstract
        session_type: Kind of session (see SessionType)
        start_time: Start, the only ordering key
        end_time: End, strictly after start_time
        duration: Whole minutes between start and end (derived)
        room: Room name
        location: Venue area
        speaker_id: FK to Speaker (SET NULL on delete)
        max_attendees: Capacity, non-negative
        status: Session status (see SessionStatus)

    Relationships:
        event: Owning event (many-to-one)
        speaker: Speaker holding the session (many-to-one, optional)

    Indexes:
        - event_id, start_time (timeline queries)
    """

    __tablename__ = "agenda_sessions"

    GUID_PREFIX = "ses"

    id = Column(Integer, primary_key=True, autoincrement=True)

    event_id = Column(
        Integer,
        ForeignKey("events.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    session_type = Column(String(50), nullable=False, default=SessionType.TALK.value)
    start_time = Column(DateTime, nullable=False)
    end_time = Column(DateTime, nullable=False)
    duration = Column(Integer, nullable=False)
    room = Column(String(100), nullable=True)
    location = Column(String(255), nullable=True)
    speaker_id = Column(
        Integer,
        ForeignKey("speakers.id", ondelete="SET NULL"),
        nullable=True,
        index=True
    )
    max_attendees = Column(Integer, nullable=True)
    status = Column(String(50), nullable=False, default=SessionStatus.SCHEDULED.value)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(
        DateTime,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
        nullable=False
    )

    event = relationship("Event", back_populates="agenda_sessions")
    speaker = relationship("Speaker", back_populates="sessions")

    __table_args__ = (
        Index("idx_agenda_sessions_event_start", "event_id", "start_time"),
    )

    @property
    def event_guid(self) -> Optional[str]:
        return self.event.guid if self.event is not None else None

    @property
    def speaker_guid(self) -> Optional[str]:
        return self.speaker.guid if self.speaker is not None else None

    def __repr__(self) -> str:
        return (
            f"<AgendaSession(id={self.id}, title='{self.title}', "
            f"start_time={self.start_time})>"
        )

    def __str__(self) -> str:
        return self.title
