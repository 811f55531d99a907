"""
Speaker model.

Speakers belong to an event and can be referenced by agenda sessions.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import Column, Integer, String, DateTime, Text, ForeignKey
from sqlalchemy.orm import relationship

from backend.src.models import Base
from backend.src.models.mixins import GuidMixin


class Speaker(Base, GuidMixin):
    """
    Speaker model.

    Attributes:
        id: Primary key (internal, never exposed)
        guid: GUID string property (spk_xxx, inherited from GuidMixin)
        event_id: FK to Event
        first_name, last_name: Speaker name
        company: Affiliation
        job_title: Role at the company
        bio: Short biography

    Relationships:
        event: Owning event (many-to-one)
        sessions: Agenda sessions held by this speaker (SET NULL on delete)
    """

    __tablename__ = "speakers"

    GUID_PREFIX = "spk"

    id = Column(Integer, primary_key=True, autoincrement=True)

    event_id = Column(
        Integer,
        ForeignKey("events.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    company = Column(String(200), nullable=True)
    job_title = Column(String(200), nullable=True)
    bio = Column(Text, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(
        DateTime,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
        nullable=False
    )

    event = relationship("Event", back_populates="speakers")
    sessions = relationship("AgendaSession", back_populates="speaker", passive_deletes=True)

    @property
    def event_guid(self) -> Optional[str]:
        return self.event.guid if self.event is not None else None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    def __repr__(self) -> str:
        return f"<Speaker(id={self.id}, name='{self.full_name}')>"
