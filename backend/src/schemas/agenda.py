"""
Pydantic schemas for the event agenda.

Provides data validation and serialization for:
- Agenda session create and partial update requests
- Session responses
- The day-bucketed agenda of an event

Design:
- ``duration`` is derived from the time window and is read-only
- There is no position field: the agenda is always returned in time order
"""

from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_serializer, field_validator

from backend.src.models.agenda_session import SessionStatus, SessionType
from backend.src.utils.formatting import to_naive_utc


# ============================================================================
# Request Schemas
# ============================================================================


class AgendaSessionCreate(BaseModel):
    """
    Schema for creating an agenda session.

    Title length and the time window are checked by the service so that a
    failed check comes back as a field error on the session form.

    Example:
        >>> AgendaSessionCreate(event_guid="evt_01hgw...", title="Opening keynote",
        ...                     start_time="2026-05-12T09:00:00Z",
        ...                     end_time="2026-05-12T10:00:00Z")
    """

    event_guid: str = Field(..., description="Event GUID (evt_xxx)")
    title: str = Field(..., max_length=255)
    description: Optional[str] = None
    session_type: SessionType = Field(default=SessionType.TALK)
    start_time: datetime
    end_time: datetime
    room: Optional[str] = Field(default=None, max_length=100)
    location: Optional[str] = Field(default=None, max_length=255)
    speaker_guid: Optional[str] = Field(default=None, description="Speaker GUID (spk_xxx)")
    max_attendees: Optional[int] = None
    status: SessionStatus = Field(default=SessionStatus.SCHEDULED)

    @field_validator("start_time", "end_time")
    @classmethod
    def normalize_utc(cls, v: datetime) -> datetime:
        """Store datetimes as naive UTC."""
        return to_naive_utc(v)

    model_config = {
        "use_enum_values": True,
        "json_schema_extra": {
            "example": {
                "event_guid": "evt_01hgw2bbg0000000000000001",
                "title": "Opening keynote",
                "session_type": "keynote",
                "start_time": "2026-05-12T09:00:00Z",
                "end_time": "2026-05-12T10:00:00Z",
                "room": "Main hall",
            }
        },
    }


class AgendaSessionUpdate(BaseModel):
    """
    Schema for a partial session update.

    ``speaker_guid: null`` removes the speaker.
    """

    title: Optional[str] = Field(default=None, max_length=255)
    description: Optional[str] = None
    session_type: Optional[SessionType] = None
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    room: Optional[str] = Field(default=None, max_length=100)
    location: Optional[str] = Field(default=None, max_length=255)
    speaker_guid: Optional[str] = None
    max_attendees: Optional[int] = None
    status: Optional[SessionStatus] = None

    @field_validator("title", "session_type", "start_time", "end_time", "status")
    @classmethod
    def reject_null(cls, v):
        """Required columns can be changed but not cleared."""
        if v is None:
            raise ValueError("Field cannot be null")
        return v

    @field_validator("start_time", "end_time")
    @classmethod
    def normalize_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        """Store datetimes as naive UTC."""
        return to_naive_utc(v)

    model_config = {"use_enum_values": True}


# ============================================================================
# Response Schemas
# ============================================================================


class AgendaSessionResponse(BaseModel):
    """Agenda session as returned by the API."""

    guid: str = Field(..., description="Session GUID (ses_xxx)")
    event_guid: str
    title: str
    description: Optional[str] = None
    session_type: SessionType
    start_time: datetime
    end_time: datetime
    duration: int = Field(..., description="Length in whole minutes")
    room: Optional[str] = None
    location: Optional[str] = None
    speaker_guid: Optional[str] = None
    max_attendees: Optional[int] = None
    status: SessionStatus

    @field_serializer("start_time", "end_time")
    @classmethod
    def serialize_datetime_utc(cls, v: datetime) -> str:
        """Serialize datetime as ISO 8601 with explicit UTC timezone (Z suffix)."""
        return v.isoformat() + "Z" if v else None

    model_config = {"from_attributes": True}


class AgendaDay(BaseModel):
    """One calendar day of the agenda, sessions in time order."""

    date: date
    sessions: List[AgendaSessionResponse]


class AgendaResponse(BaseModel):
    """An event's agenda grouped into days."""

    event_guid: str
    days: List[AgendaDay]
