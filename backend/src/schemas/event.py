"""
Pydantic schemas for events.

Events are the scoping root for budget, staff, sponsor and agenda data;
only create and read shapes are needed.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator, field_serializer

from backend.src.models.event import EventStatus
from backend.src.utils.formatting import to_naive_utc


class EventCreate(BaseModel):
    """
    Schema for creating an event.

    Example:
        >>> EventCreate(title="Tech Summit 2026",
        ...             start_date="2026-05-12T00:00:00Z", end_date="2026-05-14T00:00:00Z")
    """

    title: str = Field(..., min_length=3, max_length=255, description="Event title")
    description: Optional[str] = Field(default=None, description="Event description")
    start_date: datetime = Field(..., description="First day of the event")
    end_date: datetime = Field(..., description="Last day of the event")
    location: Optional[str] = Field(default=None, max_length=255, description="Venue")
    status: EventStatus = Field(default=EventStatus.DRAFT, description="Lifecycle status")

    @field_validator("start_date", "end_date")
    @classmethod
    def normalize_utc(cls, v: datetime) -> datetime:
        """Store datetimes as naive UTC."""
        return to_naive_utc(v)

    model_config = {"use_enum_values": True}


class EventResponse(BaseModel):
    """Event as returned by the API."""

    guid: str = Field(..., description="Event GUID (evt_xxx)")
    title: str
    description: Optional[str] = None
    start_date: datetime
    end_date: datetime
    location: Optional[str] = None
    status: EventStatus
    created_at: datetime
    updated_at: datetime

    @field_serializer("start_date", "end_date", "created_at", "updated_at")
    @classmethod
    def serialize_datetime_utc(cls, v: datetime) -> str:
        """Serialize datetime as ISO 8601 with explicit UTC timezone (Z suffix)."""
        return v.isoformat() + "Z" if v else None

    model_config = {"from_attributes": True}
