"""
Pydantic schemas for speakers.
"""

from typing import Optional

from pydantic import BaseModel, Field


class SpeakerCreate(BaseModel):
    """Schema for creating a speaker of an event."""

    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    company: Optional[str] = Field(default=None, max_length=200)
    job_title: Optional[str] = Field(default=None, max_length=200)
    bio: Optional[str] = None


class SpeakerResponse(BaseModel):
    """Speaker as returned by the API."""

    guid: str = Field(..., description="Speaker GUID (spk_xxx)")
    event_guid: str
    first_name: str
    last_name: str
    company: Optional[str] = None
    job_title: Optional[str] = None
    bio: Optional[str] = None

    model_config = {"from_attributes": True}
