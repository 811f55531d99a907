"""
Pydantic schemas for staff members.
"""

from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field, field_serializer, field_validator

from backend.src.models.staff import StaffRole


class StaffCreate(BaseModel):
    """Schema for creating a staff member."""

    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    email: str = Field(..., max_length=255, description="Contact email")
    phone: Optional[str] = Field(default=None, max_length=50)
    role: StaffRole = Field(default=StaffRole.OTHER, description="Staff role")
    hourly_rate: Optional[Decimal] = Field(default=None, ge=0, description="Reference hourly rate")
    is_active: bool = Field(default=True)
    notes: Optional[str] = None

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        """Require a plausible email address."""
        v = v.strip()
        local, _, domain = v.partition("@")
        if not local or "." not in domain:
            raise ValueError("Invalid email address")
        return v

    @field_validator("first_name", "last_name")
    @classmethod
    def strip_names(cls, v: str) -> str:
        """Reject whitespace-only names."""
        if not v.strip():
            raise ValueError("Name cannot be empty or whitespace")
        return v.strip()

    model_config = {
        "use_enum_values": True,
        "json_schema_extra": {
            "example": {
                "first_name": "Anna",
                "last_name": "Rossi",
                "email": "anna.rossi@example.com",
                "role": "hostess",
            }
        },
    }


class StaffResponse(BaseModel):
    """Staff member as returned by the API."""

    guid: str = Field(..., description="Staff GUID (stf_xxx)")
    first_name: str
    last_name: str
    email: str
    phone: Optional[str] = None
    role: StaffRole
    hourly_rate: Optional[Decimal] = None
    is_active: bool
    notes: Optional[str] = None

    @field_serializer("hourly_rate")
    @classmethod
    def serialize_decimal(cls, v: Optional[Decimal]) -> Optional[float]:
        """Serialize Decimal as float for JSON."""
        return float(v) if v is not None else None

    model_config = {"from_attributes": True}
