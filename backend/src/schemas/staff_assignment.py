"""
Pydantic schemas for staff assignments and their payments.

Provides data validation and serialization for:
- Assignment create (single and batch) and partial update requests
- Payment operations: mark paid, postpone, cancel
- Assignment responses, including the linked budget item GUID

Design:
- ``payment_status`` is never accepted as input; it is derived server-side
- ``budget_category_guid`` selects where the generated budget item lives
- Datetimes are normalized to naive UTC on input and get a Z suffix on output
"""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field, field_serializer, field_validator

from backend.src.models.staff_assignment import AssignmentStatus, PaymentStatus, PaymentTerms
from backend.src.utils.formatting import to_naive_utc


def _normalize_url(v: Optional[str]) -> Optional[str]:
    if v is None:
        return v
    v = v.strip()
    if not v:
        return None
    if not v.startswith(("http://", "https://")):
        v = f"https://{v}"
    return v


# ============================================================================
# Create / Update Schemas
# ============================================================================


class StaffAssignmentFields(BaseModel):
    """Fields shared by single and batch assignment creation."""

    start_time: datetime = Field(..., description="Start of the engagement")
    end_time: datetime = Field(..., description="End of the engagement")
    assignment_status: AssignmentStatus = Field(default=AssignmentStatus.REQUESTED)
    payment_terms: PaymentTerms = Field(
        default=PaymentTerms.CUSTOM,
        description="custom keeps payment_due_date; other terms derive it from end_time",
    )
    payment_amount: Optional[Decimal] = Field(default=None, ge=0, description="Agreed amount")
    payment_due_date: Optional[datetime] = None
    payment_date: Optional[datetime] = None
    payment_notes: Optional[str] = None
    invoice_number: Optional[str] = Field(default=None, max_length=100)
    invoice_url: Optional[str] = Field(default=None, max_length=500)
    budget_category_guid: Optional[str] = Field(
        default=None, description="Category for the generated budget item (bgc_xxx)"
    )

    @field_validator("start_time", "end_time", "payment_due_date", "payment_date")
    @classmethod
    def normalize_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        """Store datetimes as naive UTC."""
        return to_naive_utc(v)

    @field_validator("invoice_url")
    @classmethod
    def validate_invoice_url(cls, v: Optional[str]) -> Optional[str]:
        """Add https:// when the scheme is missing."""
        return _normalize_url(v)

    model_config = {"use_enum_values": True}


class StaffAssignmentCreate(StaffAssignmentFields):
    """
    Schema for assigning one staff member to an event.

    Example:
        >>> StaffAssignmentCreate(
        ...     event_guid="evt_01hgw...", staff_guid="stf_01hgw...",
        ...     start_time="2026-05-12T08:00:00Z", end_time="2026-05-12T18:00:00Z",
        ...     payment_amount=500, payment_terms="30_days",
        ... )
    """

    event_guid: str = Field(..., description="Event GUID (evt_xxx)")
    staff_guid: str = Field(..., description="Staff GUID (stf_xxx)")

    model_config = {
        "use_enum_values": True,
        "json_schema_extra": {
            "example": {
                "event_guid": "evt_01hgw2bbg0000000000000001",
                "staff_guid": "stf_01hgw2bbg0000000000000001",
                "start_time": "2026-05-12T08:00:00Z",
                "end_time": "2026-05-12T18:00:00Z",
                "payment_amount": 500,
                "payment_terms": "30_days",
                "budget_category_guid": "bgc_01hgw2bbg0000000000000001",
            }
        },
    }


class StaffAssignmentBatchCreate(StaffAssignmentFields):
    """Schema for assigning several staff members with identical fields."""

    event_guid: str = Field(..., description="Event GUID (evt_xxx)")
    staff_guids: List[str] = Field(..., min_length=1, description="Staff GUIDs (stf_xxx)")


class StaffAssignmentUpdate(BaseModel):
    """
    Schema for a partial assignment update.

    Only fields that are present in the request are applied. An explicit
    ``null`` clears an optional value; required columns reject it.
    """

    staff_guid: Optional[str] = None
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    assignment_status: Optional[AssignmentStatus] = None
    payment_terms: Optional[PaymentTerms] = None
    payment_amount: Optional[Decimal] = Field(default=None, ge=0)
    payment_due_date: Optional[datetime] = None
    payment_date: Optional[datetime] = None
    payment_notes: Optional[str] = None
    invoice_number: Optional[str] = Field(default=None, max_length=100)
    invoice_url: Optional[str] = Field(default=None, max_length=500)
    budget_category_guid: Optional[str] = None

    @field_validator("start_time", "end_time", "assignment_status", "payment_terms")
    @classmethod
    def reject_null(cls, v):
        """Required columns can be changed but not cleared."""
        if v is None:
            raise ValueError("Field cannot be null")
        return v

    @field_validator("start_time", "end_time", "payment_due_date", "payment_date")
    @classmethod
    def normalize_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        """Store datetimes as naive UTC."""
        return to_naive_utc(v)

    @field_validator("invoice_url")
    @classmethod
    def validate_invoice_url(cls, v: Optional[str]) -> Optional[str]:
        """Add https:// when the scheme is missing."""
        return _normalize_url(v)

    model_config = {"use_enum_values": True}


class StaffAssignmentStatusUpdate(BaseModel):
    """Lifecycle status change."""

    assignment_status: AssignmentStatus

    model_config = {"use_enum_values": True}


# ============================================================================
# Payment Operation Schemas
# ============================================================================


class MarkPaidRequest(BaseModel):
    """Record a payment; notes and invoice fields replace existing ones when given."""

    payment_date: datetime = Field(..., description="When the payment was made")
    payment_notes: Optional[str] = None
    invoice_number: Optional[str] = Field(default=None, max_length=100)
    invoice_url: Optional[str] = Field(default=None, max_length=500)

    @field_validator("payment_date")
    @classmethod
    def normalize_utc(cls, v: datetime) -> datetime:
        """Store datetimes as naive UTC."""
        return to_naive_utc(v)

    @field_validator("invoice_url")
    @classmethod
    def validate_invoice_url(cls, v: Optional[str]) -> Optional[str]:
        """Add https:// when the scheme is missing."""
        return _normalize_url(v)


class PostponePaymentRequest(BaseModel):
    """Move the payment due date."""

    new_due_date: datetime = Field(..., description="New due date")
    reason: Optional[str] = Field(default=None, max_length=500)

    @field_validator("new_due_date")
    @classmethod
    def normalize_utc(cls, v: datetime) -> datetime:
        """Store datetimes as naive UTC."""
        return to_naive_utc(v)


class CancelPaymentRequest(BaseModel):
    """Undo a recorded payment."""

    reason: Optional[str] = Field(default=None, max_length=500)


# ============================================================================
# Response Schemas
# ============================================================================


class StaffAssignmentResponse(BaseModel):
    """Staff assignment as returned by the API."""

    guid: str = Field(..., description="Assignment GUID (sta_xxx)")
    event_guid: str
    staff_guid: str
    start_time: datetime
    end_time: datetime
    assignment_status: AssignmentStatus
    payment_status: PaymentStatus
    payment_terms: PaymentTerms
    payment_amount: Optional[Decimal] = None
    payment_due_date: Optional[datetime] = None
    payment_date: Optional[datetime] = None
    payment_notes: Optional[str] = None
    invoice_number: Optional[str] = None
    invoice_url: Optional[str] = None
    budget_item_guid: Optional[str] = Field(
        default=None, description="Linked budget item (bgi_xxx), if any"
    )
    created_at: datetime
    updated_at: datetime

    @field_serializer("payment_amount")
    @classmethod
    def serialize_decimal(cls, v: Optional[Decimal]) -> Optional[float]:
        """Serialize Decimal as float for JSON."""
        return float(v) if v is not None else None

    @field_serializer(
        "start_time", "end_time", "payment_due_date", "payment_date", "created_at", "updated_at"
    )
    @classmethod
    def serialize_datetime_utc(cls, v: Optional[datetime]) -> Optional[str]:
        """Serialize datetime as ISO 8601 with explicit UTC timezone (Z suffix)."""
        return v.isoformat() + "Z" if v else None

    model_config = {"from_attributes": True}
