"""
Pydantic schemas for event sponsors.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field, field_serializer, field_validator

from backend.src.models.sponsor import SponsorshipLevel, SponsorPaymentStatus
from backend.src.utils.formatting import to_naive_utc


class SponsorCreate(BaseModel):
    """
    Schema for creating a sponsor.

    A positive ``sponsorship_amount`` generates an income budget item, in
    ``budget_category_guid`` when given, otherwise in the event's income
    category.

    Example:
        >>> SponsorCreate(event_guid="evt_01hgw...", company_name="Acme Corp",
        ...               sponsorship_amount=1000, payment_status="partial")
    """

    event_guid: str = Field(..., description="Event GUID (evt_xxx)")
    company_name: str = Field(..., min_length=2, max_length=200)
    contact_person: Optional[str] = Field(default=None, max_length=200)
    email: Optional[str] = Field(default=None, max_length=255)
    phone: Optional[str] = Field(default=None, max_length=50)
    sponsorship_level: SponsorshipLevel = Field(default=SponsorshipLevel.PARTNER)
    sponsorship_amount: Optional[Decimal] = Field(default=None, ge=0)
    contract_signed: bool = False
    contract_date: Optional[datetime] = None
    payment_status: SponsorPaymentStatus = Field(default=SponsorPaymentStatus.PENDING)
    payment_date: Optional[datetime] = None
    website_url: Optional[str] = Field(default=None, max_length=500)
    description: Optional[str] = None
    notes: Optional[str] = None
    budget_category_guid: Optional[str] = Field(
        default=None, description="Category for the income item (bgc_xxx)"
    )

    @field_validator("company_name")
    @classmethod
    def validate_name_not_whitespace(cls, v: str) -> str:
        """Ensure company name is not just whitespace."""
        if not v.strip():
            raise ValueError("Company name cannot be empty or whitespace")
        return v.strip()

    @field_validator("website_url")
    @classmethod
    def validate_website_url(cls, v: Optional[str]) -> Optional[str]:
        """Validate website URL format if provided."""
        if v is not None:
            v = v.strip()
            if v:
                if not v.startswith(("http://", "https://")):
                    v = f"https://{v}"
            else:
                v = None
        return v

    @field_validator("contract_date", "payment_date")
    @classmethod
    def normalize_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        """Store datetimes as naive UTC."""
        return to_naive_utc(v)

    model_config = {
        "use_enum_values": True,
        "json_schema_extra": {
            "example": {
                "event_guid": "evt_01hgw2bbg0000000000000001",
                "company_name": "Acme Corp",
                "sponsorship_level": "gold",
                "sponsorship_amount": 1000,
                "payment_status": "partial",
                "website_url": "https://acme.example.com",
            }
        },
    }


class SponsorUpdate(BaseModel):
    """
    Schema for a partial sponsor update.

    Only fields present in the request are applied.
    """

    company_name: Optional[str] = Field(default=None, min_length=2, max_length=200)
    contact_person: Optional[str] = Field(default=None, max_length=200)
    email: Optional[str] = Field(default=None, max_length=255)
    phone: Optional[str] = Field(default=None, max_length=50)
    sponsorship_level: Optional[SponsorshipLevel] = None
    sponsorship_amount: Optional[Decimal] = Field(default=None, ge=0)
    contract_signed: Optional[bool] = None
    contract_date: Optional[datetime] = None
    payment_status: Optional[SponsorPaymentStatus] = None
    payment_date: Optional[datetime] = None
    website_url: Optional[str] = Field(default=None, max_length=500)
    description: Optional[str] = None
    notes: Optional[str] = None
    budget_category_guid: Optional[str] = None

    @field_validator("company_name", "sponsorship_level", "payment_status", "contract_signed")
    @classmethod
    def reject_null(cls, v):
        """Required columns can be changed but not cleared."""
        if v is None:
            raise ValueError("Field cannot be null")
        return v

    @field_validator("company_name")
    @classmethod
    def validate_name_not_whitespace(cls, v: Optional[str]) -> Optional[str]:
        """Ensure company name is not just whitespace if provided."""
        if v is not None:
            if not v.strip():
                raise ValueError("Company name cannot be empty or whitespace")
            return v.strip()
        return v

    @field_validator("website_url")
    @classmethod
    def validate_website_url(cls, v: Optional[str]) -> Optional[str]:
        """Validate website URL format if provided.

        Empty string is converted to None to clear the field.
        """
        if v is not None:
            v = v.strip()
            if v:
                if not v.startswith(("http://", "https://")):
                    v = f"https://{v}"
            else:
                v = None
        return v

    @field_validator("contract_date", "payment_date")
    @classmethod
    def normalize_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        """Store datetimes as naive UTC."""
        return to_naive_utc(v)

    model_config = {"use_enum_values": True}


class SponsorResponse(BaseModel):
    """Sponsor as returned by the API."""

    guid: str = Field(..., description="Sponsor GUID (spn_xxx)")
    event_guid: str
    company_name: str
    contact_person: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    sponsorship_level: SponsorshipLevel
    sponsorship_amount: Optional[Decimal] = None
    contract_signed: bool
    contract_date: Optional[datetime] = None
    payment_status: SponsorPaymentStatus
    payment_date: Optional[datetime] = None
    website_url: Optional[str] = None
    description: Optional[str] = None
    notes: Optional[str] = None
    budget_item_guid: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    @field_serializer("sponsorship_amount")
    @classmethod
    def serialize_decimal(cls, v: Optional[Decimal]) -> Optional[float]:
        """Serialize Decimal as float for JSON."""
        return float(v) if v is not None else None

    @field_serializer("contract_date", "payment_date", "created_at", "updated_at")
    @classmethod
    def serialize_datetime_utc(cls, v: Optional[datetime]) -> Optional[str]:
        """Serialize datetime as ISO 8601 with explicit UTC timezone (Z suffix)."""
        return v.isoformat() + "Z" if v else None

    model_config = {"from_attributes": True}
