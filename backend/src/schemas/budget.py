"""
Pydantic schemas for the event budget.

Provides data validation and serialization for:
- Budget category create/update requests and responses
- Budget item create/update/status requests and responses

Design:
- ``spent_amount`` appears only in responses; it is derived from the
  items and cannot be set through the API
- Money travels as Decimal internally and is serialized as float
- GUIDs are exposed, never internal IDs
"""

import re
from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field, field_serializer, field_validator

from backend.src.models.budget_item import BudgetItemStatus
from backend.src.utils.formatting import to_naive_utc


HEX_COLOR = re.compile(r"^#[0-9A-Fa-f]{6}$")


def _validate_color(v: Optional[str]) -> Optional[str]:
    if v is None or v == "":
        return None
    if not HEX_COLOR.match(v):
        raise ValueError("Color must be hex format like #RRGGBB")
    return v


# ============================================================================
# Category Schemas
# ============================================================================


class BudgetCategoryCreate(BaseModel):
    """
    Schema for creating a budget category.

    Example:
        >>> BudgetCategoryCreate(name="Catering", allocated_amount=Decimal("12000"))
    """

    name: str = Field(..., min_length=2, max_length=100, description="Category name")
    description: Optional[str] = Field(default=None, description="Category description")
    allocated_amount: Decimal = Field(
        default=Decimal("0"), ge=0, description="Planned budget for the category"
    )
    color: Optional[str] = Field(default=None, description="Hex color code (#RRGGBB)")
    icon: Optional[str] = Field(default=None, max_length=50, description="Icon name")

    @field_validator("color")
    @classmethod
    def validate_color_format(cls, v: Optional[str]) -> Optional[str]:
        """Validate hex color format."""
        return _validate_color(v)

    @field_validator("name")
    @classmethod
    def validate_name_not_whitespace(cls, v: str) -> str:
        """Ensure name is not just whitespace."""
        if len(v.strip()) < 2:
            raise ValueError("Name must be at least 2 characters")
        return v.strip()

    model_config = {
        "json_schema_extra": {
            "example": {
                "name": "Catering",
                "allocated_amount": 12000,
                "color": "#3B82F6",
                "icon": "utensils",
            }
        }
    }


class BudgetCategoryUpdate(BaseModel):
    """
    Schema for updating a budget category.

    All fields are optional; only provided fields are updated.
    """

    name: Optional[str] = Field(default=None, min_length=2, max_length=100)
    description: Optional[str] = None
    allocated_amount: Optional[Decimal] = Field(default=None, ge=0)
    color: Optional[str] = None
    icon: Optional[str] = Field(default=None, max_length=50)

    @field_validator("name", "allocated_amount", "color")
    @classmethod
    def reject_null(cls, v):
        """Required columns can be changed but not cleared."""
        if v is None:
            raise ValueError("Field cannot be null")
        return v

    @field_validator("color")
    @classmethod
    def validate_color_format(cls, v: Optional[str]) -> Optional[str]:
        """Validate hex color format."""
        return _validate_color(v)


class BudgetCategoryResponse(BaseModel):
    """Budget category as returned by the API."""

    guid: str = Field(..., description="Category GUID (bgc_xxx)")
    event_guid: str = Field(..., description="Owning event GUID")
    name: str
    description: Optional[str] = None
    color: str
    icon: Optional[str] = None
    allocated_amount: Decimal
    spent_amount: Decimal = Field(..., description="Sum of item actual costs (derived)")
    remaining_amount: Decimal
    created_at: datetime
    updated_at: datetime

    @field_serializer("allocated_amount", "spent_amount", "remaining_amount")
    @classmethod
    def serialize_decimal(cls, v: Decimal) -> float:
        """Serialize Decimal as float for JSON."""
        return float(v)

    @field_serializer("created_at", "updated_at")
    @classmethod
    def serialize_datetime_utc(cls, v: datetime) -> str:
        """Serialize datetime as ISO 8601 with explicit UTC timezone (Z suffix)."""
        return v.isoformat() + "Z" if v else None

    model_config = {"from_attributes": True}


# ============================================================================
# Item Schemas
# ============================================================================


class BudgetItemCreate(BaseModel):
    """
    Schema for creating a budget item in a category.

    Example:
        >>> BudgetItemCreate(description="Coffee breaks", estimated_cost=Decimal("900"))
    """

    description: str = Field(..., min_length=3, max_length=500)
    estimated_cost: Decimal = Field(..., ge=0)
    actual_cost: Optional[Decimal] = Field(
        default=None, ge=0, description="Actual cost; omit while not yet incurred"
    )
    status: BudgetItemStatus = Field(default=BudgetItemStatus.PLANNED)
    vendor: Optional[str] = Field(default=None, max_length=255)
    invoice_number: Optional[str] = Field(default=None, max_length=100)
    payment_date: Optional[datetime] = None
    notes: Optional[str] = None

    @field_validator("payment_date")
    @classmethod
    def normalize_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        """Store datetimes as naive UTC."""
        return to_naive_utc(v)

    model_config = {"use_enum_values": True}


class BudgetItemUpdate(BaseModel):
    """
    Schema for updating a budget item.

    ``category_guid`` moves the item to another category of the same event.
    """

    category_guid: Optional[str] = Field(default=None, description="Target category GUID")
    description: Optional[str] = Field(default=None, min_length=3, max_length=500)
    estimated_cost: Optional[Decimal] = Field(default=None, ge=0)
    actual_cost: Optional[Decimal] = Field(default=None, ge=0)
    status: Optional[BudgetItemStatus] = None
    vendor: Optional[str] = Field(default=None, max_length=255)
    invoice_number: Optional[str] = Field(default=None, max_length=100)
    payment_date: Optional[datetime] = None
    notes: Optional[str] = None

    @field_validator("description", "estimated_cost", "status")
    @classmethod
    def reject_null(cls, v):
        """Required columns can be changed but not cleared."""
        if v is None:
            raise ValueError("Field cannot be null")
        return v

    @field_validator("payment_date")
    @classmethod
    def normalize_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        """Store datetimes as naive UTC."""
        return to_naive_utc(v)

    model_config = {"use_enum_values": True}


class BudgetItemStatusUpdate(BaseModel):
    """Quick status change; paid requires payment date and actual cost."""

    status: BudgetItemStatus
    payment_date: Optional[datetime] = None
    actual_cost: Optional[Decimal] = Field(default=None, ge=0)

    @field_validator("payment_date")
    @classmethod
    def normalize_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        """Store datetimes as naive UTC."""
        return to_naive_utc(v)

    model_config = {"use_enum_values": True}


class BudgetItemResponse(BaseModel):
    """Budget item as returned by the API."""

    guid: str = Field(..., description="Item GUID (bgi_xxx)")
    category_guid: str
    description: str
    estimated_cost: Decimal
    actual_cost: Optional[Decimal] = None
    status: BudgetItemStatus
    vendor: Optional[str] = None
    invoice_number: Optional[str] = None
    payment_date: Optional[datetime] = None
    notes: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    @field_serializer("estimated_cost", "actual_cost")
    @classmethod
    def serialize_decimal(cls, v: Optional[Decimal]) -> Optional[float]:
        """Serialize Decimal as float for JSON."""
        return float(v) if v is not None else None

    @field_serializer("payment_date", "created_at", "updated_at")
    @classmethod
    def serialize_datetime_utc(cls, v: Optional[datetime]) -> Optional[str]:
        """Serialize datetime as ISO 8601 with explicit UTC timezone (Z suffix)."""
        return v.isoformat() + "Z" if v else None

    model_config = {"from_attributes": True}


class BudgetCategoryDetailResponse(BudgetCategoryResponse):
    """Category with its items."""

    items: List[BudgetItemResponse] = Field(default_factory=list)
