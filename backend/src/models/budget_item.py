"""
Budget item model.

A single cost or income line inside a budget category. Items can be
entered by hand or generated by the linked-record synchronizer on behalf
of a staff assignment or a sponsor; generated items carry no back
reference, the owner holds the (weak) pointer instead.
"""

import enum
from datetime import datetime
from typing import Optional

from sqlalchemy import Column, Integer, String, DateTime, Numeric, Text, ForeignKey
from sqlalchemy.orm import relationship

from backend.src.models import Base
from backend.src.models.mixins import GuidMixin


class BudgetItemStatus(str, enum.Enum):
    """Budget item status."""
    PLANNED = "planned"
    APPROVED = "approved"
    PURCHASED = "purchased"
    INVOICED = "invoiced"
    PAID = "paid"
    CANCELLED = "cancelled"


class BudgetItem(Base, GuidMixin):
    """
    Budget item model.

    Attributes:
        id: Primary key (internal, never exposed)
        guid: GUID string property (bgi_xxx, inherited from GuidMixin)
        category_id: FK to BudgetCategory (CASCADE on delete)
        event_id: FK to Event, always equal to the category's event
        description: Line description (3-500 characters)
        estimated_cost: Planned cost
        actual_cost: Actual cost; NULL counts as zero in the category spend
        status: Item status (see BudgetItemStatus)
        vendor: Vendor / counterparty name
        invoice_number: Invoice reference
        payment_date: When the line was settled
        notes: Free-form notes
    """

    __tablename__ = "budget_items"

    GUID_PREFIX = "bgi"

    id = Column(Integer, primary_key=True, autoincrement=True)

    category_id = Column(
        Integer,
        ForeignKey("budget_categories.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    event_id = Column(
        Integer,
        ForeignKey("events.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    description = Column(String(500), nullable=False)
    estimated_cost = Column(Numeric(12, 2), nullable=False)
    actual_cost = Column(Numeric(12, 2), nullable=True)
    status = Column(String(50), nullable=False, default=BudgetItemStatus.PLANNED.value)
    vendor = Column(String(255), nullable=True)
    invoice_number = Column(String(100), nullable=True)
    payment_date = Column(DateTime, nullable=True)
    notes = Column(Text, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(
        DateTime,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
        nullable=False
    )

    category = relationship("BudgetCategory", back_populates="items")

    @property
    def category_guid(self) -> Optional[str]:
        return self.category.guid if self.category is not None else None

    def __repr__(self) -> str:
        return (
            f"<BudgetItem(id={self.id}, description='{self.description}', "
            f"actual={self.actual_cost}, status='{self.status}')>"
        )

    def __str__(self) -> str:
        return self.description
