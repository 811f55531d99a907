"""
Staff assignment model.

An assignment books one staff member on one event for a time window and
carries the payment bookkeeping for that engagement. When a budget
category is chosen and an amount is known, the assignment owns exactly one
budget item that mirrors its cost.

``budget_item_id`` is a weak reference: a plain nullable integer without a
foreign key constraint. The item may be removed independently; readers
treat a dangling pointer the same as no link.
"""

import enum
from datetime import datetime
from typing import Optional

from sqlalchemy import Column, Integer, String, DateTime, Numeric, Text, ForeignKey
from sqlalchemy.orm import relationship

from backend.src.models import Base
from backend.src.models.mixins import GuidMixin


class AssignmentStatus(str, enum.Enum):
    """Assignment lifecycle status."""
    REQUESTED = "requested"
    CONFIRMED = "confirmed"
    DECLINED = "declined"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class PaymentStatus(str, enum.Enum):
    """Derived payment status of an assignment."""
    NOT_DUE = "not_due"
    PENDING = "pending"
    OVERDUE = "overdue"
    PAID = "paid"


class PaymentTerms(str, enum.Enum):
    """Payment terms; every value except CUSTOM derives the due date."""
    CUSTOM = "custom"
    IMMEDIATE = "immediate"
    DAYS_30 = "30_days"
    DAYS_60 = "60_days"
    DAYS_90 = "90_days"


class StaffAssignment(Base, GuidMixin):
    """
    Staff assignment model.

    Attributes:
        id: Primary key (internal, never exposed)
        guid: GUID string property (sta_xxx, inherited from GuidMixin)
        event_id: FK to Event
        staff_id: FK to Staff
        start_time: Start of the engagement
        end_time: End of the engagement, strictly after start_time
        assignment_status: Lifecycle status (see AssignmentStatus)
        payment_status: Derived payment status (see PaymentStatus)
        payment_terms: Payment terms (see PaymentTerms)
        payment_amount: Agreed amount (NULL when not yet known)
        payment_due_date: Due date, derived from terms unless terms are custom
        payment_date: When the payment was made
        payment_notes: Payment history notes (postpone/cancel reasons appended)
        invoice_number: Invoice reference
        invoice_url: Link to the invoice document
        budget_item_id: Weak pointer to the generated BudgetItem

    Relationships:
        event: Owning event (many-to-one)
        staff: Assigned staff member (many-to-one)
        budget_item: Linked budget item (view-only, resolves to None if dangling)
    """

    __tablename__ = "staff_assignments"

    GUID_PREFIX = "sta"

    id = Column(Integer, primary_key=True, autoincrement=True)

    event_id = Column(
        Integer,
        ForeignKey("events.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    staff_id = Column(
        Integer,
        ForeignKey("staff.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    start_time = Column(DateTime, nullable=False)
    end_time = Column(DateTime, nullable=False)

    assignment_status = Column(
        String(50), nullable=False, default=AssignmentStatus.REQUESTED.value
    )

    payment_status = Column(String(50), nullable=False, default=PaymentStatus.NOT_DUE.value)
    payment_terms = Column(String(50), nullable=False, default=PaymentTerms.CUSTOM.value)
    payment_amount = Column(Numeric(12, 2), nullable=True)
    payment_due_date = Column(DateTime, nullable=True)
    payment_date = Column(DateTime, nullable=True)
    payment_notes = Column(Text, nullable=True)

    invoice_number = Column(String(100), nullable=True)
    invoice_url = Column(String(2048), nullable=True)

    # No FK: the budget item may disappear independently
    budget_item_id = Column(Integer, nullable=True, index=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(
        DateTime,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
        nullable=False
    )

    event = relationship("Event", back_populates="staff_assignments")
    staff = relationship("Staff", back_populates="assignments")
    budget_item = relationship(
        "BudgetItem",
        primaryjoin="foreign(StaffAssignment.budget_item_id) == BudgetItem.id",
        viewonly=True,
        uselist=False
    )

    @property
    def event_guid(self) -> Optional[str]:
        return self.event.guid if self.event is not None else None

    @property
    def staff_guid(self) -> Optional[str]:
        return self.staff.guid if self.staff is not None else None

    @property
    def budget_item_guid(self) -> Optional[str]:
        """GUID of the linked budget item, None when unlinked or dangling."""
        return self.budget_item.guid if self.budget_item is not None else None

    def __repr__(self) -> str:
        return (
            f"<StaffAssignment(id={self.id}, staff_id={self.staff_id}, "
            f"event_id={self.event_id}, payment_status='{self.payment_status}')>"
        )
