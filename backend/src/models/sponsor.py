"""
Sponsor model.

A sponsor contributes income to an event. When a sponsorship amount is
known the sponsor owns one budget item (in the chosen category, or in the
event's income category) whose actual cost follows the payment status.
``budget_item_id`` is a weak reference, see StaffAssignment.
"""

import enum
from datetime import datetime
from typing import Optional

from sqlalchemy import Column, Integer, String, Boolean, DateTime, Numeric, Text, ForeignKey
from sqlalchemy.orm import relationship

from backend.src.models import Base
from backend.src.models.mixins import GuidMixin


class SponsorshipLevel(str, enum.Enum):
    """Sponsorship tier."""
    PLATINUM = "platinum"
    GOLD = "gold"
    SILVER = "silver"
    BRONZE = "bronze"
    PARTNER = "partner"


class SponsorPaymentStatus(str, enum.Enum):
    """Sponsor payment status; PARTIAL books half the amount as received."""
    PENDING = "pending"
    PARTIAL = "partial"
    PAID = "paid"


class Sponsor(Base, GuidMixin):
    """
    Sponsor model.

    Attributes:
        id: Primary key (internal, never exposed)
        guid: GUID string property (spn_xxx, inherited from GuidMixin)
        event_id: FK to Event
        company_name: Sponsoring company
        contact_person: Contact name
        email: Contact email
        phone: Contact phone
        sponsorship_level: Tier (see SponsorshipLevel)
        sponsorship_amount: Committed amount (NULL or 0 when not yet known)
        contract_signed: Whether the contract has been signed
        contract_date: Contract signature date
        payment_status: Payment progress (see SponsorPaymentStatus)
        payment_date: Date of the (last) payment
        website_url: Company website
        description: Public description
        notes: Internal notes
        budget_item_id: Weak pointer to the generated BudgetItem

    Relationships:
        event: Owning event (many-to-one)
        budget_item: Linked budget item (view-only, resolves to None if dangling)
    """

    __tablename__ = "sponsors"

    GUID_PREFIX = "spn"

    id = Column(Integer, primary_key=True, autoincrement=True)

    event_id = Column(
        Integer,
        ForeignKey("events.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    company_name = Column(String(200), nullable=False)
    contact_person = Column(String(200), nullable=True)
    email = Column(String(255), nullable=True)
    phone = Column(String(50), nullable=True)
    sponsorship_level = Column(
        String(50), nullable=False, default=SponsorshipLevel.PARTNER.value
    )
    sponsorship_amount = Column(Numeric(12, 2), nullable=True)
    contract_signed = Column(Boolean, nullable=False, default=False)
    contract_date = Column(DateTime, nullable=True)
    payment_status = Column(
        String(50), nullable=False, default=SponsorPaymentStatus.PENDING.value
    )
    payment_date = Column(DateTime, nullable=True)
    website_url = Column(String(2048), nullable=True)
    description = Column(Text, nullable=True)
    notes = Column(Text, nullable=True)

    # No FK: the budget item may disappear independently
    budget_item_id = Column(Integer, nullable=True, index=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(
        DateTime,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
        nullable=False
    )

    event = relationship("Event", back_populates="sponsors")
    budget_item = relationship(
        "BudgetItem",
        primaryjoin="foreign(Sponsor.budget_item_id) == BudgetItem.id",
        viewonly=True,
        uselist=False
    )

    @property
    def event_guid(self) -> Optional[str]:
        return self.event.guid if self.event is not None else None

    @property
    def budget_item_guid(self) -> Optional[str]:
        """GUID of the linked budget item, None when unlinked or dangling."""
        return self.budget_item.guid if self.budget_item is not None else None

    def __repr__(self) -> str:
        return (
            f"<Sponsor(id={self.id}, company='{self.company_name}', "
            f"level='{self.sponsorship_level}', payment_status='{self.payment_status}')>"
        )

    def __str__(self) -> str:
        return self.company_name
