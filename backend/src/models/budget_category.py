"""
Budget category model.

A category groups the budget items of one event (Venue, Catering, Staff,
Income, ...). ``spent_amount`` is a stored aggregate: it always equals the
sum of the items' ``actual_cost`` (NULL counted as zero) and is rewritten
by BudgetService.recompute_spent_amount after every item mutation. It is
never accepted from API input.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy import Column, Integer, String, DateTime, Numeric, Text, ForeignKey
from sqlalchemy.orm import relationship

from backend.src.models import Base
from backend.src.models.mixins import GuidMixin


DEFAULT_CATEGORY_COLOR = "#3B82F6"


class BudgetCategory(Base, GuidMixin):
    """
    Budget category model.

    Attributes:
        id: Primary key (internal, never exposed)
        guid: GUID string property (bgc_xxx, inherited from GuidMixin)
        event_id: FK to the owning Event
        name: Category name (2-100 characters)
        description: Optional description
        color: Hex color code (#RRGGBB) for UI display
        icon: Icon name for UI display
        allocated_amount: Planned budget for the category
        spent_amount: Derived sum of item actual costs

    Relationships:
        event: Owning event (many-to-one)
        items: Budget items (one-to-many, CASCADE on delete)
    """

    __tablename__ = "budget_categories"

    GUID_PREFIX = "bgc"

    id = Column(Integer, primary_key=True, autoincrement=True)

    event_id = Column(
        Integer,
        ForeignKey("events.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    name = Column(String(100), nullable=False)
    description = Column(Text, nullable=True)
    color = Column(String(7), nullable=False, default=DEFAULT_CATEGORY_COLOR)
    icon = Column(String(50), nullable=True)
    allocated_amount = Column(Numeric(12, 2), nullable=False, default=Decimal("0"))
    spent_amount = Column(Numeric(12, 2), nullable=False, default=Decimal("0"))

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(
        DateTime,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
        nullable=False
    )

    event = relationship("Event", back_populates="budget_categories")
    items = relationship(
        "BudgetItem",
        back_populates="category",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="BudgetItem.id"
    )

    @property
    def event_guid(self) -> Optional[str]:
        return self.event.guid if self.event is not None else None

    @property
    def remaining_amount(self) -> Decimal:
        """Allocated minus spent; negative when the category is over budget."""
        return (self.allocated_amount or Decimal("0")) - (self.spent_amount or Decimal("0"))

    def __repr__(self) -> str:
        return (
            f"<BudgetCategory(id={self.id}, name='{self.name}', "
            f"spent={self.spent_amount}/{self.allocated_amount})>"
        )

    def __str__(self) -> str:
        return self.name
