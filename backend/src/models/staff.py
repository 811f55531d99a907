"""
Staff model.

A staff member is a person who can be assigned to events (hostess, driver,
AV technician, ...). Staff records are shared across events; the per-event
engagement lives in StaffAssignment.
"""

import enum
from datetime import datetime

from sqlalchemy import Column, Integer, String, Boolean, DateTime, Numeric, Text
from sqlalchemy.orm import relationship

from backend.src.models import Base
from backend.src.models.mixins import GuidMixin


class StaffRole(str, enum.Enum):
    """Staff role vocabulary."""
    HOSTESS = "hostess"
    STEWARD = "steward"
    DRIVER = "driver"
    AV_TECH = "av_tech"
    PHOTOGRAPHER = "photographer"
    VIDEOGRAPHER = "videographer"
    SECURITY = "security"
    CATERING = "catering"
    CLEANING = "cleaning"
    OTHER = "other"


class Staff(Base, GuidMixin):
    """
    Staff member model.

    Attributes:
        id: Primary key (internal, never exposed)
        guid: GUID string property (stf_xxx, inherited from GuidMixin)
        first_name: Given name
        last_name: Family name
        email: Contact email
        phone: Contact phone
        role: Role (see StaffRole)
        hourly_rate: Reference rate, informational only
        is_active: Whether the person can receive new assignments
        notes: Free-form notes

    Relationships:
        assignments: Staff assignments (one-to-many, CASCADE on delete)
    """

    __tablename__ = "staff"

    GUID_PREFIX = "stf"

    id = Column(Integer, primary_key=True, autoincrement=True)

    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    email = Column(String(255), nullable=False)
    phone = Column(String(50), nullable=True)
    role = Column(String(50), nullable=False, default=StaffRole.OTHER.value)
    hourly_rate = Column(Numeric(12, 2), nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)
    notes = Column(Text, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(
        DateTime,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
        nullable=False
    )

    assignments = relationship(
        "StaffAssignment",
        back_populates="staff",
        cascade="all, delete-orphan",
        passive_deletes=True
    )

    @property
    def full_name(self) -> str:
        """Name in "First Last" order, as used for vendor fields."""
        return f"{self.first_name} {self.last_name}"

    @property
    def sort_name(self) -> str:
        """Name in "Last First" order, as used for budget line descriptions."""
        return f"{self.last_name} {self.first_name}"

    def __repr__(self) -> str:
        return f"<Staff(id={self.id}, name='{self.full_name}', role='{self.role}')>"

    def __str__(self) -> str:
        return self.full_name
