"""
SQLAlchemy models for the eventdash application.

This module provides the declarative base class and imports all models
to ensure they are registered with SQLAlchemy's metadata (required for
Alembic autogenerate and ``Base.metadata.create_all`` in tests).
"""

from sqlalchemy.orm import declarative_base

Base = declarative_base()


from backend.src.models.event import Event, EventStatus
from backend.src.models.staff import Staff, StaffRole
from backend.src.models.speaker import Speaker
from backend.src.models.budget_category import BudgetCategory, DEFAULT_CATEGORY_COLOR
from backend.src.models.budget_item import BudgetItem, BudgetItemStatus
from backend.src.models.staff_assignment import (
    StaffAssignment, AssignmentStatus, PaymentStatus, PaymentTerms
)
from backend.src.models.sponsor import Sponsor, SponsorshipLevel, SponsorPaymentStatus
from backend.src.models.agenda_session import AgendaSession, SessionType, SessionStatus

__all__ = [
    "Base",
    "Event",
    "EventStatus",
    "Staff",
    "StaffRole",
    "Speaker",
    "BudgetCategory",
    "DEFAULT_CATEGORY_COLOR",
    "BudgetItem",
    "BudgetItemStatus",
    "StaffAssignment",
    "AssignmentStatus",
    "PaymentStatus",
    "PaymentTerms",
    "Sponsor",
    "SponsorshipLevel",
    "SponsorPaymentStatus",
    "AgendaSession",
    "SessionType",
    "SessionStatus",
]
