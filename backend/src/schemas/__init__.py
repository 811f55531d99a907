"""
Pydantic schemas for API request/response validation.

This module exports all schema classes for use in API endpoints.
"""

from backend.src.schemas.action_result import ActionResult
from backend.src.schemas.event import EventCreate, EventResponse
from backend.src.schemas.staff import StaffCreate, StaffResponse
from backend.src.schemas.speaker import SpeakerCreate, SpeakerResponse
from backend.src.schemas.budget import (
    BudgetCategoryCreate,
    BudgetCategoryUpdate,
    BudgetCategoryResponse,
    BudgetCategoryDetailResponse,
    BudgetItemCreate,
    BudgetItemUpdate,
    BudgetItemStatusUpdate,
    BudgetItemResponse,
)
from backend.src.schemas.staff_assignment import (
    StaffAssignmentCreate,
    StaffAssignmentBatchCreate,
    StaffAssignmentUpdate,
    StaffAssignmentStatusUpdate,
    MarkPaidRequest,
    PostponePaymentRequest,
    CancelPaymentRequest,
    StaffAssignmentResponse,
)
from backend.src.schemas.sponsor import SponsorCreate, SponsorUpdate, SponsorResponse
from backend.src.schemas.agenda import (
    AgendaSessionCreate,
    AgendaSessionUpdate,
    AgendaSessionResponse,
    AgendaDay,
    AgendaResponse,
)

__all__ = [
    # Action result
    "ActionResult",
    # Event
    "EventCreate",
    "EventResponse",
    # Staff
    "StaffCreate",
    "StaffResponse",
    # Speaker
    "SpeakerCreate",
    "SpeakerResponse",
    # Budget
    "BudgetCategoryCreate",
    "BudgetCategoryUpdate",
    "BudgetCategoryResponse",
    "BudgetCategoryDetailResponse",
    "BudgetItemCreate",
    "BudgetItemUpdate",
    "BudgetItemStatusUpdate",
    "BudgetItemResponse",
    # Staff assignment
    "StaffAssignmentCreate",
    "StaffAssignmentBatchCreate",
    "StaffAssignmentUpdate",
    "StaffAssignmentStatusUpdate",
    "MarkPaidRequest",
    "PostponePaymentRequest",
    "CancelPaymentRequest",
    "StaffAssignmentResponse",
    # Sponsor
    "SponsorCreate",
    "SponsorUpdate",
    "SponsorResponse",
    # Agenda
    "AgendaSessionCreate",
    "AgendaSessionUpdate",
    "AgendaSessionResponse",
    "AgendaDay",
    "AgendaResponse",
]
