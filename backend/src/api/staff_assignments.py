"""
Staff assignments API endpoints.

Provides endpoints for:
- Assigning staff to events (single and batch)
- Partial updates and lifecycle status changes
- Payment operations: mark paid, postpone, cancel
- Deleting assignments together with their budget item

Design:
- Mutations answer with an ActionResult carrying the affected assignment
  and the view-invalidation tokens recorded by the service
- Service exceptions are mapped to ActionResult failures by the
  application-level exception handlers
- All endpoints use GUID format (sta_xxx) for identifiers
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from backend.src.api.responses import success_result
from backend.src.db.database import get_db
from backend.src.schemas.action_result import ActionResult
from backend.src.schemas.staff_assignment import (
    CancelPaymentRequest,
    MarkPaidRequest,
    PostponePaymentRequest,
    StaffAssignmentBatchCreate,
    StaffAssignmentCreate,
    StaffAssignmentResponse,
    StaffAssignmentStatusUpdate,
    StaffAssignmentUpdate,
)
from backend.src.services.staff_assignment_service import StaffAssignmentService
from backend.src.utils.logging_config import get_logger


logger = get_logger("api")

router = APIRouter(
    prefix="/staff-assignments",
    tags=["Staff Assignments"],
)


# ============================================================================
# Dependencies
# ============================================================================


def get_staff_assignment_service(db: Session = Depends(get_db)) -> StaffAssignmentService:
    """Create StaffAssignmentService instance with database session."""
    return StaffAssignmentService(db=db)


def _data(assignment) -> StaffAssignmentResponse:
    return StaffAssignmentResponse.model_validate(assignment)


# ============================================================================
# Read Endpoints
# ============================================================================


@router.get(
    "",
    response_model=List[StaffAssignmentResponse],
    summary="List staff assignments",
)
async def list_staff_assignments(
    event_guid: Optional[str] = Query(default=None, description="Filter by event"),
    staff_guid: Optional[str] = Query(default=None, description="Filter by staff member"),
    service: StaffAssignmentService = Depends(get_staff_assignment_service),
) -> List[StaffAssignmentResponse]:
    """List assignments ordered by start time."""
    assignments = service.list(event_guid=event_guid, staff_guid=staff_guid)
    return [_data(a) for a in assignments]


@router.get(
    "/{guid}",
    response_model=StaffAssignmentResponse,
    summary="Get a staff assignment",
)
async def get_staff_assignment(
    guid: str,
    service: StaffAssignmentService = Depends(get_staff_assignment_service),
) -> StaffAssignmentResponse:
    return _data(service.get_by_guid(guid))


# ============================================================================
# Mutations
# ============================================================================


@router.post(
    "",
    response_model=ActionResult,
    status_code=status.HTTP_201_CREATED,
    summary="Assign a staff member to an event",
)
async def create_staff_assignment(
    request: StaffAssignmentCreate,
    service: StaffAssignmentService = Depends(get_staff_assignment_service),
) -> ActionResult:
    """
    Create an assignment.

    When ``payment_amount`` is positive and ``budget_category_guid`` is
    given, a budget item mirroring the cost is created in that category
    and its GUID is returned as ``data.budget_item_guid``.

    Example:
        POST /api/staff-assignments
        {
          "event_guid": "evt_xxx",
          "staff_guid": "stf_xxx",
          "start_time": "2026-05-12T08:00:00Z",
          "end_time": "2026-05-12T18:00:00Z",
          "payment_amount": 500,
          "budget_category_guid": "bgc_xxx"
        }
    """
    assignment = service.create(**request.model_dump())
    logger.info(f"API created staff assignment {assignment.guid}")
    return success_result("Assignment created", service.revalidator, _data(assignment))


@router.post(
    "/batch",
    response_model=ActionResult,
    status_code=status.HTTP_201_CREATED,
    summary="Assign several staff members at once",
)
async def create_staff_assignments_batch(
    request: StaffAssignmentBatchCreate,
    service: StaffAssignmentService = Depends(get_staff_assignment_service),
) -> ActionResult:
    """
    Create one assignment per staff member with identical fields.

    ``data.assignments`` lists the created assignment GUIDs.
    """
    fields = request.model_dump(exclude={"event_guid", "staff_guids"})
    created = service.create_batch(
        event_guid=request.event_guid,
        staff_guids=request.staff_guids,
        **fields
    )
    return ActionResult(
        success=True,
        message=f"{len(created)} assignments created",
        data={"assignments": [_data(a).model_dump(mode="json") for a in created]},
        revalidate=service.revalidator.drain(),
    )


@router.patch(
    "/{guid}",
    response_model=ActionResult,
    summary="Update a staff assignment",
)
async def update_staff_assignment(
    guid: str,
    request: StaffAssignmentUpdate,
    service: StaffAssignmentService = Depends(get_staff_assignment_service),
) -> ActionResult:
    """Apply the fields present in the body; the budget item follows."""
    assignment = service.update(guid, **request.model_dump(exclude_unset=True))
    return success_result("Assignment updated", service.revalidator, _data(assignment))


@router.post(
    "/{guid}/status",
    response_model=ActionResult,
    summary="Change the assignment status",
)
async def update_staff_assignment_status(
    guid: str,
    request: StaffAssignmentStatusUpdate,
    service: StaffAssignmentService = Depends(get_staff_assignment_service),
) -> ActionResult:
    assignment = service.update_status(guid, request.assignment_status)
    return success_result("Assignment status updated", service.revalidator, _data(assignment))


@router.delete(
    "/{guid}",
    response_model=ActionResult,
    summary="Delete a staff assignment",
)
async def delete_staff_assignment(
    guid: str,
    service: StaffAssignmentService = Depends(get_staff_assignment_service),
) -> ActionResult:
    """Delete the assignment and its linked budget item."""
    service.delete(guid)
    return success_result("Assignment deleted", service.revalidator)


# ============================================================================
# Payments
# ============================================================================


@router.post(
    "/{guid}/mark-paid",
    response_model=ActionResult,
    summary="Record the payment of an assignment",
)
async def mark_staff_assignment_paid(
    guid: str,
    request: MarkPaidRequest,
    service: StaffAssignmentService = Depends(get_staff_assignment_service),
) -> ActionResult:
    assignment = service.mark_paid(guid, **request.model_dump())
    return success_result("Payment recorded", service.revalidator, _data(assignment))


@router.post(
    "/{guid}/postpone-payment",
    response_model=ActionResult,
    summary="Postpone the payment due date",
)
async def postpone_staff_assignment_payment(
    guid: str,
    request: PostponePaymentRequest,
    service: StaffAssignmentService = Depends(get_staff_assignment_service),
) -> ActionResult:
    assignment = service.postpone_payment(guid, request.new_due_date, request.reason)
    return success_result("Payment postponed", service.revalidator, _data(assignment))


@router.post(
    "/{guid}/cancel-payment",
    response_model=ActionResult,
    summary="Cancel a recorded payment",
)
async def cancel_staff_assignment_payment(
    guid: str,
    request: CancelPaymentRequest,
    service: StaffAssignmentService = Depends(get_staff_assignment_service),
) -> ActionResult:
    assignment = service.cancel_payment(guid, request.reason)
    return success_result("Payment cancelled", service.revalidator, _data(assignment))
