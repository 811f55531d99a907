"""
Staff API endpoints.

Staff members are the people assigned to events; their payments live on
the assignments.
"""

from typing import List

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from backend.src.api.responses import success_result
from backend.src.db.database import get_db
from backend.src.schemas.action_result import ActionResult
from backend.src.schemas.staff import StaffCreate, StaffResponse
from backend.src.services.staff_service import StaffService
from backend.src.utils.logging_config import get_logger


logger = get_logger("api")

router = APIRouter(
    prefix="/staff",
    tags=["Staff"],
)


def get_staff_service(db: Session = Depends(get_db)) -> StaffService:
    """Create StaffService instance with database session."""
    return StaffService(db=db)


@router.get(
    "",
    response_model=List[StaffResponse],
    summary="List staff members",
)
async def list_staff(
    active_only: bool = Query(default=False, description="Only active staff"),
    service: StaffService = Depends(get_staff_service),
) -> List[StaffResponse]:
    return [StaffResponse.model_validate(s) for s in service.list(active_only=active_only)]


@router.get(
    "/{guid}",
    response_model=StaffResponse,
    summary="Get a staff member",
)
async def get_staff(
    guid: str,
    service: StaffService = Depends(get_staff_service),
) -> StaffResponse:
    return StaffResponse.model_validate(service.get_by_guid(guid))


@router.post(
    "",
    response_model=ActionResult,
    status_code=status.HTTP_201_CREATED,
    summary="Create a staff member",
)
async def create_staff(
    request: StaffCreate,
    service: StaffService = Depends(get_staff_service),
) -> ActionResult:
    staff = service.create(**request.model_dump())
    return success_result(
        "Staff member created", service.revalidator, StaffResponse.model_validate(staff)
    )
