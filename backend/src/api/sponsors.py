"""
Sponsors API endpoints.

Sponsors with a positive sponsorship amount own one income budget item;
the service keeps it in sync on every mutation.
"""

from typing import List

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from backend.src.api.responses import success_result
from backend.src.db.database import get_db
from backend.src.schemas.action_result import ActionResult
from backend.src.schemas.sponsor import SponsorCreate, SponsorResponse, SponsorUpdate
from backend.src.services.sponsor_service import SponsorService
from backend.src.utils.logging_config import get_logger


logger = get_logger("api")

router = APIRouter(
    prefix="/sponsors",
    tags=["Sponsors"],
)


def get_sponsor_service(db: Session = Depends(get_db)) -> SponsorService:
    """Create SponsorService instance with database session."""
    return SponsorService(db=db)


@router.get(
    "",
    response_model=List[SponsorResponse],
    summary="List an event's sponsors",
)
async def list_sponsors(
    event_guid: str = Query(..., description="Event GUID (evt_xxx)"),
    service: SponsorService = Depends(get_sponsor_service),
) -> List[SponsorResponse]:
    return [SponsorResponse.model_validate(s) for s in service.list(event_guid)]


@router.get(
    "/{guid}",
    response_model=SponsorResponse,
    summary="Get a sponsor",
)
async def get_sponsor(
    guid: str,
    service: SponsorService = Depends(get_sponsor_service),
) -> SponsorResponse:
    return SponsorResponse.model_validate(service.get_by_guid(guid))


@router.post(
    "",
    response_model=ActionResult,
    status_code=status.HTTP_201_CREATED,
    summary="Create a sponsor",
)
async def create_sponsor(
    request: SponsorCreate,
    service: SponsorService = Depends(get_sponsor_service),
) -> ActionResult:
    """
    Create a sponsor.

    Example:
        POST /api/sponsors
        {
          "event_guid": "evt_xxx",
          "company_name": "Acme Corp",
          "sponsorship_amount": 1000,
          "payment_status": "partial"
        }

        The generated income item has actual cost 500.
    """
    sponsor = service.create(**request.model_dump())
    logger.info(f"API created sponsor {sponsor.guid}")
    return success_result(
        "Sponsor created", service.revalidator, SponsorResponse.model_validate(sponsor)
    )


@router.patch(
    "/{guid}",
    response_model=ActionResult,
    summary="Update a sponsor",
)
async def update_sponsor(
    guid: str,
    request: SponsorUpdate,
    service: SponsorService = Depends(get_sponsor_service),
) -> ActionResult:
    sponsor = service.update(guid, **request.model_dump(exclude_unset=True))
    return success_result(
        "Sponsor updated", service.revalidator, SponsorResponse.model_validate(sponsor)
    )


@router.delete(
    "/{guid}",
    response_model=ActionResult,
    summary="Delete a sponsor",
)
async def delete_sponsor(
    guid: str,
    service: SponsorService = Depends(get_sponsor_service),
) -> ActionResult:
    """Delete the sponsor and its linked budget item."""
    service.delete(guid)
    return success_result("Sponsor deleted", service.revalidator)
