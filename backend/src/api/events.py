"""
Events API endpoints.

Events scope every other record. Only creation and reads are exposed,
plus the event's speakers used by agenda sessions.
"""

from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from backend.src.db.database import get_db
from backend.src.schemas.event import EventCreate, EventResponse
from backend.src.schemas.speaker import SpeakerCreate, SpeakerResponse
from backend.src.services.event_service import EventService
from backend.src.services.speaker_service import SpeakerService
from backend.src.utils.logging_config import get_logger


logger = get_logger("api")

router = APIRouter(
    prefix="/events",
    tags=["Events"],
)


def get_event_service(db: Session = Depends(get_db)) -> EventService:
    """Create EventService instance with database session."""
    return EventService(db=db)


def get_speaker_service(db: Session = Depends(get_db)) -> SpeakerService:
    """Create SpeakerService instance with database session."""
    return SpeakerService(db=db)


@router.get(
    "",
    response_model=List[EventResponse],
    summary="List events",
)
async def list_events(
    service: EventService = Depends(get_event_service),
) -> List[EventResponse]:
    return [EventResponse.model_validate(e) for e in service.list()]


@router.post(
    "",
    response_model=EventResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create an event",
)
async def create_event(
    request: EventCreate,
    service: EventService = Depends(get_event_service),
) -> EventResponse:
    """
    Create an event.

    Raises:
        400: End date before start date
        422: Validation error
    """
    event = service.create(**request.model_dump())
    logger.info(f"API created event {event.guid}")
    return EventResponse.model_validate(event)


@router.get(
    "/{guid}",
    response_model=EventResponse,
    summary="Get an event",
)
async def get_event(
    guid: str,
    service: EventService = Depends(get_event_service),
) -> EventResponse:
    return EventResponse.model_validate(service.get_by_guid(guid))


@router.get(
    "/{guid}/speakers",
    response_model=List[SpeakerResponse],
    summary="List an event's speakers",
)
async def list_event_speakers(
    guid: str,
    service: SpeakerService = Depends(get_speaker_service),
) -> List[SpeakerResponse]:
    return [SpeakerResponse.model_validate(s) for s in service.list(guid)]


@router.post(
    "/{guid}/speakers",
    response_model=SpeakerResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Add a speaker to an event",
)
async def create_event_speaker(
    guid: str,
    request: SpeakerCreate,
    service: SpeakerService = Depends(get_speaker_service),
) -> SpeakerResponse:
    return SpeakerResponse.model_validate(service.create(guid, **request.model_dump()))
