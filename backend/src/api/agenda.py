"""
Agenda API endpoints.

Provides endpoints for:
- The day-bucketed agenda of an event
- Creating, updating and deleting single agenda sessions

Design:
- The agenda is always served in time order; manual reordering in the
  timeline is client-side state and has no endpoint
- Title and time-window checks come back as field errors (400) so the
  session form can show them inline
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from backend.src.api.responses import success_result
from backend.src.db.database import get_db
from backend.src.schemas.action_result import ActionResult
from backend.src.schemas.agenda import (
    AgendaDay,
    AgendaResponse,
    AgendaSessionCreate,
    AgendaSessionResponse,
    AgendaSessionUpdate,
)
from backend.src.services.agenda_service import AgendaService
from backend.src.services.agenda_timeline import AgendaTimeline
from backend.src.utils.logging_config import get_logger


logger = get_logger("api")

router = APIRouter(tags=["Agenda"])


def get_agenda_service(db: Session = Depends(get_db)) -> AgendaService:
    """Create AgendaService instance with database session."""
    return AgendaService(db=db)


@router.get(
    "/events/{event_guid}/agenda",
    response_model=AgendaResponse,
    summary="Get an event's agenda grouped by day",
)
async def get_event_agenda(
    event_guid: str,
    service: AgendaService = Depends(get_agenda_service),
) -> AgendaResponse:
    """
    Get the agenda of an event.

    Example:
        GET /api/events/evt_xxx/agenda

        Response:
        {
          "event_guid": "evt_xxx",
          "days": [
            {"date": "2026-05-12", "sessions": [...]},
            {"date": "2026-05-13", "sessions": [...]}
          ]
        }
    """
    timeline = AgendaTimeline(event_guid, service.list_for_event(event_guid))
    return AgendaResponse(
        event_guid=event_guid,
        days=[
            AgendaDay(
                date=day,
                sessions=[AgendaSessionResponse.model_validate(s) for s in sessions],
            )
            for day, sessions in timeline.days()
        ],
    )


@router.get(
    "/agenda/sessions/{guid}",
    response_model=AgendaSessionResponse,
    summary="Get an agenda session",
)
async def get_agenda_session(
    guid: str,
    service: AgendaService = Depends(get_agenda_service),
) -> AgendaSessionResponse:
    return AgendaSessionResponse.model_validate(service.get_by_guid(guid))


@router.post(
    "/agenda/sessions",
    response_model=ActionResult,
    status_code=status.HTTP_201_CREATED,
    summary="Create an agenda session",
)
async def create_agenda_session(
    request: AgendaSessionCreate,
    service: AgendaService = Depends(get_agenda_service),
) -> ActionResult:
    session = service.create_session(**request.model_dump())
    return success_result(
        "Session created", service.revalidator, AgendaSessionResponse.model_validate(session)
    )


@router.patch(
    "/agenda/sessions/{guid}",
    response_model=ActionResult,
    summary="Update an agenda session",
)
async def update_agenda_session(
    guid: str,
    request: AgendaSessionUpdate,
    service: AgendaService = Depends(get_agenda_service),
) -> ActionResult:
    session = service.update_session(guid, **request.model_dump(exclude_unset=True))
    return success_result(
        "Session updated", service.revalidator, AgendaSessionResponse.model_validate(session)
    )


@router.delete(
    "/agenda/sessions/{guid}",
    response_model=ActionResult,
    summary="Delete an agenda session",
)
async def delete_agenda_session(
    guid: str,
    service: AgendaService = Depends(get_agenda_service),
) -> ActionResult:
    """Delete a session; the client asks for confirmation beforehand."""
    service.delete_session(guid)
    return success_result("Session deleted", service.revalidator)
