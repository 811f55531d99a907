"""
Event service.

Events only need create/read here: they scope every other entity, and
the other services resolve event GUIDs through ``get_by_guid``.
"""

from datetime import datetime
from typing import List, Optional

from sqlalchemy.orm import Session

from backend.src.models import Event
from backend.src.models.event import EventStatus
from backend.src.services.exceptions import NotFoundError, ValidationError
from backend.src.services.guid import GuidService
from backend.src.utils.logging_config import get_logger


logger = get_logger("services")


class EventService:
    """
    Service for managing events.

    Usage:
        >>> service = EventService(db_session)
        >>> event = service.create(
        ...     title="Tech Summit 2026",
        ...     start_date=datetime(2026, 5, 12),
        ...     end_date=datetime(2026, 5, 14),
        ... )
    """

    def __init__(self, db: Session):
        self.db = db

    def create(
        self,
        title: str,
        start_date: datetime,
        end_date: datetime,
        description: Optional[str] = None,
        location: Optional[str] = None,
        status: str = EventStatus.DRAFT.value,
    ) -> Event:
        """
        Create a new event.

        Raises:
            ValidationError: If end_date is before start_date
        """
        if end_date < start_date:
            raise ValidationError("End date must not be before start date", field="end_date")

        event = Event(
            title=title,
            start_date=start_date,
            end_date=end_date,
            description=description,
            location=location,
            status=status,
        )
        self.db.add(event)
        self.db.commit()
        self.db.refresh(event)

        logger.info(f"Created event: {event.title} ({event.guid})")
        return event

    def get_by_guid(self, guid: str) -> Event:
        """
        Get an event by GUID.

        Raises:
            NotFoundError: If the GUID is malformed or no event matches
        """
        if not GuidService.validate_guid(guid, "evt"):
            raise NotFoundError("Event", guid)

        event = (
            self.db.query(Event)
            .filter(Event.uuid == GuidService.parse_guid(guid, "evt"))
            .first()
        )
        if not event:
            raise NotFoundError("Event", guid)
        return event

    def list(self) -> List[Event]:
        """List all events, soonest first."""
        return self.db.query(Event).order_by(Event.start_date.asc(), Event.id.asc()).all()
