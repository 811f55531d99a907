"""
Agenda service: persistence for single agenda sessions.

Sessions are stored with their time window only; the display order of a
timeline is derived from ``start_time`` on every read. Reordering in the
timeline is never written back here.
"""

from datetime import datetime
from typing import Any, List, Optional

from sqlalchemy.orm import Session

from backend.src.models import AgendaSession, Event, Speaker
from backend.src.models.agenda_session import SessionStatus, SessionType
from backend.src.services.event_service import EventService
from backend.src.services.exceptions import NotFoundError, ValidationError
from backend.src.services.guid import GuidService
from backend.src.utils.logging_config import get_logger
from backend.src.utils.revalidation import ViewRevalidator, event_agenda, event_detail


logger = get_logger("services")

MIN_TITLE_LENGTH = 3

UPDATABLE_FIELDS = (
    "title", "description", "session_type", "start_time", "end_time",
    "room", "location", "max_attendees", "status",
)


def session_duration_minutes(start_time: datetime, end_time: datetime) -> int:
    """Whole minutes between start and end, rounded to the nearest minute."""
    return round((end_time - start_time).total_seconds() / 60)


class AgendaService:
    """
    Service for agenda sessions.

    Usage:
        >>> service = AgendaService(db_session)
        >>> session = service.create_session(
        ...     event_guid="evt_01hgw...",
        ...     title="Opening keynote",
        ...     session_type="keynote",
        ...     start_time=datetime(2026, 5, 12, 9, 0),
        ...     end_time=datetime(2026, 5, 12, 10, 0),
        ... )
        >>> session.duration
        60
    """

    def __init__(self, db: Session, revalidator: Optional[ViewRevalidator] = None):
        self.db = db
        self.revalidator = revalidator or ViewRevalidator()
        self.events = EventService(db)

    def create_session(
        self,
        event_guid: str,
        title: str,
        start_time: datetime,
        end_time: datetime,
        session_type: str = SessionType.TALK.value,
        description: Optional[str] = None,
        room: Optional[str] = None,
        location: Optional[str] = None,
        speaker_guid: Optional[str] = None,
        max_attendees: Optional[int] = None,
        status: str = SessionStatus.SCHEDULED.value,
    ) -> AgendaSession:
        """
        Create an agenda session.

        Raises:
            NotFoundError: If the event or speaker does not exist
            ValidationError: If the title is too short, the window is not
                positive, or the speaker belongs to another event
        """
        event = self.events.get_by_guid(event_guid)
        self._validate(title, start_time, end_time, max_attendees)
        speaker = self._resolve_speaker(speaker_guid, event)

        session = AgendaSession(
            event_id=event.id,
            title=title.strip(),
            description=description,
            session_type=session_type,
            start_time=start_time,
            end_time=end_time,
            duration=session_duration_minutes(start_time, end_time),
            room=room,
            location=location,
            speaker_id=speaker.id if speaker else None,
            max_attendees=max_attendees,
            status=status,
        )
        self.db.add(session)
        self.db.commit()
        self.db.refresh(session)

        logger.info(f"Created agenda session: {session.title} ({session.guid}) for event {event.guid}")
        self._revalidate(event)
        return session

    def get_by_guid(self, guid: str) -> AgendaSession:
        """
        Get a session by GUID.

        Raises:
            NotFoundError: If the GUID is malformed or no session matches
        """
        if not GuidService.validate_guid(guid, "ses"):
            raise NotFoundError("AgendaSession", guid)

        session = (
            self.db.query(AgendaSession)
            .filter(AgendaSession.uuid == GuidService.parse_guid(guid, "ses"))
            .first()
        )
        if not session:
            raise NotFoundError("AgendaSession", guid)
        return session

    def list_for_event(self, event_guid: str) -> List[AgendaSession]:
        """
        List an event's sessions in time order.

        This is the canonical ordering a timeline is (re)seeded with.

        Raises:
            NotFoundError: If the event does not exist
        """
        event = self.events.get_by_guid(event_guid)
        return (
            self.db.query(AgendaSession)
            .filter(AgendaSession.event_id == event.id)
            .order_by(AgendaSession.start_time.asc(), AgendaSession.id.asc())
            .all()
        )

    def update_session(self, guid: str, **updates: Any) -> AgendaSession:
        """
        Apply a partial update to a session.

        The merged title and time window are re-validated and the duration
        recomputed. Passing ``speaker_guid=None`` removes the speaker.

        Raises:
            NotFoundError: If the session or speaker does not exist
            ValidationError: On invalid merged values or an unknown field
        """
        session = self.get_by_guid(guid)
        event = session.event

        change_speaker = "speaker_guid" in updates
        speaker = self._resolve_speaker(updates.pop("speaker_guid", None), event)

        for field in updates:
            if field not in UPDATABLE_FIELDS:
                raise ValidationError(f"Field '{field}' cannot be updated", field=field)

        title = updates.get("title", session.title)
        start_time = updates.get("start_time", session.start_time)
        end_time = updates.get("end_time", session.end_time)
        self._validate(title, start_time, end_time, updates.get("max_attendees"))

        # Nothing is written to the session until every check has passed
        if change_speaker:
            session.speaker_id = speaker.id if speaker else None
        for field, value in updates.items():
            setattr(session, field, value.strip() if field == "title" else value)
        session.duration = session_duration_minutes(start_time, end_time)

        self.db.commit()
        self.db.refresh(session)

        logger.info(f"Updated agenda session {session.guid}")
        self._revalidate(event)
        return session

    def delete_session(self, guid: str) -> None:
        """
        Delete a session.

        Confirmation is the caller's responsibility; it is not re-checked.

        Raises:
            NotFoundError: If the session does not exist
        """
        session = self.get_by_guid(guid)
        event = session.event

        self.db.delete(session)
        self.db.commit()

        logger.info(f"Deleted agenda session {guid}")
        self._revalidate(event)

    # =========================================================================
    # Helpers
    # =========================================================================

    @staticmethod
    def _validate(
        title: Optional[str],
        start_time: datetime,
        end_time: datetime,
        max_attendees: Optional[int] = None,
    ) -> None:
        if title is None or len(title.strip()) < MIN_TITLE_LENGTH:
            raise ValidationError(
                f"Title must be at least {MIN_TITLE_LENGTH} characters", field="title"
            )
        if end_time <= start_time:
            raise ValidationError("End time must be after start time", field="end_time")
        if max_attendees is not None and max_attendees < 0:
            raise ValidationError("Max attendees cannot be negative", field="max_attendees")

    def _resolve_speaker(self, speaker_guid: Optional[str], event: Event) -> Optional[Speaker]:
        if not speaker_guid:
            return None

        if not GuidService.validate_guid(speaker_guid, "spk"):
            raise NotFoundError("Speaker", speaker_guid)
        speaker = (
            self.db.query(Speaker)
            .filter(Speaker.uuid == GuidService.parse_guid(speaker_guid, "spk"))
            .first()
        )
        if not speaker:
            raise NotFoundError("Speaker", speaker_guid)
        if speaker.event_id != event.id:
            raise ValidationError("Speaker belongs to a different event", field="speaker_guid")
        return speaker

    def _revalidate(self, event: Event) -> None:
        self.revalidator.revalidate_paths(event_agenda(event.guid), event_detail(event.guid))
