"""
Speaker service.

Speakers are looked up by agenda sessions; only create and list are needed.
"""

from typing import List, Optional

from sqlalchemy.orm import Session

from backend.src.models import Speaker
from backend.src.services.event_service import EventService
from backend.src.utils.logging_config import get_logger


logger = get_logger("services")


class SpeakerService:
    """
    Service for event speakers.

    Usage:
        >>> service = SpeakerService(db_session)
        >>> speaker = service.create(event_guid="evt_01hgw...", first_name="Ada", last_name="Lovelace")
    """

    def __init__(self, db: Session):
        self.db = db

    def create(
        self,
        event_guid: str,
        first_name: str,
        last_name: str,
        company: Optional[str] = None,
        job_title: Optional[str] = None,
        bio: Optional[str] = None,
    ) -> Speaker:
        """
        Create a speaker for an event.

        Raises:
            NotFoundError: If the event does not exist
        """
        event = EventService(self.db).get_by_guid(event_guid)

        speaker = Speaker(
            event_id=event.id,
            first_name=first_name,
            last_name=last_name,
            company=company,
            job_title=job_title,
            bio=bio,
        )
        self.db.add(speaker)
        self.db.commit()
        self.db.refresh(speaker)

        logger.info(f"Created speaker: {speaker.full_name} ({speaker.guid}) for event {event.guid}")
        return speaker

    def list(self, event_guid: str) -> List[Speaker]:
        """List an event's speakers ordered by last name."""
        event = EventService(self.db).get_by_guid(event_guid)
        return (
            self.db.query(Speaker)
            .filter(Speaker.event_id == event.id)
            .order_by(Speaker.last_name.asc(), Speaker.first_name.asc())
            .all()
        )
