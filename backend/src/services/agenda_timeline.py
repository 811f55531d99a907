"""
Agenda timeline controller.

In-memory state behind an event's agenda timeline: the current sequence
of sessions, their grouping into days, the drag-and-drop reorder gesture
and the create/edit form. Nothing here touches the database directly;
form submissions go through a session gateway (``AgendaService``).

Design:
- The sequence is seeded from the gateway's time-ordered read and is
  reset by every ``load``/``reload``. Reordering is ephemeral: there is no
  order column, so a reload always shows time order again
- Day buckets are computed from each session's own ``start_time``; moving a
  card across a day boundary changes its position in the sequence, never
  its date
- A successful form submission closes the form but does not splice the
  session into the sequence; the caller reloads from the gateway
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Dict, List, Optional, Protocol, Sequence, Tuple, TypeVar

from backend.src.services.exceptions import NotFoundError, ServiceError, ValidationError
from backend.src.utils.logging_config import get_logger


logger = get_logger("services")

T = TypeVar("T")

FORM_FIELDS = (
    "title", "description", "session_type", "start_time", "end_time",
    "room", "location", "speaker_guid", "max_attendees", "status",
)


class TimelineSession(Protocol):
    """Anything with a GUID and a start time can sit on the timeline."""

    guid: str
    start_time: datetime


class SessionGateway(Protocol):
    """Persistence operations the timeline form submits to."""

    def create_session(self, event_guid: str, **fields: Any) -> TimelineSession:
        ...

    def update_session(self, guid: str, **fields: Any) -> TimelineSession:
        ...


def array_move(items: Sequence[T], old_index: int, new_index: int) -> List[T]:
    """
    Return a copy of ``items`` with the element at ``old_index`` moved to
    ``new_index``.

    Examples:
        >>> array_move(["a", "b", "c", "d"], 0, 2)
        ['b', 'c', 'a', 'd']
        >>> array_move(["a", "b", "c", "d"], 3, 1)
        ['a', 'd', 'b', 'c']
    """
    result = list(items)
    result.insert(new_index, result.pop(old_index))
    return result


@dataclass
class DragState:
    """
    In-flight drag gesture.

    Attributes:
        active_guid: Session being dragged
        over_guid: Session currently under the pointer / keyboard cursor
    """
    active_guid: str
    over_guid: Optional[str] = None


@dataclass
class FormState:
    """
    Create/edit form state.

    Attributes:
        editing_guid: Session being edited, None when creating
        initial: Prefilled field values (empty for create)
        message: Last failure message, None after success or on open
        errors: Per-field error messages of the last failed submission
    """
    editing_guid: Optional[str] = None
    initial: Dict[str, Any] = field(default_factory=dict)
    message: Optional[str] = None
    errors: Dict[str, List[str]] = field(default_factory=dict)

    @property
    def is_edit(self) -> bool:
        return self.editing_guid is not None


@dataclass
class FormSubmission:
    """Outcome of ``AgendaTimeline.submit_form``."""
    success: bool
    message: str
    session: Optional[Any] = None
    errors: Dict[str, List[str]] = field(default_factory=dict)


class AgendaTimeline:
    """
    Controller for one event's agenda timeline.

    Usage:
        >>> timeline = AgendaTimeline(event_guid, agenda_service.list_for_event(event_guid))
        >>> timeline.start_drag(third.guid)
        >>> timeline.drop(first.guid)
        True
        >>> [s.guid for s in timeline.items][0] == third.guid
        True
        >>> timeline.reload(agenda_service.list_for_event(event_guid))  # back to time order
    """

    def __init__(self, event_guid: str, sessions: Sequence[TimelineSession] = ()):
        self.event_guid = event_guid
        self.items: List[TimelineSession] = []
        self.drag: Optional[DragState] = None
        self.form: Optional[FormState] = None
        self.load(sessions)

    # =========================================================================
    # Sequence
    # =========================================================================

    def load(self, sessions: Sequence[TimelineSession]) -> None:
        """Replace the sequence with ``sessions`` (as given) and drop any drag."""
        self.items = list(sessions)
        self.drag = None

    def reload(self, sessions: Sequence[TimelineSession]) -> None:
        """Re-seed after a refresh; any manual arrangement is discarded."""
        self.load(sessions)

    @property
    def order(self) -> List[str]:
        """GUIDs in current sequence order."""
        return [session.guid for session in self.items]

    def days(self) -> List[Tuple[date, List[TimelineSession]]]:
        """
        Group the sequence into day buckets.

        Buckets are keyed by the calendar date of ``start_time`` and sorted
        ascending; within a bucket sessions keep their sequence order.
        """
        buckets: Dict[date, List[TimelineSession]] = {}
        for session in self.items:
            buckets.setdefault(session.start_time.date(), []).append(session)
        return sorted(buckets.items(), key=lambda bucket: bucket[0])

    def index_of(self, guid: Optional[str]) -> Optional[int]:
        for index, session in enumerate(self.items):
            if session.guid == guid:
                return index
        return None

    def find(self, guid: Optional[str]) -> Optional[TimelineSession]:
        index = self.index_of(guid)
        return self.items[index] if index is not None else None

    # =========================================================================
    # Drag and drop
    # =========================================================================

    @property
    def is_dragging(self) -> bool:
        return self.drag is not None

    @property
    def overlay(self) -> Optional[TimelineSession]:
        """Session rendered in the drag overlay, None when not dragging."""
        return self.find(self.drag.active_guid) if self.drag else None

    def start_drag(self, guid: str) -> None:
        """
        Begin dragging a session (pointer down past the activation distance,
        or keyboard pick-up).

        Raises:
            NotFoundError: If the session is not on the timeline
        """
        if self.index_of(guid) is None:
            raise NotFoundError("AgendaSession", guid)
        self.drag = DragState(active_guid=guid, over_guid=guid)

    def drag_over(self, guid: Optional[str]) -> None:
        """Track the session under the pointer; unknown or None clears the target."""
        if self.drag is None:
            return
        self.drag.over_guid = guid if self.index_of(guid) is not None else None

    def nudge(self, step: int) -> None:
        """
        Keyboard move: shift the drop target by ``step`` positions,
        clamped to the ends of the sequence.
        """
        if self.drag is None or not self.items:
            return
        current = self.index_of(self.drag.over_guid)
        if current is None:
            current = self.index_of(self.drag.active_guid)
        target = min(max(current + step, 0), len(self.items) - 1)
        self.drag.over_guid = self.items[target].guid

    def drop(self, target_guid: Optional[str] = None) -> bool:
        """
        Release the drag.

        The dragged session moves to the target's index in the flattened
        sequence. Without an active drag, without a valid target, or when
        dropped onto itself, the sequence is unchanged.

        Args:
            target_guid: Drop target; defaults to the last ``drag_over`` target

        Returns:
            True if the sequence changed
        """
        if self.drag is None:
            return False

        active_guid = self.drag.active_guid
        over_guid = target_guid if target_guid is not None else self.drag.over_guid
        self.drag = None

        old_index = self.index_of(active_guid)
        new_index = self.index_of(over_guid)
        if old_index is None or new_index is None or old_index == new_index:
            return False

        self.items = array_move(self.items, old_index, new_index)
        logger.debug(f"Moved {active_guid} from position {old_index} to {new_index}")
        return True

    def cancel_drag(self) -> None:
        """Abort the drag (escape key); the sequence is unchanged."""
        self.drag = None

    # =========================================================================
    # Form
    # =========================================================================

    def open_create_form(self) -> FormState:
        self.form = FormState()
        return self.form

    def open_edit_form(self, guid: str) -> FormState:
        """
        Open the form prefilled with a session's current values.

        Raises:
            NotFoundError: If the session is not on the timeline
        """
        session = self.find(guid)
        if session is None:
            raise NotFoundError("AgendaSession", guid)

        initial = {name: getattr(session, name, None) for name in FORM_FIELDS}
        self.form = FormState(editing_guid=guid, initial=initial)
        return self.form

    def close_form(self) -> None:
        self.form = None

    def submit_form(self, data: Dict[str, Any], gateway: SessionGateway) -> FormSubmission:
        """
        Submit the open form through the gateway.

        Creates a session (create form) or updates the edited one. On
        success the form closes; the sequence is left as is until the
        caller reloads. On a service error the form stays open with the
        message and field errors recorded on it.

        Raises:
            ValidationError: If no form is open
        """
        if self.form is None:
            raise ValidationError("No session form is open")

        try:
            if self.form.is_edit:
                session = gateway.update_session(self.form.editing_guid, **data)
                message = "Session updated"
            else:
                session = gateway.create_session(self.event_guid, **data)
                message = "Session created"
        except ServiceError as e:
            field_name = getattr(e, "field", None)
            self.form.message = str(e)
            self.form.errors = {field_name: [str(e)]} if field_name else {}
            logger.info(f"Session form rejected for event {self.event_guid}: {e}")
            return FormSubmission(success=False, message=str(e), errors=dict(self.form.errors))

        self.close_form()
        return FormSubmission(success=True, message=message, session=session)
