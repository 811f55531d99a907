"""
Staff assignment service.

Books staff members on events and keeps the payment bookkeeping and the
linked budget item consistent with each assignment.

Design:
- One transaction per mutation: the assignment write, the budget item
  write and the category recompute commit together; the budget steps run
  in SAVEPOINTs so their failure never blocks the assignment
- ``payment_status`` is re-derived on every write that touches the due
  date, the paid date or the assignment status
- Payment operations (mark paid, postpone, cancel) leave the budget item
  alone: payment bookkeeping and cost bookkeeping are independent
"""

from datetime import datetime
from decimal import Decimal
from typing import Any, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from backend.src.models import Event, Staff, StaffAssignment
from backend.src.models.staff_assignment import AssignmentStatus, PaymentTerms
from backend.src.services.budget_service import BudgetService
from backend.src.services.budget_sync_service import BudgetSyncService
from backend.src.services.event_service import EventService
from backend.src.services.exceptions import NotFoundError, ValidationError
from backend.src.services.guid import GuidService
from backend.src.services.payment_status import (
    TERMINAL_FAILURE_STATUSES,
    derive_payment_status,
    resolve_payment_due_date,
)
from backend.src.services.staff_service import StaffService
from backend.src.utils.formatting import append_note, format_note_date, money
from backend.src.utils.logging_config import get_logger
from backend.src.utils.revalidation import (
    DASHBOARD, STAFF_LIST, ViewRevalidator,
    event_budget, event_staff, staff_detail,
)


logger = get_logger("services")

UPDATABLE_FIELDS = (
    "start_time", "end_time", "assignment_status", "payment_terms",
    "payment_amount", "payment_due_date", "payment_date", "payment_notes",
    "invoice_number", "invoice_url",
)


class StaffAssignmentService:
    """
    Service for staff assignments and their payments.

    Usage:
        >>> service = StaffAssignmentService(db_session)
        >>> assignment = service.create(
        ...     event_guid="evt_01hgw...",
        ...     staff_guid="stf_01hgw...",
        ...     start_time=datetime(2026, 5, 12, 8),
        ...     end_time=datetime(2026, 5, 12, 18),
        ...     payment_amount=Decimal("500"),
        ...     payment_terms="30_days",
        ...     budget_category_guid="bgc_01hgw...",
        ... )
        >>> assignment.budget_item_guid
        'bgi_01hgw...'
    """

    def __init__(self, db: Session, revalidator: Optional[ViewRevalidator] = None):
        """
        Initialize staff assignment service.

        Args:
            db: SQLAlchemy database session
            revalidator: Collector for view-invalidation tokens
        """
        self.db = db
        self.revalidator = revalidator or ViewRevalidator()
        self.events = EventService(db)
        self.staff = StaffService(db)
        self.budget_sync = BudgetSyncService(db, BudgetService(db, self.revalidator))

    # =========================================================================
    # Create / read
    # =========================================================================

    def create(
        self,
        event_guid: str,
        staff_guid: str,
        start_time: datetime,
        end_time: datetime,
        assignment_status: str = AssignmentStatus.REQUESTED.value,
        payment_terms: str = PaymentTerms.CUSTOM.value,
        payment_amount: Optional[Decimal] = None,
        payment_due_date: Optional[datetime] = None,
        payment_date: Optional[datetime] = None,
        payment_notes: Optional[str] = None,
        invoice_number: Optional[str] = None,
        invoice_url: Optional[str] = None,
        budget_category_guid: Optional[str] = None,
    ) -> StaffAssignment:
        """
        Create an assignment and, when it has a cost and a category, its
        budget item.

        Args:
            event_guid: Event GUID (evt_xxx)
            staff_guid: Staff GUID (stf_xxx)
            start_time: Start of the engagement
            end_time: End of the engagement, strictly after start_time
            payment_terms: custom keeps ``payment_due_date`` verbatim; the
                other terms derive it from ``end_time`` when an amount is set
            budget_category_guid: Category for the generated budget item;
                without it (or without a positive amount) no item is created

        Returns:
            Created StaffAssignment

        Raises:
            NotFoundError: If the event, staff member or category does not exist
            ValidationError: If the time window is invalid or the category
                belongs to another event
        """
        event = self.events.get_by_guid(event_guid)
        staff = self.staff.get_by_guid(staff_guid)
        self._validate_window(start_time, end_time)
        category = self.budget_sync.resolve_category(budget_category_guid, event.id)

        amount = money(payment_amount)
        due_date = resolve_payment_due_date(payment_terms, amount, end_time, payment_due_date)

        assignment = StaffAssignment(
            event_id=event.id,
            staff_id=staff.id,
            start_time=start_time,
            end_time=end_time,
            assignment_status=assignment_status,
            payment_terms=payment_terms,
            payment_amount=amount,
            payment_due_date=due_date,
            payment_date=payment_date,
            payment_status=derive_payment_status(due_date, payment_date, assignment_status).value,
            payment_notes=payment_notes,
            invoice_number=invoice_number,
            invoice_url=invoice_url,
        )

        try:
            self.db.add(assignment)
            self.budget_sync.sync_staff_assignment(assignment, staff, category)
            self.db.commit()
            self.db.refresh(assignment)
        except SQLAlchemyError:
            self.db.rollback()
            raise

        logger.info(
            f"Created staff assignment {assignment.guid}: {staff.full_name} on {event.guid}"
            + (f" (budget item {assignment.budget_item_guid})" if assignment.budget_item_id else "")
        )
        self._revalidate(event, staff, budget=True)
        return assignment

    def create_batch(
        self,
        event_guid: str,
        staff_guids: List[str],
        start_time: datetime,
        end_time: datetime,
        **common: Any
    ) -> List[StaffAssignment]:
        """
        Assign several staff members to the same event window.

        The shared window, the event and every staff member are validated
        before anything is written. Assignments are then created one by
        one with the same fields; the first failure stops the batch.

        Args:
            staff_guids: Staff GUIDs; duplicates are ignored
            **common: Any other ``create`` argument, applied to every assignment

        Raises:
            ValidationError: If the list is empty or the window is invalid
            NotFoundError: If the event or any staff member does not exist
        """
        unique_guids = list(dict.fromkeys(staff_guids))
        if not unique_guids:
            raise ValidationError("Select at least one staff member", field="staff_guids")

        self._validate_window(start_time, end_time)
        self.events.get_by_guid(event_guid)
        for guid in unique_guids:
            self.staff.get_by_guid(guid)

        created = [
            self.create(
                event_guid=event_guid,
                staff_guid=guid,
                start_time=start_time,
                end_time=end_time,
                **common
            )
            for guid in unique_guids
        ]

        logger.info(f"Created {len(created)} staff assignments for event {event_guid}")
        return created

    def get_by_guid(self, guid: str) -> StaffAssignment:
        """
        Get an assignment by GUID.

        Raises:
            NotFoundError: If the GUID is malformed or no assignment matches
        """
        if not GuidService.validate_guid(guid, "sta"):
            raise NotFoundError("StaffAssignment", guid)

        assignment = (
            self.db.query(StaffAssignment)
            .filter(StaffAssignment.uuid == GuidService.parse_guid(guid, "sta"))
            .first()
        )
        if not assignment:
            raise NotFoundError("StaffAssignment", guid)
        return assignment

    def list(
        self,
        event_guid: Optional[str] = None,
        staff_guid: Optional[str] = None,
    ) -> List[StaffAssignment]:
        """
        List assignments ordered by start time, optionally filtered.

        Raises:
            NotFoundError: If a filter GUID does not exist
        """
        query = self.db.query(StaffAssignment)
        if event_guid:
            query = query.filter(StaffAssignment.event_id == self.events.get_by_guid(event_guid).id)
        if staff_guid:
            query = query.filter(StaffAssignment.staff_id == self.staff.get_by_guid(staff_guid).id)
        return query.order_by(StaffAssignment.start_time.asc(), StaffAssignment.id.asc()).all()

    # =========================================================================
    # Update / delete
    # =========================================================================

    def update(self, guid: str, **updates: Any) -> StaffAssignment:
        """
        Apply a partial update and resync the budget item.

        New values are merged over the stored ones. The due date is
        re-derived from the merged terms, amount and end time, and the
        payment status is always re-derived. The budget item is then
        updated, or created if the assignment now has a cost and a
        category, using the merged values. Clearing the amount keeps an
        existing item with zero cost.

        Args:
            guid: Assignment GUID (sta_xxx)
            **updates: Any of UPDATABLE_FIELDS, plus ``staff_guid`` and
                ``budget_category_guid``

        Raises:
            NotFoundError: If the assignment, staff member or category does not exist
            ValidationError: If the merged window is invalid or a field is unknown
        """
        assignment = self.get_by_guid(guid)
        event = assignment.event

        previous_staff = assignment.staff
        staff = previous_staff
        staff_guid = updates.pop("staff_guid", None)
        if staff_guid:
            staff = self.staff.get_by_guid(staff_guid)
        category = self.budget_sync.resolve_category(
            updates.pop("budget_category_guid", None), event.id
        )

        unknown = set(updates) - set(UPDATABLE_FIELDS)
        if unknown:
            field = sorted(unknown)[0]
            raise ValidationError(f"Field '{field}' cannot be updated", field=field)

        start_time = updates.get("start_time", assignment.start_time)
        end_time = updates.get("end_time", assignment.end_time)
        self._validate_window(start_time, end_time)

        if "payment_amount" in updates:
            updates["payment_amount"] = money(updates["payment_amount"])

        for field, value in updates.items():
            setattr(assignment, field, value)
        assignment.staff_id = staff.id

        assignment.payment_due_date = resolve_payment_due_date(
            assignment.payment_terms,
            assignment.payment_amount,
            assignment.end_time,
            assignment.payment_due_date,
        )
        self._derive_status(assignment)

        try:
            self.budget_sync.sync_staff_assignment(assignment, staff, category)
            self.db.commit()
            self.db.refresh(assignment)
        except SQLAlchemyError:
            self.db.rollback()
            raise

        logger.info(f"Updated staff assignment {assignment.guid}")
        self._revalidate(event, staff, budget=True)
        if previous_staff.id != staff.id:
            self.revalidator.revalidate_path(staff_detail(previous_staff.guid))
        return assignment

    def update_status(self, guid: str, assignment_status: str) -> StaffAssignment:
        """
        Change only the lifecycle status and re-derive the payment status.

        Raises:
            NotFoundError: If the assignment does not exist
        """
        assignment = self.get_by_guid(guid)
        assignment.assignment_status = assignment_status
        self._derive_status(assignment)
        self.db.commit()
        self.db.refresh(assignment)

        logger.info(f"Staff assignment {assignment.guid} is now {assignment_status}")
        self._revalidate(assignment.event, assignment.staff)
        return assignment

    def delete(self, guid: str) -> None:
        """
        Delete an assignment and its linked budget item.

        The budget item goes first and its category is recomputed. If that
        fails, the assignment is deleted anyway and the item stays behind.

        Raises:
            NotFoundError: If the assignment does not exist
        """
        assignment = self.get_by_guid(guid)
        event = assignment.event
        staff = assignment.staff

        try:
            unlinked = self.budget_sync.unlink(assignment)
            self.db.delete(assignment)
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise

        logger.info(
            f"Deleted staff assignment {guid}"
            + ("" if unlinked else " (linked budget item left orphaned)")
        )
        self._revalidate(event, staff, budget=True)

    # =========================================================================
    # Payments
    # =========================================================================

    def mark_paid(
        self,
        guid: str,
        payment_date: datetime,
        payment_notes: Optional[str] = None,
        invoice_number: Optional[str] = None,
        invoice_url: Optional[str] = None,
    ) -> StaffAssignment:
        """
        Record the payment of an assignment.

        Notes and invoice fields are replaced only when given.

        Raises:
            NotFoundError: If the assignment does not exist
            ValidationError: If the assignment was declined or cancelled
        """
        assignment = self.get_by_guid(guid)
        if assignment.assignment_status in TERMINAL_FAILURE_STATUSES:
            raise ValidationError(
                f"Cannot record a payment for a {assignment.assignment_status} assignment",
                field="assignment_status",
            )

        assignment.payment_date = payment_date
        if payment_notes is not None:
            assignment.payment_notes = payment_notes
        if invoice_number is not None:
            assignment.invoice_number = invoice_number
        if invoice_url is not None:
            assignment.invoice_url = invoice_url
        self._derive_status(assignment)

        self.db.commit()
        self.db.refresh(assignment)

        logger.info(f"Marked staff assignment {assignment.guid} as paid")
        self._revalidate(assignment.event, assignment.staff, dashboard=True)
        return assignment

    def postpone_payment(
        self,
        guid: str,
        new_due_date: datetime,
        reason: Optional[str] = None,
    ) -> StaffAssignment:
        """
        Move the due date and re-derive the payment status.

        The terms switch to custom so a later edit keeps the new date
        instead of re-deriving it from the end time. The reason, if any,
        is appended to the payment notes.

        Raises:
            NotFoundError: If the assignment does not exist
        """
        assignment = self.get_by_guid(guid)

        assignment.payment_due_date = new_due_date
        assignment.payment_terms = PaymentTerms.CUSTOM.value
        if reason:
            assignment.payment_notes = append_note(
                assignment.payment_notes,
                f"Postponed to {format_note_date(new_due_date)}: {reason}",
            )
        self._derive_status(assignment)

        self.db.commit()
        self.db.refresh(assignment)

        logger.info(f"Postponed payment of {assignment.guid} to {new_due_date.isoformat()}")
        self._revalidate(assignment.event, assignment.staff, dashboard=True)
        return assignment

    def cancel_payment(self, guid: str, reason: Optional[str] = None) -> StaffAssignment:
        """
        Undo a recorded payment.

        Clears the paid date and invoice fields and re-derives the status
        from the existing due date. The reason, if any, is appended to the
        payment notes.

        Raises:
            NotFoundError: If the assignment does not exist
        """
        assignment = self.get_by_guid(guid)

        assignment.payment_date = None
        assignment.invoice_number = None
        assignment.invoice_url = None
        if reason:
            assignment.payment_notes = append_note(
                assignment.payment_notes, f"Payment cancelled: {reason}"
            )
        self._derive_status(assignment)

        self.db.commit()
        self.db.refresh(assignment)

        logger.info(f"Cancelled payment of {assignment.guid}")
        self._revalidate(assignment.event, assignment.staff, dashboard=True)
        return assignment

    # =========================================================================
    # Helpers
    # =========================================================================

    @staticmethod
    def _validate_window(start_time: datetime, end_time: datetime) -> None:
        if end_time <= start_time:
            raise ValidationError("End time must be after start time", field="end_time")

    @staticmethod
    def _derive_status(assignment: StaffAssignment) -> None:
        assignment.payment_status = derive_payment_status(
            assignment.payment_due_date,
            assignment.payment_date,
            assignment.assignment_status,
        ).value

    def _revalidate(
        self,
        event: Event,
        staff: Staff,
        budget: bool = False,
        dashboard: bool = False,
    ) -> None:
        self.revalidator.revalidate_paths(
            STAFF_LIST,
            staff_detail(staff.guid),
            event_staff(event.guid),
            event_budget(event.guid) if budget else None,
            DASHBOARD if dashboard else None,
        )
