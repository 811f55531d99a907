"""
Linked-record synchronizer between owners and budget items.

A staff assignment or a sponsor (the "owner") may own at most one budget
item, referenced by its weak ``budget_item_id`` pointer. This module keeps
that item's fields a pure function of the owner's current fields and
decides, on every owner mutation, whether the budget side needs a create,
an update, a delete or nothing at all.

Design:
- The mapping functions (``staff_budget_fields``, ``sponsor_budget_fields``)
  are pure; re-running a sync for the same owner state yields the same item
  fields and the same category total
- The linked item is re-read from the database right before each decision;
  a pointer to a vanished item counts as "no link"
- Budget work runs inside a SAVEPOINT. Any failure rolls back only the
  budget side and is logged; the owner mutation still commits, left in an
  unlinked (or stale-linked) state that the next update repairs
"""

from datetime import datetime
from decimal import Decimal
from typing import Any, Callable, Dict, Optional, Union

from sqlalchemy.orm import Session

from backend.src.models import BudgetCategory, BudgetItem, Sponsor, Staff, StaffAssignment
from backend.src.models.budget_item import BudgetItemStatus
from backend.src.models.sponsor import SponsorPaymentStatus
from backend.src.models.staff_assignment import PaymentStatus
from backend.src.services.budget_service import BudgetService
from backend.src.services.exceptions import ValidationError
from backend.src.utils.formatting import money
from backend.src.utils.logging_config import get_logger


logger = get_logger("services")

ZERO = Decimal("0.00")
STAFF_ITEM_NOTES = "Generated automatically from staff assignments"
SPONSOR_ITEM_NOTES = "Generated automatically from sponsors"

Owner = Union[StaffAssignment, Sponsor]


def _status_value(status: Any) -> Optional[str]:
    return status.value if hasattr(status, "value") else status


# =============================================================================
# Field mapping
# =============================================================================

def staff_budget_fields(
    first_name: str,
    last_name: str,
    payment_amount: Optional[Decimal],
    payment_status: Union[str, PaymentStatus],
) -> Dict[str, Any]:
    """
    Budget item fields for a staff assignment.

    Staff cost counts as committed as soon as the assignment exists, so
    the actual cost equals the estimate. A missing amount maps to zero.

    Example:
        >>> staff_budget_fields("Anna", "Rossi", Decimal("500"), "pending")["description"]
        'Staff payment: Rossi Anna'
    """
    amount = money(payment_amount) or ZERO
    paid = _status_value(payment_status) == PaymentStatus.PAID.value
    return {
        "description": f"Staff payment: {last_name} {first_name}",
        "estimated_cost": amount,
        "actual_cost": amount,
        "status": BudgetItemStatus.PAID.value if paid else BudgetItemStatus.APPROVED.value,
        "vendor": f"{first_name} {last_name}",
        "notes": STAFF_ITEM_NOTES,
    }


def sponsor_actual_cost(
    sponsorship_amount: Optional[Decimal],
    payment_status: Union[str, SponsorPaymentStatus],
) -> Decimal:
    """
    Received part of a sponsorship.

    Paid counts the full amount, partial counts half of it and anything
    else counts nothing. The halving is a rough approximation kept on
    purpose; no installment data exists to do better.

    Examples:
        >>> sponsor_actual_cost(Decimal("1000"), "partial")
        Decimal('500.00')
        >>> sponsor_actual_cost(Decimal("1000"), "pending")
        Decimal('0.00')
    """
    amount = money(sponsorship_amount) or ZERO
    status = _status_value(payment_status)
    if status == SponsorPaymentStatus.PAID.value:
        return amount
    if status == SponsorPaymentStatus.PARTIAL.value:
        return money(amount / 2)
    return ZERO


def sponsor_budget_fields(
    company_name: str,
    sponsorship_amount: Optional[Decimal],
    payment_status: Union[str, SponsorPaymentStatus],
    payment_date: Optional[datetime] = None,
) -> Dict[str, Any]:
    """Budget item fields for a sponsor."""
    paid = _status_value(payment_status) == SponsorPaymentStatus.PAID.value
    return {
        "description": f"Sponsor: {company_name}",
        "estimated_cost": money(sponsorship_amount) or ZERO,
        "actual_cost": sponsor_actual_cost(sponsorship_amount, payment_status),
        "status": BudgetItemStatus.PAID.value if paid else BudgetItemStatus.PLANNED.value,
        "vendor": company_name,
        "payment_date": payment_date,
        "notes": SPONSOR_ITEM_NOTES,
    }


# =============================================================================
# Synchronizer
# =============================================================================

class BudgetSyncService:
    """
    Keeps an owner's single linked budget item in sync.

    Callers add/modify the owner first, call ``sync_*`` (which flushes the
    owner and may set ``budget_item_id``), then commit once.

    Usage:
        >>> sync = BudgetSyncService(db_session)
        >>> category = sync.resolve_category("bgc_01hgw...", event_id=assignment.event_id)
        >>> sync.sync_staff_assignment(assignment, staff, category)
        >>> db_session.commit()
    """

    def __init__(self, db: Session, budget_service: Optional[BudgetService] = None):
        self.db = db
        self.budget = budget_service or BudgetService(db)

    def resolve_category(
        self,
        category_guid: Optional[str],
        event_id: int,
    ) -> Optional[BudgetCategory]:
        """
        Resolve a selected budget category for an owner of ``event_id``.

        Returns None when no category was selected.

        Raises:
            NotFoundError: If the category does not exist
            ValidationError: If the category belongs to another event
        """
        if not category_guid:
            return None

        category = self.budget.get_category_by_guid(category_guid)
        if category.event_id != event_id:
            raise ValidationError(
                "Budget category belongs to a different event",
                field="budget_category_guid",
            )
        return category

    def current_item(self, owner: Owner) -> Optional[BudgetItem]:
        """
        Re-read the owner's linked item.

        A pointer to a missing item, or to an item of another event, is
        cleared and reported as no link.
        """
        if owner.budget_item_id is None:
            return None

        item = self.budget.get_item(owner.budget_item_id)
        if item is None or item.event_id != owner.event_id:
            logger.warning(
                f"{owner.guid} pointed at missing budget item id={owner.budget_item_id}; "
                f"treating as unlinked"
            )
            owner.budget_item_id = None
            return None
        return item

    def sync_staff_assignment(
        self,
        assignment: StaffAssignment,
        staff: Staff,
        category: Optional[BudgetCategory] = None,
    ) -> Optional[BudgetItem]:
        """Sync the budget item of a staff assignment (see ``sync``)."""
        fields = staff_budget_fields(
            staff.first_name, staff.last_name, assignment.payment_amount, assignment.payment_status
        )
        return self.sync(assignment, fields, category=category)

    def sync_sponsor(
        self,
        sponsor: Sponsor,
        category: Optional[BudgetCategory] = None,
    ) -> Optional[BudgetItem]:
        """
        Sync the budget item of a sponsor (see ``sync``).

        Without an explicit category, a new item goes to the event's
        income category, created on first use.
        """
        fields = sponsor_budget_fields(
            sponsor.company_name,
            sponsor.sponsorship_amount,
            sponsor.payment_status,
            sponsor.payment_date,
        )
        event_id = sponsor.event_id
        return self.sync(
            sponsor,
            fields,
            category=category,
            default_category=lambda: self.budget.ensure_income_category(event_id),
        )

    def sync(
        self,
        owner: Owner,
        fields: Dict[str, Any],
        category: Optional[BudgetCategory] = None,
        default_category: Optional[Callable[[], BudgetCategory]] = None,
    ) -> Optional[BudgetItem]:
        """
        Create, update or leave alone the owner's linked budget item.

        Decision, made against a fresh read of the linked item:
        - linked item exists: overwrite it with ``fields`` (moving it to
          ``category`` when a different one was selected); a zero amount
          keeps the item with zero cost
        - no linked item, a category is available and the amount is
          positive: create one and point the owner at it
        - otherwise: nothing to do

        Args:
            owner: Staff assignment or sponsor, already added to the session
            fields: Item fields computed by one of the mapping functions
            category: Explicitly selected category, if any
            default_category: Called (inside the savepoint) to obtain a
                category when creating without an explicit one

        Returns:
            The linked BudgetItem after the sync, or None when unlinked
            (including after a recovered failure)
        """
        amount = fields.get("estimated_cost") or ZERO

        # begin_nested() flushes the owner first, so it has an id and event
        nested = self.db.begin_nested()
        owner_guid = owner.guid
        try:
            item = self.current_item(owner)

            if item is not None:
                moved_to = category if category is not None and category.id != item.category_id else None
                self.budget.update_item(item, category=moved_to, commit=False, **fields)
                nested.commit()
                return item

            if amount <= ZERO:
                nested.commit()
                return None

            target = category
            if target is None and default_category is not None:
                target = default_category()
            if target is None:
                nested.commit()
                return None

            item = self.budget.create_item(target, commit=False, **fields)
            nested.commit()
        except Exception as e:
            nested.rollback()
            logger.error(
                f"Budget sync failed for {owner_guid}; record kept without budget update: {e}",
                exc_info=True,
            )
            return None

        owner.budget_item_id = item.id
        logger.info(f"Linked {owner.guid} to budget item {item.guid}")
        return item

    def unlink(self, owner: Owner) -> bool:
        """
        Delete the owner's linked budget item before the owner is deleted.

        A failure is logged as a warning and leaves the item behind as an
        orphan; the owner deletion must go ahead regardless.

        Returns:
            True if no item remains linked, False if the delete failed
        """
        nested = self.db.begin_nested()
        owner_guid = owner.guid
        item_id = owner.budget_item_id
        try:
            item = self.current_item(owner)
            if item is not None:
                item_guid = item.guid
                self.budget.delete_item(item, commit=False)
                logger.info(f"Deleted budget item {item_guid} linked to {owner.guid}")
            nested.commit()
            return True
        except Exception as e:
            nested.rollback()
            logger.warning(
                f"Could not delete budget item id={item_id} of {owner_guid}; "
                f"leaving it orphaned: {e}"
            )
            return False
