"""
Budget service: categories, items and the spent-amount ledger.

Provides row-level create/read/update/delete for budget categories and
budget items, and owns the only code path that writes a category's
``spent_amount``.

Design:
- ``spent_amount`` is always recomputed from scratch (sum of item
  ``actual_cost``, NULL counted as zero), never adjusted incrementally
- The recompute runs inside its own SAVEPOINT; a failure is logged and
  leaves the aggregate stale until the next mutation in that category,
  it never fails the item mutation that triggered it
- Item mutations accept ``commit=False`` so the linked-record synchronizer
  can fold them into the owning record's transaction
- Removing an item (directly or through its category) clears the weak
  ``budget_item_id`` pointer of any staff assignment or sponsor that
  referenced it, so no owner is left pointing at a missing row
"""

from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from backend.src.config.settings import get_settings
from backend.src.models import (
    BudgetCategory, BudgetItem, Sponsor, StaffAssignment,
    DEFAULT_CATEGORY_COLOR,
)
from backend.src.models.budget_item import BudgetItemStatus
from backend.src.services.event_service import EventService
from backend.src.services.exceptions import NotFoundError, ValidationError
from backend.src.services.guid import GuidService
from backend.src.utils.formatting import money
from backend.src.utils.logging_config import get_logger
from backend.src.utils.revalidation import ViewRevalidator, event_budget


logger = get_logger("services")

ZERO = Decimal("0.00")

CATEGORY_FIELDS = ("name", "description", "color", "icon", "allocated_amount")
ITEM_FIELDS = (
    "description", "estimated_cost", "actual_cost", "status",
    "vendor", "invoice_number", "payment_date", "notes",
)
MONEY_FIELDS = ("allocated_amount", "estimated_cost", "actual_cost")


class BudgetService:
    """
    Service for budget categories and budget items.

    Usage:
        >>> service = BudgetService(db_session)
        >>> category = service.create_category(event_guid="evt_01hgw...", name="Staff",
        ...                                    allocated_amount=Decimal("5000"))
        >>> item = service.create_item(category, description="Stage lights",
        ...                            estimated_cost=Decimal("800"), actual_cost=Decimal("750"))
        >>> category.spent_amount
        Decimal('750.00')
    """

    def __init__(self, db: Session, revalidator: Optional[ViewRevalidator] = None):
        """
        Initialize budget service.

        Args:
            db: SQLAlchemy database session
            revalidator: Collector for view-invalidation tokens (a private
                one is created when omitted)
        """
        self.db = db
        self.revalidator = revalidator or ViewRevalidator()

    # =========================================================================
    # Categories
    # =========================================================================

    def create_category(
        self,
        event_guid: str,
        name: str,
        allocated_amount: Optional[Decimal] = None,
        description: Optional[str] = None,
        color: Optional[str] = None,
        icon: Optional[str] = None,
    ) -> BudgetCategory:
        """
        Create a budget category for an event.

        The new category starts with ``spent_amount = 0``.

        Raises:
            NotFoundError: If the event does not exist
        """
        event = EventService(self.db).get_by_guid(event_guid)

        category = BudgetCategory(
            event_id=event.id,
            name=name,
            description=description,
            color=color or DEFAULT_CATEGORY_COLOR,
            icon=icon,
            allocated_amount=money(allocated_amount) or ZERO,
            spent_amount=ZERO,
        )
        self.db.add(category)
        self.db.commit()
        self.db.refresh(category)

        logger.info(f"Created budget category: {category.name} ({category.guid}) for event {event.guid}")
        self.revalidator.revalidate_path(event_budget(event.guid))
        return category

    def get_category_by_guid(self, guid: str) -> BudgetCategory:
        """
        Get a budget category by GUID.

        Raises:
            NotFoundError: If the GUID is malformed or no category matches
        """
        if not GuidService.validate_guid(guid, "bgc"):
            raise NotFoundError("BudgetCategory", guid)

        category = (
            self.db.query(BudgetCategory)
            .filter(BudgetCategory.uuid == GuidService.parse_guid(guid, "bgc"))
            .first()
        )
        if not category:
            raise NotFoundError("BudgetCategory", guid)
        return category

    def get_category(self, category_id: int) -> Optional[BudgetCategory]:
        """Get a category by internal ID, None if it no longer exists."""
        return self.db.get(BudgetCategory, category_id)

    def list_categories(self, event_guid: str) -> List[BudgetCategory]:
        """
        List an event's budget categories ordered by name.

        Raises:
            NotFoundError: If the event does not exist
        """
        event = EventService(self.db).get_by_guid(event_guid)
        return (
            self.db.query(BudgetCategory)
            .filter(BudgetCategory.event_id == event.id)
            .order_by(BudgetCategory.name.asc(), BudgetCategory.id.asc())
            .all()
        )

    def update_category(self, guid: str, **updates: Any) -> BudgetCategory:
        """
        Update a category's descriptive fields and allocation.

        ``spent_amount`` is not updatable; it only ever changes through
        ``recompute_spent_amount``.

        Raises:
            NotFoundError: If the category does not exist
            ValidationError: If an unknown or derived field is supplied
        """
        category = self.get_category_by_guid(guid)

        for field in updates:
            if field not in CATEGORY_FIELDS:
                raise ValidationError(f"Field '{field}' cannot be updated", field=field)

        for field, value in updates.items():
            if field in MONEY_FIELDS:
                value = money(value) or ZERO
            if field == "color" and value is None:
                value = DEFAULT_CATEGORY_COLOR
            setattr(category, field, value)

        self.db.commit()
        self.db.refresh(category)

        logger.info(f"Updated budget category: {category.name} ({category.guid})")
        self.revalidator.revalidate_path(event_budget(category.event.guid))
        return category

    def delete_category(self, guid: str) -> None:
        """
        Delete a category together with all of its items.

        Owners that pointed at one of the removed items are unlinked.
        No aggregate is recomputed since the category itself is gone.

        Raises:
            NotFoundError: If the category does not exist
        """
        category = self.get_category_by_guid(guid)
        event_guid = category.event.guid
        item_ids = [item.id for item in category.items]

        self._clear_owner_pointers(item_ids)
        self.db.delete(category)
        self.db.commit()

        logger.info(
            f"Deleted budget category {guid} with {len(item_ids)} item(s)"
        )
        self.revalidator.revalidate_path(event_budget(event_guid))

    def ensure_income_category(self, event_id: int) -> BudgetCategory:
        """
        Return the event's income category, creating it when missing.

        Any category whose name contains the configured income name
        (case-insensitive) qualifies; the oldest match wins. A new one is
        flushed but not committed, so it joins the caller's transaction.

        Args:
            event_id: Internal event ID

        Returns:
            Existing or newly created BudgetCategory
        """
        settings = get_settings()
        pattern = f"%{settings.income_category_name.lower()}%"

        category = (
            self.db.query(BudgetCategory)
            .filter(BudgetCategory.event_id == event_id)
            .filter(func.lower(BudgetCategory.name).like(pattern))
            .order_by(BudgetCategory.id.asc())
            .first()
        )
        if category:
            return category

        category = BudgetCategory(
            event_id=event_id,
            name=settings.income_category_name,
            description="Sponsorship and other income",
            color=settings.income_category_color,
            icon=settings.income_category_icon,
            allocated_amount=ZERO,
            spent_amount=ZERO,
        )
        self.db.add(category)
        self.db.flush()

        logger.info(f"Created income category {category.guid} for event_id={event_id}")
        return category

    # =========================================================================
    # Items
    # =========================================================================

    def create_item(
        self,
        category: BudgetCategory,
        description: str,
        estimated_cost: Decimal,
        actual_cost: Optional[Decimal] = None,
        status: str = BudgetItemStatus.PLANNED.value,
        vendor: Optional[str] = None,
        invoice_number: Optional[str] = None,
        payment_date: Optional[datetime] = None,
        notes: Optional[str] = None,
        commit: bool = True,
    ) -> BudgetItem:
        """
        Create a budget item and recompute its category's spent amount.

        Args:
            category: Target category (the item inherits its event)
            commit: Commit the session; pass False to join the caller's
                transaction (the item is still flushed and has an ID)

        Returns:
            Created BudgetItem
        """
        item = BudgetItem(
            category_id=category.id,
            event_id=category.event_id,
            description=description,
            estimated_cost=money(estimated_cost) or ZERO,
            actual_cost=money(actual_cost),
            status=status,
            vendor=vendor,
            invoice_number=invoice_number,
            payment_date=payment_date,
            notes=notes,
        )
        self.db.add(item)
        self.db.flush()

        self.recompute_spent_amount(category.id)

        if commit:
            self.db.commit()
            self.db.refresh(item)
            self.revalidator.revalidate_path(event_budget(category.event.guid))

        logger.info(f"Created budget item: {item.description} ({item.guid}) in {category.guid}")
        return item

    def get_item_by_guid(self, guid: str) -> BudgetItem:
        """
        Get a budget item by GUID.

        Raises:
            NotFoundError: If the GUID is malformed or no item matches
        """
        if not GuidService.validate_guid(guid, "bgi"):
            raise NotFoundError("BudgetItem", guid)

        item = (
            self.db.query(BudgetItem)
            .filter(BudgetItem.uuid == GuidService.parse_guid(guid, "bgi"))
            .first()
        )
        if not item:
            raise NotFoundError("BudgetItem", guid)
        return item

    def get_item(self, item_id: Optional[int]) -> Optional[BudgetItem]:
        """
        Re-read an item by internal ID straight from the database.

        Used to resolve weak ``budget_item_id`` pointers; returns None for a
        missing ID or a row that has been removed.
        """
        if item_id is None:
            return None
        return (
            self.db.query(BudgetItem)
            .filter(BudgetItem.id == item_id)
            .populate_existing()
            .first()
        )

    def list_items(self, category: BudgetCategory) -> List[BudgetItem]:
        """List a category's items in creation order."""
        return (
            self.db.query(BudgetItem)
            .filter(BudgetItem.category_id == category.id)
            .order_by(BudgetItem.id.asc())
            .all()
        )

    def update_item(
        self,
        item: BudgetItem,
        category: Optional[BudgetCategory] = None,
        commit: bool = True,
        **updates: Any
    ) -> BudgetItem:
        """
        Update a budget item, optionally moving it to another category.

        Both the old and the new category are recomputed when the item
        moves; otherwise its own category is recomputed.

        Args:
            item: Item to update
            category: New category (must belong to the item's event)
            commit: Commit the session (see create_item)
            **updates: Item fields to overwrite

        Raises:
            ValidationError: If the target category belongs to another
                event or an unknown field is supplied
        """
        previous_category_id = item.category_id

        moving = category is not None and category.id != item.category_id
        if moving and category.event_id != item.event_id:
            raise ValidationError(
                "Budget category belongs to a different event",
                field="category_guid",
            )
        for field in updates:
            if field not in ITEM_FIELDS:
                raise ValidationError(f"Field '{field}' cannot be updated", field=field)

        if moving:
            item.category_id = category.id
        for field, value in updates.items():
            if field in MONEY_FIELDS:
                value = money(value)
                if field == "estimated_cost" and value is None:
                    value = ZERO
            setattr(item, field, value)

        self.db.flush()

        self.recompute_spent_amount(item.category_id)
        if previous_category_id != item.category_id:
            self.recompute_spent_amount(previous_category_id)

        if commit:
            self.db.commit()
            self.db.refresh(item)
            self.revalidator.revalidate_path(event_budget(item.category.event.guid))

        logger.info(f"Updated budget item {item.guid}")
        return item

    def update_item_status(
        self,
        item: BudgetItem,
        status: str,
        payment_date: Optional[datetime] = None,
        actual_cost: Optional[Decimal] = None,
    ) -> BudgetItem:
        """
        Change an item's status.

        Marking an item paid requires both a payment date and an actual cost.

        Raises:
            ValidationError: If paid is requested without date and cost
        """
        updates: Dict[str, Any] = {"status": status}

        if status == BudgetItemStatus.PAID.value:
            if payment_date is None:
                raise ValidationError("Payment date is required for paid items", field="payment_date")
            if actual_cost is None:
                raise ValidationError("Actual cost is required for paid items", field="actual_cost")

        if payment_date is not None:
            updates["payment_date"] = payment_date
        if actual_cost is not None:
            updates["actual_cost"] = actual_cost

        return self.update_item(item, **updates)

    def delete_item(self, item: BudgetItem, commit: bool = True) -> None:
        """
        Delete a budget item and recompute its category's spent amount.

        Any staff assignment or sponsor still pointing at the item is
        unlinked in the same transaction.
        """
        category_id = item.category_id
        item_guid = item.guid
        event_guid = item.category.event.guid

        self._clear_owner_pointers([item.id])
        self.db.delete(item)
        self.db.flush()

        self.recompute_spent_amount(category_id)

        if commit:
            self.db.commit()
            self.revalidator.revalidate_path(event_budget(event_guid))

        logger.info(f"Deleted budget item {item_guid}")

    # =========================================================================
    # Ledger
    # =========================================================================

    def recompute_spent_amount(self, category_id: int) -> Optional[Decimal]:
        """
        Recompute a category's spent amount from its items.

        Sums ``actual_cost`` over every item currently in the category
        (NULL as zero) and stores the result. Runs in a SAVEPOINT; on any
        failure the savepoint is rolled back and the error logged, the
        enclosing mutation is not affected.

        Args:
            category_id: Internal category ID

        Returns:
            The new spent amount, or None if the category is gone or the
            recompute failed
        """
        nested = self.db.begin_nested()
        try:
            category = self.get_category(category_id)
            if category is None:
                nested.commit()
                return None

            total = self._sum_actual_costs(category_id)
            category.spent_amount = total
            self.db.flush()
            nested.commit()

            logger.debug(f"Recomputed spent amount for {category.guid}: {total}")
            return total
        except Exception as e:
            nested.rollback()
            logger.error(
                f"Failed to recompute spent amount for category_id={category_id}: {e}",
                exc_info=True,
            )
            return None

    def _sum_actual_costs(self, category_id: int) -> Decimal:
        rows = (
            self.db.query(BudgetItem.actual_cost)
            .filter(BudgetItem.category_id == category_id)
            .all()
        )
        return sum((money(cost) or ZERO for (cost,) in rows), ZERO)

    def _clear_owner_pointers(self, item_ids: Iterable[int]) -> None:
        item_ids = list(item_ids)
        if not item_ids:
            return
        for model in (StaffAssignment, Sponsor):
            owners = self.db.query(model).filter(model.budget_item_id.in_(item_ids)).all()
            for owner in owners:
                owner.budget_item_id = None
                logger.info(f"Unlinked {owner.guid} from removed budget item")
