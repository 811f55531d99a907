"""
Sponsor service.

Sponsors bring income into an event budget. A sponsor with a positive
sponsorship amount owns one budget item, filed under the explicitly
chosen category or, by default, under the event's income category
(created on first use).
"""

from datetime import datetime
from decimal import Decimal
from typing import Any, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from backend.src.models import Event, Sponsor
from backend.src.models.sponsor import SponsorshipLevel, SponsorPaymentStatus
from backend.src.services.budget_service import BudgetService
from backend.src.services.budget_sync_service import BudgetSyncService
from backend.src.services.event_service import EventService
from backend.src.services.exceptions import NotFoundError, ValidationError
from backend.src.services.guid import GuidService
from backend.src.utils.formatting import money
from backend.src.utils.logging_config import get_logger
from backend.src.utils.revalidation import (
    ViewRevalidator, event_budget, event_detail, event_sponsors,
)


logger = get_logger("services")

UPDATABLE_FIELDS = (
    "company_name", "contact_person", "email", "phone", "sponsorship_level",
    "sponsorship_amount", "contract_signed", "contract_date", "payment_status",
    "payment_date", "website_url", "description", "notes",
)


class SponsorService:
    """
    Service for event sponsors.

    Usage:
        >>> service = SponsorService(db_session)
        >>> sponsor = service.create(
        ...     event_guid="evt_01hgw...",
        ...     company_name="Acme Corp",
        ...     sponsorship_amount=Decimal("1000"),
        ...     payment_status="partial",
        ... )
        >>> sponsor.budget_item.actual_cost
        Decimal('500.00')
    """

    def __init__(self, db: Session, revalidator: Optional[ViewRevalidator] = None):
        self.db = db
        self.revalidator = revalidator or ViewRevalidator()
        self.events = EventService(db)
        self.budget_sync = BudgetSyncService(db, BudgetService(db, self.revalidator))

    def create(
        self,
        event_guid: str,
        company_name: str,
        sponsorship_level: str = SponsorshipLevel.PARTNER.value,
        sponsorship_amount: Optional[Decimal] = None,
        payment_status: str = SponsorPaymentStatus.PENDING.value,
        payment_date: Optional[datetime] = None,
        contact_person: Optional[str] = None,
        email: Optional[str] = None,
        phone: Optional[str] = None,
        contract_signed: bool = False,
        contract_date: Optional[datetime] = None,
        website_url: Optional[str] = None,
        description: Optional[str] = None,
        notes: Optional[str] = None,
        budget_category_guid: Optional[str] = None,
    ) -> Sponsor:
        """
        Create a sponsor and, for a positive amount, its income budget item.

        Args:
            event_guid: Event GUID (evt_xxx)
            company_name: Sponsoring company, also used as item vendor
            sponsorship_amount: Committed amount; zero or None means no item
            payment_status: pending / partial / paid, drives the item's
                actual cost (nothing / half / full)
            budget_category_guid: Category for the item; defaults to the
                event's income category

        Raises:
            NotFoundError: If the event or the category does not exist
            ValidationError: If the category belongs to another event
        """
        event = self.events.get_by_guid(event_guid)
        category = self.budget_sync.resolve_category(budget_category_guid, event.id)

        sponsor = Sponsor(
            event_id=event.id,
            company_name=company_name,
            sponsorship_level=sponsorship_level,
            sponsorship_amount=money(sponsorship_amount),
            payment_status=payment_status,
            payment_date=payment_date,
            contact_person=contact_person,
            email=email,
            phone=phone,
            contract_signed=contract_signed,
            contract_date=contract_date,
            website_url=website_url,
            description=description,
            notes=notes,
        )

        try:
            self.db.add(sponsor)
            self.budget_sync.sync_sponsor(sponsor, category)
            self.db.commit()
            self.db.refresh(sponsor)
        except SQLAlchemyError:
            self.db.rollback()
            raise

        logger.info(f"Created sponsor: {sponsor.company_name} ({sponsor.guid}) for event {event.guid}")
        self._revalidate(event)
        return sponsor

    def get_by_guid(self, guid: str) -> Sponsor:
        """
        Get a sponsor by GUID.

        Raises:
            NotFoundError: If the GUID is malformed or no sponsor matches
        """
        if not GuidService.validate_guid(guid, "spn"):
            raise NotFoundError("Sponsor", guid)

        sponsor = (
            self.db.query(Sponsor)
            .filter(Sponsor.uuid == GuidService.parse_guid(guid, "spn"))
            .first()
        )
        if not sponsor:
            raise NotFoundError("Sponsor", guid)
        return sponsor

    def list(self, event_guid: str) -> List[Sponsor]:
        """List an event's sponsors, largest sponsorship first."""
        event = self.events.get_by_guid(event_guid)
        return (
            self.db.query(Sponsor)
            .filter(Sponsor.event_id == event.id)
            .order_by(Sponsor.sponsorship_amount.desc(), Sponsor.company_name.asc())
            .all()
        )

    def update(self, guid: str, **updates: Any) -> Sponsor:
        """
        Apply a partial update and resync the budget item.

        The item mirrors the merged sponsor fields; one is created if the
        sponsor gained a positive amount and had none.

        Raises:
            NotFoundError: If the sponsor or the category does not exist
            ValidationError: If a field is unknown or the category belongs
                to another event
        """
        sponsor = self.get_by_guid(guid)
        event = sponsor.event
        category = self.budget_sync.resolve_category(
            updates.pop("budget_category_guid", None), event.id
        )

        for field in updates:
            if field not in UPDATABLE_FIELDS:
                raise ValidationError(f"Field '{field}' cannot be updated", field=field)

        for field, value in updates.items():
            if field == "sponsorship_amount":
                value = money(value)
            setattr(sponsor, field, value)

        try:
            self.budget_sync.sync_sponsor(sponsor, category)
            self.db.commit()
            self.db.refresh(sponsor)
        except SQLAlchemyError:
            self.db.rollback()
            raise

        logger.info(f"Updated sponsor {sponsor.guid}")
        self._revalidate(event)
        return sponsor

    def delete(self, guid: str) -> None:
        """
        Delete a sponsor and its linked budget item.

        A failure to delete the item is logged and does not stop the
        sponsor deletion.

        Raises:
            NotFoundError: If the sponsor does not exist
        """
        sponsor = self.get_by_guid(guid)
        event = sponsor.event

        try:
            unlinked = self.budget_sync.unlink(sponsor)
            self.db.delete(sponsor)
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise

        logger.info(
            f"Deleted sponsor {guid}"
            + ("" if unlinked else " (linked budget item left orphaned)")
        )
        self._revalidate(event)

    def _revalidate(self, event: Event) -> None:
        self.revalidator.revalidate_paths(
            event_sponsors(event.guid),
            event_budget(event.guid),
            event_detail(event.guid),
        )
