"""
Staff service.

Staff members are shared across events; this service only needs to
create, look up and list them for the assignment workflow.
"""

from decimal import Decimal
from typing import List, Optional

from sqlalchemy.orm import Session

from backend.src.models import Staff
from backend.src.models.staff import StaffRole
from backend.src.services.exceptions import NotFoundError
from backend.src.services.guid import GuidService
from backend.src.utils.formatting import money
from backend.src.utils.logging_config import get_logger
from backend.src.utils.revalidation import STAFF_LIST, ViewRevalidator


logger = get_logger("services")


class StaffService:
    """
    Service for managing staff members.

    Usage:
        >>> service = StaffService(db_session)
        >>> staff = service.create(first_name="Anna", last_name="Rossi",
        ...                        email="anna@example.com", role="hostess")
    """

    def __init__(self, db: Session, revalidator: Optional[ViewRevalidator] = None):
        self.db = db
        self.revalidator = revalidator or ViewRevalidator()

    def create(
        self,
        first_name: str,
        last_name: str,
        email: str,
        role: str = StaffRole.OTHER.value,
        phone: Optional[str] = None,
        hourly_rate: Optional[Decimal] = None,
        is_active: bool = True,
        notes: Optional[str] = None,
    ) -> Staff:
        """Create a staff member."""
        staff = Staff(
            first_name=first_name,
            last_name=last_name,
            email=email,
            role=role,
            phone=phone,
            hourly_rate=money(hourly_rate),
            is_active=is_active,
            notes=notes,
        )
        self.db.add(staff)
        self.db.commit()
        self.db.refresh(staff)

        logger.info(f"Created staff member: {staff.full_name} ({staff.guid})")
        self.revalidator.revalidate_path(STAFF_LIST)
        return staff

    def get_by_guid(self, guid: str) -> Staff:
        """
        Get a staff member by GUID.

        Raises:
            NotFoundError: If the GUID is malformed or no staff member matches
        """
        if not GuidService.validate_guid(guid, "stf"):
            raise NotFoundError("Staff", guid)

        staff = (
            self.db.query(Staff)
            .filter(Staff.uuid == GuidService.parse_guid(guid, "stf"))
            .first()
        )
        if not staff:
            raise NotFoundError("Staff", guid)
        return staff

    def list(self, active_only: bool = False) -> List[Staff]:
        """List staff members ordered by last name, then first name."""
        query = self.db.query(Staff)
        if active_only:
            query = query.filter(Staff.is_active.is_(True))
        return query.order_by(Staff.last_name.asc(), Staff.first_name.asc()).all()
