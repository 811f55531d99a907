"""
Service layer for business logic.

Service classes live in their own modules and are imported from there
(e.g. ``from backend.src.services.sponsor_service import SponsorService``).
Only the dependency-free building blocks are re-exported here, since the
model layer imports GUID helpers from this package.
"""

from backend.src.services.exceptions import (
    ServiceError,
    NotFoundError,
    ConflictError,
    ValidationError,
)
from backend.src.services.guid import GuidService, ENTITY_PREFIXES

__all__ = [
    "ServiceError",
    "NotFoundError",
    "ConflictError",
    "ValidationError",
    "GuidService",
    "ENTITY_PREFIXES",
]
