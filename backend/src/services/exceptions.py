"""
Custom exceptions for service layer.

Provides specific exception types for business logic errors
that the API layer translates to ActionResult responses.
"""

from typing import Any, Optional


class ServiceError(Exception):
    """Base exception for service layer errors."""
    pass


class NotFoundError(ServiceError):
    """Raised when a requested resource is not found."""

    def __init__(self, resource: str, identifier: Any):
        self.resource = resource
        self.identifier = identifier
        self.message = f"{resource} {identifier} not found"
        super().__init__(self.message)


class ConflictError(ServiceError):
    """Raised when an operation conflicts with existing state (e.g. duplicate name)."""

    def __init__(self, message: str, field: Optional[str] = None):
        self.message = message
        self.field = field
        super().__init__(message)


class ValidationError(ServiceError):
    """
    Raised when input fails a business rule the schema layer cannot check.

    Examples: an end time that is not after the start time once a partial
    update is merged, or a budget category that belongs to another event.
    ``field`` names the offending input so the API can build a field map.
    """

    def __init__(self, message: str, field: Optional[str] = None):
        self.message = message
        self.field = field
        super().__init__(message)
