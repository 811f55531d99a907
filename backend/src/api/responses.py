"""
Helpers that turn service outcomes into ActionResult payloads.

Mutating endpoints answer with an ActionResult on success and failure
alike. Success results are built here from the service's revalidator;
failures are built by the exception handlers in ``main``.
"""

from typing import Any, Dict, List, Optional

from fastapi.responses import JSONResponse
from pydantic import BaseModel

from backend.src.schemas.action_result import ActionResult
from backend.src.services.exceptions import (
    ConflictError, NotFoundError, ServiceError, ValidationError,
)
from backend.src.utils.revalidation import ViewRevalidator


def success_result(
    message: str,
    revalidator: ViewRevalidator,
    data: Optional[BaseModel] = None,
) -> ActionResult:
    """
    Build a successful ActionResult.

    Args:
        message: Outcome shown to the user
        revalidator: The service's token collector; drained into the result
        data: Response schema of the affected record, if any
    """
    return ActionResult(
        success=True,
        message=message,
        data=data.model_dump(mode="json") if data is not None else None,
        revalidate=revalidator.drain(),
    )


def failure_response(
    status_code: int,
    message: str,
    errors: Optional[Dict[str, List[str]]] = None,
) -> JSONResponse:
    """JSON response carrying a failed ActionResult."""
    result = ActionResult(success=False, message=message, errors=errors or None)
    return JSONResponse(status_code=status_code, content=result.model_dump(mode="json"))


def service_error_status(exc: ServiceError) -> int:
    """HTTP status for a service-layer exception."""
    if isinstance(exc, NotFoundError):
        return 404
    if isinstance(exc, ConflictError):
        return 409
    if isinstance(exc, ValidationError):
        return 400
    return 500


def service_error_fields(exc: ServiceError) -> Optional[Dict[str, List[str]]]:
    """Field error map for exceptions that name the offending input."""
    field: Any = getattr(exc, "field", None)
    if not field:
        return None
    return {field: [getattr(exc, "message", str(exc))]}
