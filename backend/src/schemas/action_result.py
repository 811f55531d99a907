"""
Pydantic schema for the result of a mutating operation.

Every create/update/delete endpoint answers with an ActionResult, whether
it succeeded or not, so clients handle one shape:

- success: Whether the mutation went through
- message: Human-readable summary, shown on failure
- data: Payload of the affected record (e.g. its GUID and linked item)
- errors: Per-field error messages, shown inline next to form fields
- revalidate: View-invalidation tokens for cached views to refetch
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class ActionResult(BaseModel):
    """
    Structured result of a mutation.

    Example:
        >>> ActionResult(success=False, message="Validation failed",
        ...              errors={"end_time": ["End time must be after start time"]})
    """

    success: bool = Field(..., description="Whether the operation succeeded")
    message: str = Field(..., description="Human-readable outcome")
    data: Optional[Dict[str, Any]] = Field(
        default=None,
        description="Affected record, serialized like the matching read endpoint",
    )
    errors: Optional[Dict[str, List[str]]] = Field(
        default=None,
        description="Field name to list of error messages",
    )
    revalidate: List[str] = Field(
        default_factory=list,
        description="Opaque view paths whose cached data is now stale",
    )

    model_config = {
        "json_schema_extra": {
            "example": {
                "success": True,
                "message": "Assignment created",
                "data": {
                    "guid": "sta_01hgw2bbg0000000000000001",
                    "budget_item_guid": "bgi_01hgw2bbg0000000000000002",
                },
                "errors": None,
                "revalidate": [
                    "/people/staff",
                    "/events/evt_01hgw2bbg0000000000000003/staff",
                ],
            }
        }
    }
