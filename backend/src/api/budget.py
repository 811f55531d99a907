"""
Budget API endpoints.

Provides endpoints for:
- Budget categories of an event (list, create, get, update, delete)
- Budget items of a category (list, create, get, update, move, delete)
- Quick status changes of an item

Design:
- ``spent_amount`` is read-only; every item mutation recomputes it
- Items generated from staff assignments or sponsors can be edited here,
  but the owner's next update overwrites them again
"""

from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from backend.src.api.responses import success_result
from backend.src.db.database import get_db
from backend.src.schemas.action_result import ActionResult
from backend.src.schemas.budget import (
    BudgetCategoryCreate,
    BudgetCategoryDetailResponse,
    BudgetCategoryResponse,
    BudgetCategoryUpdate,
    BudgetItemCreate,
    BudgetItemResponse,
    BudgetItemStatusUpdate,
    BudgetItemUpdate,
)
from backend.src.services.budget_service import BudgetService
from backend.src.utils.logging_config import get_logger


logger = get_logger("api")

router = APIRouter(tags=["Budget"])


def get_budget_service(db: Session = Depends(get_db)) -> BudgetService:
    """Create BudgetService instance with database session."""
    return BudgetService(db=db)


# ============================================================================
# Categories
# ============================================================================


@router.get(
    "/events/{event_guid}/budget/categories",
    response_model=List[BudgetCategoryResponse],
    summary="List an event's budget categories",
)
async def list_budget_categories(
    event_guid: str,
    service: BudgetService = Depends(get_budget_service),
) -> List[BudgetCategoryResponse]:
    categories = service.list_categories(event_guid)
    return [BudgetCategoryResponse.model_validate(c) for c in categories]


@router.post(
    "/events/{event_guid}/budget/categories",
    response_model=ActionResult,
    status_code=status.HTTP_201_CREATED,
    summary="Create a budget category",
)
async def create_budget_category(
    event_guid: str,
    request: BudgetCategoryCreate,
    service: BudgetService = Depends(get_budget_service),
) -> ActionResult:
    category = service.create_category(event_guid, **request.model_dump())
    return success_result(
        "Category created", service.revalidator, BudgetCategoryResponse.model_validate(category)
    )


@router.get(
    "/budget/categories/{guid}",
    response_model=BudgetCategoryDetailResponse,
    summary="Get a budget category with its items",
)
async def get_budget_category(
    guid: str,
    service: BudgetService = Depends(get_budget_service),
) -> BudgetCategoryDetailResponse:
    return BudgetCategoryDetailResponse.model_validate(service.get_category_by_guid(guid))


@router.patch(
    "/budget/categories/{guid}",
    response_model=ActionResult,
    summary="Update a budget category",
)
async def update_budget_category(
    guid: str,
    request: BudgetCategoryUpdate,
    service: BudgetService = Depends(get_budget_service),
) -> ActionResult:
    category = service.update_category(guid, **request.model_dump(exclude_unset=True))
    return success_result(
        "Category updated", service.revalidator, BudgetCategoryResponse.model_validate(category)
    )


@router.delete(
    "/budget/categories/{guid}",
    response_model=ActionResult,
    summary="Delete a budget category and its items",
)
async def delete_budget_category(
    guid: str,
    service: BudgetService = Depends(get_budget_service),
) -> ActionResult:
    service.delete_category(guid)
    return success_result("Category deleted", service.revalidator)


# ============================================================================
# Items
# ============================================================================


@router.get(
    "/budget/categories/{guid}/items",
    response_model=List[BudgetItemResponse],
    summary="List a category's items",
)
async def list_budget_items(
    guid: str,
    service: BudgetService = Depends(get_budget_service),
) -> List[BudgetItemResponse]:
    category = service.get_category_by_guid(guid)
    return [BudgetItemResponse.model_validate(i) for i in service.list_items(category)]


@router.post(
    "/budget/categories/{guid}/items",
    response_model=ActionResult,
    status_code=status.HTTP_201_CREATED,
    summary="Create a budget item",
)
async def create_budget_item(
    guid: str,
    request: BudgetItemCreate,
    service: BudgetService = Depends(get_budget_service),
) -> ActionResult:
    """Create an item; the category's spent amount is recomputed."""
    category = service.get_category_by_guid(guid)
    item = service.create_item(category, **request.model_dump())
    return success_result(
        "Budget item created", service.revalidator, BudgetItemResponse.model_validate(item)
    )


@router.get(
    "/budget/items/{guid}",
    response_model=BudgetItemResponse,
    summary="Get a budget item",
)
async def get_budget_item(
    guid: str,
    service: BudgetService = Depends(get_budget_service),
) -> BudgetItemResponse:
    return BudgetItemResponse.model_validate(service.get_item_by_guid(guid))


@router.patch(
    "/budget/items/{guid}",
    response_model=ActionResult,
    summary="Update or move a budget item",
)
async def update_budget_item(
    guid: str,
    request: BudgetItemUpdate,
    service: BudgetService = Depends(get_budget_service),
) -> ActionResult:
    """
    Update an item.

    With ``category_guid`` the item moves to that category and both
    categories are recomputed.
    """
    item = service.get_item_by_guid(guid)
    updates = request.model_dump(exclude_unset=True)
    category_guid = updates.pop("category_guid", None)
    category = service.get_category_by_guid(category_guid) if category_guid else None

    item = service.update_item(item, category=category, **updates)
    return success_result(
        "Budget item updated", service.revalidator, BudgetItemResponse.model_validate(item)
    )


@router.post(
    "/budget/items/{guid}/status",
    response_model=ActionResult,
    summary="Change a budget item's status",
)
async def update_budget_item_status(
    guid: str,
    request: BudgetItemStatusUpdate,
    service: BudgetService = Depends(get_budget_service),
) -> ActionResult:
    """Marking an item paid requires ``payment_date`` and ``actual_cost``."""
    item = service.get_item_by_guid(guid)
    item = service.update_item_status(
        item,
        request.status,
        payment_date=request.payment_date,
        actual_cost=request.actual_cost,
    )
    return success_result(
        "Budget item status updated",
        service.revalidator,
        BudgetItemResponse.model_validate(item),
    )


@router.delete(
    "/budget/items/{guid}",
    response_model=ActionResult,
    summary="Delete a budget item",
)
async def delete_budget_item(
    guid: str,
    service: BudgetService = Depends(get_budget_service),
) -> ActionResult:
    service.delete_item(service.get_item_by_guid(guid))
    return success_result("Budget item deleted", service.revalidator)
