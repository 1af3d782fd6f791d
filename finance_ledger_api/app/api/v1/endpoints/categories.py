"""
Category endpoints for API v1.

Every route requires a valid bearer token; the gate is attached to the
router in ``router.py``.
"""

from typing import List

from fastapi import APIRouter, Query

from finance_ledger_api.app.schemas.category import CategoryCreate, CategoryRead, CategoryUpdate
from finance_ledger_api.app.services.category_service import CategoryService
from finance_ledger_api.app.services.filters import CategoryPredicate


router = APIRouter()


@router.post("/", response_model=CategoryRead)
async def create_category(category: CategoryCreate) -> CategoryRead:
    return await CategoryService.create_category(category)


@router.get("/", response_model=List[CategoryRead])
async def list_categories(
    user_id: int = Query(..., gt=0),
    category_type: str = Query(..., alias="type", min_length=1),
    title: str = Query(""),
    description: str = Query(""),
) -> List[CategoryRead]:
    """List a user's categories of one type.

    - **user_id**, **type**: required.
    - **title**, **description**: optional substring filters.
    """
    predicate = CategoryPredicate(
        user_id=user_id,
        type=category_type,
        title=title,
        description=description,
    )
    return await CategoryService.list_categories(predicate)


@router.get("/{category_id}", response_model=CategoryRead)
async def get_category(category_id: int) -> CategoryRead:
    return await CategoryService.get_category(category_id)


@router.put("/{category_id}", response_model=CategoryRead)
async def update_category(category_id: int, updates: CategoryUpdate) -> CategoryRead:
    """Update a category's title and/or description."""
    return await CategoryService.update_category(category_id, updates)


@router.delete("/{category_id}")
async def delete_category(category_id: int) -> bool:
    await CategoryService.delete_category(category_id)
    return True
