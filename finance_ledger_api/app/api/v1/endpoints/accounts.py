"""
Account endpoints for API v1.

CRUD for ledger entries, the filtered listing and the two aggregate
reports.  Every route requires a valid bearer token; the gate is
attached to the router in ``router.py``.
"""

import datetime as dt
from typing import List, Optional

from fastapi import APIRouter, Path, Query

from finance_ledger_api.app.core.errors import ValidationError
from finance_ledger_api.app.schemas.account import (
    AccountCreate,
    AccountRead,
    AccountsGraph,
    AccountsReport,
    AccountUpdate,
)
from finance_ledger_api.app.services.account_service import AccountService
from finance_ledger_api.app.services.filters import ListPredicate


router = APIRouter()


# Optional query fields arrive as "" when a client sends the key with no
# value; that means "not filtered on", same as leaving the key out.
def _optional_category_id(raw: str) -> int:
    if not raw:
        return 0
    try:
        category_id = int(raw)
    except ValueError:
        raise ValidationError("Invalid request fields: query.category_id") from None
    if category_id < 0:
        raise ValidationError("Invalid request fields: query.category_id")
    return category_id


def _optional_date(raw: str) -> Optional[dt.date]:
    if not raw:
        return None
    try:
        return dt.date.fromisoformat(raw)
    except ValueError:
        raise ValidationError("Invalid request fields: query.date") from None


@router.post("/", response_model=AccountRead)
async def create_account(account: AccountCreate) -> AccountRead:
    """Create an account.

    The referenced category must exist (404 otherwise) and have the same
    type as the account (400 otherwise).
    """
    return await AccountService.create_account(account)


@router.get("/", response_model=List[AccountRead])
async def list_accounts(
    user_id: int = Query(..., gt=0),
    account_type: str = Query(..., alias="type", min_length=1),
    category_id: str = Query(""),
    title: str = Query(""),
    description: str = Query(""),
    date: str = Query(""),
) -> List[AccountRead]:
    """List a user's accounts of one type.

    - **user_id**, **type**: required.
    - **category_id**: exact match; ``0``, empty or omitted means any.
    - **title**, **description**: substring filters.
    - **date**: exact day (``YYYY-MM-DD``); empty or omitted means any.
    """
    predicate = ListPredicate(
        user_id=user_id,
        type=account_type,
        category_id=_optional_category_id(category_id),
        title=title,
        description=description,
        date=_optional_date(date),
    )
    return await AccountService.list_accounts(predicate)


@router.get("/reports/{user_id}/{account_type}", response_model=AccountsReport)
async def get_accounts_report(
    user_id: int = Path(..., gt=0),
    account_type: str = Path(..., min_length=1),
) -> AccountsReport:
    """Sum of account values for a user and type."""
    return await AccountService.get_accounts_report(user_id, account_type)


@router.get("/graph/{user_id}/{account_type}", response_model=AccountsGraph)
async def get_accounts_graph(
    user_id: int = Path(..., gt=0),
    account_type: str = Path(..., min_length=1),
) -> AccountsGraph:
    """Number of accounts for a user and type."""
    return await AccountService.get_accounts_graph(user_id, account_type)


@router.get("/{account_id}", response_model=AccountRead)
async def get_account(account_id: int) -> AccountRead:
    return await AccountService.get_account(account_id)


@router.put("/{account_id}", response_model=AccountRead)
async def update_account(account_id: int, updates: AccountUpdate) -> AccountRead:
    """Update an account's title, description and/or value."""
    return await AccountService.update_account(account_id, updates)


@router.delete("/{account_id}")
async def delete_account(account_id: int) -> bool:
    await AccountService.delete_account(account_id)
    return True
