"""
Business logic for accounts.

Besides CRUD, ``AccountService`` provides the filtered listing used by
``GET /accounts`` and the two aggregate reports: the sum of values and
the number of entries for one user and type.
"""

import logging
import sqlite3
from typing import List

from ..core.db import execute, fetch_all, fetch_one
from ..core.errors import NotFoundError, ValidationError
from ..schemas.account import (
    AccountCreate,
    AccountRead,
    AccountsGraph,
    AccountsReport,
    AccountUpdate,
)
from .category_service import CategoryService
from .filters import ListPredicate, build_account_filter, resolve_variant


logger = logging.getLogger(__name__)

_ACCOUNT_SELECT = (
    "SELECT a.id, a.user_id, a.category_id, a.title, a.type, a.description, "
    "a.value, a.date, a.created_at, c.title AS category_title "
    "FROM accounts a LEFT JOIN categories c ON c.id = a.category_id"
)


def _to_read(row: sqlite3.Row) -> AccountRead:
    return AccountRead(
        id=row["id"],
        user_id=row["user_id"],
        category_id=row["category_id"],
        title=row["title"],
        type=row["type"],
        description=row["description"],
        value=row["value"],
        date=row["date"],
        category_title=row["category_title"],
        created_at=row["created_at"],
    )


class AccountService:
    """CRUD, filtered listing and reports for accounts."""

    @classmethod
    async def create_account(cls, data: AccountCreate) -> AccountRead:
        """Insert an account after checking it against its category.

        Raises ``NotFoundError`` if the category does not exist and
        ``ValidationError`` if the category has a different type.
        """
        category = await CategoryService.get_category(data.category_id)
        if category.type != data.type:
            raise ValidationError("Account type is different of Category type")
        logger.info("Creating %s account '%s' for user %s", data.type, data.title, data.user_id)
        account_id, _ = await execute(
            """
            INSERT INTO accounts (user_id, category_id, title, type, description, value, date)
            VALUES (?, ?, ?, ?, ?, ?, ?)
            """,
            (
                data.user_id,
                data.category_id,
                data.title,
                data.type,
                data.description,
                data.value,
                data.date.isoformat(),
            ),
        )
        return await cls.get_account(account_id)

    @classmethod
    async def get_account(cls, account_id: int) -> AccountRead:
        row = await fetch_one(f"{_ACCOUNT_SELECT} WHERE a.id = ?", (account_id,))
        if row is None:
            raise NotFoundError(f"Account {account_id} not found")
        return _to_read(row)

    @classmethod
    async def list_accounts(cls, predicate: ListPredicate) -> List[AccountRead]:
        """Return the accounts matching ``predicate``, oldest first.

        An invalid predicate (no user or no type) matches nothing.
        """
        variant = resolve_variant(predicate)
        if variant is None:
            return []
        where, params = build_account_filter(predicate)
        logger.debug("Listing accounts with %s", variant.value)
        rows = await fetch_all(f"{_ACCOUNT_SELECT} WHERE {where} ORDER BY a.id", params)
        return [_to_read(row) for row in rows]

    @classmethod
    async def update_account(cls, account_id: int, updates: AccountUpdate) -> AccountRead:
        """Update the supplied fields of an account and return it.

        Raises ``NotFoundError`` if the account does not exist.
        """
        fields = {k: v for k, v in updates.model_dump().items() if v is not None}
        if fields:
            assignments = ", ".join(f"{key} = ?" for key in fields)
            _, rowcount = await execute(
                f"UPDATE accounts SET {assignments} WHERE id = ?",
                (*fields.values(), account_id),
            )
            if rowcount == 0:
                raise NotFoundError(f"Account {account_id} not found")
        return await cls.get_account(account_id)

    @classmethod
    async def delete_account(cls, account_id: int) -> None:
        _, rowcount = await execute("DELETE FROM accounts WHERE id = ?", (account_id,))
        if rowcount == 0:
            raise NotFoundError(f"Account {account_id} not found")
        logger.info("Deleted account %s", account_id)

    @classmethod
    async def get_accounts_report(cls, user_id: int, account_type: str) -> AccountsReport:
        row = await fetch_one(
            "SELECT COALESCE(SUM(value), 0) AS total FROM accounts WHERE user_id = ? AND type = ?",
            (user_id, account_type),
        )
        return AccountsReport(user_id=user_id, type=account_type, sum=row["total"])

    @classmethod
    async def get_accounts_graph(cls, user_id: int, account_type: str) -> AccountsGraph:
        row = await fetch_one(
            "SELECT COUNT(*) AS total FROM accounts WHERE user_id = ? AND type = ?",
            (user_id, account_type),
        )
        return AccountsGraph(user_id=user_id, type=account_type, count=row["total"])
