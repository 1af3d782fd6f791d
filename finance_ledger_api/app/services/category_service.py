"""
Business logic for categories.
"""

import logging
import sqlite3
from typing import List

from ..core.db import execute, fetch_all, fetch_one
from ..core.errors import NotFoundError
from ..schemas.category import CategoryCreate, CategoryRead, CategoryUpdate
from .filters import CategoryPredicate, build_category_filter, resolve_variant


logger = logging.getLogger(__name__)

_CATEGORY_COLUMNS = "id, user_id, title, type, description, created_at"


def _to_read(row: sqlite3.Row) -> CategoryRead:
    return CategoryRead(
        id=row["id"],
        user_id=row["user_id"],
        title=row["title"],
        type=row["type"],
        description=row["description"],
        created_at=row["created_at"],
    )


class CategoryService:
    """CRUD and filtered listing for categories."""

    @classmethod
    async def create_category(cls, data: CategoryCreate) -> CategoryRead:
        logger.info("Creating %s category '%s' for user %s", data.type, data.title, data.user_id)
        category_id, _ = await execute(
            "INSERT INTO categories (user_id, title, type, description) VALUES (?, ?, ?, ?)",
            (data.user_id, data.title, data.type, data.description),
        )
        return await cls.get_category(category_id)

    @classmethod
    async def get_category(cls, category_id: int) -> CategoryRead:
        row = await fetch_one(
            f"SELECT {_CATEGORY_COLUMNS} FROM categories WHERE id = ?", (category_id,)
        )
        if row is None:
            raise NotFoundError(f"Category {category_id} not found")
        return _to_read(row)

    @classmethod
    async def list_categories(cls, predicate: CategoryPredicate) -> List[CategoryRead]:
        """Return the categories matching ``predicate``, oldest first.

        An invalid predicate (no user or no type) matches nothing.
        """
        variant = resolve_variant(predicate)
        if variant is None:
            return []
        where, params = build_category_filter(predicate)
        logger.debug("Listing categories with %s", variant.value)
        rows = await fetch_all(
            f"SELECT {_CATEGORY_COLUMNS} FROM categories WHERE {where} ORDER BY id",
            params,
        )
        return [_to_read(row) for row in rows]

    @classmethod
    async def update_category(cls, category_id: int, updates: CategoryUpdate) -> CategoryRead:
        """Update the supplied fields of a category and return it.

        Raises ``NotFoundError`` if the category does not exist.
        """
        fields = {k: v for k, v in updates.model_dump().items() if v is not None}
        if fields:
            assignments = ", ".join(f"{key} = ?" for key in fields)
            _, rowcount = await execute(
                f"UPDATE categories SET {assignments} WHERE id = ?",
                (*fields.values(), category_id),
            )
            if rowcount == 0:
                raise NotFoundError(f"Category {category_id} not found")
        return await cls.get_category(category_id)

    @classmethod
    async def delete_category(cls, category_id: int) -> None:
        _, rowcount = await execute("DELETE FROM categories WHERE id = ?", (category_id,))
        if rowcount == 0:
            raise NotFoundError(f"Category {category_id} not found")
        logger.info("Deleted category %s", category_id)
