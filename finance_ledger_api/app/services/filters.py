"""
List-filter resolution for accounts and categories.

A list request always carries ``user_id`` and ``type`` and may carry
any subset of the optional fields.  ``resolve_variant`` names the
exact combination present with one ``QueryVariant``: the four presence
flags form a bitmask and ``_VARIANTS`` maps every one of the sixteen
masks to its own member, so no combination is left unhandled and no
two variants overlap.

The SQL itself is not picked from a fixed list.  ``build_account_filter``
and ``build_category_filter`` compose one ``WHERE`` clause per present
field; the variant is used to label the query in logs and to pin the
composed clauses down in tests.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple


class QueryVariant(str, Enum):
    BY_USER_AND_TYPE = "ByUserAndType"
    BY_USER_AND_TYPE_AND_CATEGORY = "ByUserAndTypeAndCategory"
    BY_USER_AND_TYPE_AND_DATE = "ByUserAndTypeAndDate"
    BY_USER_AND_TYPE_AND_TITLE = "ByUserAndTypeAndTitle"
    BY_USER_AND_TYPE_AND_DESCRIPTION = "ByUserAndTypeAndDescription"
    BY_USER_AND_TYPE_AND_CATEGORY_AND_DATE = "ByUserAndTypeAndCategoryAndDate"
    BY_USER_AND_TYPE_AND_CATEGORY_AND_TITLE = "ByUserAndTypeAndCategoryAndTitle"
    BY_USER_AND_TYPE_AND_CATEGORY_AND_DESCRIPTION = "ByUserAndTypeAndCategoryAndDescription"
    BY_USER_AND_TYPE_AND_DATE_AND_TITLE = "ByUserAndTypeAndDateAndTitle"
    BY_USER_AND_TYPE_AND_DATE_AND_DESCRIPTION = "ByUserAndTypeAndDateAndDescription"
    BY_USER_AND_TYPE_AND_TITLE_AND_DESCRIPTION = "ByUserAndTypeAndTitleAndDescription"
    BY_USER_AND_TYPE_AND_CATEGORY_AND_DATE_AND_TITLE = "ByUserAndTypeAndCategoryAndDateAndTitle"
    BY_USER_AND_TYPE_AND_CATEGORY_AND_DATE_AND_DESCRIPTION = "ByUserAndTypeAndCategoryAndDateAndDescription"
    BY_USER_AND_TYPE_AND_CATEGORY_AND_TITLE_AND_DESCRIPTION = "ByUserAndTypeAndCategoryAndTitleAndDescription"
    BY_USER_AND_TYPE_AND_DATE_AND_TITLE_AND_DESCRIPTION = "ByUserAndTypeAndDateAndTitleAndDescription"
    ALL_FIELDS_PRESENT = "AllFieldsPresent"


# Presence bits, in the order they appear in variant names.
CATEGORY = 1
DATE = 2
TITLE = 4
DESCRIPTION = 8

_VARIANTS: Dict[int, QueryVariant] = {
    0: QueryVariant.BY_USER_AND_TYPE,
    CATEGORY: QueryVariant.BY_USER_AND_TYPE_AND_CATEGORY,
    DATE: QueryVariant.BY_USER_AND_TYPE_AND_DATE,
    TITLE: QueryVariant.BY_USER_AND_TYPE_AND_TITLE,
    DESCRIPTION: QueryVariant.BY_USER_AND_TYPE_AND_DESCRIPTION,
    CATEGORY | DATE: QueryVariant.BY_USER_AND_TYPE_AND_CATEGORY_AND_DATE,
    CATEGORY | TITLE: QueryVariant.BY_USER_AND_TYPE_AND_CATEGORY_AND_TITLE,
    CATEGORY | DESCRIPTION: QueryVariant.BY_USER_AND_TYPE_AND_CATEGORY_AND_DESCRIPTION,
    DATE | TITLE: QueryVariant.BY_USER_AND_TYPE_AND_DATE_AND_TITLE,
    DATE | DESCRIPTION: QueryVariant.BY_USER_AND_TYPE_AND_DATE_AND_DESCRIPTION,
    TITLE | DESCRIPTION: QueryVariant.BY_USER_AND_TYPE_AND_TITLE_AND_DESCRIPTION,
    CATEGORY | DATE | TITLE: QueryVariant.BY_USER_AND_TYPE_AND_CATEGORY_AND_DATE_AND_TITLE,
    CATEGORY | DATE | DESCRIPTION: QueryVariant.BY_USER_AND_TYPE_AND_CATEGORY_AND_DATE_AND_DESCRIPTION,
    CATEGORY | TITLE | DESCRIPTION: QueryVariant.BY_USER_AND_TYPE_AND_CATEGORY_AND_TITLE_AND_DESCRIPTION,
    DATE | TITLE | DESCRIPTION: QueryVariant.BY_USER_AND_TYPE_AND_DATE_AND_TITLE_AND_DESCRIPTION,
    CATEGORY | DATE | TITLE | DESCRIPTION: QueryVariant.ALL_FIELDS_PRESENT,
}


@dataclass(frozen=True)
class ListPredicate:
    """Filters of a "list accounts" request.

    ``category_id == 0``, an empty ``title``/``description`` and
    ``date is None`` all mean "not filtered on".
    """

    user_id: int
    type: str
    category_id: int = 0
    title: str = ""
    description: str = ""
    date: Optional[date] = None

    def is_valid(self) -> bool:
        return self.user_id > 0 and bool(self.type)

    def presence_mask(self) -> int:
        mask = 0
        if self.category_id > 0:
            mask |= CATEGORY
        if self.date is not None:
            mask |= DATE
        if self.title:
            mask |= TITLE
        if self.description:
            mask |= DESCRIPTION
        return mask


@dataclass(frozen=True)
class CategoryPredicate:
    """Filters of a "list categories" request."""

    user_id: int
    type: str
    title: str = ""
    description: str = ""

    def is_valid(self) -> bool:
        return self.user_id > 0 and bool(self.type)

    def presence_mask(self) -> int:
        mask = 0
        if self.title:
            mask |= TITLE
        if self.description:
            mask |= DESCRIPTION
        return mask


def resolve_variant(predicate: ListPredicate | CategoryPredicate) -> Optional[QueryVariant]:
    """Return the single variant serving ``predicate``.

    ``None`` means the mandatory ``user_id``/``type`` pair is missing and
    nothing should be queried.
    """
    if not predicate.is_valid():
        return None
    return _VARIANTS[predicate.presence_mask()]


_LIKE_ESCAPE = "\\"


def _like(value: str) -> str:
    """Wrap ``value`` for a substring ``LIKE`` with its wildcards escaped."""
    for char in (_LIKE_ESCAPE, "%", "_"):
        value = value.replace(char, _LIKE_ESCAPE + char)
    return f"%{value}%"


def build_account_filter(predicate: ListPredicate) -> Tuple[str, List[Any]]:
    """Compose the ``WHERE`` clause (without the keyword) for an account list."""
    clauses = ["a.user_id = ?", "a.type = ?"]
    params: List[Any] = [predicate.user_id, predicate.type]
    if predicate.category_id > 0:
        clauses.append("a.category_id = ?")
        params.append(predicate.category_id)
    if predicate.date is not None:
        clauses.append("a.date = ?")
        params.append(predicate.date.isoformat())
    if predicate.title:
        clauses.append("a.title LIKE ? ESCAPE '\\'")
        params.append(_like(predicate.title))
    if predicate.description:
        clauses.append("a.description LIKE ? ESCAPE '\\'")
        params.append(_like(predicate.description))
    return " AND ".join(clauses), params


def build_category_filter(predicate: CategoryPredicate) -> Tuple[str, List[Any]]:
    """Compose the ``WHERE`` clause (without the keyword) for a category list."""
    clauses = ["user_id = ?", "type = ?"]
    params: List[Any] = [predicate.user_id, predicate.type]
    if predicate.title:
        clauses.append("title LIKE ? ESCAPE '\\'")
        params.append(_like(predicate.title))
    if predicate.description:
        clauses.append("description LIKE ? ESCAPE '\\'")
        params.append(_like(predicate.description))
    return " AND ".join(clauses), params
