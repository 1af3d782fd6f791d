"""
Tests for list-filter resolution.

``VARIANT_FIXTURES`` pins down, for every named variant, one predicate
that selects it and the exact clauses the composed query must carry.
"""

from datetime import date

import pytest

from finance_ledger_api.app.services.filters import (
    CategoryPredicate,
    ListPredicate,
    QueryVariant,
    build_account_filter,
    build_category_filter,
    resolve_variant,
)


BASE = ("a.user_id = ?", "a.type = ?")
DAY = date(2024, 1, 1)

VARIANT_FIXTURES = [
    (QueryVariant.BY_USER_AND_TYPE, {}, []),
    (QueryVariant.BY_USER_AND_TYPE_AND_CATEGORY, {"category_id": 7}, ["a.category_id = ?"]),
    (QueryVariant.BY_USER_AND_TYPE_AND_DATE, {"date": DAY}, ["a.date = ?"]),
    (QueryVariant.BY_USER_AND_TYPE_AND_TITLE, {"title": "rent"}, ["a.title LIKE ? ESCAPE '\\'"]),
    (QueryVariant.BY_USER_AND_TYPE_AND_DESCRIPTION, {"description": "q1"}, ["a.description LIKE ? ESCAPE '\\'"]),
    (
        QueryVariant.BY_USER_AND_TYPE_AND_CATEGORY_AND_DATE,
        {"category_id": 7, "date": DAY},
        ["a.category_id = ?", "a.date = ?"],
    ),
    (
        QueryVariant.BY_USER_AND_TYPE_AND_CATEGORY_AND_TITLE,
        {"category_id": 7, "title": "rent"},
        ["a.category_id = ?", "a.title LIKE ? ESCAPE '\\'"],
    ),
    (
        QueryVariant.BY_USER_AND_TYPE_AND_CATEGORY_AND_DESCRIPTION,
        {"category_id": 7, "description": "q1"},
        ["a.category_id = ?", "a.description LIKE ? ESCAPE '\\'"],
    ),
    (
        QueryVariant.BY_USER_AND_TYPE_AND_DATE_AND_TITLE,
        {"date": DAY, "title": "rent"},
        ["a.date = ?", "a.title LIKE ? ESCAPE '\\'"],
    ),
    (
        QueryVariant.BY_USER_AND_TYPE_AND_DATE_AND_DESCRIPTION,
        {"date": DAY, "description": "q1"},
        ["a.date = ?", "a.description LIKE ? ESCAPE '\\'"],
    ),
    (
        QueryVariant.BY_USER_AND_TYPE_AND_TITLE_AND_DESCRIPTION,
        {"title": "rent", "description": "q1"},
        ["a.title LIKE ? ESCAPE '\\'", "a.description LIKE ? ESCAPE '\\'"],
    ),
    (
        QueryVariant.BY_USER_AND_TYPE_AND_CATEGORY_AND_DATE_AND_TITLE,
        {"category_id": 7, "date": DAY, "title": "rent"},
        ["a.category_id = ?", "a.date = ?", "a.title LIKE ? ESCAPE '\\'"],
    ),
    (
        QueryVariant.BY_USER_AND_TYPE_AND_CATEGORY_AND_DATE_AND_DESCRIPTION,
        {"category_id": 7, "date": DAY, "description": "q1"},
        ["a.category_id = ?", "a.date = ?", "a.description LIKE ? ESCAPE '\\'"],
    ),
    (
        QueryVariant.BY_USER_AND_TYPE_AND_CATEGORY_AND_TITLE_AND_DESCRIPTION,
        {"category_id": 7, "title": "rent", "description": "q1"},
        ["a.category_id = ?", "a.title LIKE ? ESCAPE '\\'", "a.description LIKE ? ESCAPE '\\'"],
    ),
    (
        QueryVariant.BY_USER_AND_TYPE_AND_DATE_AND_TITLE_AND_DESCRIPTION,
        {"date": DAY, "title": "rent", "description": "q1"},
        ["a.date = ?", "a.title LIKE ? ESCAPE '\\'", "a.description LIKE ? ESCAPE '\\'"],
    ),
    (
        QueryVariant.ALL_FIELDS_PRESENT,
        {"category_id": 7, "date": DAY, "title": "rent", "description": "q1"},
        ["a.category_id = ?", "a.date = ?", "a.title LIKE ? ESCAPE '\\'", "a.description LIKE ? ESCAPE '\\'"],
    ),
]


class TestResolveVariant:
    def test_only_mandatory_fields(self):
        predicate = ListPredicate(user_id=1, type="expense")

        assert resolve_variant(predicate) is QueryVariant.BY_USER_AND_TYPE

    def test_category_and_title(self):
        predicate = ListPredicate(user_id=1, type="expense", category_id=7, title="rent")

        assert resolve_variant(predicate) is QueryVariant.BY_USER_AND_TYPE_AND_CATEGORY_AND_TITLE

    def test_all_fields_present(self):
        predicate = ListPredicate(
            user_id=1,
            type="income",
            category_id=3,
            date=DAY,
            title="Bonus",
            description="Q1",
        )

        assert resolve_variant(predicate) is QueryVariant.ALL_FIELDS_PRESENT

    def test_category_and_date_is_handled(self):
        predicate = ListPredicate(user_id=1, type="expense", category_id=7, date=DAY)

        assert resolve_variant(predicate) is QueryVariant.BY_USER_AND_TYPE_AND_CATEGORY_AND_DATE

    @pytest.mark.parametrize(
        "predicate",
        [
            ListPredicate(user_id=0, type="expense"),
            ListPredicate(user_id=-3, type="expense", title="rent"),
            ListPredicate(user_id=1, type=""),
        ],
    )
    def test_mandatory_gate(self, predicate):
        assert resolve_variant(predicate) is None

    def test_every_combination_has_its_own_variant(self):
        seen = set()
        for category_id in (0, 7):
            for day in (None, DAY):
                for title in ("", "rent"):
                    for description in ("", "q1"):
                        predicate = ListPredicate(
                            user_id=1,
                            type="expense",
                            category_id=category_id,
                            date=day,
                            title=title,
                            description=description,
                        )
                        variant = resolve_variant(predicate)
                        assert variant is not None
                        seen.add(variant)

        assert seen == set(QueryVariant)

    def test_negative_category_counts_as_absent(self):
        predicate = ListPredicate(user_id=1, type="expense", category_id=-1)

        assert resolve_variant(predicate) is QueryVariant.BY_USER_AND_TYPE


class TestAccountFilter:
    @pytest.mark.parametrize("variant,fields,extra_clauses", VARIANT_FIXTURES)
    def test_composed_clauses_match_variant(self, variant, fields, extra_clauses):
        predicate = ListPredicate(user_id=1, type="expense", **fields)

        where, params = build_account_filter(predicate)

        assert resolve_variant(predicate) is variant
        assert where.split(" AND ") == [*BASE, *extra_clauses]
        assert len(params) == len(BASE) + len(extra_clauses)

    def test_params_in_clause_order(self):
        predicate = ListPredicate(
            user_id=1,
            type="income",
            category_id=3,
            date=DAY,
            title="Bonus",
            description="Q1",
        )

        _, params = build_account_filter(predicate)

        assert params == [1, "income", 3, "2024-01-01", "%Bonus%", "%Q1%"]

    @pytest.mark.parametrize(
        "title,pattern",
        [("50%", "%50\\%%"), ("a_b", "%a\\_b%"), ("C:\\tmp", "%C:\\\\tmp%")],
    )
    def test_wildcards_in_text_are_escaped(self, title, pattern):
        _, params = build_account_filter(ListPredicate(user_id=1, type="income", title=title))

        assert params[-1] == pattern


class TestCategoryFilter:
    def test_mandatory_only(self):
        predicate = CategoryPredicate(user_id=2, type="expense")

        where, params = build_category_filter(predicate)

        assert resolve_variant(predicate) is QueryVariant.BY_USER_AND_TYPE
        assert where == "user_id = ? AND type = ?"
        assert params == [2, "expense"]

    def test_title_and_description(self):
        predicate = CategoryPredicate(user_id=2, type="expense", title="Rent", description="flat")

        where, params = build_category_filter(predicate)

        assert resolve_variant(predicate) is QueryVariant.BY_USER_AND_TYPE_AND_TITLE_AND_DESCRIPTION
        assert where == "user_id = ? AND type = ? AND title LIKE ? ESCAPE '\\' AND description LIKE ? ESCAPE '\\'"
        assert params == [2, "expense", "%Rent%", "%flat%"]

    def test_gate(self):
        assert resolve_variant(CategoryPredicate(user_id=0, type="expense")) is None
