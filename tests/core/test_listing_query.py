# tests/core/test_listing_query.py
"""
Тесты построителя запросов ленты (uytop/core/listings/query.py).
"""

import operator
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Any
from uuid import uuid4

import pytest

from uytop.common.constants import ListingSurface, SortMode
from uytop.core.listings.models import ListingFilters
from uytop.core.listings.query import (
    DEFAULT_ORDER,
    Condition,
    ListingQuery,
    OrderBy,
    build_listing_query,
    build_owner_query,
    resolve_order,
)


_OPS = {"=": operator.eq, ">=": operator.ge, "<=": operator.le}


def run_in_memory(query: ListingQuery, rows: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """Выполняет ListingQuery над списком словарей так же, как это сделал бы PostgreSQL."""
    matched = [
        row for row in rows
        if all(_OPS[c.op](row[c.column], c.value) for c in query.conditions)
    ]
    for item in reversed(query.order):
        matched.sort(key=lambda row: row[item.column], reverse=item.descending)
    return matched[: query.limit]


def _row(price: int, is_promoted: bool = False, **overrides: Any) -> dict[str, Any]:
    row = {
        "id": uuid4(),
        "status": "approved",
        "listing_type": "sale",
        "property_type": "apartment",
        "price": Decimal(price),
        "is_promoted": is_promoted,
        "like_count": 0,
        "created_at": datetime(2024, 1, 1, tzinfo=timezone.utc),
    }
    row.update(overrides)
    return row


class TestBuildListingQuery:
    """Тесты для build_listing_query."""

    def test_empty_filters(self) -> None:
        query = build_listing_query(ListingFilters())

        assert query.conditions == (Condition("status", "=", "approved"),)
        assert query.order == DEFAULT_ORDER
        assert query.limit == 20

    def test_falsy_values_add_no_conditions(self) -> None:
        filters = ListingFilters(
            property_type="", listing_type="", region_id="",
            min_price=0, max_price=0, rooms_count=0,
        )

        query = build_listing_query(filters)

        assert query.conditions == (Condition("status", "=", "approved"),)

    def test_all_filters(self, region_id) -> None:
        filters = ListingFilters(
            property_type="house",
            listing_type="rent",
            region_id=region_id,
            min_price=Decimal("100"),
            max_price=Decimal("500"),
            rooms_count=3,
        )

        query = build_listing_query(filters)

        assert query.condition_for("property_type").value == "house"
        assert query.condition_for("listing_type").value == "rent"
        assert query.condition_for("region_id").value == region_id
        assert query.condition_for("price", ">=").value == Decimal("100")
        assert query.condition_for("price", "<=").value == Decimal("500")
        assert query.condition_for("rooms_count").value == 3

    def test_min_greater_than_max_is_passed_as_is(self) -> None:
        query = build_listing_query(ListingFilters(min_price=900, max_price=100))

        assert query.condition_for("price", ">=").value == Decimal("900")
        assert query.condition_for("price", "<=").value == Decimal("100")
        assert run_in_memory(query, [_row(50), _row(500), _row(1000)]) == []

    def test_buy_surface_forces_sale(self) -> None:
        query = build_listing_query(ListingFilters(listing_type="rent"), ListingSurface.BUY)

        listing_type_conditions = [c for c in query.conditions if c.column == "listing_type"]
        assert listing_type_conditions == [Condition("listing_type", "=", "sale")]
        assert query.surface == ListingSurface.BUY

    def test_same_filters_same_query(self) -> None:
        filters = ListingFilters(property_type="apartment", min_price=1000, sort_by="price_desc")

        assert build_listing_query(filters) == build_listing_query(filters.model_copy())
        assert build_listing_query(filters).to_sql() == build_listing_query(filters).to_sql()

    def test_page_size(self) -> None:
        assert build_listing_query(ListingFilters(), page_size=5).limit == 5


class TestResolveOrder:
    """Ровно один порядок сортировки на режим."""

    @pytest.mark.parametrize(
        ("sort_by", "expected"),
        [
            (SortMode.PRICE_ASC, (OrderBy("price"),)),
            (SortMode.PRICE_DESC, (OrderBy("price", descending=True),)),
            (SortMode.POPULARITY, (OrderBy("like_count", descending=True),)),
            (SortMode.DATE_DESC, DEFAULT_ORDER),
            (None, DEFAULT_ORDER),
        ],
    )
    def test_order(self, sort_by, expected) -> None:
        assert resolve_order(sort_by) == expected

    def test_price_asc_ignores_promotion(self) -> None:
        rows = [_row(100, is_promoted=True), _row(50)]

        ordered = run_in_memory(build_listing_query(ListingFilters(sort_by="price_asc")), rows)

        assert [row["price"] for row in ordered] == [50, 100]

    def test_default_order_puts_promoted_first(self) -> None:
        now = datetime(2024, 6, 1, tzinfo=timezone.utc)
        rows = [
            _row(10, created_at=now),
            _row(20, is_promoted=True, created_at=now - timedelta(days=3)),
            _row(30, created_at=now - timedelta(days=1)),
        ]

        ordered = run_in_memory(build_listing_query(ListingFilters()), rows)

        assert [row["price"] for row in ordered] == [20, 10, 30]

    def test_pending_and_rent_excluded_on_buy(self) -> None:
        rows = [_row(10), _row(20, status="pending"), _row(30, listing_type="rent")]

        ordered = run_in_memory(build_listing_query(ListingFilters(), ListingSurface.BUY), rows)

        assert [row["price"] for row in ordered] == [10]


class TestToSql:
    """Параметризованный SQL."""

    def test_placeholders_and_limit(self) -> None:
        query = build_listing_query(ListingFilters(property_type="land", max_price=300))

        sql, params = query.to_sql()

        assert params == ["approved", "land", Decimal("300"), 20]
        assert "l.status = $1" in sql
        assert "l.property_type = $2" in sql
        assert "l.price <= $3" in sql
        assert "LIMIT $4" in sql
        assert "ORDER BY l.is_promoted DESC, l.created_at DESC" in sql

    def test_values_never_inlined(self) -> None:
        sql, params = build_listing_query(ListingFilters(rooms_count=4)).to_sql()

        assert "4" not in sql.rsplit("    WHERE ", 1)[1].split("ORDER BY")[0]
        assert 4 in params

    def test_unknown_operator_rejected(self) -> None:
        with pytest.raises(ValueError):
            Condition("price", "LIKE", "%1%")


class TestOwnerQuery:
    def test_owner_query(self) -> None:
        owner_id = uuid4()

        query = build_owner_query(owner_id)
        sql, params = query.to_sql()

        assert query.conditions == (Condition("user_id", "=", owner_id),)
        assert query.order == (OrderBy("created_at", descending=True),)
        assert "status" not in sql.rsplit("    WHERE ", 1)[1]
        assert params == [owner_id, 20]
