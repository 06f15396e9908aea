# uytop/core/listings/query.py
"""
Построитель запросов ленты объявлений.

Чистые функции: одинаковый выбор фильтров всегда даёт одинаковый запрос.
Запрос доступен и в структурном виде (условия, сортировка, лимит),
и как параметризованный SQL для asyncpg.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional
from uuid import UUID

from uytop.common.constants import DEFAULT_PAGE_SIZE, ListingStatus, ListingSurface, ListingType, SortMode
from uytop.core.listings.models import ListingFilters


LISTING_SELECT = """
    SELECT
        l.*,
        to_jsonb(r) AS region,
        to_jsonb(pr) AS profile,
        COALESCE(
            (
                SELECT jsonb_agg(to_jsonb(i) ORDER BY i.display_order)
                FROM listing_images i
                WHERE i.listing_id = l.id
            ),
            '[]'::jsonb
        ) AS images
    FROM listings l
    LEFT JOIN regions r ON r.id = l.region_id
    LEFT JOIN profiles pr ON pr.id = l.user_id
"""

_OPERATORS = ("=", ">=", "<=")


@dataclass(frozen=True)
class Condition:
    """Условие фильтрации по колонке таблицы listings."""

    column: str
    op: str
    value: Any

    def __post_init__(self) -> None:
        if self.op not in _OPERATORS:
            raise ValueError(f"Unsupported operator: {self.op}")


@dataclass(frozen=True)
class OrderBy:
    column: str
    descending: bool = False


@dataclass(frozen=True)
class ListingQuery:
    """Структурное описание выборки объявлений."""

    conditions: tuple[Condition, ...]
    order: tuple[OrderBy, ...]
    limit: int = DEFAULT_PAGE_SIZE
    surface: Optional[ListingSurface] = field(default=None, compare=False)

    def condition_for(self, column: str, op: str = "=") -> Optional[Condition]:
        """Условие по колонке и оператору, если оно есть."""
        for condition in self.conditions:
            if condition.column == column and condition.op == op:
                return condition
        return None

    def to_sql(self) -> tuple[str, list[Any]]:
        """
        Параметризованный SQL.

        Returns:
            (текст запроса, список параметров для $1..$N)
        """
        params: list[Any] = []
        where: list[str] = []

        for condition in self.conditions:
            params.append(condition.value)
            where.append(f"l.{condition.column} {condition.op} ${len(params)}")

        sql = LISTING_SELECT
        if where:
            sql += "    WHERE " + "\n      AND ".join(where) + "\n"

        order_sql = ", ".join(
            f"l.{item.column} {'DESC' if item.descending else 'ASC'}" for item in self.order
        )
        sql += f"    ORDER BY {order_sql}\n"

        params.append(self.limit)
        sql += f"    LIMIT ${len(params)}\n"

        return sql, params


# Сортировка по умолчанию: сначала продвигаемые, затем новые.
# date_desc отдельной ветки не имеет и попадает сюда же.
DEFAULT_ORDER = (
    OrderBy("is_promoted", descending=True),
    OrderBy("created_at", descending=True),
)


def resolve_order(sort_by: Optional[SortMode]) -> tuple[OrderBy, ...]:
    """Ровно один порядок сортировки для выбранного режима."""
    match sort_by:
        case SortMode.PRICE_ASC:
            return (OrderBy("price"),)
        case SortMode.PRICE_DESC:
            return (OrderBy("price", descending=True),)
        case SortMode.POPULARITY:
            return (OrderBy("like_count", descending=True),)
        case _:
            return DEFAULT_ORDER


def build_listing_query(
    filters: ListingFilters,
    surface: ListingSurface = ListingSurface.BROWSE,
    page_size: int = DEFAULT_PAGE_SIZE,
) -> ListingQuery:
    """
    Строит выборку одобренных объявлений по фильтрам.

    На экране покупки тип сделки всегда 'sale', выбранный тип игнорируется.
    Незаполненные фильтры (None, 0) не добавляют условий.
    min_price > max_price не проверяется и уходит в запрос как есть.

    Args:
        filters: Выбор пользователя
        surface: Экран (лента или покупка)
        page_size: Размер страницы

    Returns:
        Описание запроса
    """
    conditions: list[Condition] = [Condition("status", "=", ListingStatus.APPROVED.value)]

    if surface == ListingSurface.BUY:
        conditions.append(Condition("listing_type", "=", ListingType.SALE.value))

    if filters.property_type:
        conditions.append(Condition("property_type", "=", filters.property_type.value))

    if filters.listing_type and surface != ListingSurface.BUY:
        conditions.append(Condition("listing_type", "=", filters.listing_type.value))

    if filters.region_id:
        conditions.append(Condition("region_id", "=", filters.region_id))

    if filters.min_price:
        conditions.append(Condition("price", ">=", filters.min_price))

    if filters.max_price:
        conditions.append(Condition("price", "<=", filters.max_price))

    if filters.rooms_count:
        conditions.append(Condition("rooms_count", "=", filters.rooms_count))

    return ListingQuery(
        conditions=tuple(conditions),
        order=resolve_order(filters.sort_by),
        limit=page_size,
        surface=surface,
    )


def build_owner_query(owner_id: UUID, page_size: int = DEFAULT_PAGE_SIZE) -> ListingQuery:
    """Объявления владельца в любом статусе, новые первыми."""
    return ListingQuery(
        conditions=(Condition("user_id", "=", owner_id),),
        order=(OrderBy("created_at", descending=True),),
        limit=page_size,
    )
