# uytop/core/listings/repository.py
"""
Репозиторий объявлений и их изображений.
"""

from __future__ import annotations

from typing import Any, Optional
from uuid import UUID

from asyncpg import Record

from uytop.core.listings.models import Listing, ListingImage
from uytop.core.listings.query import LISTING_SELECT, ListingQuery
from uytop.infra.database import DatabaseManager, decode_jsonb


def row_to_listing(row: Record | dict[str, Any]) -> Listing:
    """Собирает Listing из строки с jsonb-колонками region, profile, images."""
    data = dict(row)
    data["region"] = decode_jsonb(data.get("region"))
    data["profile"] = decode_jsonb(data.get("profile"))
    data["images"] = decode_jsonb(data.get("images")) or []
    return Listing(**data)


class ListingRepository:
    """
    Репозиторий объявлений.
    Ошибки БД пробрасываются, их обрабатывает ListingService.
    """

    def __init__(self, db: DatabaseManager) -> None:
        self._db = db

    async def search(self, query: ListingQuery) -> list[Listing]:
        """Выполняет выборку, построенную build_listing_query/build_owner_query."""
        sql, params = query.to_sql()
        rows = await self._db.fetch(sql, *params)
        return [row_to_listing(row) for row in rows]

    async def get_by_id(self, listing_id: UUID) -> Optional[Listing]:
        row = await self._db.fetchrow(
            LISTING_SELECT + "    WHERE l.id = $1\n",
            listing_id,
        )
        return row_to_listing(row) if row else None

    async def add_image(self, listing_id: UUID, image_url: str) -> ListingImage:
        """
        Добавляет изображение в конец галереи объявления.

        Строка объявления блокируется на время транзакции,
        чтобы display_order не совпал при одновременной загрузке.
        """
        async with self._db.transaction() as conn:
            await conn.execute(
                "SELECT id FROM listings WHERE id = $1 FOR UPDATE",
                listing_id,
            )
            row = await conn.fetchrow(
                """
                INSERT INTO listing_images (listing_id, image_url, display_order)
                SELECT $1, $2, COALESCE(MAX(display_order) + 1, 0)
                FROM listing_images
                WHERE listing_id = $1
                RETURNING id, listing_id, image_url, display_order, created_at
                """,
                listing_id,
                image_url,
            )

        return ListingImage(**dict(row))
