# uytop/core/regions/repository.py
"""
Репозиторий регионов.
"""

from __future__ import annotations

from uytop.common.logger import log_error
from uytop.core.regions.models import Region
from uytop.infra.database import DatabaseManager


class RegionRepository:
    """Репозиторий справочника регионов."""

    def __init__(self, db: DatabaseManager) -> None:
        self._db = db

    async def list_all(self) -> list[Region]:
        """
        Все регионы, упорядоченные по русскому названию.
        При недоступности БД возвращает пустой список.
        """
        if not self._db.is_available:
            return []

        try:
            rows = await self._db.fetch(
                """
                SELECT id, name_ru, name_uz, created_at
                FROM regions
                ORDER BY name_ru
                """
            )
            return [Region(**dict(row)) for row in rows]
        except Exception as e:
            await log_error(f"Ошибка получения регионов: {e}")
            return []
