# uytop/core/profiles/repository.py
"""
Репозиторий профилей и балансов.
Ошибки БД не перехватываются, их обрабатывает слой сервисов.
"""

from __future__ import annotations

from typing import Any, Optional
from uuid import UUID

from asyncpg import Record

from uytop.core.profiles.models import Profile, ProfileSyncDTO, ProfileUpdateDTO, UserBalance
from uytop.infra.database import DatabaseManager, decode_jsonb


PROFILE_COLUMNS = """
    p.id, p.telegram_id, p.telegram_username, p.first_name, p.last_name,
    p.phone_number, p.language, p.region_id, p.is_admin, p.last_seen,
    p.created_at, p.updated_at
"""


def row_to_profile(row: Record | dict[str, Any]) -> Profile:
    """Собирает Profile из строки с колонкой region (jsonb)."""
    data = dict(row)
    data["region"] = decode_jsonb(data.get("region"))
    return Profile(**data)


class ProfileRepository:
    """Репозиторий профилей пользователей."""

    def __init__(self, db: DatabaseManager) -> None:
        self._db = db

    async def get_by_telegram_id(self, telegram_id: int) -> Optional[Profile]:
        """Профиль по Telegram ID вместе с регионом."""
        row = await self._db.fetchrow(
            f"""
            SELECT {PROFILE_COLUMNS}, to_jsonb(r) AS region
            FROM profiles p
            LEFT JOIN regions r ON r.id = p.region_id
            WHERE p.telegram_id = $1
            """,
            telegram_id,
        )
        return row_to_profile(row) if row else None

    async def get_by_id(self, profile_id: UUID) -> Optional[Profile]:
        """Профиль по внутреннему ID вместе с регионом."""
        row = await self._db.fetchrow(
            f"""
            SELECT {PROFILE_COLUMNS}, to_jsonb(r) AS region
            FROM profiles p
            LEFT JOIN regions r ON r.id = p.region_id
            WHERE p.id = $1
            """,
            profile_id,
        )
        return row_to_profile(row) if row else None

    async def upsert_by_telegram_id(self, dto: ProfileSyncDTO) -> tuple[Profile, bool]:
        """
        Атомарно создаёт профиль или обновляет отображаемые поля и last_seen.

        Одна строка на telegram_id гарантируется уникальным индексом и
        ON CONFLICT, поэтому одновременные входы не создают дубликатов.
        Баланс создаётся в той же транзакции, если его ещё нет.

        Returns:
            (профиль, создан ли он этим вызовом)
        """
        async with self._db.transaction() as conn:
            row = await conn.fetchrow(
                f"""
                WITH p AS (
                    INSERT INTO profiles (telegram_id, telegram_username, first_name, last_name, last_seen)
                    VALUES ($1, $2, $3, $4, NOW())
                    ON CONFLICT (telegram_id) DO UPDATE SET
                        telegram_username = COALESCE(EXCLUDED.telegram_username, profiles.telegram_username),
                        first_name = COALESCE(EXCLUDED.first_name, profiles.first_name),
                        last_name = COALESCE(EXCLUDED.last_name, profiles.last_name),
                        last_seen = NOW(),
                        updated_at = NOW()
                    RETURNING *, (xmax = 0) AS created
                )
                SELECT {PROFILE_COLUMNS}, p.created AS created, to_jsonb(r) AS region
                FROM p
                LEFT JOIN regions r ON r.id = p.region_id
                """,
                dto.telegram_id,
                dto.username,
                dto.first_name,
                dto.last_name,
            )

            await conn.execute(
                """
                INSERT INTO user_balances (user_id)
                VALUES ($1)
                ON CONFLICT (user_id) DO NOTHING
                """,
                row["id"],
            )

        return row_to_profile(row), bool(row["created"])

    async def update_profile(self, profile_id: UUID, dto: ProfileUpdateDTO) -> Optional[Profile]:
        """
        Сохраняет правки профиля.

        Returns:
            Обновлённый профиль или None, если профиль не найден
        """
        row = await self._db.fetchrow(
            f"""
            WITH p AS (
                UPDATE profiles
                SET first_name = $2, last_name = $3, phone_number = $4,
                    language = $5, region_id = $6, updated_at = NOW()
                WHERE id = $1
                RETURNING *
            )
            SELECT {PROFILE_COLUMNS}, to_jsonb(r) AS region
            FROM p
            LEFT JOIN regions r ON r.id = p.region_id
            """,
            profile_id,
            dto.first_name,
            dto.last_name,
            dto.phone_number,
            dto.language.value,
            dto.region_id,
        )
        return row_to_profile(row) if row else None


class BalanceRepository:
    """Репозиторий балансов пользователей."""

    def __init__(self, db: DatabaseManager) -> None:
        self._db = db

    async def get_by_user(self, profile_id: UUID) -> Optional[UserBalance]:
        """Баланс пользователя или None, если записи нет."""
        row = await self._db.fetchrow(
            """
            SELECT id, user_id, balance, total_spent, updated_at
            FROM user_balances
            WHERE user_id = $1
            """,
            profile_id,
        )
        return UserBalance(**dict(row)) if row else None
