# uytop/core/profiles/service.py
"""
Сервис профилей.
Синхронизация профиля с Telegram, правки профиля и баланс.
"""

from __future__ import annotations

from typing import Optional
from uuid import UUID

from uytop.common.constants import TypeMsg
from uytop.common.logger import log_info
from uytop.core.profiles.models import Profile, ProfileSyncDTO, ProfileUpdateDTO, UserBalance
from uytop.core.profiles.repository import BalanceRepository, ProfileRepository
from uytop.infra.database import DatabaseManager


class ProfileService:
    """
    Сервис профилей.
    Ошибки хранилища пробрасываются вызывающему коду.
    """

    def __init__(
        self,
        db: DatabaseManager,
        profile_repo: ProfileRepository | None = None,
        balance_repo: BalanceRepository | None = None,
    ) -> None:
        self._db = db
        self._profile_repo = profile_repo or ProfileRepository(db)
        self._balance_repo = balance_repo or BalanceRepository(db)

    @property
    def is_available(self) -> bool:
        """Доступно ли хранилище профилей."""
        return self._db.is_available

    async def sync_identity(self, dto: ProfileSyncDTO) -> Profile:
        """
        Создаёт профиль при первом входе или обновляет имя, username и last_seen.

        Args:
            dto: Данные пользователя Telegram

        Returns:
            Актуальный профиль
        """
        profile, created = await self._profile_repo.upsert_by_telegram_id(dto)

        if created:
            await log_info(
                f"Новый пользователь: {profile.telegram_id} ({profile.display_name})",
                type_msg=TypeMsg.INFO,
            )
        else:
            await log_info(f"Пользователь {profile.telegram_id} вошёл повторно", type_msg=TypeMsg.DEBUG)

        return profile

    async def get_by_telegram_id(self, telegram_id: int) -> Optional[Profile]:
        return await self._profile_repo.get_by_telegram_id(telegram_id)

    async def save_profile(self, profile_id: UUID, dto: ProfileUpdateDTO) -> Optional[Profile]:
        """
        Сохраняет правки профиля (имя, телефон, язык, регион).

        Returns:
            Обновлённый профиль или None, если профиль не найден
        """
        profile = await self._profile_repo.update_profile(profile_id, dto)

        if profile is not None:
            await log_info(f"Профиль {profile.telegram_id} обновлён", type_msg=TypeMsg.DEBUG)

        return profile

    async def get_balance(self, profile_id: UUID) -> Optional[UserBalance]:
        """Баланс пользователя для отображения."""
        return await self._balance_repo.get_by_user(profile_id)
