# tests/core/test_profiles_service.py
"""
Тесты репозиториев и сервиса профилей.
"""

import asyncio
from decimal import Decimal
from typing import Any, Optional
from unittest.mock import AsyncMock, MagicMock
from uuid import UUID, uuid4

import pytest

from uytop.common.constants import Language
from uytop.core.profiles.models import Profile, ProfileSyncDTO, ProfileUpdateDTO
from uytop.core.profiles.repository import BalanceRepository, ProfileRepository, row_to_profile
from uytop.core.profiles.service import ProfileService


class InMemoryProfileRepository:
    """Хранилище профилей в памяти с атомарным upsert по telegram_id."""

    def __init__(self) -> None:
        self.rows: dict[int, Profile] = {}
        self._lock = asyncio.Lock()

    async def upsert_by_telegram_id(self, dto: ProfileSyncDTO) -> tuple[Profile, bool]:
        async with self._lock:
            await asyncio.sleep(0)
            existing = self.rows.get(dto.telegram_id)
            if existing is None:
                profile = Profile(
                    id=uuid4(),
                    telegram_id=dto.telegram_id,
                    telegram_username=dto.username,
                    first_name=dto.first_name,
                    last_name=dto.last_name,
                )
                self.rows[dto.telegram_id] = profile
                return profile, True
            profile = existing.model_copy(update={"first_name": dto.first_name or existing.first_name})
            self.rows[dto.telegram_id] = profile
            return profile, False

    async def get_by_telegram_id(self, telegram_id: int) -> Optional[Profile]:
        return self.rows.get(telegram_id)

    async def update_profile(self, profile_id: UUID, dto: ProfileUpdateDTO) -> Optional[Profile]:
        for telegram_id, profile in self.rows.items():
            if profile.id == profile_id:
                updated = profile.model_copy(update=dto.model_dump())
                self.rows[telegram_id] = updated
                return updated
        return None


# =============================================================================
# МОДЕЛИ
# =============================================================================

class TestProfileModels:
    def test_display_name(self, sample_profile_data: dict[str, Any]) -> None:
        profile = Profile(**sample_profile_data)

        assert profile.full_name == "Тест Пользователь"
        assert profile.display_name == "Тест Пользователь"
        assert profile.avatar_letter == "Т"

    def test_display_name_fallbacks(self) -> None:
        assert Profile(id=uuid4(), telegram_id=1, telegram_username="bob").display_name == "@bob"
        assert Profile(id=uuid4(), telegram_id=42).display_name == "42"

    def test_update_dto_empty_region(self) -> None:
        dto = ProfileUpdateDTO(first_name="Али", region_id="")

        assert dto.region_id is None
        assert dto.language == Language.RU


# =============================================================================
# РЕПОЗИТОРИИ
# =============================================================================

class TestProfileRepository:
    """Тесты для ProfileRepository."""

    @pytest.mark.asyncio
    async def test_upsert_creates_balance(
        self, mock_db: MagicMock, mock_conn: AsyncMock, sample_profile_data: dict[str, Any]
    ) -> None:
        mock_conn.fetchrow.return_value = {**sample_profile_data, "created": True}

        profile, created = await ProfileRepository(mock_db).upsert_by_telegram_id(
            ProfileSyncDTO(telegram_id=123456789, username="test_user", first_name="Тест")
        )

        assert created is True
        assert profile.telegram_id == 123456789
        assert "ON CONFLICT (telegram_id)" in mock_conn.fetchrow.call_args[0][0]
        balance_sql, balance_user = mock_conn.execute.call_args[0]
        assert "user_balances" in balance_sql
        assert balance_user == sample_profile_data["id"]

    @pytest.mark.asyncio
    async def test_upsert_existing(
        self, mock_db: MagicMock, mock_conn: AsyncMock, sample_profile_data: dict[str, Any]
    ) -> None:
        mock_conn.fetchrow.return_value = {**sample_profile_data, "created": False}

        _, created = await ProfileRepository(mock_db).upsert_by_telegram_id(
            ProfileSyncDTO(telegram_id=123456789)
        )

        assert created is False

    @pytest.mark.asyncio
    async def test_concurrent_upserts_use_single_statement_per_transaction(
        self, mock_db: MagicMock, mock_conn: AsyncMock, sample_profile_data: dict[str, Any]
    ) -> None:
        mock_conn.fetchrow.side_effect = [
            {**sample_profile_data, "created": index == 0} for index in range(5)
        ]
        repo = ProfileRepository(mock_db)
        dto = ProfileSyncDTO(telegram_id=123456789, username="test_user")

        results = await asyncio.gather(*(repo.upsert_by_telegram_id(dto) for _ in range(5)))

        assert [created for _, created in results] == [True, False, False, False, False]
        assert len({profile.id for profile, _ in results}) == 1

        # Каждый вход: одна транзакция, upsert и баланс на одном соединении
        assert mock_db.transaction.call_count == 5
        mock_db.fetchrow.assert_not_called()
        mock_db.execute.assert_not_called()
        assert [call[0] for call in mock_conn.mock_calls] == ["fetchrow", "execute"] * 5

        upsert_sql = mock_conn.fetchrow.call_args_list[0][0][0]
        assert "INSERT INTO profiles" in upsert_sql
        assert "ON CONFLICT (telegram_id) DO UPDATE SET" in upsert_sql
        assert "RETURNING *, (xmax = 0) AS created" in upsert_sql
        assert mock_conn.fetchrow.call_args_list[0][0][1:] == (123456789, "test_user", None, None)

        balance_sql = mock_conn.execute.call_args_list[0][0][0]
        assert "INSERT INTO user_balances" in balance_sql
        assert "ON CONFLICT (user_id) DO NOTHING" in balance_sql

    @pytest.mark.asyncio
    async def test_get_by_telegram_id_decodes_region(
        self, mock_db: MagicMock, sample_profile_data: dict[str, Any], sample_region_data: dict[str, Any]
    ) -> None:
        mock_db.fetchrow.return_value = {
            **sample_profile_data,
            "region_id": sample_region_data["id"],
            "region": '{"id": "11111111-1111-1111-1111-111111111111", "name_ru": "Ташкент", "name_uz": "Toshkent"}',
        }

        profile = await ProfileRepository(mock_db).get_by_telegram_id(123456789)

        assert profile.region is not None
        assert profile.region.localized_name("uz") == "Toshkent"

    @pytest.mark.asyncio
    async def test_update_profile_params(
        self, mock_db: MagicMock, sample_profile_data: dict[str, Any], region_id: UUID
    ) -> None:
        mock_db.fetchrow.return_value = sample_profile_data
        dto = ProfileUpdateDTO(first_name="Али", phone_number="+998901234567", language="uz", region_id=region_id)

        await ProfileRepository(mock_db).update_profile(sample_profile_data["id"], dto)

        params = mock_db.fetchrow.call_args[0][1:]
        assert params == (sample_profile_data["id"], "Али", None, "+998901234567", "uz", region_id)

    @pytest.mark.asyncio
    async def test_balance_not_found(self, mock_db: MagicMock) -> None:
        assert await BalanceRepository(mock_db).get_by_user(uuid4()) is None

    @pytest.mark.asyncio
    async def test_balance(self, mock_db: MagicMock) -> None:
        user_id = uuid4()
        mock_db.fetchrow.return_value = {
            "id": uuid4(), "user_id": user_id, "balance": Decimal("150"),
            "total_spent": Decimal("0"), "updated_at": None,
        }

        balance = await BalanceRepository(mock_db).get_by_user(user_id)

        assert balance.balance == Decimal("150")


# =============================================================================
# СЕРВИС
# =============================================================================

class TestProfileService:
    """Тесты для ProfileService."""

    @pytest.fixture
    def repo(self) -> InMemoryProfileRepository:
        return InMemoryProfileRepository()

    @pytest.fixture
    def service(self, mock_db: MagicMock, repo: InMemoryProfileRepository) -> ProfileService:
        return ProfileService(mock_db, profile_repo=repo, balance_repo=MagicMock())

    @pytest.mark.asyncio
    async def test_concurrent_first_sign_in_creates_one_profile(
        self, service: ProfileService, repo: InMemoryProfileRepository
    ) -> None:
        dto = ProfileSyncDTO(telegram_id=777, first_name="Али")

        profiles = await asyncio.gather(*(service.sync_identity(dto) for _ in range(5)))

        assert len(repo.rows) == 1
        assert len({profile.id for profile in profiles}) == 1

    @pytest.mark.asyncio
    async def test_save_then_fetch(self, service: ProfileService, region_id: UUID) -> None:
        profile = await service.sync_identity(ProfileSyncDTO(telegram_id=777, first_name="Али"))
        dto = ProfileUpdateDTO(first_name="Алишер", language="uz", region_id=region_id)

        saved = await service.save_profile(profile.id, dto)
        fetched = await service.get_by_telegram_id(777)

        assert saved == fetched
        assert fetched.first_name == "Алишер"
        assert fetched.language == Language.UZ
        assert fetched.region_id == region_id

    @pytest.mark.asyncio
    async def test_save_unknown_profile(self, service: ProfileService) -> None:
        assert await service.save_profile(uuid4(), ProfileUpdateDTO()) is None

    @pytest.mark.asyncio
    async def test_store_errors_propagate(self, mock_db: MagicMock) -> None:
        repo = MagicMock()
        repo.upsert_by_telegram_id = AsyncMock(side_effect=RuntimeError("db down"))
        service = ProfileService(mock_db, profile_repo=repo, balance_repo=MagicMock())

        with pytest.raises(RuntimeError):
            await service.sync_identity(ProfileSyncDTO(telegram_id=1))

    def test_is_available(self, mock_db: MagicMock, offline_db: MagicMock) -> None:
        assert ProfileService(mock_db).is_available is True
        assert ProfileService(offline_db).is_available is False
