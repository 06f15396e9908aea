# tests/conftest.py
"""
Общие фикстуры и настройки для тестов.
"""

from __future__ import annotations

import hashlib
import hmac
import json
import os
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock, MagicMock
from urllib.parse import urlencode
from uuid import UUID, uuid4

import pytest

# Устанавливаем переменные окружения перед импортом модулей
os.environ.setdefault("BOT_TOKEN", "test_bot_token")
os.environ.setdefault("DB_PASSWORD", "test_password")
os.environ.setdefault("IMGBB_API_KEY", "")

TEST_BOT_TOKEN = "123456:TEST-TOKEN"


# =============================================================================
# ФИКСТУРЫ КОНФИГУРАЦИИ
# =============================================================================

@pytest.fixture(scope="session")
def project_root() -> Path:
    """Корневая директория проекта."""
    return Path(__file__).parent.parent


@pytest.fixture(scope="session")
def config_path(project_root: Path) -> Path:
    """Путь к файлу конфигурации."""
    return project_root / "config" / "config.json"


@pytest.fixture(scope="session")
def lang_dict_path(project_root: Path) -> Path:
    """Путь к файлу локализации."""
    return project_root / "config" / "lang_dict.json"


# =============================================================================
# ФИКСТУРЫ ИНФРАСТРУКТУРЫ (МОКИ)
# =============================================================================

class FakeTransaction:
    """Асинхронный контекстный менеджер, отдающий мок соединения."""

    def __init__(self, conn: AsyncMock) -> None:
        self.conn = conn

    async def __aenter__(self) -> AsyncMock:
        return self.conn

    async def __aexit__(self, *exc: Any) -> bool:
        return False


@pytest.fixture
def mock_conn() -> AsyncMock:
    """Мок соединения asyncpg внутри транзакции."""
    conn = AsyncMock()
    conn.fetchrow = AsyncMock(return_value=None)
    conn.execute = AsyncMock(return_value="INSERT 0 1")
    return conn


@pytest.fixture
def mock_db(mock_conn: AsyncMock) -> MagicMock:
    """Мок менеджера базы данных (подключён)."""
    db = MagicMock()
    db.is_available = True
    db.fetchrow = AsyncMock(return_value=None)
    db.fetch = AsyncMock(return_value=[])
    db.execute = AsyncMock(return_value="INSERT 0 1")
    db.fetchval = AsyncMock(return_value=None)
    db.health_check = AsyncMock(return_value=True)
    db.transaction = MagicMock(side_effect=lambda: FakeTransaction(mock_conn))
    return db


@pytest.fixture
def offline_db() -> MagicMock:
    """Мок менеджера БД в демо-режиме."""
    db = MagicMock()
    db.is_available = False
    db.health_check = AsyncMock(return_value=False)
    return db


# =============================================================================
# ФИКСТУРЫ МОДЕЛЕЙ
# =============================================================================

@pytest.fixture
def region_id() -> UUID:
    return UUID("11111111-1111-1111-1111-111111111111")


@pytest.fixture
def sample_region_data(region_id: UUID) -> dict[str, Any]:
    """Пример региона."""
    return {
        "id": region_id,
        "name_ru": "Ташкент",
        "name_uz": "Toshkent",
        "created_at": datetime(2024, 1, 1, tzinfo=timezone.utc),
    }


@pytest.fixture
def sample_profile_data() -> dict[str, Any]:
    """Пример строки профиля (без региона)."""
    return {
        "id": UUID("22222222-2222-2222-2222-222222222222"),
        "telegram_id": 123456789,
        "telegram_username": "test_user",
        "first_name": "Тест",
        "last_name": "Пользователь",
        "phone_number": None,
        "language": "ru",
        "region_id": None,
        "is_admin": False,
        "last_seen": datetime.now(timezone.utc),
        "created_at": datetime.now(timezone.utc),
        "updated_at": datetime.now(timezone.utc),
        "region": None,
    }


@pytest.fixture
def sample_listing_data(sample_profile_data: dict[str, Any]) -> dict[str, Any]:
    """Пример строки объявления в том виде, в каком её отдаёт выборка."""
    listing_id = UUID("33333333-3333-3333-3333-333333333333")
    return {
        "id": listing_id,
        "user_id": sample_profile_data["id"],
        "title": "2-комнатная квартира в центре",
        "description": "Светлая квартира",
        "property_type": "apartment",
        "listing_type": "sale",
        "price": 65000,
        "area_sqm": 54.5,
        "area_sotka": None,
        "rooms_count": 2,
        "latitude": 41.31,
        "longitude": 69.28,
        "address": "ул. Навои, 1",
        "region_id": None,
        "status": "approved",
        "view_count": 10,
        "like_count": 3,
        "is_promoted": False,
        "promoted_until": None,
        "created_at": datetime(2024, 5, 1, tzinfo=timezone.utc),
        "updated_at": datetime(2024, 5, 1, tzinfo=timezone.utc),
        "region": None,
        "profile": None,
        "images": json.dumps([
            {
                "id": str(uuid4()),
                "listing_id": str(listing_id),
                "image_url": "https://i.ibb.co/second.jpg",
                "display_order": 1,
                "created_at": "2024-05-01T10:00:00+00:00",
            },
            {
                "id": str(uuid4()),
                "listing_id": str(listing_id),
                "image_url": "https://i.ibb.co/first.jpg",
                "display_order": 0,
                "created_at": "2024-05-01T10:00:00+00:00",
            },
        ]),
    }


# =============================================================================
# TELEGRAM initData
# =============================================================================

def make_init_data(
    user: dict[str, Any],
    bot_token: str = TEST_BOT_TOKEN,
    auth_date: int | None = None,
    extra: dict[str, str] | None = None,
) -> str:
    """Подписанная строка initData, как её формирует Telegram."""
    fields = {
        "auth_date": str(auth_date if auth_date is not None else int(time.time())),
        "query_id": "AAHdF6IQAAAAAN0XohDhrOrc",
        "user": json.dumps(user, separators=(",", ":"), ensure_ascii=False),
        **(extra or {}),
    }
    data_check_string = "\n".join(f"{key}={fields[key]}" for key in sorted(fields))
    secret_key = hmac.new(b"WebAppData", bot_token.encode(), hashlib.sha256).digest()
    fields["hash"] = hmac.new(secret_key, data_check_string.encode(), hashlib.sha256).hexdigest()
    return urlencode(fields)


@pytest.fixture
def telegram_user() -> dict[str, Any]:
    """Объект пользователя Telegram (initDataUnsafe.user)."""
    return {
        "id": 123456789,
        "first_name": "Тест",
        "last_name": "Пользователь",
        "username": "test_user",
        "language_code": "ru",
    }


@pytest.fixture
def bot_token() -> str:
    """Токен бота для подписи initData в тестах."""
    return TEST_BOT_TOKEN


@pytest.fixture
def sign_init_data():
    """Функция подписи initData (см. make_init_data)."""
    return make_init_data
