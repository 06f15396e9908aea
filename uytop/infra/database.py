# uytop/infra/database.py
"""
Менеджер базы данных PostgreSQL.
Пул соединений, ретрай при ошибках подключения и транзакции.
Без настроенных реквизитов приложение работает в демо-режиме (только гостевой доступ).
"""

from __future__ import annotations

import asyncio
import json
from contextlib import asynccontextmanager
from functools import wraps
from typing import Any, AsyncGenerator, Callable, TypeVar

import asyncpg
from asyncpg import Connection, Pool, Record

from uytop.common.constants import TypeMsg
from uytop.common.logger import log_error, log_info, log_warning

T = TypeVar("T")

CONNECTION_ERRORS = (
    asyncpg.PostgresConnectionError,
    asyncpg.InterfaceError,
    ConnectionRefusedError,
    OSError,
)


class StoreUnavailableError(RuntimeError):
    """Хранилище не настроено или не подключено."""
    pass


def retry_on_connection_error(
    max_attempts: int = 3,
    delay: float = 1.0,
) -> Callable[[Callable[..., T]], Callable[..., T]]:
    """
    Декоратор для ретрая при ошибках подключения.
    Задержка растёт линейно: delay * attempt.

    Args:
        max_attempts: Максимальное количество попыток
        delay: Базовая задержка между попытками (секунды)
    """
    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        @wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> T:
            last_error: Exception | None = None

            for attempt in range(1, max_attempts + 1):
                try:
                    return await func(*args, **kwargs)
                except CONNECTION_ERRORS as e:
                    last_error = e
                    if attempt < max_attempts:
                        await log_info(
                            f"Ошибка подключения к БД (попытка {attempt}/{max_attempts}): {e}",
                            type_msg=TypeMsg.WARNING,
                        )
                        await asyncio.sleep(delay * attempt)
                    else:
                        await log_error(f"Не удалось подключиться к БД после {max_attempts} попыток: {e}")

            raise last_error  # type: ignore

        return wrapper  # type: ignore

    return decorator


class DatabaseManager:
    """
    Менеджер подключений к PostgreSQL.
    Singleton для пула соединений.
    """

    _instance: DatabaseManager | None = None
    _pool: Pool | None = None

    def __new__(cls) -> DatabaseManager:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self) -> None:
        if hasattr(self, "_initialized"):
            return
        self._initialized = True
        self._pool = None

    @property
    def is_available(self) -> bool:
        """Подключён ли пул соединений."""
        return self._pool is not None

    @property
    def pool(self) -> Pool:
        """Возвращает пул соединений."""
        if self._pool is None:
            raise StoreUnavailableError("База данных недоступна")
        return self._pool

    @retry_on_connection_error(max_attempts=3, delay=1.0)
    async def connect(
        self,
        dsn: str,
        min_size: int = 2,
        max_size: int = 10,
        command_timeout: int = 60,
    ) -> None:
        """
        Создаёт пул соединений к PostgreSQL.

        Args:
            dsn: DSN строка подключения
            min_size: Минимальный размер пула
            max_size: Максимальный размер пула
            command_timeout: Таймаут команд (секунды)
        """
        if self._pool is not None:
            return

        await log_info("Подключение к PostgreSQL...", type_msg=TypeMsg.INFO)

        self._pool = await asyncpg.create_pool(
            dsn=dsn,
            min_size=min_size,
            max_size=max_size,
            command_timeout=command_timeout,
        )

        await log_info("Подключение к PostgreSQL установлено", type_msg=TypeMsg.INFO)

    async def disconnect(self) -> None:
        """Закрывает пул соединений."""
        if self._pool is not None:
            await self._pool.close()
            self._pool = None
            await log_info("Соединение с PostgreSQL закрыто", type_msg=TypeMsg.INFO)

    @asynccontextmanager
    async def acquire(self) -> AsyncGenerator[Connection, None]:
        """
        Контекстный менеджер для получения соединения из пула.

        Example:
            async with db.acquire() as conn:
                rows = await conn.fetch("SELECT * FROM regions")
        """
        async with self.pool.acquire() as connection:
            yield connection

    @asynccontextmanager
    async def transaction(self) -> AsyncGenerator[Connection, None]:
        """
        Контекстный менеджер для транзакции.
        Commit при успехе, rollback при ошибке.

        Example:
            async with db.transaction() as conn:
                await conn.execute("INSERT INTO profiles ...")
                await conn.execute("INSERT INTO user_balances ...")
        """
        async with self.pool.acquire() as connection:
            async with connection.transaction():
                yield connection

    async def execute(self, query: str, *args: Any) -> str:
        """Выполняет SQL запрос без возврата данных."""
        async with self.acquire() as conn:
            return await conn.execute(query, *args)

    async def fetch(self, query: str, *args: Any) -> list[Record]:
        """Выполняет SQL запрос и возвращает все строки."""
        async with self.acquire() as conn:
            return await conn.fetch(query, *args)

    async def fetchrow(self, query: str, *args: Any) -> Record | None:
        """Выполняет SQL запрос и возвращает одну строку."""
        async with self.acquire() as conn:
            return await conn.fetchrow(query, *args)

    async def fetchval(self, query: str, *args: Any, column: int = 0) -> Any:
        """Выполняет SQL запрос и возвращает одно значение."""
        async with self.acquire() as conn:
            return await conn.fetchval(query, *args, column=column)

    async def health_check(self) -> bool:
        """Проверяет, отвечает ли БД."""
        if not self.is_available:
            return False
        try:
            return await self.fetchval("SELECT 1") == 1
        except Exception as e:
            await log_error(f"Health check PostgreSQL failed: {e}")
            return False


_db_manager: DatabaseManager | None = None


def get_db() -> DatabaseManager:
    """Возвращает глобальный экземпляр DatabaseManager."""
    global _db_manager
    if _db_manager is None:
        _db_manager = DatabaseManager()
    return _db_manager


async def init_db() -> bool:
    """
    Инициализирует подключение к базе данных.

    Returns:
        True, если БД подключена; False в демо-режиме (реквизиты не заданы
        подключиться не удалось или не применилась схема).
    """
    from uytop.config import settings

    db_settings = settings.database
    if not db_settings.is_configured:
        await log_warning("PostgreSQL не настроен, приложение работает в демо-режиме")
        return False

    db = get_db()
    try:
        await db.connect(
            dsn=db_settings.dsn,
            min_size=db_settings.DB_MIN_POOL_SIZE,
            max_size=db_settings.DB_MAX_POOL_SIZE,
            command_timeout=db_settings.DB_COMMAND_TIMEOUT,
        )
    except Exception as e:
        await log_error(f"PostgreSQL недоступен, демо-режим: {e}")
        return False

    await log_info(
        f"PostgreSQL подключён: {db_settings.DB_HOST}:{db_settings.DB_PORT}/{db_settings.DB_NAME}",
        type_msg=TypeMsg.INFO,
    )

    try:
        await _init_schema(db)
    except Exception as e:
        await log_error(f"Не удалось применить схему БД, демо-режим: {e}")
        await db.disconnect()
        return False
    return True


async def _init_schema(db: DatabaseManager) -> None:
    """Применяет migrations/init.sql (идемпотентный DDL)."""
    from uytop.config.loader import get_project_root

    schema_path = get_project_root() / "migrations" / "init.sql"
    if not schema_path.exists():
        await log_error(f"Файл схемы БД не найден: {schema_path}")
        return

    schema_sql = schema_path.read_text(encoding="utf-8")

    await log_info("Применение схемы БД...", type_msg=TypeMsg.INFO)

    # advisory lock против одновременного запуска миграций несколькими процессами
    async with db.transaction() as conn:
        await conn.execute("SELECT pg_advisory_xact_lock(20240101)")
        await conn.execute(schema_sql)

    await log_info("Схема БД применена", type_msg=TypeMsg.INFO)


async def close_db() -> None:
    """Закрывает подключение к базе данных."""
    await get_db().disconnect()


def decode_jsonb(value: Any) -> Any:
    """
    asyncpg по умолчанию отдаёт json/jsonb строкой, декодируем.
    """
    if isinstance(value, (str, bytes)):
        return json.loads(value)
    return value
