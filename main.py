#!/usr/bin/env python3
# main.py
"""
Точка входа мини-приложения Uytop.
Поднимает NiceGUI (страницы) и JSON API на одном сервере.
Без настроенной БД приложение работает в демо-режиме.
"""

from __future__ import annotations

import argparse
import os

from uytop.api.dependencies import cleanup_dependencies, init_dependencies
from uytop.common.constants import TypeMsg
from uytop.common.logger import log_info, setup_logging
from uytop.config import settings
from uytop.infra.database import close_db, get_db, init_db


async def startup() -> None:
    """Подключение к БД и инициализация зависимостей."""
    await log_info(
        f"Запуск {settings.system.PROJECT_NAME} v{settings.system.VERSION} ({settings.system.ENVIRONMENT})",
        type_msg=TypeMsg.INFO,
    )

    db_ready = await init_db()
    await init_dependencies(get_db())

    if not db_ready:
        await log_info("Демо-режим: доступен только гостевой просмотр", type_msg=TypeMsg.WARNING)
    if not settings.telegram.BOT_TOKEN and settings.telegram.VERIFY_INIT_DATA:
        await log_info("BOT_TOKEN не задан: вход через Telegram отключён, доступен только гостевой режим", type_msg=TypeMsg.WARNING)


async def shutdown() -> None:
    """Освобождение ресурсов."""
    await cleanup_dependencies()
    await close_db()
    await log_info("Приложение остановлено", type_msg=TypeMsg.INFO)


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Uytop Telegram Mini App")
    parser.add_argument("--host", default=settings.telegram.WEBAPP_HOST, help="Хост сервера")
    parser.add_argument("--port", type=int, default=settings.telegram.WEBAPP_PORT, help="Порт сервера")
    parser.add_argument("--reload", action="store_true", help="Перезапуск при изменении кода")
    return parser.parse_args()


def configure_storage() -> None:
    """Путь хранилища NiceGUI из настроек (nicegui читает его при импорте)."""
    os.environ.setdefault("NICEGUI_STORAGE_PATH", settings.system.STORAGE_PATH)


def main() -> None:
    args = parse_args()

    setup_logging()
    configure_storage()

    from nicegui import app, ui

    from uytop.web import create_app

    app.on_startup(startup)
    app.on_shutdown(shutdown)
    create_app()

    ui.run(
        host=args.host,
        port=args.port,
        reload=args.reload,
        title="Uytop",
        show=False,
        storage_secret=settings.system.STORAGE_SECRET,
    )


if __name__ in {"__main__", "__mp_main__"}:
    main()
