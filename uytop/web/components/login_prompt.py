# uytop/web/components/login_prompt.py
"""
Приглашение войти через Telegram для гостей.
"""

from __future__ import annotations

from typing import Any, Awaitable, Callable

from nicegui import ui

from uytop.common.localization import get_text
from uytop.common.logger import log_warning
from uytop.core.identity.resolver import AuthError
from uytop.core.identity.session import SessionContext
from uytop.core.identity.telegram_auth import TelegramAuthError, extract_identity
from uytop.web.telegram_host import WebAppHost


async def sign_in_from_host(context: SessionContext, host: WebAppHost) -> bool:
    """Вход по данным текущей сессии Telegram. False, если войти не удалось."""
    session = await host.read_session()

    try:
        user = extract_identity(session)
    except TelegramAuthError as e:
        await log_warning(f"Некорректные данные пользователя Telegram при входе: {e}")
        return False

    raw_identity = user.model_dump(exclude_none=True) if user else None

    try:
        await context.sign_in(raw_identity, session.init_data)
    except AuthError as e:
        await log_warning(f"Вход через Telegram не удался: {e}")
        return False
    return True


async def create_login_prompt(
    context: SessionContext,
    lang: str,
    on_success: Callable[[], Awaitable[Any]] | None = None,
) -> None:
    """
    Карточка входа. Внутри Telegram кнопка выполняет вход,
    снаружи открывает бота в Telegram.
    """
    from uytop.config import settings

    host = WebAppHost()
    try:
        embedded = await host.is_embedded()
    except Exception as e:
        await log_warning(f"Не удалось определить хост Telegram: {e}")
        embedded = False

    async def handle_login() -> None:
        if not embedded:
            ui.navigate.to(settings.telegram.webapp_url, new_tab=True)
            return

        if await sign_in_from_host(context, host):
            if on_success is not None:
                await on_success()
            else:
                ui.navigate.reload()
        else:
            ui.notify(get_text("login_failed", lang), type="negative")

    with ui.card().classes("w-full max-w-md mx-auto mt-8 p-8 items-center text-center gap-4"):
        ui.label(get_text("app_title", lang)).classes("text-3xl font-bold text-slate-800")
        ui.icon("account_circle").classes("text-6xl text-blue-500")
        ui.label(get_text("login_prompt", lang)).classes("text-slate-600 text-sm")
        ui.button(
            get_text("login", lang) if embedded else get_text("login_in_telegram", lang),
            on_click=handle_login,
        ).classes("w-full")
