# uytop/web/telegram_host.py
"""
Хост Telegram WebApp в браузере клиента (через ui.run_javascript).
"""

from __future__ import annotations

from nicegui import ui

from uytop.common.constants import TELEGRAM_BACKGROUND_COLOR, TELEGRAM_HEADER_COLOR
from uytop.core.identity.host import HostSession, TelegramHost


# Вне Telegram скрипт telegram-web-app.js тоже создаёт WebApp, но с platform 'unknown' и пустым initData
IS_EMBEDDED_JS = """
const tg = window.Telegram && window.Telegram.WebApp;
return !!tg && (!!tg.initData || (!!tg.platform && tg.platform !== 'unknown'));
"""

PREPARE_JS = f"""
const tg = window.Telegram && window.Telegram.WebApp;
if (!tg) return false;
tg.ready();
tg.expand();
try {{
    tg.setHeaderColor('{TELEGRAM_HEADER_COLOR}');
    tg.setBackgroundColor('{TELEGRAM_BACKGROUND_COLOR}');
}} catch (e) {{
    console.log('Не удалось установить цвета темы:', e);
}}
return true;
"""

READ_SESSION_JS = """
const tg = window.Telegram && window.Telegram.WebApp;
return {
    init_data: (tg && tg.initData) || '',
    unsafe_user: (tg && tg.initDataUnsafe && tg.initDataUnsafe.user) || null,
};
"""


class WebAppHost(TelegramHost):
    """Telegram WebApp текущего клиента NiceGUI."""

    def __init__(self, timeout: float = 5.0) -> None:
        self.timeout = timeout

    async def is_embedded(self) -> bool:
        return bool(await ui.run_javascript(IS_EMBEDDED_JS, timeout=self.timeout))

    async def prepare(self) -> None:
        await ui.run_javascript(PREPARE_JS, timeout=self.timeout)

    async def read_session(self) -> HostSession:
        result = await ui.run_javascript(READ_SESSION_JS, timeout=self.timeout)
        if not isinstance(result, dict):
            return HostSession()
        return HostSession(
            init_data=result.get("init_data") or "",
            unsafe_user=result.get("unsafe_user"),
        )
