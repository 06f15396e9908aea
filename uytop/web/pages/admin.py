# uytop/web/pages/admin.py
from __future__ import annotations

from typing import Any

from nicegui import ui

from uytop.common.localization import get_text
from uytop.core.identity.session import SessionContext
from uytop.web.components.login_prompt import create_login_prompt

ADMIN_SECTIONS = (
    ("admin_users", "group"),
    ("admin_listings", "home_work"),
    ("admin_moderation", "fact_check"),
)


class AdminPage:
    """Админ-панель. Доступна только профилям с флагом is_admin."""

    def __init__(self, context: SessionContext) -> None:
        self.context = context
        self.lang = context.current.language

    def _t(self, key: str, **kwargs: Any) -> str:
        return get_text(key, self.lang, **kwargs)

    async def mount(self) -> None:
        session = self.context.current
        if session.is_guest:
            await create_login_prompt(self.context, self.lang)
            return

        if not session.is_admin:
            self._render_denied()
            return

        with ui.column().classes("w-full p-4 gap-4"):
            ui.label(self._t("admin_title")).classes("text-2xl font-bold text-slate-800")
            for label_key, icon in ADMIN_SECTIONS:
                with ui.card().classes("w-full p-4"):
                    with ui.row().classes("items-center gap-3"):
                        ui.icon(icon).classes("text-2xl text-blue-600")
                        with ui.column().classes("gap-0"):
                            ui.label(self._t(label_key)).classes("font-medium")
                            ui.label(self._t("admin_placeholder")).classes("text-sm text-slate-500")

    def _render_denied(self) -> None:
        with ui.card().classes("w-full max-w-md mx-auto mt-8 p-8 items-center text-center gap-2"):
            ui.icon("block").classes("text-5xl text-red-500")
            ui.label(self._t("admin_denied")).classes("text-xl font-semibold text-slate-800")
            ui.label(self._t("admin_denied_hint")).classes("text-slate-600")
