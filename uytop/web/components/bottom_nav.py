"""
Нижняя навигация мини-приложения.
"""

from __future__ import annotations

from nicegui import ui

from uytop.common.localization import get_text

NAV_ITEMS = (
    ("home", "/", "home", "nav_home"),
    ("buy", "/buy", "search", "nav_buy"),
    ("sell", "/sell", "add_circle", "nav_sell"),
    ("profile", "/profile", "person", "nav_profile"),
)


def create_bottom_nav(active: str, lang: str) -> None:
    """Создаёт нижнюю панель навигации, active - ключ текущего экрана."""
    with ui.footer().classes("bg-white border-t border-slate-200 p-0"):
        with ui.row().classes("w-full justify-around no-wrap py-1"):
            for key, path, icon, label_key in NAV_ITEMS:
                color = "text-blue-600" if key == active else "text-slate-500"
                with ui.column().classes(f"items-center gap-0 cursor-pointer {color}").on(
                    "click", lambda path=path: ui.navigate.to(path)
                ):
                    ui.icon(icon).classes("text-2xl")
                    ui.label(get_text(label_key, lang)).classes("text-xs")
