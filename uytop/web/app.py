# uytop/web/app.py
"""
Приложение NiceGUI: страницы мини-приложения и JSON API на одном сервере.
"""

from __future__ import annotations

from nicegui import app, ui

from uytop.api.dependencies import get_listing_service, get_profile_service, get_region_repository
from uytop.api.routes import router
from uytop.common.constants import TELEGRAM_BACKGROUND_COLOR, TELEGRAM_WEBAPP_SCRIPT
from uytop.core.identity.session import SessionContext
from uytop.web.components.bottom_nav import create_bottom_nav
from uytop.web.pages import AdminPage, BuyPage, HomePage, ProfilePage, SellPage
from uytop.web.session import get_session_context


def _page_frame(context: SessionContext, active: str) -> None:
    """Общая обвязка экрана: скрипт Telegram WebApp, фон и нижняя навигация."""
    ui.add_head_html(f'<script src="{TELEGRAM_WEBAPP_SCRIPT}"></script>')
    ui.query("body").style(f"background-color: {TELEGRAM_BACKGROUND_COLOR}")
    create_bottom_nav(active, context.current.language)


def create_app() -> None:
    """Регистрирует страницы и API."""
    app.include_router(router)

    @ui.page("/")
    async def index() -> None:
        context = await get_session_context()
        _page_frame(context, "home")
        await HomePage(context, get_listing_service(), get_region_repository()).mount()

    @ui.page("/buy")
    async def buy() -> None:
        context = await get_session_context()
        _page_frame(context, "buy")
        await BuyPage(context, get_listing_service(), get_region_repository()).mount()

    @ui.page("/sell")
    async def sell() -> None:
        context = await get_session_context()
        _page_frame(context, "sell")
        await SellPage(context, get_listing_service()).mount()

    @ui.page("/profile")
    async def profile() -> None:
        context = await get_session_context()
        _page_frame(context, "profile")
        await ProfilePage(context, get_profile_service(), get_region_repository()).mount()

    @ui.page("/admin")
    async def admin() -> None:
        context = await get_session_context()
        _page_frame(context, "profile")
        await AdminPage(context).mount()
