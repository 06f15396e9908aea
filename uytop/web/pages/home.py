# uytop/web/pages/home.py
from __future__ import annotations

from typing import Any

from nicegui import ui

from uytop.common.constants import ListingType, PropertyType
from uytop.common.localization import get_text
from uytop.common.logger import log_info
from uytop.core.identity.session import SessionContext
from uytop.core.listings.models import ListingFilters
from uytop.core.listings.service import ListingService
from uytop.core.regions.repository import RegionRepository
from uytop.web.components.filter_panel import FilterPanel
from uytop.web.components.listing_feed import ListingFeed

QUICK_FILTERS = (
    ("filter_all", ListingFilters()),
    ("filter_apartments", ListingFilters(property_type=PropertyType.APARTMENT)),
    ("filter_houses", ListingFilters(property_type=PropertyType.HOUSE)),
    ("filter_rent", ListingFilters(listing_type=ListingType.RENT)),
)


class HomePage:
    """
    Главная: быстрые фильтры, топ-объявления и общая лента.
    """

    def __init__(
        self,
        context: SessionContext,
        listings: ListingService,
        regions: RegionRepository,
    ) -> None:
        self.context = context
        self.listings = listings
        self.regions = regions
        self.lang = context.current.language
        self.filters = ListingFilters()
        self.feed = ListingFeed(listings.browse, self.lang)
        self.filter_panel: FilterPanel | None = None
        self.quick_row: ui.row | None = None

    def _t(self, key: str, **kwargs: Any) -> str:
        return get_text(key, self.lang, **kwargs)

    async def mount(self) -> None:
        await log_info("открытие главной", extra={"session": self.context.current.status.value})

        self.filter_panel = FilterPanel(self.lang, await self.regions.list_all(), on_apply=self.apply_filters)

        with ui.column().classes("w-full bg-white border-b border-slate-200 px-4 py-4 gap-3"):
            with ui.row().classes("w-full items-center justify-between"):
                ui.label(self._t("app_title")).classes("text-2xl font-bold text-slate-800")
                if self.context.current.is_guest:
                    ui.button(self._t("login"), on_click=lambda: ui.navigate.to("/profile")).props("dense")
                else:
                    ui.button(
                        self._t("filters_title"),
                        icon="tune",
                        on_click=lambda: self.filter_panel.open(self.filters),
                    ).props("flat dense")

            self.quick_row = ui.row().classes("gap-2 no-wrap overflow-x-auto")
            self._render_quick_filters()

        with ui.column().classes("w-full p-4 gap-4"):
            if not self.listings.is_available:
                with ui.card().classes("w-full bg-yellow-50 border border-yellow-200"):
                    ui.label(self._t("demo_mode")).classes("text-yellow-800 text-sm")

            self.feed.render_container()

        await self.feed.load(self.filters)

    def _render_quick_filters(self) -> None:
        if self.quick_row is None:
            return
        self.quick_row.clear()
        with self.quick_row:
            for label_key, filters in QUICK_FILTERS:
                active = self.filters == filters
                ui.button(
                    self._t(label_key),
                    on_click=lambda filters=filters: self.apply_filters(filters),
                ).props(f"rounded unelevated dense no-caps {'color=blue-2 text-color=blue-9' if active else 'color=grey-3 text-color=grey-9'}")

    async def apply_filters(self, filters: ListingFilters) -> None:
        """Новая выборка. Ответы предыдущих запросов отбрасываются лентой."""
        self.filters = filters
        self._render_quick_filters()
        await self.feed.load(filters)
