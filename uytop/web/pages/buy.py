# uytop/web/pages/buy.py
from __future__ import annotations

from typing import Any

from nicegui import ui

from uytop.common.localization import get_text
from uytop.core.identity.session import SessionContext
from uytop.core.listings.models import ListingFilters
from uytop.core.listings.service import ListingService
from uytop.core.regions.repository import RegionRepository
from uytop.web.components.filter_panel import FilterPanel
from uytop.web.components.listing_feed import ListingFeed


class BuyPage:
    """Объявления о продаже. Тип сделки не выбирается."""

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
        self.feed = ListingFeed(listings.buy, self.lang, split_promoted=False)

    def _t(self, key: str, **kwargs: Any) -> str:
        return get_text(key, self.lang, **kwargs)

    async def mount(self) -> None:
        panel = FilterPanel(
            self.lang,
            await self.regions.list_all(),
            on_apply=self.apply_filters,
            show_listing_type=False,
        )

        with ui.row().classes("w-full items-center justify-between bg-white border-b border-slate-200 px-4 py-4"):
            ui.label(self._t("buy_title")).classes("text-2xl font-bold text-slate-800")
            ui.button(self._t("filters_title"), icon="tune", on_click=lambda: panel.open(self.filters)).props(
                "flat dense"
            )

        with ui.column().classes("w-full p-4 gap-4"):
            self.feed.render_container()

        await self.feed.load(self.filters)

    async def apply_filters(self, filters: ListingFilters) -> None:
        self.filters = filters
        await self.feed.load(filters)
