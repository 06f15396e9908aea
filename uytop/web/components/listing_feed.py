# uytop/web/components/listing_feed.py
"""
Лента объявлений с защитой от устаревших ответов.
"""

from __future__ import annotations

from typing import Awaitable, Callable

from nicegui import ui

from uytop.common.localization import get_text
from uytop.core.listings.models import ListingFilters, ListingSearchResult
from uytop.web.components.listing_card import create_listing_card


class ListingFeed:
    """
    Контейнер ленты.

    Каждая загрузка получает номер поколения; ответ отрисовывается,
    только если за время запроса не была начата более новая загрузка.
    """

    def __init__(
        self,
        fetch: Callable[[ListingFilters], Awaitable[ListingSearchResult]],
        lang: str,
        split_promoted: bool = True,
    ) -> None:
        self.fetch = fetch
        self.lang = lang
        self.split_promoted = split_promoted
        self.generation = 0
        self.container: ui.column | None = None

    def render_container(self) -> None:
        self.container = ui.column().classes("w-full gap-4")

    async def load(self, filters: ListingFilters) -> bool:
        """
        Загружает и отрисовывает ленту.

        Returns:
            False, если ответ устарел и был отброшен
        """
        self.generation += 1
        generation = self.generation

        self.show_loading()
        result = await self.fetch(filters)

        if generation != self.generation:
            return False

        self.render(result)
        return True

    def show_loading(self) -> None:
        if self.container is None:
            return
        self.container.clear()
        with self.container:
            with ui.row().classes("w-full justify-center py-12"):
                ui.spinner(size="lg")

    def render(self, result: ListingSearchResult) -> None:
        if self.container is None:
            return
        self.container.clear()

        with self.container:
            if result.error == "store_error":
                ui.label(get_text("loading_error", self.lang)).classes("text-red-600 text-sm")

            if not result.items:
                ui.label(get_text("listings_empty", self.lang)).classes("w-full text-center text-slate-600 py-12")
                return

            if not self.split_promoted:
                for listing in result.items:
                    create_listing_card(listing, self.lang)
                return

            if result.promoted:
                with ui.row().classes("items-center gap-2"):
                    ui.icon("star").classes("text-orange-500")
                    ui.label(get_text("promoted_title", self.lang)).classes("text-lg font-semibold text-slate-800")
                for listing in result.promoted:
                    create_listing_card(listing, self.lang, promoted=True)

            for listing in result.regular:
                create_listing_card(listing, self.lang)
