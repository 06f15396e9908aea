# uytop/web/pages/sell.py
from __future__ import annotations

from typing import Any
from uuid import UUID

from nicegui import events, ui

from uytop.common.constants import ListingStatus
from uytop.common.localization import get_text
from uytop.common.logger import log_error
from uytop.core.identity.session import SessionContext
from uytop.core.listings.models import Listing
from uytop.core.listings.service import ListingAccessError, ListingNotFoundError, ListingService
from uytop.infra.image_host import ImageHostNotConfiguredError, ImageUploadError
from uytop.web.components.listing_card import create_listing_card
from uytop.web.components.login_prompt import create_login_prompt

STATUS_COLORS = {
    ListingStatus.PENDING: "orange",
    ListingStatus.APPROVED: "green",
    ListingStatus.REJECTED: "red",
}


class SellPage:
    """Объявления продавца и загрузка фотографий."""

    def __init__(self, context: SessionContext, listings: ListingService) -> None:
        self.context = context
        self.listings = listings
        self.lang = context.current.language
        self.content: ui.column | None = None

    def _t(self, key: str, **kwargs: Any) -> str:
        return get_text(key, self.lang, **kwargs)

    async def mount(self) -> None:
        session = self.context.current
        if session.is_guest or session.profile is None:
            await create_login_prompt(self.context, self.lang)
            return

        with ui.row().classes("w-full items-center justify-between bg-white border-b border-slate-200 px-4 py-4"):
            ui.label(self._t("sell_title")).classes("text-2xl font-bold text-slate-800")

        self.content = ui.column().classes("w-full p-4 gap-4")
        await self.refresh()

    async def refresh(self) -> None:
        profile = self.context.current.profile
        if self.content is None or profile is None:
            return

        result = await self.listings.list_owned(profile.id)
        self.content.clear()

        with self.content:
            if result.error == "store_error":
                ui.label(self._t("loading_error")).classes("text-red-600 text-sm")

            if not result.items:
                ui.label(self._t("sell_empty")).classes("w-full text-center text-slate-600 py-12")
                return

            for listing in result.items:
                self._render_listing(listing)

    def _render_listing(self, listing: Listing) -> None:
        with ui.column().classes("w-full gap-2"):
            create_listing_card(listing, self.lang)
            with ui.row().classes("w-full items-center justify-between"):
                ui.badge(self._t(f"status_{listing.status.value}"), color=STATUS_COLORS[listing.status])
                ui.upload(
                    label=self._t("sell_add_photo"),
                    auto_upload=True,
                    max_files=1,
                    on_upload=lambda e, listing_id=listing.id: self.upload_photo(listing_id, e),
                ).props("accept=image/* flat dense").classes("max-w-xs")

    async def upload_photo(self, listing_id: UUID, event: events.UploadEventArguments) -> None:
        profile = self.context.current.profile
        if profile is None:
            return

        try:
            await self.listings.attach_image(listing_id, profile.id, event.content.read(), event.name)
        except (ListingNotFoundError, ListingAccessError, ImageHostNotConfiguredError, ImageUploadError) as e:
            await log_error(f"Фото к объявлению {listing_id} не загружено: {e}")
            ui.notify(self._t("photo_upload_failed"), type="negative")
            return

        ui.notify(self._t("photo_uploaded"), type="positive")
        await self.refresh()
