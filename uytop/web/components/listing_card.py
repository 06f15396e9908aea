# uytop/web/components/listing_card.py
"""
Карточка объявления.
"""

from __future__ import annotations

from nicegui import ui

from uytop.common.localization import format_price, get_text, listing_type_label, property_type_label
from uytop.core.listings.models import Listing


def create_listing_card(listing: Listing, lang: str, promoted: bool = False) -> ui.card:
    """Карточка с фото, ценой, типом и регионом."""
    border = "border-orange-200 ring-2 ring-orange-100" if promoted else "border-slate-200"

    with ui.card().tight().classes(f"w-full border {border}") as card:
        with ui.element("div").classes("relative w-full h-48 bg-slate-200"):
            if listing.thumbnail_url:
                ui.image(listing.thumbnail_url).classes("w-full h-full object-cover")
            else:
                with ui.row().classes("w-full h-full items-center justify-center"):
                    ui.icon("home_work").classes("text-5xl text-slate-400")

            if promoted:
                ui.label(get_text("promoted_badge", lang)).classes(
                    "absolute top-2 left-2 bg-orange-500 text-white px-2 py-1 rounded-lg text-xs font-semibold"
                )

            ui.label(listing_type_label(listing.listing_type.value, lang)).classes(
                "absolute top-2 right-2 bg-white px-2 py-1 rounded-lg text-xs font-medium text-slate-700"
            )

        with ui.column().classes("w-full p-4 gap-2"):
            with ui.row().classes("w-full items-start justify-between no-wrap"):
                ui.label(listing.title).classes("font-semibold text-slate-800 text-sm")
                ui.label(f"{format_price(listing.price)} {get_text('currency', lang)}").classes(
                    "text-lg font-bold text-blue-600 whitespace-nowrap"
                )

            with ui.row().classes("gap-2"):
                ui.badge(property_type_label(listing.property_type.value, lang), color="grey-3", text_color="grey-8")
                if listing.rooms_count:
                    ui.badge(get_text("rooms_short", lang, rooms=listing.rooms_count), color="grey-3", text_color="grey-8")

            with ui.row().classes("w-full items-center justify-between text-xs text-slate-500"):
                if listing.region:
                    with ui.row().classes("items-center gap-1"):
                        ui.icon("place")
                        ui.label(listing.region.localized_name(lang))
                with ui.row().classes("items-center gap-3"):
                    with ui.row().classes("items-center gap-1"):
                        ui.icon("visibility")
                        ui.label(str(listing.view_count))
                    with ui.row().classes("items-center gap-1"):
                        ui.icon("favorite_border")
                        ui.label(str(listing.like_count))

    return card
