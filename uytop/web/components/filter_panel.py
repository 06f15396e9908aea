# uytop/web/components/filter_panel.py
"""
Панель фильтров ленты объявлений.
"""

from __future__ import annotations

from typing import Any, Awaitable, Callable

from nicegui import ui

from uytop.common.constants import ListingType, PropertyType, SortMode
from uytop.common.localization import get_text, listing_type_label, property_type_label
from uytop.core.listings.models import ListingFilters
from uytop.core.regions.models import Region

ROOM_CHOICES = (1, 2, 3, 4)


def filters_from_form(values: dict[str, Any]) -> ListingFilters:
    """
    Фильтры из значений формы.
    Пустые поля и нули становятся «без ограничения».
    """
    cleaned = {key: (value if value not in ("", 0) else None) for key, value in values.items()}
    return ListingFilters(**cleaned)


class FilterPanel:
    """Диалог с полным набором фильтров."""

    def __init__(
        self,
        lang: str,
        regions: list[Region],
        on_apply: Callable[[ListingFilters], Awaitable[Any]],
        show_listing_type: bool = True,
    ) -> None:
        self.lang = lang
        self.regions = regions
        self.on_apply = on_apply
        self.show_listing_type = show_listing_type
        self.values: dict[str, Any] = {}
        self.dialog: ui.dialog | None = None

    def _t(self, key: str, **kwargs: Any) -> str:
        return get_text(key, self.lang, **kwargs)

    def _property_options(self) -> dict[str, str]:
        options = {"": self._t("filter_all")}
        options.update({item.value: property_type_label(item.value, self.lang) for item in PropertyType})
        return options

    def _listing_type_options(self) -> dict[str, str]:
        options = {"": self._t("filter_all")}
        options.update({item.value: listing_type_label(item.value, self.lang) for item in ListingType})
        return options

    def _region_options(self) -> dict[str, str]:
        options = {"": self._t("filter_all_regions")}
        options.update({str(region.id): region.localized_name(self.lang) for region in self.regions})
        return options

    def _sort_options(self) -> dict[str, str]:
        return {
            "": self._t("sort_default"),
            SortMode.DATE_DESC.value: self._t("sort_date_desc"),
            SortMode.PRICE_ASC.value: self._t("sort_price_asc"),
            SortMode.PRICE_DESC.value: self._t("sort_price_desc"),
            SortMode.POPULARITY.value: self._t("sort_popularity"),
        }

    def set_filters(self, filters: ListingFilters) -> None:
        """Заполняет форму текущим выбором."""
        data = filters.model_dump(mode="json")
        self.values = {key: ("" if value is None else value) for key, value in data.items()}
        for key in ("min_price", "max_price", "rooms_count"):
            if self.values.get(key) == "":
                self.values[key] = None

    def open(self, filters: ListingFilters) -> None:
        self.set_filters(filters)
        self._build()
        if self.dialog is not None:
            self.dialog.open()

    def _build(self) -> None:
        if self.dialog is not None:
            self.dialog.clear()
            container = self.dialog
        else:
            self.dialog = container = ui.dialog().props("position=bottom")

        with container, ui.card().classes("w-full gap-4 p-4"):
            with ui.row().classes("w-full items-center justify-between"):
                ui.label(self._t("filters_title")).classes("text-lg font-semibold")
                ui.button(icon="close", on_click=container.close).props("flat round dense")

            ui.select(self._property_options(), label=self._t("filter_property_type")).classes("w-full").bind_value(
                self.values, "property_type"
            )
            if self.show_listing_type:
                ui.select(self._listing_type_options(), label=self._t("filter_listing_type")).classes(
                    "w-full"
                ).bind_value(self.values, "listing_type")

            ui.select(self._region_options(), label=self._t("filter_region")).classes("w-full").bind_value(
                self.values, "region_id"
            )

            with ui.row().classes("w-full no-wrap gap-2"):
                ui.number(self._t("filter_min_price"), min=0).classes("flex-1").bind_value(self.values, "min_price")
                ui.number(self._t("filter_max_price"), min=0).classes("flex-1").bind_value(self.values, "max_price")

            ui.label(self._t("filter_rooms")).classes("text-sm text-slate-600")
            ui.toggle(list(ROOM_CHOICES), clearable=True).bind_value(self.values, "rooms_count")

            ui.select(self._sort_options(), label=self._t("filter_sort")).classes("w-full").bind_value(
                self.values, "sort_by"
            )

            with ui.row().classes("w-full no-wrap gap-2"):
                ui.button(self._t("reset"), on_click=self._reset).props("outline").classes("flex-1")
                ui.button(self._t("apply"), on_click=self._apply).classes("flex-1")

    async def _apply(self) -> None:
        if self.dialog is not None:
            self.dialog.close()
        await self.on_apply(filters_from_form(self.values))

    async def _reset(self) -> None:
        if self.dialog is not None:
            self.dialog.close()
        await self.on_apply(ListingFilters())
