from __future__ import annotations

from typing import Any, Optional

from nicegui import ui

from uytop.common.constants import Language
from uytop.common.localization import get_text
from uytop.common.logger import log_error, log_info
from uytop.core.identity.session import SessionContext
from uytop.core.profiles.models import Profile, ProfileUpdateDTO, UserBalance
from uytop.core.profiles.service import ProfileService
from uytop.core.regions.models import Region
from uytop.core.regions.repository import RegionRepository
from uytop.web.components.login_prompt import create_login_prompt

LANGUAGE_NAMES = {Language.RU.value: "Русский", Language.UZ.value: "O'zbekcha"}


def profile_form_values(profile: Profile) -> dict[str, Any]:
    """Значения формы редактирования из профиля."""
    return {
        "first_name": profile.first_name or "",
        "last_name": profile.last_name or "",
        "phone_number": profile.phone_number or "",
        "language": profile.language.value,
        "region_id": str(profile.region_id) if profile.region_id else "",
    }


def update_dto_from_form(values: dict[str, Any]) -> ProfileUpdateDTO:
    """DTO правок: пустые строки сохраняются как NULL."""
    return ProfileUpdateDTO(
        first_name=values.get("first_name") or None,
        last_name=values.get("last_name") or None,
        phone_number=values.get("phone_number") or None,
        language=values.get("language") or Language.RU,
        region_id=values.get("region_id") or None,
    )


class ProfilePage:
    """Профиль: данные пользователя, редактирование, баланс и выход."""

    def __init__(
        self,
        context: SessionContext,
        profiles: ProfileService,
        regions: RegionRepository,
    ) -> None:
        self.context = context
        self.profiles = profiles
        self.regions_repo = regions
        self.lang = context.current.language
        self.regions: list[Region] = []
        self.balance: Optional[UserBalance] = None
        self.editing = False
        self.form: dict[str, Any] = {}
        self.content: ui.column | None = None

    def _t(self, key: str, **kwargs: Any) -> str:
        return get_text(key, self.lang, **kwargs)

    async def mount(self) -> None:
        profile = self.context.current.profile
        if self.context.current.is_guest or profile is None:
            await create_login_prompt(self.context, self.lang)
            return

        self.regions = await self.regions_repo.list_all()
        try:
            self.balance = await self.profiles.get_balance(profile.id)
        except Exception as e:
            await log_error(f"Ошибка получения баланса {profile.telegram_id}: {e}")
            self.balance = None

        self.content = ui.column().classes("w-full p-4 gap-4")
        self._render()

    def _region_name(self, profile: Profile) -> str:
        for region in self.regions:
            if region.id == profile.region_id:
                return region.localized_name(self.lang)
        return self._t("region_not_set")

    def _render(self) -> None:
        profile = self.context.current.profile
        if self.content is None or profile is None:
            return
        self.content.clear()

        with self.content:
            with ui.row().classes("w-full items-center justify-between"):
                ui.label(self._t("profile_title")).classes("text-2xl font-bold text-slate-800")
                if not self.editing:
                    ui.button(self._t("edit"), icon="edit", on_click=self._start_edit).props("flat dense")

            with ui.card().classes("w-full p-4"):
                with ui.row().classes("items-center gap-4"):
                    ui.avatar(profile.avatar_letter, color="primary", text_color="white")
                    with ui.column().classes("gap-0"):
                        ui.label(profile.display_name).classes("text-lg font-medium")
                        if profile.telegram_username:
                            ui.label(f"@{profile.telegram_username}").classes("text-slate-500 text-sm")

            if self.editing:
                self._render_form()
            else:
                self._render_details(profile)

            self._render_balance()

            ui.button(self._t("logout"), icon="logout", on_click=self._logout).props("outline color=red").classes(
                "w-full"
            )

    def _render_details(self, profile: Profile) -> None:
        with ui.card().classes("w-full p-4"):
            with ui.grid(columns=2).classes("w-full gap-2"):
                ui.label(self._t("profile_phone")).classes("text-slate-600")
                ui.label(profile.phone_number or "-")
                ui.label(self._t("profile_language")).classes("text-slate-600")
                ui.label(LANGUAGE_NAMES.get(profile.language.value, profile.language.value))
                ui.label(self._t("profile_region")).classes("text-slate-600")
                ui.label(self._region_name(profile))

    def _render_form(self) -> None:
        region_options = {"": self._t("region_not_set")}
        region_options.update({str(region.id): region.localized_name(self.lang) for region in self.regions})

        with ui.card().classes("w-full p-4 gap-3"):
            ui.input(self._t("profile_first_name")).classes("w-full").bind_value(self.form, "first_name")
            ui.input(self._t("profile_last_name")).classes("w-full").bind_value(self.form, "last_name")
            ui.input(self._t("profile_phone")).classes("w-full").bind_value(self.form, "phone_number")
            ui.select(LANGUAGE_NAMES, label=self._t("profile_language")).classes("w-full").bind_value(
                self.form, "language"
            )
            ui.select(region_options, label=self._t("profile_region")).classes("w-full").bind_value(
                self.form, "region_id"
            )
            with ui.row().classes("w-full no-wrap gap-2"):
                ui.button(self._t("cancel"), on_click=self._cancel_edit).props("outline").classes("flex-1")
                ui.button(self._t("save"), on_click=self._save).classes("flex-1")

    def _render_balance(self) -> None:
        balance = self.balance.balance if self.balance else 0
        total_spent = self.balance.total_spent if self.balance else 0

        with ui.card().classes("w-full p-4 bg-blue-600 text-white"):
            ui.label(self._t("balance")).classes("text-sm opacity-80")
            ui.label(f"{balance} {self._t('points')}").classes("text-3xl font-bold")
            ui.label(f"{self._t('total_spent')}: {total_spent} {self._t('points')}").classes("text-sm opacity-80")

    def _start_edit(self) -> None:
        profile = self.context.current.profile
        if profile is None:
            return
        self.form = profile_form_values(profile)
        self.editing = True
        self._render()

    def _cancel_edit(self) -> None:
        self.editing = False
        self._render()

    async def _save(self) -> None:
        profile = self.context.current.profile
        if profile is None:
            return

        try:
            updated = await self.profiles.save_profile(profile.id, update_dto_from_form(self.form))
        except Exception as e:
            await log_error(f"Ошибка сохранения профиля {profile.telegram_id}: {e}")
            updated = None

        if updated is None:
            ui.notify(self._t("profile_save_failed"), type="negative")
            return

        language_changed = updated.language != profile.language
        self.context.update_profile(updated)
        self.editing = False
        ui.notify(get_text("profile_saved", updated.language.value), type="positive")
        await log_info(f"Профиль {updated.telegram_id} сохранён из веб-интерфейса")

        if language_changed:
            ui.navigate.reload()
            return
        self._render()

    def _logout(self) -> None:
        self.context.sign_out()
        ui.navigate.to("/")
