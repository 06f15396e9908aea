# uytop/core/identity/host.py
"""
Абстракция хоста Telegram WebApp.

Хост сообщает, открыто ли приложение внутри Telegram, принимает
служебные вызовы (ready, expand, цвета темы) и отдаёт данные сессии.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Optional

from pydantic import BaseModel


class HostSession(BaseModel):
    """Данные сессии, которые отдаёт Telegram WebApp."""

    # Строка initData (query string, подписана ботом)
    init_data: str = ""
    # Объект initDataUnsafe.user, может отсутствовать или быть любым JSON
    unsafe_user: Optional[Any] = None


class TelegramHost(ABC):
    """Хост, в котором запущено мини-приложение."""

    @abstractmethod
    async def is_embedded(self) -> bool:
        """Открыто ли приложение внутри Telegram."""

    @abstractmethod
    async def prepare(self) -> None:
        """
        ready, expand и цвета заголовка/фона.
        Ошибки не критичны, вызывающий код их логирует и продолжает.
        """

    @abstractmethod
    async def read_session(self) -> HostSession:
        """Текущие данные сессии."""


class InitDataHost(TelegramHost):
    """
    Хост для JSON API: initData приходит в заголовке X-Telegram-Init-Data.
    Служебные вызовы клиенту не нужны.
    """

    def __init__(self, init_data: str | None) -> None:
        self._init_data = init_data or ""

    async def is_embedded(self) -> bool:
        return bool(self._init_data)

    async def prepare(self) -> None:
        return None

    async def read_session(self) -> HostSession:
        return HostSession(init_data=self._init_data)
