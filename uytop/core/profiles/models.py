# uytop/core/profiles/models.py
"""
Модели профилей пользователей и балансов.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from uytop.common.constants import Language
from uytop.core.regions.models import Region


class Profile(BaseModel):
    """Профиль пользователя, привязанный к Telegram ID."""

    id: UUID
    telegram_id: int = Field(..., description="Telegram ID пользователя")
    telegram_username: Optional[str] = Field(None, description="Username в Telegram")
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone_number: Optional[str] = None
    language: Language = Field(Language.RU, description="Язык интерфейса")
    region_id: Optional[UUID] = None
    is_admin: bool = False
    last_seen: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    region: Optional[Region] = None

    class Config:
        from_attributes = True

    @property
    def full_name(self) -> str:
        """Полное имя пользователя."""
        return " ".join(part for part in (self.first_name, self.last_name) if part)

    @property
    def display_name(self) -> str:
        """Отображаемое имя (имя или @username)."""
        if self.full_name:
            return self.full_name
        if self.telegram_username:
            return f"@{self.telegram_username}"
        return str(self.telegram_id)

    @property
    def avatar_letter(self) -> str:
        """Буква для аватара-заглушки."""
        source = self.first_name or self.telegram_username or "U"
        return source[0].upper()


class ProfileSyncDTO(BaseModel):
    """Данные Telegram для создания/обновления профиля при входе."""

    telegram_id: int
    username: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None


class ProfileUpdateDTO(BaseModel):
    """Редактируемые пользователем поля профиля."""

    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone_number: Optional[str] = None
    language: Language = Language.RU
    region_id: Optional[UUID] = None

    @field_validator("region_id", mode="before")
    @classmethod
    def empty_region_to_none(cls, v: object) -> object:
        """Пустой выбор региона сохраняется как NULL."""
        if v == "":
            return None
        return v


class UserBalance(BaseModel):
    """Баланс пользователя (только отображение)."""

    id: UUID
    user_id: UUID
    balance: Decimal = Decimal("0")
    total_spent: Decimal = Decimal("0")
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
