"""
Модель региона.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field


class Region(BaseModel):
    """Регион (справочник, только чтение)."""

    id: UUID
    name_ru: str = Field(..., description="Название на русском")
    name_uz: str = Field(..., description="Название на узбекском")
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True

    def localized_name(self, lang: str) -> str:
        """Название на языке пользователя."""
        return self.name_uz if lang == "uz" else self.name_ru
