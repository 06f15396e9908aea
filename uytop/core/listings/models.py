# uytop/core/listings/models.py
"""
Модели объявлений, изображений и фильтров ленты.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from uytop.common.constants import ListingStatus, ListingType, PropertyType, SortMode
from uytop.core.profiles.models import Profile
from uytop.core.regions.models import Region


class ListingImage(BaseModel):
    """Изображение объявления."""

    id: UUID
    listing_id: UUID
    image_url: str = Field(..., description="Публичный URL изображения")
    display_order: int = Field(0, description="Порядок показа")
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class Listing(BaseModel):
    """Объявление о продаже или аренде недвижимости."""

    id: UUID
    user_id: UUID = Field(..., description="Владелец объявления")
    title: str
    description: Optional[str] = None

    property_type: PropertyType
    listing_type: ListingType
    price: Decimal = Field(..., ge=0)

    # Параметры объекта
    area_sqm: Optional[Decimal] = None
    area_sotka: Optional[Decimal] = None
    rooms_count: Optional[int] = None

    # Локация
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    address: Optional[str] = None
    region_id: Optional[UUID] = None

    # Модерация и продвижение
    status: ListingStatus = ListingStatus.PENDING
    view_count: int = 0
    like_count: int = 0
    is_promoted: bool = False
    promoted_until: Optional[datetime] = None

    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    # Связанные сущности
    images: list[ListingImage] = Field(default_factory=list)
    region: Optional[Region] = None
    profile: Optional[Profile] = None

    class Config:
        from_attributes = True

    @property
    def thumbnail_url(self) -> Optional[str]:
        """Первое изображение по display_order."""
        if not self.images:
            return None
        return min(self.images, key=lambda image: image.display_order).image_url

    @property
    def is_sale(self) -> bool:
        return self.listing_type == ListingType.SALE


class ListingFilters(BaseModel):
    """
    Выбор пользователя в панели фильтров.

    Незаполненные значения (None, пустая строка, 0) не ограничивают выборку.
    """

    property_type: Optional[PropertyType] = None
    listing_type: Optional[ListingType] = None
    region_id: Optional[UUID] = None
    min_price: Optional[Decimal] = None
    max_price: Optional[Decimal] = None
    rooms_count: Optional[int] = None
    sort_by: Optional[SortMode] = None

    @field_validator(
        "property_type", "listing_type", "region_id", "min_price",
        "max_price", "rooms_count", "sort_by",
        mode="before",
    )
    @classmethod
    def empty_to_none(cls, v: object) -> object:
        if v == "":
            return None
        return v


class ListingSearchResult(BaseModel):
    """Результат выборки: объявления либо причина ошибки."""

    items: list[Listing] = Field(default_factory=list)
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def promoted(self) -> list[Listing]:
        return [listing for listing in self.items if listing.is_promoted]

    @property
    def regular(self) -> list[Listing]:
        return [listing for listing in self.items if not listing.is_promoted]
