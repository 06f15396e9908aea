# uytop/core/listings/service.py
"""
Сервис объявлений.
Лента, экран покупки, объявления продавца и загрузка фотографий.
"""

from __future__ import annotations

from uuid import UUID

from uytop.common.constants import DEFAULT_PAGE_SIZE, ListingSurface, TypeMsg
from uytop.common.logger import log_error, log_info
from uytop.core.listings.models import Listing, ListingFilters, ListingImage, ListingSearchResult
from uytop.core.listings.query import build_listing_query, build_owner_query
from uytop.core.listings.repository import ListingRepository
from uytop.infra.database import DatabaseManager
from uytop.infra.image_host import ImageHostClient, ImageHostNotConfiguredError


class ListingNotFoundError(LookupError):
    """Объявление не найдено."""
    pass


class ListingAccessError(PermissionError):
    """Объявление принадлежит другому пользователю."""
    pass


class ListingService:
    """Сервис объявлений."""

    def __init__(
        self,
        db: DatabaseManager,
        image_host: ImageHostClient | None = None,
        repository: ListingRepository | None = None,
        page_size: int = DEFAULT_PAGE_SIZE,
    ) -> None:
        self._db = db
        self._image_host = image_host
        self._repo = repository or ListingRepository(db)
        self._page_size = page_size

    @property
    def is_available(self) -> bool:
        return self._db.is_available

    async def browse(self, filters: ListingFilters) -> ListingSearchResult:
        """Лента одобренных объявлений по фильтрам."""
        return await self._search(filters, ListingSurface.BROWSE)

    async def buy(self, filters: ListingFilters) -> ListingSearchResult:
        """Одобренные объявления о продаже."""
        return await self._search(filters, ListingSurface.BUY)

    async def _search(self, filters: ListingFilters, surface: ListingSurface) -> ListingSearchResult:
        """
        Выполняет выборку. Не выбрасывает исключений:
        при ошибке возвращает пустой список с причиной.
        """
        if not self._db.is_available:
            return ListingSearchResult(error="store_unavailable")

        query = build_listing_query(filters, surface, self._page_size)

        try:
            items = await self._repo.search(query)
        except Exception as e:
            await log_error(f"Ошибка выборки объявлений ({surface.value}): {e}")
            return ListingSearchResult(error="store_error")

        return ListingSearchResult(items=items)

    async def list_owned(self, owner_id: UUID) -> ListingSearchResult:
        """Объявления продавца в любом статусе."""
        if not self._db.is_available:
            return ListingSearchResult(error="store_unavailable")

        try:
            items = await self._repo.search(build_owner_query(owner_id, self._page_size))
        except Exception as e:
            await log_error(f"Ошибка получения объявлений владельца {owner_id}: {e}")
            return ListingSearchResult(error="store_error")

        return ListingSearchResult(items=items)

    async def attach_image(
        self,
        listing_id: UUID,
        owner_id: UUID,
        content: bytes,
        filename: str = "image.jpg",
    ) -> ListingImage:
        """
        Загружает фото на хостинг и добавляет его в галерею объявления.

        Raises:
            ListingNotFoundError: Объявление не найдено
            ListingAccessError: Объявление принадлежит другому пользователю
            ImageHostNotConfiguredError: Не задан ключ хостинга
            ImageUploadError: Хостинг не принял изображение
        """
        listing = await self._get_owned(listing_id, owner_id)

        if self._image_host is None:
            raise ImageHostNotConfiguredError("ImgBB API key not configured")

        url = await self._image_host.upload(content, filename)
        image = await self._repo.add_image(listing.id, url)

        await log_info(
            f"К объявлению {listing.id} добавлено фото #{image.display_order}",
            type_msg=TypeMsg.INFO,
        )
        return image

    async def _get_owned(self, listing_id: UUID, owner_id: UUID) -> Listing:
        listing = await self._repo.get_by_id(listing_id)
        if listing is None:
            raise ListingNotFoundError(f"Listing {listing_id} not found")
        if listing.user_id != owner_id:
            raise ListingAccessError(f"Listing {listing_id} belongs to another user")
        return listing
