# uytop/api/dependencies.py
"""
Dependency Injection для JSON API и страниц.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from uytop.core.identity.resolver import IdentityResolver
    from uytop.core.listings.service import ListingService
    from uytop.core.profiles.service import ProfileService
    from uytop.core.regions.repository import RegionRepository
    from uytop.infra.database import DatabaseManager
    from uytop.infra.image_host import ImageHostClient


# Синглтоны
_db: "DatabaseManager | None" = None
_image_host: "ImageHostClient | None" = None
_profile_service: "ProfileService | None" = None
_listing_service: "ListingService | None" = None
_region_repository: "RegionRepository | None" = None
_web_resolver: "IdentityResolver | None" = None
_api_resolver: "IdentityResolver | None" = None


async def init_dependencies(db: "DatabaseManager") -> None:
    """Инициализировать зависимости при старте приложения."""
    global _db, _image_host, _profile_service, _listing_service
    global _region_repository, _web_resolver, _api_resolver

    from uytop.config import settings
    from uytop.core.identity.resolver import IdentityResolver
    from uytop.core.listings.service import ListingService
    from uytop.core.profiles.service import ProfileService
    from uytop.core.regions.repository import RegionRepository
    from uytop.infra.image_host import ImageHostClient

    _db = db
    _image_host = ImageHostClient(
        api_key=settings.image_host.IMGBB_API_KEY,
        upload_url=settings.image_host.IMGBB_UPLOAD_URL,
        timeout=settings.image_host.IMGBB_TIMEOUT,
    )
    _profile_service = ProfileService(db)
    _listing_service = ListingService(db, image_host=_image_host, page_size=settings.listings.PAGE_SIZE)
    _region_repository = RegionRepository(db)

    telegram = settings.telegram
    # Страницы ждут инициализации WebApp на клиенте, API получает initData сразу в заголовке
    _web_resolver = IdentityResolver(
        _profile_service,
        bot_token=telegram.BOT_TOKEN,
        verify_signature=telegram.VERIFY_INIT_DATA,
        max_age_seconds=telegram.INIT_DATA_MAX_AGE,
        grace_period=telegram.HOST_GRACE_PERIOD,
    )
    _api_resolver = IdentityResolver(
        _profile_service,
        bot_token=telegram.BOT_TOKEN,
        verify_signature=telegram.VERIFY_INIT_DATA,
        max_age_seconds=telegram.INIT_DATA_MAX_AGE,
        grace_period=0,
    )


def get_database() -> "DatabaseManager":
    if _db is None:
        raise RuntimeError("DatabaseManager не инициализирован. Вызовите init_dependencies()")
    return _db


def get_profile_service() -> "ProfileService":
    """Получить сервис профилей."""
    if _profile_service is None:
        raise RuntimeError("ProfileService не инициализирован. Вызовите init_dependencies()")
    return _profile_service


def get_listing_service() -> "ListingService":
    """Получить сервис объявлений."""
    if _listing_service is None:
        raise RuntimeError("ListingService не инициализирован. Вызовите init_dependencies()")
    return _listing_service


def get_region_repository() -> "RegionRepository":
    """Получить справочник регионов."""
    if _region_repository is None:
        raise RuntimeError("RegionRepository не инициализирован. Вызовите init_dependencies()")
    return _region_repository


def get_web_resolver() -> "IdentityResolver":
    """Resolver для страниц NiceGUI (с паузой на инициализацию WebApp)."""
    if _web_resolver is None:
        raise RuntimeError("IdentityResolver не инициализирован. Вызовите init_dependencies()")
    return _web_resolver


def get_api_resolver() -> "IdentityResolver":
    """Resolver для JSON API (initData из заголовка, без паузы)."""
    if _api_resolver is None:
        raise RuntimeError("IdentityResolver не инициализирован. Вызовите init_dependencies()")
    return _api_resolver


async def cleanup_dependencies() -> None:
    """Очистить ресурсы при остановке приложения."""
    global _image_host, _profile_service, _listing_service
    global _region_repository, _web_resolver, _api_resolver

    if _image_host is not None:
        await _image_host.close()
        _image_host = None

    _profile_service = None
    _listing_service = None
    _region_repository = None
    _web_resolver = None
    _api_resolver = None
