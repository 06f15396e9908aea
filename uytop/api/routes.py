# uytop/api/routes.py
"""
JSON API мини-приложения.

Авторизация по заголовку X-Telegram-Init-Data (initData Telegram WebApp).
Без заголовка запрос выполняется как гостевой.

Endpoints:
- GET /health - статус сервиса
- GET /api/v1/listings - лента одобренных объявлений
- GET /api/v1/listings/buy - объявления о продаже
- GET /api/v1/listings/mine - объявления текущего пользователя
- POST /api/v1/listings/{listing_id}/images - загрузить фото
- GET /api/v1/regions - справочник регионов
- GET /api/v1/me - текущая сессия
- PATCH /api/v1/me - обновить профиль
- GET /api/v1/me/balance - баланс
"""

from __future__ import annotations

from typing import Annotated, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, File, Header, HTTPException, UploadFile
from pydantic import BaseModel, ValidationError

from uytop import __version__
from uytop.api.dependencies import (
    get_api_resolver,
    get_database,
    get_listing_service,
    get_profile_service,
    get_region_repository,
)
from uytop.common.constants import Language
from uytop.core.identity.host import InitDataHost
from uytop.core.identity.resolver import IdentityResolver
from uytop.core.identity.session import Session
from uytop.core.listings.models import ListingFilters, ListingImage, ListingSearchResult
from uytop.core.listings.service import ListingAccessError, ListingNotFoundError, ListingService
from uytop.core.profiles.models import Profile, ProfileUpdateDTO, UserBalance
from uytop.core.profiles.service import ProfileService
from uytop.core.regions.models import Region
from uytop.core.regions.repository import RegionRepository
from uytop.infra.database import DatabaseManager
from uytop.infra.image_host import ImageHostNotConfiguredError, ImageUploadError


router = APIRouter()


# === MODELS ===

class HealthStatus(BaseModel):
    """Статус здоровья сервиса."""
    service: str
    status: str = "healthy"  # healthy, degraded
    version: str | None = None
    dependencies: dict[str, str] = {}


class UpdateProfileRequest(BaseModel):
    """Запрос на обновление профиля."""
    first_name: str | None = None
    last_name: str | None = None
    phone_number: str | None = None
    language: Language | None = None
    region_id: UUID | str | None = None


# === AUTH DEPENDENCY ===

async def get_current_session(
    resolver: Annotated[IdentityResolver, Depends(get_api_resolver)],
    x_telegram_init_data: Annotated[str | None, Header(alias="X-Telegram-Init-Data")] = None,
) -> Session:
    """Сессия по initData из заголовка. Без заголовка гость."""
    return await resolver.resolve_current_user(InitDataHost(x_telegram_init_data))


async def require_profile(
    session: Annotated[Session, Depends(get_current_session)],
) -> Profile:
    """Профиль авторизованного пользователя, для гостя 401."""
    if session.is_guest or session.profile is None:
        reason = session.reason.value if session.reason else "unauthorized"
        raise HTTPException(status_code=401, detail=reason)
    return session.profile


async def get_listing_filters(
    property_type: Optional[str] = None,
    listing_type: Optional[str] = None,
    region_id: Optional[str] = None,
    min_price: Optional[str] = None,
    max_price: Optional[str] = None,
    rooms_count: Optional[str] = None,
    sort_by: Optional[str] = None,
) -> ListingFilters:
    """Фильтры ленты из query-параметров. Пустые значения не ограничивают выборку."""
    try:
        return ListingFilters(
            property_type=property_type,
            listing_type=listing_type,
            region_id=region_id,
            min_price=min_price,
            max_price=max_price,
            rooms_count=rooms_count,
            sort_by=sort_by,
        )
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=e.errors(include_url=False, include_context=False))


# === HEALTH CHECK ===

@router.get("/health", response_model=HealthStatus, tags=["Health"])
async def health_check(
    db: Annotated[DatabaseManager, Depends(get_database)],
) -> HealthStatus:
    """Проверка здоровья сервиса. Без БД сервис работает в демо-режиме."""
    db_ok = await db.health_check()
    return HealthStatus(
        service="uytop",
        status="healthy" if db_ok else "degraded",
        version=__version__,
        dependencies={"postgres": "healthy" if db_ok else "unavailable"},
    )


# === LISTINGS ===

@router.get("/api/v1/listings", response_model=ListingSearchResult, tags=["Listings"])
async def browse_listings(
    filters: Annotated[ListingFilters, Depends(get_listing_filters)],
    service: Annotated[ListingService, Depends(get_listing_service)],
) -> ListingSearchResult:
    """Лента одобренных объявлений. Ошибка хранилища возвращается в поле error."""
    return await service.browse(filters)


@router.get("/api/v1/listings/buy", response_model=ListingSearchResult, tags=["Listings"])
async def buy_listings(
    filters: Annotated[ListingFilters, Depends(get_listing_filters)],
    service: Annotated[ListingService, Depends(get_listing_service)],
) -> ListingSearchResult:
    """Одобренные объявления о продаже (тип сделки из фильтров игнорируется)."""
    return await service.buy(filters)


@router.get("/api/v1/listings/mine", response_model=ListingSearchResult, tags=["Listings"])
async def my_listings(
    profile: Annotated[Profile, Depends(require_profile)],
    service: Annotated[ListingService, Depends(get_listing_service)],
) -> ListingSearchResult:
    """Объявления текущего пользователя в любом статусе."""
    return await service.list_owned(profile.id)


@router.post(
    "/api/v1/listings/{listing_id}/images",
    response_model=ListingImage,
    status_code=201,
    tags=["Listings"],
)
async def upload_listing_image(
    listing_id: UUID,
    profile: Annotated[Profile, Depends(require_profile)],
    service: Annotated[ListingService, Depends(get_listing_service)],
    image: UploadFile = File(...),
) -> ListingImage:
    """Загрузить фото к своему объявлению."""
    content = await image.read()
    if not content:
        raise HTTPException(status_code=400, detail="Пустой файл")

    try:
        return await service.attach_image(
            listing_id,
            profile.id,
            content,
            image.filename or "image.jpg",
        )
    except ListingNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ListingAccessError as e:
        raise HTTPException(status_code=403, detail=str(e))
    except ImageHostNotConfiguredError as e:
        raise HTTPException(status_code=503, detail=str(e))
    except ImageUploadError as e:
        raise HTTPException(status_code=502, detail=str(e))


# === REGIONS ===

@router.get("/api/v1/regions", response_model=list[Region], tags=["Regions"])
async def list_regions(
    repository: Annotated[RegionRepository, Depends(get_region_repository)],
) -> list[Region]:
    """Регионы, упорядоченные по русскому названию."""
    return await repository.list_all()


# === PROFILE ===

@router.get("/api/v1/me", response_model=Session, tags=["Profile"])
async def get_me(
    session: Annotated[Session, Depends(get_current_session)],
) -> Session:
    """Текущая сессия: профиль либо гостевой режим с причиной."""
    return session


@router.patch("/api/v1/me", response_model=Profile, tags=["Profile"])
async def update_me(
    request: UpdateProfileRequest,
    profile: Annotated[Profile, Depends(require_profile)],
    service: Annotated[ProfileService, Depends(get_profile_service)],
) -> Profile:
    """Обновить профиль. Незаданные поля сохраняют текущие значения."""
    data = request.model_dump(exclude_unset=True)
    if not data:
        raise HTTPException(status_code=400, detail="Нет данных для обновления")

    current = {
        "first_name": profile.first_name,
        "last_name": profile.last_name,
        "phone_number": profile.phone_number,
        "language": profile.language,
        "region_id": profile.region_id,
    }
    if data.get("language") is None:
        data.pop("language", None)

    try:
        dto = ProfileUpdateDTO(**{**current, **data})
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=e.errors(include_url=False, include_context=False))

    updated = await service.save_profile(profile.id, dto)
    if updated is None:
        raise HTTPException(status_code=404, detail="Профиль не найден")
    return updated


@router.get("/api/v1/me/balance", response_model=UserBalance, tags=["Profile"])
async def get_my_balance(
    profile: Annotated[Profile, Depends(require_profile)],
    service: Annotated[ProfileService, Depends(get_profile_service)],
) -> UserBalance:
    """Баланс текущего пользователя."""
    balance = await service.get_balance(profile.id)
    if balance is None:
        raise HTTPException(status_code=404, detail="Баланс не найден")
    return balance
