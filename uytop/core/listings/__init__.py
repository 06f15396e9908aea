# uytop/core/listings/__init__.py
"""
Домен объявлений.
"""

from uytop.core.listings.models import Listing, ListingFilters, ListingImage, ListingSearchResult
from uytop.core.listings.query import ListingQuery, build_listing_query, build_owner_query
from uytop.core.listings.repository import ListingRepository
from uytop.core.listings.service import ListingAccessError, ListingNotFoundError, ListingService

__all__ = [
    "Listing",
    "ListingFilters",
    "ListingImage",
    "ListingSearchResult",
    "ListingQuery",
    "build_listing_query",
    "build_owner_query",
    "ListingRepository",
    "ListingService",
    "ListingNotFoundError",
    "ListingAccessError",
]
