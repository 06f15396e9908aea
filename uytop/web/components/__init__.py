# uytop/web/components/__init__.py
"""
UI компоненты мини-приложения.
"""

from uytop.web.components.bottom_nav import create_bottom_nav
from uytop.web.components.filter_panel import FilterPanel, filters_from_form
from uytop.web.components.listing_card import create_listing_card
from uytop.web.components.listing_feed import ListingFeed
from uytop.web.components.login_prompt import create_login_prompt

__all__ = [
    "create_bottom_nav",
    "FilterPanel",
    "filters_from_form",
    "create_listing_card",
    "ListingFeed",
    "create_login_prompt",
]
