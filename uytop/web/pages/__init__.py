# uytop/web/pages/__init__.py
"""
Экраны мини-приложения.
"""

from uytop.web.pages.admin import AdminPage
from uytop.web.pages.buy import BuyPage
from uytop.web.pages.home import HomePage
from uytop.web.pages.profile import ProfilePage
from uytop.web.pages.sell import SellPage

__all__ = ["AdminPage", "BuyPage", "HomePage", "ProfilePage", "SellPage"]
