# uytop/core/regions/__init__.py
"""
Справочник регионов.
"""

from uytop.core.regions.models import Region
from uytop.core.regions.repository import RegionRepository

__all__ = ["Region", "RegionRepository"]
