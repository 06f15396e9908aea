# uytop/core/profiles/__init__.py
"""
Домен профилей пользователей.
"""

from uytop.core.profiles.models import Profile, ProfileSyncDTO, ProfileUpdateDTO, UserBalance
from uytop.core.profiles.repository import BalanceRepository, ProfileRepository
from uytop.core.profiles.service import ProfileService

__all__ = [
    "Profile",
    "ProfileSyncDTO",
    "ProfileUpdateDTO",
    "UserBalance",
    "ProfileRepository",
    "BalanceRepository",
    "ProfileService",
]
