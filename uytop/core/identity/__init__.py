# uytop/core/identity/__init__.py
"""
Определение текущего пользователя по сессии Telegram.
"""

from uytop.core.identity.host import HostSession, InitDataHost, TelegramHost
from uytop.core.identity.resolver import AuthError, IdentityResolver
from uytop.core.identity.session import Session, SessionContext
from uytop.core.identity.telegram_auth import TelegramAuthError, TelegramUser, validate_init_data

__all__ = [
    "HostSession",
    "InitDataHost",
    "TelegramHost",
    "AuthError",
    "IdentityResolver",
    "Session",
    "SessionContext",
    "TelegramAuthError",
    "TelegramUser",
    "validate_init_data",
]
