# uytop/common/constants.py
"""
Общие константы и перечисления.
"""

from enum import Enum


class TypeMsg(str, Enum):
    """Типы сообщений для логирования."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class Language(str, Enum):
    """Языки интерфейса."""
    RU = "ru"
    UZ = "uz"


class PropertyType(str, Enum):
    """Типы недвижимости."""
    APARTMENT = "apartment"
    HOUSE = "house"
    LAND = "land"
    COMMERCIAL = "commercial"


class ListingType(str, Enum):
    """Тип сделки."""
    SALE = "sale"
    RENT = "rent"


class ListingStatus(str, Enum):
    """Статусы модерации объявления."""
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class SortMode(str, Enum):
    """Режимы сортировки ленты объявлений."""
    PRICE_ASC = "price_asc"
    PRICE_DESC = "price_desc"
    DATE_DESC = "date_desc"
    POPULARITY = "popularity"


class ListingSurface(str, Enum):
    """Экран, для которого строится выборка."""
    BROWSE = "browse"
    BUY = "buy"


class SessionStatus(str, Enum):
    """Результат определения текущего пользователя."""
    AUTHENTICATED = "authenticated"
    GUEST = "guest"
    ERROR = "error"


class SessionReason(str, Enum):
    """Причина гостевого режима или ошибки сессии."""
    NOT_EMBEDDED = "not_embedded"
    NO_IDENTITY = "no_identity"
    STORE_UNAVAILABLE = "store_unavailable"
    STORE_ERROR = "store_error"
    MALFORMED_PAYLOAD = "malformed_payload"
    INVALID_SIGNATURE = "invalid_signature"
    SIGNED_OUT = "signed_out"
    SIGNATURE_UNAVAILABLE = "signature_unavailable"


# Размер страницы ленты (пагинации нет)
DEFAULT_PAGE_SIZE = 20

# Цвета темы Telegram WebApp
TELEGRAM_HEADER_COLOR = "#ffffff"
TELEGRAM_BACKGROUND_COLOR = "#f8fafc"

TELEGRAM_WEBAPP_SCRIPT = "https://telegram.org/js/telegram-web-app.js"
