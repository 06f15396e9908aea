# uytop/common/localization.py
"""
Модуль локализации.
Загружает переводы (ru, uz) из config/lang_dict.json.
"""

from __future__ import annotations

import json
from decimal import Decimal
from functools import lru_cache
from pathlib import Path
from typing import Any


FALLBACK_LANGUAGE = "ru"


def get_lang_dict_path() -> Path:
    """Возвращает путь к файлу локализации."""
    return Path(__file__).parent.parent.parent / "config" / "lang_dict.json"


@lru_cache()
def load_lang_dict() -> dict[str, dict[str, str]]:
    """
    Загружает словарь локализации из JSON файла.
    Кэширует результат.
    """
    lang_path = get_lang_dict_path()
    if not lang_path.exists():
        raise FileNotFoundError(f"Файл локализации не найден: {lang_path}")

    with open(lang_path, "r", encoding="utf-8") as f:
        return json.load(f)


def get_text(
    key: str,
    lang: str = FALLBACK_LANGUAGE,
    default: str | None = None,
    **kwargs: Any,
) -> str:
    """
    Получает локализованный текст по ключу.

    Args:
        key: Ключ перевода
        lang: Код языка (ru, uz)
        default: Значение, если ключ не найден
        **kwargs: Параметры для форматирования строки

    Returns:
        Локализованный текст, либо "[key]" если перевода нет

    Example:
        >>> get_text("nav_home", "uz")
        "Bosh sahifa"
    """
    try:
        translations = load_lang_dict().get(key)
    except FileNotFoundError:
        translations = None

    if not translations:
        return default if default is not None else f"[{key}]"

    text = translations.get(lang) or translations.get(FALLBACK_LANGUAGE)
    if not text:
        text = next(iter(translations.values()), f"[{key}]")

    if kwargs:
        try:
            text = text.format(**kwargs)
        except KeyError:
            pass

    return text


def property_type_label(property_type: str, lang: str = FALLBACK_LANGUAGE) -> str:
    """Подпись типа недвижимости; неизвестный тип возвращается как есть."""
    return get_text(f"property_type_{property_type}", lang, default=property_type)


def listing_type_label(listing_type: str, lang: str = FALLBACK_LANGUAGE) -> str:
    """Подпись типа сделки (продажа/аренда)."""
    key = "listing_type_sale" if listing_type == "sale" else "listing_type_rent"
    return get_text(key, lang)


def format_price(price: Decimal | float | int) -> str:
    """
    Форматирует цену с разделением разрядов пробелом.

    >>> format_price(1250000)
    '1 250 000'
    """
    return f"{int(price):,}".replace(",", " ")
