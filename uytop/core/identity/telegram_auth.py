# uytop/core/identity/telegram_auth.py
"""
Валидация Telegram Mini App initData и извлечение пользователя.
https://core.telegram.org/bots/webapps#validating-data-received-via-the-mini-app
"""

from __future__ import annotations

import hashlib
import hmac
import json
from datetime import datetime, timedelta, timezone
from typing import Any
from urllib.parse import parse_qs

from pydantic import BaseModel, ValidationError

from uytop.core.identity.host import HostSession


class TelegramUser(BaseModel):
    """Данные пользователя Telegram."""
    id: int
    first_name: str | None = None
    last_name: str | None = None
    username: str | None = None
    language_code: str | None = None
    is_premium: bool | None = None
    photo_url: str | None = None


class TelegramInitData(BaseModel):
    """Распарсенные данные initData."""
    user: TelegramUser
    auth_date: datetime
    query_id: str | None = None
    chat_type: str | None = None
    chat_instance: str | None = None
    start_param: str | None = None
    hash: str


class TelegramAuthError(Exception):
    """Ошибка валидации Telegram данных."""
    pass


class MalformedIdentityError(TelegramAuthError):
    """Данные пользователя не являются JSON-объектом."""
    pass


def _first(parsed: dict[str, list[str]], key: str) -> str | None:
    values = parsed.get(key)
    return values[0] if values else None


def validate_init_data(
    init_data: str,
    bot_token: str,
    max_age_seconds: int = 86400,  # 24 часа
) -> TelegramInitData:
    """
    Валидировать initData от Telegram Mini App.

    Args:
        init_data: URL-encoded строка от Telegram WebApp.initData
        bot_token: Токен бота
        max_age_seconds: Максимальный возраст данных (по умолчанию 24 часа)

    Returns:
        TelegramInitData с данными пользователя

    Raises:
        TelegramAuthError: Если данные невалидны или устарели
    """
    try:
        parsed = parse_qs(init_data, keep_blank_values=True)

        if "hash" not in parsed:
            raise TelegramAuthError("Отсутствует hash в initData")

        received_hash = parsed["hash"][0]

        # Строка для проверки: пары key=value без hash, отсортированы по ключам
        data_check_string = "\n".join(
            f"{key}={parsed[key][0]}" for key in sorted(parsed.keys()) if key != "hash"
        )

        # Секретный ключ: HMAC-SHA256(bot_token) с ключом "WebAppData"
        secret_key = hmac.new(
            b"WebAppData",
            bot_token.encode(),
            hashlib.sha256,
        ).digest()

        calculated_hash = hmac.new(
            secret_key,
            data_check_string.encode(),
            hashlib.sha256,
        ).hexdigest()

        if not hmac.compare_digest(calculated_hash, received_hash):
            raise TelegramAuthError("Невалидный hash initData")

        if "auth_date" not in parsed:
            raise TelegramAuthError("Отсутствует auth_date в initData")

        auth_date = datetime.fromtimestamp(int(parsed["auth_date"][0]), tz=timezone.utc)
        if datetime.now(timezone.utc) - auth_date > timedelta(seconds=max_age_seconds):
            raise TelegramAuthError("initData устарели")

        if "user" not in parsed:
            raise TelegramAuthError("Отсутствует user в initData")

        user = TelegramUser(**json.loads(parsed["user"][0]))

        return TelegramInitData(
            user=user,
            auth_date=auth_date,
            query_id=_first(parsed, "query_id"),
            chat_type=_first(parsed, "chat_type"),
            chat_instance=_first(parsed, "chat_instance"),
            start_param=_first(parsed, "start_param"),
            hash=received_hash,
        )

    except TelegramAuthError:
        raise
    except Exception as e:
        raise TelegramAuthError(f"Ошибка парсинга initData: {e}") from e


def coerce_telegram_id(value: Any) -> int | None:
    """Числовой Telegram ID или None (0, bool, нечисловые строки не считаются)."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value or None
    if isinstance(value, str) and value.strip().isdigit():
        return int(value) or None
    return None


def parse_identity(raw: Any) -> TelegramUser | None:
    """
    Пользователь из объекта Telegram user.

    Returns:
        TelegramUser или None, если числового id нет

    Raises:
        MalformedIdentityError: Объект не является словарём или поля некорректны
    """
    if raw is None:
        return None
    if not isinstance(raw, dict):
        raise MalformedIdentityError(f"Ожидался объект пользователя, получено {type(raw).__name__}")

    telegram_id = coerce_telegram_id(raw.get("id"))
    if telegram_id is None:
        return None

    try:
        return TelegramUser(**{**raw, "id": telegram_id})
    except ValidationError as e:
        raise MalformedIdentityError(f"Некорректные поля пользователя: {e}") from e


def extract_identity(session: HostSession) -> TelegramUser | None:
    """
    Пользователь из сессии хоста.

    Сначала initDataUnsafe.user, при его отсутствии поле user из строки initData.
    Подпись здесь не проверяется.
    """
    raw = session.unsafe_user

    if raw is None and session.init_data:
        user_json = _first(parse_qs(session.init_data, keep_blank_values=True), "user")
        if user_json is not None:
            try:
                raw = json.loads(user_json)
            except ValueError as e:
                raise MalformedIdentityError(f"Поле user в initData не является JSON: {e}") from e

    return parse_identity(raw)


def extract_user_id(init_data: str) -> int | None:
    """
    Быстрое извлечение user_id из initData без полной валидации.
    Используется для логирования.
    """
    try:
        user = extract_identity(HostSession(init_data=init_data))
    except TelegramAuthError:
        return None
    return user.id if user else None
