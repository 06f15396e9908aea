# uytop/core/identity/resolver.py
"""
Определение текущего пользователя по сессии Telegram WebApp.
"""

from __future__ import annotations

import asyncio
from typing import Any, Awaitable, Callable

from uytop.common.constants import SessionReason, TypeMsg
from uytop.common.logger import log_error, log_info, log_warning
from uytop.core.identity.host import TelegramHost
from uytop.core.identity.session import Session
from uytop.core.identity.telegram_auth import (
    MalformedIdentityError,
    TelegramAuthError,
    TelegramUser,
    extract_identity,
    parse_identity,
    validate_init_data,
)
from uytop.core.profiles.models import Profile, ProfileSyncDTO
from uytop.core.profiles.service import ProfileService


class AuthError(Exception):
    """Явный вход через Telegram не удался."""
    pass


class IdentityResolver:
    """
    Определяет пользователя и синхронизирует его профиль.

    Вне Telegram всегда гость, хранилище при этом не трогается.
    resolve_current_user никогда не выбрасывает исключений.
    """

    def __init__(
        self,
        profiles: ProfileService,
        bot_token: str = "",
        verify_signature: bool = True,
        max_age_seconds: int = 86400,
        grace_period: float = 2.0,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ) -> None:
        self._profiles = profiles
        self._bot_token = bot_token
        self._verify_signature = verify_signature
        self._max_age_seconds = max_age_seconds
        self._grace_period = grace_period
        self._sleep = sleep

    @property
    def verification_enabled(self) -> bool:
        """Подпись проверяется, только если включена и задан токен бота."""
        return self._verify_signature and bool(self._bot_token)

    @property
    def signature_unavailable(self) -> bool:
        """Проверка подписи включена, но токена бота нет: входить нельзя."""
        return self._verify_signature and not self._bot_token

    async def resolve_current_user(self, host: TelegramHost) -> Session:
        """
        Текущий пользователь.

        Порядок: вне Telegram -> гость; хранилище недоступно или нет токена
        для проверки подписи -> ошибка;
        ready/expand, пауза на инициализацию хоста, чтение пользователя,
        проверка подписи и upsert профиля.
        """
        try:
            embedded = await host.is_embedded()
        except Exception as e:
            await log_warning(f"Не удалось определить хост Telegram: {e}")
            embedded = False

        if not embedded:
            return Session.guest(SessionReason.NOT_EMBEDDED)

        if not self._profiles.is_available:
            await log_info("Хранилище профилей недоступно, гостевой режим", type_msg=TypeMsg.DEBUG)
            return Session.error(SessionReason.STORE_UNAVAILABLE)

        if self.signature_unavailable:
            await log_info("BOT_TOKEN не задан, initData не проверить: гостевой режим", type_msg=TypeMsg.DEBUG)
            return Session.error(SessionReason.SIGNATURE_UNAVAILABLE)

        try:
            await host.prepare()
        except Exception as e:
            await log_warning(f"Ошибка инициализации Telegram WebApp: {e}")

        if self._grace_period > 0:
            await self._sleep(self._grace_period)

        try:
            host_session = await host.read_session()
            user = extract_identity(host_session)
        except MalformedIdentityError as e:
            await log_warning(f"Некорректные данные пользователя Telegram: {e}")
            return Session.error(SessionReason.MALFORMED_PAYLOAD)
        except Exception as e:
            await log_error(f"Ошибка чтения сессии Telegram: {e}")
            return Session.error(SessionReason.MALFORMED_PAYLOAD)

        if user is None:
            return Session.guest(SessionReason.NO_IDENTITY)

        if self.verification_enabled:
            try:
                self._verify(host_session.init_data, user)
            except TelegramAuthError as e:
                await log_warning(f"initData пользователя {user.id} не прошли проверку: {e}")
                return Session.error(SessionReason.INVALID_SIGNATURE)

        try:
            profile = await self._profiles.sync_identity(self._to_sync_dto(user))
        except Exception as e:
            await log_error(f"Ошибка синхронизации профиля {user.id}: {e}")
            return Session.error(SessionReason.STORE_ERROR)

        return Session.authenticated(profile)

    async def sign_in_with_identity(self, raw_identity: Any, init_data: str | None = None) -> Profile:
        """
        Явный вход (кнопка «Войти»).

        Args:
            raw_identity: Объект пользователя Telegram (id, username, first_name, last_name)
            init_data: Строка initData для проверки подписи

        Raises:
            AuthError: Нет числового id, хранилище недоступно или запись не удалась
        """
        try:
            user = parse_identity(raw_identity)
        except MalformedIdentityError as e:
            raise AuthError(str(e)) from e

        if user is None:
            raise AuthError("Telegram identity has no numeric id")

        if not self._profiles.is_available:
            raise AuthError("Profile store is not available")

        if self.signature_unavailable:
            raise AuthError("Bot token is not configured, Telegram signature cannot be verified")

        if self.verification_enabled:
            try:
                self._verify(init_data or "", user)
            except TelegramAuthError as e:
                raise AuthError(f"Invalid Telegram signature: {e}") from e

        try:
            return await self._profiles.sync_identity(self._to_sync_dto(user))
        except Exception as e:
            await log_error(f"Ошибка входа пользователя {user.id}: {e}")
            raise AuthError(f"Failed to sync profile: {e}") from e

    def sign_out(self) -> Session:
        """Гостевой снимок. Сессия Telegram не инвалидируется."""
        return Session.guest(SessionReason.SIGNED_OUT)

    async def reload(self, session: Session) -> Session:
        """Перечитывает профиль авторизованной сессии из хранилища."""
        if session.profile is None:
            return session

        try:
            profile = await self._profiles.get_by_telegram_id(session.profile.telegram_id)
        except Exception as e:
            await log_error(f"Ошибка обновления профиля {session.profile.telegram_id}: {e}")
            return Session.error(SessionReason.STORE_ERROR)

        if profile is None:
            return Session.guest(SessionReason.NO_IDENTITY)
        return Session.authenticated(profile)

    def _verify(self, init_data: str, user: TelegramUser) -> None:
        data = validate_init_data(init_data, self._bot_token, self._max_age_seconds)
        if data.user.id != user.id:
            raise TelegramAuthError("Пользователь initData не совпадает с пользователем сессии")

    @staticmethod
    def _to_sync_dto(user: TelegramUser) -> ProfileSyncDTO:
        return ProfileSyncDTO(
            telegram_id=user.id,
            username=user.username,
            first_name=user.first_name,
            last_name=user.last_name,
        )
