# uytop/core/identity/session.py
"""
Снимок сессии и контекст сессии экрана.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any, Callable, Optional

from pydantic import BaseModel, Field

from uytop.common.constants import Language, SessionReason, SessionStatus
from uytop.core.profiles.models import Profile

if TYPE_CHECKING:
    from uytop.core.identity.host import TelegramHost
    from uytop.core.identity.resolver import IdentityResolver


class Session(BaseModel):
    """
    Неизменяемый снимок: кто сейчас пользуется приложением.
    Ошибка определения пользователя тоже означает гостевой режим.
    """

    status: SessionStatus
    profile: Optional[Profile] = None
    reason: Optional[SessionReason] = None
    resolved_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    class Config:
        frozen = True

    @classmethod
    def authenticated(cls, profile: Profile) -> Session:
        return cls(status=SessionStatus.AUTHENTICATED, profile=profile)

    @classmethod
    def guest(cls, reason: SessionReason) -> Session:
        return cls(status=SessionStatus.GUEST, reason=reason)

    @classmethod
    def error(cls, reason: SessionReason) -> Session:
        return cls(status=SessionStatus.ERROR, reason=reason)

    @property
    def is_guest(self) -> bool:
        return self.status != SessionStatus.AUTHENTICATED or self.profile is None

    @property
    def is_authenticated(self) -> bool:
        return not self.is_guest

    @property
    def is_admin(self) -> bool:
        return self.profile is not None and self.profile.is_admin

    @property
    def language(self) -> str:
        """Язык интерфейса: из профиля, для гостя русский."""
        if self.profile is None:
            return Language.RU.value
        return self.profile.language.value


class SessionContext:
    """
    Текущая сессия экрана.

    Создаётся один раз на клиента и передаётся каждому экрану.
    Каждое изменение заменяет снимок целиком.
    """

    def __init__(
        self,
        resolver: IdentityResolver,
        host: TelegramHost,
        snapshot: Session | None = None,
        on_change: Callable[[Session], Any] | None = None,
    ) -> None:
        self._resolver = resolver
        self._host = host
        self._snapshot = snapshot
        self._on_change = on_change

    @property
    def current(self) -> Session:
        """Текущий снимок (гость, пока сессия не определена)."""
        if self._snapshot is None:
            return Session.guest(SessionReason.NO_IDENTITY)
        return self._snapshot

    @property
    def is_resolved(self) -> bool:
        return self._snapshot is not None

    def _set(self, session: Session) -> Session:
        self._snapshot = session
        if self._on_change is not None:
            self._on_change(session)
        return session

    async def resolve(self) -> Session:
        """Определяет пользователя, если это ещё не сделано."""
        if self._snapshot is not None:
            return self._snapshot
        return self._set(await self._resolver.resolve_current_user(self._host))

    async def refresh(self) -> Session:
        """
        Перечитывает профиль авторизованного пользователя
        либо заново определяет пользователя для гостя.
        """
        session = self._snapshot
        if session is not None and session.is_authenticated:
            return self._set(await self._resolver.reload(session))
        return self._set(await self._resolver.resolve_current_user(self._host))

    async def sign_in(self, raw_identity: Any, init_data: str | None = None) -> Profile:
        """
        Явный вход по объекту пользователя Telegram.

        Raises:
            AuthError: Вход не удался, снимок не меняется
        """
        profile = await self._resolver.sign_in_with_identity(raw_identity, init_data)
        self._set(Session.authenticated(profile))
        return profile

    def update_profile(self, profile: Profile) -> Session:
        """Заменяет профиль в снимке после сохранения правок."""
        return self._set(Session.authenticated(profile))

    def sign_out(self) -> Session:
        """Выход: только локальный снимок, на сервере ничего не инвалидируется."""
        return self._set(self._resolver.sign_out())
