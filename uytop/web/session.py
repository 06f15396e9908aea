# uytop/web/session.py
"""
Сессия клиента NiceGUI.

Снимок сессии хранится в app.storage.user, поэтому при переходе
между страницами пользователь не определяется заново.
"""

from __future__ import annotations

from typing import Any, Optional

from nicegui import app, ui
from pydantic import ValidationError

from uytop.api.dependencies import get_web_resolver
from uytop.common.constants import SessionReason
from uytop.core.identity.session import Session, SessionContext
from uytop.web.telegram_host import WebAppHost

STORAGE_KEY = "session"


def load_snapshot(data: Any) -> Optional[Session]:
    """
    Снимок из хранилища, если его можно переиспользовать.

    Переиспользуются авторизованная сессия и явный выход,
    остальные гостевые снимки определяются заново.
    """
    if not isinstance(data, dict):
        return None

    try:
        session = Session.model_validate(data)
    except ValidationError:
        return None

    if session.is_authenticated or session.reason == SessionReason.SIGNED_OUT:
        return session
    return None


def _store(session: Session) -> None:
    app.storage.user[STORAGE_KEY] = session.model_dump(mode="json")


async def get_session_context() -> SessionContext:
    """Контекст сессии текущего клиента (определяет пользователя при необходимости)."""
    await ui.context.client.connected()

    context = SessionContext(
        get_web_resolver(),
        WebAppHost(),
        snapshot=load_snapshot(app.storage.user.get(STORAGE_KEY)),
        on_change=_store,
    )
    await context.resolve()
    return context
