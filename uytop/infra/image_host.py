# uytop/infra/image_host.py
"""
Клиент хостинга изображений ImgBB.
https://api.imgbb.com/
"""

from __future__ import annotations

from typing import Any

import httpx

from uytop.common.constants import TypeMsg
from uytop.common.logger import log_error, log_info


class ImageHostNotConfiguredError(RuntimeError):
    """Не задан API ключ хостинга изображений."""
    pass


class ImageUploadError(Exception):
    """Хостинг не принял изображение."""
    pass


class ImageHostClient:
    """
    Загрузка изображений объявлений на ImgBB.

    Отправляет multipart-форму с полями `image` и `key`,
    возвращает публичный URL из `data.url`.
    """

    def __init__(
        self,
        api_key: str,
        upload_url: str = "https://api.imgbb.com/1/upload",
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.api_key = api_key
        self.upload_url = upload_url
        self.http = httpx.AsyncClient(timeout=timeout, transport=transport)

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    async def close(self) -> None:
        """Закрыть HTTP клиент."""
        await self.http.aclose()

    async def upload(self, content: bytes, filename: str = "image.jpg") -> str:
        """
        Загрузить изображение.

        Args:
            content: Байты файла
            filename: Имя файла для multipart

        Returns:
            URL загруженного изображения

        Raises:
            ImageHostNotConfiguredError: Ключ API не задан
            ImageUploadError: Сетевая ошибка или отказ хостинга
        """
        if not self.api_key:
            raise ImageHostNotConfiguredError("ImgBB API key not configured")

        try:
            response = await self.http.post(
                self.upload_url,
                data={"key": self.api_key},
                files={"image": (filename, content)},
            )
            payload: dict[str, Any] = response.json()
        except (httpx.HTTPError, ValueError) as e:
            await log_error(f"Ошибка загрузки изображения: {e}")
            raise ImageUploadError(f"Failed to upload image: {e}") from e

        if not payload.get("success"):
            await log_error(f"ImgBB отклонил изображение: status={response.status_code}")
            raise ImageUploadError("Failed to upload image")

        url = payload["data"]["url"]
        await log_info(f"Изображение загружено: {url}", type_msg=TypeMsg.DEBUG)
        return url
