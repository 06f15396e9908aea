# uytop/config/loader.py
"""
Загрузчик конфигурации проекта.
Единственный источник истины: config/config.json.
Секретные данные переопределяются из переменных окружения.
"""

from __future__ import annotations

import json
import os
from functools import lru_cache
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings


# =============================================================================
# ОПРЕДЕЛЕНИЕ ПУТЕЙ
# =============================================================================

def get_project_root() -> Path:
    """Возвращает корневую директорию проекта."""
    return Path(__file__).parent.parent.parent


def get_config_path() -> Path:
    """Возвращает путь к файлу конфигурации."""
    return get_project_root() / "config" / "config.json"


def load_config_json() -> dict[str, Any]:
    """Загружает config.json и возвращает словарь."""
    config_path = get_config_path()
    if not config_path.exists():
        raise FileNotFoundError(f"Файл конфигурации не найден: {config_path}")

    with open(config_path, "r", encoding="utf-8") as f:
        return json.load(f)


# =============================================================================
# PYDANTIC МОДЕЛИ КОНФИГУРАЦИИ
# =============================================================================

class SystemSettings(BaseModel):
    """Системные настройки."""
    PROJECT_NAME: str = "uytop"
    VERSION: str = "1.0.0"
    DEBUG: bool = False
    ENVIRONMENT: str = "development"
    STORAGE_SECRET: str = ""
    STORAGE_PATH: str = "/tmp/uytop_nicegui"

    @field_validator("STORAGE_SECRET", mode="before")
    @classmethod
    def get_from_env(cls, v: str) -> str:
        """Секрет хранилища NiceGUI из переменных окружения."""
        if not v:
            return os.getenv("STORAGE_SECRET", "uytop-dev-secret")
        return v


class LoggingSettings(BaseModel):
    """Настройки логирования."""
    LOG_LEVEL: str = "DEBUG"
    LOG_TO_FILE: bool = False
    LOG_FILE_PATH: str = "logs/app.log"
    LOG_FORMAT: str = "colored"
    LOG_MAX_BYTES: int = 10485760
    LOG_BACKUP_COUNT: int = 5


class TelegramSettings(BaseModel):
    """Настройки Telegram Mini App."""
    BOT_TOKEN: str = ""
    BOT_USERNAME: str = "TOSHKENT_UYJOYLAR_bot"
    VERIFY_INIT_DATA: bool = True
    INIT_DATA_MAX_AGE: int = 86400
    HOST_GRACE_PERIOD: float = 2.0
    WEBAPP_HOST: str = "0.0.0.0"
    WEBAPP_PORT: int = 8080

    @field_validator("BOT_TOKEN", mode="before")
    @classmethod
    def get_from_env(cls, v: str) -> str:
        """Получает токен из переменных окружения, если не задан."""
        if not v:
            return os.getenv("BOT_TOKEN", "")
        return v

    @property
    def webapp_url(self) -> str:
        """Ссылка для открытия Mini App в Telegram."""
        return f"https://t.me/{self.BOT_USERNAME}/start"


class DomainSettings(BaseModel):
    """Настройки локализации."""
    DEFAULT_LANGUAGE: str = "ru"
    SUPPORTED_LANGUAGES: list[str] = Field(default_factory=lambda: ["ru", "uz"])
    CURRENCY_LABEL: str = "сум"


class DatabaseSettings(BaseModel):
    """Настройки PostgreSQL."""
    DB_HOST: str = ""
    DB_PORT: int = 5432
    DB_NAME: str = ""
    DB_USER: str = "postgres"
    DB_PASSWORD: str = ""
    DB_MIN_POOL_SIZE: int = 2
    DB_MAX_POOL_SIZE: int = 10
    DB_COMMAND_TIMEOUT: int = 60

    @field_validator("DB_PASSWORD", mode="before")
    @classmethod
    def get_from_env(cls, v: str) -> str:
        """Получает пароль из переменных окружения."""
        if not v:
            return os.getenv("DB_PASSWORD", "")
        return v

    @property
    def is_configured(self) -> bool:
        """Заданы ли реквизиты подключения. Без них приложение работает в демо-режиме."""
        return bool(self.DB_HOST and self.DB_NAME and self.DB_USER)

    @property
    def dsn(self) -> str:
        """Возвращает DSN для подключения к PostgreSQL."""
        return (
            f"postgresql://{self.DB_USER}:{self.DB_PASSWORD}"
            f"@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"
        )


class ImageHostSettings(BaseModel):
    """Настройки хостинга изображений (ImgBB)."""
    IMGBB_API_KEY: str = ""
    IMGBB_UPLOAD_URL: str = "https://api.imgbb.com/1/upload"
    IMGBB_TIMEOUT: float = 30.0

    @field_validator("IMGBB_API_KEY", mode="before")
    @classmethod
    def get_from_env(cls, v: str) -> str:
        """Получает ключ API из переменных окружения."""
        if not v:
            return os.getenv("IMGBB_API_KEY", "")
        return v

    @property
    def is_configured(self) -> bool:
        return bool(self.IMGBB_API_KEY)


class ListingSettings(BaseModel):
    """Настройки ленты объявлений."""
    PAGE_SIZE: int = 20


# =============================================================================
# ГЛАВНЫЙ КЛАСС НАСТРОЕК
# =============================================================================

class Settings(BaseSettings):
    """
    Главный класс настроек приложения.
    Агрегирует все секции конфигурации.
    """
    system: SystemSettings = Field(default_factory=SystemSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    telegram: TelegramSettings = Field(default_factory=TelegramSettings)
    domain: DomainSettings = Field(default_factory=DomainSettings)
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    image_host: ImageHostSettings = Field(default_factory=ImageHostSettings)
    listings: ListingSettings = Field(default_factory=ListingSettings)

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"

    @classmethod
    def from_config_json(cls) -> "Settings":
        """
        Создаёт объект Settings из config.json.
        Секреты переопределяются из переменных окружения.
        """
        config_data = load_config_json()

        # Фильтруем комментарии (ключи, начинающиеся с _comment_)
        data = {k: v for k, v in config_data.items() if not k.startswith("_comment_")}

        return cls(
            system=SystemSettings(
                PROJECT_NAME=data.get("PROJECT_NAME", "uytop"),
                VERSION=data.get("VERSION", "1.0.0"),
                DEBUG=data.get("DEBUG", False),
                ENVIRONMENT=os.getenv("ENVIRONMENT", data.get("ENVIRONMENT", "development")),
                STORAGE_SECRET=os.getenv("STORAGE_SECRET", data.get("STORAGE_SECRET", "")),
                STORAGE_PATH=os.getenv("NICEGUI_STORAGE_PATH", data.get("STORAGE_PATH", "/tmp/uytop_nicegui")),
            ),
            logging=LoggingSettings(
                LOG_LEVEL=data.get("LOG_LEVEL", "DEBUG"),
                LOG_TO_FILE=data.get("LOG_TO_FILE", False),
                LOG_FILE_PATH=data.get("LOG_FILE_PATH", "logs/app.log"),
                LOG_FORMAT=data.get("LOG_FORMAT", "colored"),
                LOG_MAX_BYTES=data.get("LOG_MAX_BYTES", 10485760),
                LOG_BACKUP_COUNT=data.get("LOG_BACKUP_COUNT", 5),
            ),
            telegram=TelegramSettings(
                BOT_TOKEN=os.getenv("BOT_TOKEN", data.get("BOT_TOKEN", "")),
                BOT_USERNAME=data.get("BOT_USERNAME", "TOSHKENT_UYJOYLAR_bot"),
                VERIFY_INIT_DATA=data.get("VERIFY_INIT_DATA", True),
                INIT_DATA_MAX_AGE=data.get("INIT_DATA_MAX_AGE", 86400),
                HOST_GRACE_PERIOD=data.get("HOST_GRACE_PERIOD", 2.0),
                WEBAPP_HOST=data.get("WEBAPP_HOST", "0.0.0.0"),
                WEBAPP_PORT=int(os.getenv("WEBAPP_PORT", data.get("WEBAPP_PORT", 8080))),
            ),
            domain=DomainSettings(
                DEFAULT_LANGUAGE=data.get("DEFAULT_LANGUAGE", "ru"),
                SUPPORTED_LANGUAGES=data.get("SUPPORTED_LANGUAGES", ["ru", "uz"]),
                CURRENCY_LABEL=data.get("CURRENCY_LABEL", "сум"),
            ),
            database=DatabaseSettings(
                DB_HOST=os.getenv("DB_HOST", data.get("DB_HOST", "")),
                DB_PORT=int(os.getenv("DB_PORT", data.get("DB_PORT", 5432))),
                DB_NAME=os.getenv("DB_NAME", data.get("DB_NAME", "")),
                DB_USER=os.getenv("DB_USER", data.get("DB_USER", "postgres")),
                DB_PASSWORD=os.getenv("DB_PASSWORD", data.get("DB_PASSWORD", "")),
                DB_MIN_POOL_SIZE=data.get("DB_MIN_POOL_SIZE", 2),
                DB_MAX_POOL_SIZE=data.get("DB_MAX_POOL_SIZE", 10),
                DB_COMMAND_TIMEOUT=data.get("DB_COMMAND_TIMEOUT", 60),
            ),
            image_host=ImageHostSettings(
                IMGBB_API_KEY=os.getenv("IMGBB_API_KEY", data.get("IMGBB_API_KEY", "")),
                IMGBB_UPLOAD_URL=data.get("IMGBB_UPLOAD_URL", "https://api.imgbb.com/1/upload"),
                IMGBB_TIMEOUT=data.get("IMGBB_TIMEOUT", 30.0),
            ),
            listings=ListingSettings(
                PAGE_SIZE=data.get("PAGE_SIZE", 20),
            ),
        )


@lru_cache()
def get_settings() -> Settings:
    """
    Возвращает синглтон настроек приложения.
    Использует кэширование для производительности.
    """
    from dotenv import load_dotenv

    # Загружаем .env файл
    env_path = get_project_root() / ".env"
    if env_path.exists():
        load_dotenv(env_path)

    return Settings.from_config_json()


# Экспорт синглтона для удобного импорта
settings = get_settings()
