"""Конфигурация приложения с загрузкой переменных окружения."""

import os
from typing import Optional

from dotenv import load_dotenv

# Загружаем переменные окружения из .env файла
load_dotenv()

DEFAULT_DIRECTORY_SEARCH_URL = "https://banks.data.fdic.gov/bankfind-suite/bankfind"
BROWSER_TYPES = ("chromium", "firefox", "webkit")


class ConfigurationError(ValueError):
    """Некорректные входные данные или настройки окружения."""


def _get_float(name: str, default: str) -> float:
    raw = os.getenv(name, default)
    try:
        value = float(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}") from None
    if value <= 0:
        raise ConfigurationError(f"{name} must be positive, got {raw!r}")
    return value


def validate_bank_name(bank_name: Optional[str]) -> str:
    """
    Проверяет название банка, переданное из командной строки.

    Args:
        bank_name: Значение флага --bank

    Returns:
        Название банка без пробелов по краям

    Raises:
        ConfigurationError: Если название отсутствует или пустое
    """
    if bank_name is None or not bank_name.strip():
        raise ConfigurationError("Bank name is required: pass --bank=<name>")
    return bank_name.strip()


class BrowserConfig:
    """Настройки запуска браузера."""

    def __init__(self):
        """Инициализация конфигурации из переменных окружения."""
        self.browser_type: str = os.getenv("BROWSER_TYPE", "chromium").lower()
        if self.browser_type not in BROWSER_TYPES:
            raise ConfigurationError(
                f"BROWSER_TYPE must be one of {', '.join(BROWSER_TYPES)}, "
                f"got {self.browser_type!r}"
            )
        self.headless: bool = os.getenv("BROWSER_HEADLESS", "true").lower() == "true"
        self.timeout: float = _get_float("BROWSER_TIMEOUT", "30.0")
        self.user_agent: Optional[str] = os.getenv("BROWSER_USER_AGENT") or None


class OfferDetectionConfig:
    """Ограничения по времени для проверки сайта банка (в секундах)."""

    def __init__(self):
        self.navigation_timeout: float = _get_float("OFFER_NAVIGATION_TIMEOUT", "20.0")
        self.optional_step_timeout: float = _get_float(
            "OFFER_OPTIONAL_STEP_TIMEOUT", "5.0"
        )
        self.section_timeout: float = _get_float("OFFER_SECTION_TIMEOUT", "10.0")


class AppConfig:
    """Общая конфигурация приложения."""

    def __init__(self):
        """Инициализация конфигурации."""
        self.browser = BrowserConfig()
        self.offer = OfferDetectionConfig()

        # Страница поиска в реестре регулятора
        self.directory_search_url: str = os.getenv(
            "DIRECTORY_SEARCH_URL", DEFAULT_DIRECTORY_SEARCH_URL
        )
