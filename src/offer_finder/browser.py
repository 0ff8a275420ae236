import asyncio
from typing import Literal

from fake_useragent import UserAgent
from playwright.async_api import (
    Browser,
    BrowserContext,
    BrowserType,
    Page,
    Playwright,
    async_playwright,
)


class BrowserSession:
    """
    Сессия браузера, общая для всех шагов поиска.

    Включает:
    - Инициализацию и гарантированное закрытие браузера
    - Один контекст браузера на запуск (cookies и состояние изолированы)
    - Выдачу новых страниц с единым таймаутом по умолчанию
    """

    DEFAULT_TIMEOUT = 30.0
    DEFAULT_VIEWPORT_WIDTH = 1920
    DEFAULT_VIEWPORT_HEIGHT = 1080
    DEFAULT_LOCALE = "en-US"
    DEFAULT_TIMEZONE = "America/New_York"

    def __init__(
        self,
        browser_type: Literal["chromium", "firefox", "webkit"] = "chromium",
        headless: bool = True,
        viewport_width: int = DEFAULT_VIEWPORT_WIDTH,
        viewport_height: int = DEFAULT_VIEWPORT_HEIGHT,
        user_agent: str | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        locale: str = DEFAULT_LOCALE,
        timezone_id: str = DEFAULT_TIMEZONE,
    ):
        """
        Инициализация сессии.

        Args:
            browser_type: Тип браузера (chromium, firefox, webkit)
            headless: Запуск в headless режиме
            viewport_width: Ширина viewport
            viewport_height: Высота viewport
            user_agent: Кастомный user agent (если None, будет использован случайный)
            timeout: Таймаут для операций в секундах
            locale: Локаль браузера
            timezone_id: Часовой пояс
        """
        self.browser_type_name = browser_type
        self.headless = headless
        self.viewport_width = viewport_width
        self.viewport_height = viewport_height
        self.user_agent = user_agent
        self.timeout = timeout
        self.locale = locale
        self.timezone_id = timezone_id

        # Внутренние переменные
        self._playwright: Playwright | None = None
        self._browser: Browser | None = None
        self._context: BrowserContext | None = None

    def _get_user_agent(self) -> str:
        if self.user_agent:
            return self.user_agent
        ua = UserAgent(
            browsers=["Chrome", "Firefox", "Edge"],
            os=["Windows"],
            platforms=["desktop"],
        )
        return ua.random

    def timeout_to_ms(self, timeout: float | None = None) -> int:
        timeout_value = timeout or self.timeout
        if timeout_value < 0:
            raise ValueError("timeout cannot be negative")
        return int(timeout_value * 1000)

    async def _create_browser_context(self, browser: Browser, ua: str) -> BrowserContext:
        context = await browser.new_context(
            viewport={
                "width": self.viewport_width,
                "height": self.viewport_height,
            },
            user_agent=ua,
            locale=self.locale,
            timezone_id=self.timezone_id,
            permissions=[],
            ignore_https_errors=True,
            extra_http_headers={
                "Accept-Language": "en-US,en;q=0.9",
            },
            color_scheme="light",
        )
        return context

    async def start(self) -> None:
        """Инициализировать браузер и создать контекст."""
        if self._playwright is not None:
            return

        self._playwright = await async_playwright().start()

        # Получить тип браузера
        browser_type: BrowserType = getattr(self._playwright, self.browser_type_name)

        self._browser = await browser_type.launch(
            headless=self.headless,
            args=[
                "--disable-dev-shm-usage",
                "--no-sandbox",
                "--disable-setuid-sandbox",
            ]
            if self.browser_type_name == "chromium"
            else None,
        )

        self._context = await self._create_browser_context(
            self._browser, self._get_user_agent()
        )
        # Таймаут по умолчанию для всех страниц контекста (в миллисекундах)
        self._context.set_default_timeout(self.timeout_to_ms())

    async def close(self) -> None:
        """
        Закрыть все страницы, контекст, браузер и драйвер Playwright.

        Каждый шаг выполняется независимо: ошибка закрытия контекста
        не должна оставить запущенным браузер.
        """
        # Закрытие контекста закрывает и все его страницы
        try:
            if self._context:
                await self._context.close()
        except Exception:
            pass
        finally:
            self._context = None

        try:
            if self._browser:
                await self._browser.close()
        except Exception:
            pass
        finally:
            self._browser = None

        try:
            if self._playwright:
                await self._playwright.stop()
        except Exception:
            pass
        finally:
            self._playwright = None

        # Небольшая задержка для завершения всех внутренних задач Playwright
        await asyncio.sleep(0.1)

    async def __aenter__(self):
        # __aexit__ не вызывается, если start() упал: освобождаем то, что успело запуститься
        try:
            await self.start()
        except BaseException:
            await self.close()
            raise
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    @property
    def context(self) -> BrowserContext:
        """
        Получить текущий контекст браузера.

        Returns:
            Контекст браузера

        Raises:
            RuntimeError: Если браузер не инициализирован
        """
        if self._context is None:
            raise RuntimeError("Browser not initialized.")
        return self._context

    async def new_page(self) -> Page:
        """
        Создать новую страницу в текущем контексте.

        Returns:
            Новая страница
        """
        page = await self.context.new_page()
        page.set_default_timeout(self.timeout_to_ms())
        return page
