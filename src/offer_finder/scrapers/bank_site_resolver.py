import asyncio
import re
from typing import Optional
from urllib.parse import urlparse

from playwright.async_api import Locator, Page

from offer_finder.browser import BrowserSession
from offer_finder.config import DEFAULT_DIRECTORY_SEARCH_URL
from offer_finder.scrapers.base import BaseScraper
from offer_finder.services.logger_service import LoggerService


def is_absolute_http_url(url: Optional[str]) -> bool:
    if not url:
        return False
    parsed = urlparse(url)
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


class BankSiteResolver(BaseScraper):
    """
    Поиск официального сайта банка через реестр регулятора (FDIC BankFind).

    Последовательность: поиск по названию -> первый результат ->
    ссылка на основной сайт -> окно "вы покидаете сайт" -> новая вкладка.
    """

    SEARCH_INPUT_SELECTOR = 'input[type="search"]'
    FIRST_RESULT_SELECTOR = '[data-testid="search-result"]'
    WEBSITE_LINK_SELECTOR = 'a:has-text("Primary Website")'
    LEAVING_MODAL_SELECTOR = '[role="dialog"]'
    CONTINUE_BUTTON_PATTERN = re.compile(r"continue", re.IGNORECASE)

    def __init__(
        self,
        session: BrowserSession,
        search_url: str = DEFAULT_DIRECTORY_SEARCH_URL,
        logger: LoggerService | None = None,
    ):
        """
        Args:
            session: Открытая сессия браузера
            search_url: Страница поиска в реестре
            logger: Сервис логов
        """
        super().__init__(session, logger)
        self.search_url = search_url

    async def resolve(self, bank_name: str) -> Optional[str]:
        """
        Найти сайт банка.

        Args:
            bank_name: Название банка

        Returns:
            Абсолютный URL сайта или None, если у банка нет указанного сайта

        Raises:
            playwright.async_api.TimeoutError: Если результат поиска, окно
                подтверждения или новая вкладка не появились вовремя
        """
        page = await self.session.new_page()
        try:
            # DOM достаточно, ресурсы реестра могут грузиться долго
            await page.goto(self.search_url, wait_until="domcontentloaded")

            await page.fill(self.SEARCH_INPUT_SELECTOR, bank_name)
            await page.press(self.SEARCH_INPUT_SELECTOR, "Enter")

            # Таймаут по умолчанию: отсутствие результатов - это ошибка навигации
            first_result = page.locator(self.FIRST_RESULT_SELECTOR).first
            await first_result.wait_for(state="visible")

            website_links = first_result.locator(self.WEBSITE_LINK_SELECTOR)
            if await website_links.count() == 0:
                self.logger.info(f"No primary website listed for {bank_name!r}")
                return None

            await website_links.first.click()

            modal = page.locator(self.LEAVING_MODAL_SELECTOR).first
            await modal.wait_for(state="visible")

            continue_button = modal.get_by_role(
                "button", name=self.CONTINUE_BUTTON_PATTERN
            ).first
            new_page = await self._click_and_capture_new_page(continue_button)

            try:
                await new_page.wait_for_load_state("load")
                url = new_page.url
            finally:
                await new_page.close()

            if not is_absolute_http_url(url):
                self.logger.warning(f"Ignoring non-web address from new tab: {url!r}")
                return None
            return url
        finally:
            await page.close()

    async def _click_and_capture_new_page(self, control: Locator) -> Page:
        """
        Клик по элементу, открывающему новую вкладку, с захватом этой вкладки.

        Ожидание события "page" в контексте и клик запускаются одновременно:
        вкладка может открыться раньше, чем завершится клик.

        Args:
            control: Элемент, по которому нужно кликнуть

        Returns:
            Новая страница, полученная из события контекста
        """
        page_task = asyncio.ensure_future(
            self.session.context.wait_for_event("page", timeout=self._timeout_to_ms())
        )
        click_task = asyncio.ensure_future(control.click())

        done, pending = await asyncio.wait(
            {page_task, click_task}, return_when=asyncio.FIRST_EXCEPTION
        )
        for task in pending:
            task.cancel()

        errors = [task.exception() for task in done if task.exception() is not None]
        if errors:
            raise errors[0]

        return page_task.result()
