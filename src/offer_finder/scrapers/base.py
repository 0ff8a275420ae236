from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Locator, Page
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from offer_finder.browser import BrowserSession
from offer_finder.models import StepOutcome
from offer_finder.services.logger_service import LoggerService


class BaseScraper:
    """
    Базовый класс шага поиска, работающего поверх общей сессии браузера.

    Каждая операция получает свежую страницу из сессии
    и закрывает ее по завершении.
    """

    def __init__(self, session: BrowserSession, logger: LoggerService | None = None):
        """
        Args:
            session: Открытая сессия браузера
            logger: Сервис логов для статусных сообщений
        """
        self.session = session
        self.logger = logger or LoggerService(echo=False)

    def _timeout_to_ms(self, timeout: float | None = None) -> int:
        return self.session.timeout_to_ms(timeout)

    async def try_click(
        self,
        page: Page,
        locator: Locator,
        timeout: float,
        wait_until: str | None = "domcontentloaded",
    ) -> StepOutcome:
        """
        Необязательный клик: отсутствие элемента не является ошибкой.

        Args:
            page: Страница, на которой выполняется клик
            locator: Локатор элемента
            timeout: Таймаут ожидания элемента и клика в секундах
            wait_until: Состояние загрузки, которого ждать после клика (None - не ждать)

        Returns:
            SUCCEEDED - клик выполнен,
            NOT_APPLICABLE - элемент не появился за отведенное время,
            FAILED - элемент найден, но клик или переход не удался
        """
        timeout_ms = self._timeout_to_ms(timeout)
        target = locator.first

        try:
            await target.wait_for(state="visible", timeout=timeout_ms)
        except PlaywrightTimeoutError:
            return StepOutcome.NOT_APPLICABLE

        try:
            await target.click(timeout=timeout_ms)
            if wait_until:
                await page.wait_for_load_state(wait_until, timeout=timeout_ms)
        except PlaywrightError as e:
            self.logger.warning(f"Optional step failed: {e}")
            return StepOutcome.FAILED

        return StepOutcome.SUCCEEDED
