from playwright.async_api import Page
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from offer_finder.browser import BrowserSession
from offer_finder.matchers import (
    BUSINESS_LINK_PATTERN,
    COOKIE_ACCEPT_PATTERN,
    CREDIT_CARD_LINK_PATTERN,
    BusinessPromoAprMatcher,
    SectionMatcher,
)
from offer_finder.models import OfferVerdict, StepOutcome
from offer_finder.scrapers.base import BaseScraper
from offer_finder.services.logger_service import LoggerService


class BusinessCardOfferDetector(BaseScraper):
    """
    Проверка сайта банка на наличие бизнес-карты с промо-ставкой 0%.

    Правила распознавания вынесены в SectionMatcher, здесь только навигация:
    переход на сайт, закрытие баннера cookies, попытка перейти в раздел
    бизнес-карт и перебор секций страницы.
    """

    NAVIGATION_TIMEOUT = 20.0
    OPTIONAL_STEP_TIMEOUT = 5.0
    SECTION_TIMEOUT = 10.0

    def __init__(
        self,
        session: BrowserSession,
        matcher: SectionMatcher | None = None,
        logger: LoggerService | None = None,
        navigation_timeout: float = NAVIGATION_TIMEOUT,
        optional_step_timeout: float = OPTIONAL_STEP_TIMEOUT,
        section_timeout: float = SECTION_TIMEOUT,
    ):
        """
        Args:
            session: Открытая сессия браузера
            matcher: Стратегия распознавания (по умолчанию BusinessPromoAprMatcher)
            logger: Сервис логов
            navigation_timeout: Таймаут загрузки сайта в секундах
            optional_step_timeout: Таймаут каждого необязательного шага в секундах
            section_timeout: Таймаут ожидания секций с картами в секундах
        """
        super().__init__(session, logger)
        self.matcher = matcher or BusinessPromoAprMatcher()
        self.navigation_timeout = navigation_timeout
        self.optional_step_timeout = optional_step_timeout
        self.section_timeout = section_timeout

    async def detect(self, url: str) -> OfferVerdict:
        """
        Проверка сайта.

        Args:
            url: Адрес сайта банка

        Returns:
            Вердикт и адрес страницы, которая была проанализирована
        """
        page = await self.session.new_page()
        try:
            # Промо-блоки обычно рендерятся рано, полной загрузки не ждем
            await page.goto(
                url,
                wait_until="domcontentloaded",
                timeout=self._timeout_to_ms(self.navigation_timeout),
            )

            outcome = await self.dismiss_cookie_banner(page)
            if outcome is StepOutcome.SUCCEEDED:
                self.logger.info("Cookie banner dismissed")

            outcome = await self.open_business_cards_section(page)
            if outcome is StepOutcome.SUCCEEDED:
                self.logger.info("Opened business credit card section")

            analyzed_url = page.url
            return await self._scan_sections(page, analyzed_url)
        finally:
            await page.close()

    async def dismiss_cookie_banner(self, page: Page) -> StepOutcome:
        """Нажать "Accept" / "Accept all" / "Allow all", если баннер есть."""
        button = page.get_by_role("button", name=COOKIE_ACCEPT_PATTERN)
        return await self.try_click(
            page, button, self.optional_step_timeout, wait_until=None
        )

    async def open_business_cards_section(self, page: Page) -> StepOutcome:
        """
        Переход "Business" -> "Credit Card".

        Если первый переход не удался, второй не выполняется.
        Возвращает результат последнего выполненного перехода.
        """
        business_link = page.get_by_role("link", name=BUSINESS_LINK_PATTERN)
        outcome = await self.try_click(page, business_link, self.optional_step_timeout)
        if outcome is not StepOutcome.SUCCEEDED:
            return outcome

        cards_link = page.get_by_role("link", name=CREDIT_CARD_LINK_PATTERN)
        return await self.try_click(page, cards_link, self.optional_step_timeout)

    async def _scan_sections(self, page: Page, analyzed_url: str) -> OfferVerdict:
        sections = page.locator(self.matcher.section_selector)

        try:
            await sections.first.wait_for(
                state="attached", timeout=self._timeout_to_ms(self.section_timeout)
            )
        except PlaywrightTimeoutError:
            self.logger.info("No card or offer sections found on the page")
            return OfferVerdict(found=False, analyzed_url=analyzed_url)

        # Тексты всех секций в порядке документа, первая подходящая побеждает
        texts = await sections.all_inner_texts()
        for text in texts:
            if self.matcher.matches(text):
                return OfferVerdict(
                    found=True, analyzed_url=analyzed_url, matched_text=text.strip()
                )

        return OfferVerdict(found=False, analyzed_url=analyzed_url)
