from typing import Optional

from offer_finder.browser import BrowserSession
from offer_finder.config import AppConfig
from offer_finder.matchers import SectionMatcher
from offer_finder.models import LookupResult
from offer_finder.scrapers.bank_site_resolver import BankSiteResolver
from offer_finder.scrapers.business_card_offer import BusinessCardOfferDetector
from offer_finder.services.logger_service import LoggerService


class OfferLookupService:
    """Сервис полного поиска: сайт банка в реестре, затем предложение на сайте."""

    def __init__(
        self,
        config: AppConfig,
        logger: Optional[LoggerService] = None,
        matcher: Optional[SectionMatcher] = None,
    ):
        """
        Инициализация сервиса.

        Args:
            config: Конфигурация приложения
            logger: Сервис логов для статусных сообщений
            matcher: Стратегия распознавания предложения
        """
        self.config = config
        self.logger = logger or LoggerService()
        self.matcher = matcher

    def _create_session(self) -> BrowserSession:
        browser = self.config.browser
        return BrowserSession(
            browser_type=browser.browser_type,
            headless=browser.headless,
            user_agent=browser.user_agent,
            timeout=browser.timeout,
        )

    async def lookup(self, bank_name: str) -> LookupResult:
        """
        Выполняет поиск для одного банка.

        Сессия браузера закрывается при любом исходе, ошибки навигации
        пробрасываются вызывающему коду уже после закрытия.

        Args:
            bank_name: Проверенное название банка

        Returns:
            Результат поиска
        """
        result = LookupResult(bank_name=bank_name)
        offer = self.config.offer

        self.logger.info("Scraper starting...")
        launched = False
        try:
            async with self._create_session() as session:
                launched = True
                self.logger.info("Browser launched.")

                resolver = BankSiteResolver(
                    session,
                    search_url=self.config.directory_search_url,
                    logger=self.logger,
                )
                self.logger.info(f"Searching the bank directory for {bank_name!r}...")
                result.website = await resolver.resolve(bank_name)

                if result.website is None:
                    self.logger.info(f"Could not find a website for {bank_name!r}.")
                    return result

                self.logger.info(f"Found website: {result.website}")

                detector = BusinessCardOfferDetector(
                    session,
                    matcher=self.matcher,
                    logger=self.logger,
                    navigation_timeout=offer.navigation_timeout,
                    optional_step_timeout=offer.optional_step_timeout,
                    section_timeout=offer.section_timeout,
                )
                self.logger.info(f"Checking {result.website} for a business card offer...")
                result.verdict = await detector.detect(result.website)

                if result.verdict.found:
                    self.logger.info(
                        f"Offer found on {result.verdict.analyzed_url}: "
                        f"{result.verdict.matched_text}"
                    )
                else:
                    self.logger.info(
                        f"No 0% APR business card offer found on "
                        f"{result.verdict.analyzed_url}."
                    )
                return result
        finally:
            if launched:
                self.logger.info("Browser closed. Scraper finished.")
            else:
                self.logger.info("Scraper finished without launching the browser.")
