"""
Текстовые шаблоны и стратегии распознавания предложения на странице.

Навигация (BusinessCardOfferDetector) не знает конкретных правил:
она получает селектор секций и функцию проверки текста от SectionMatcher.
"""

import re
from abc import ABC, abstractmethod

# Кнопки согласия с cookies: "Accept", "Accept all", "Allow all"
COOKIE_ACCEPT_PATTERN = re.compile(r"\b(?:accept(?:\s+all)?|allow\s+all)\b", re.IGNORECASE)

# Ссылки на раздел для бизнеса: "Business", "Small Business", "For Business"
BUSINESS_LINK_PATTERN = re.compile(
    r"\b(?:small\s+business|for\s+business|business)\b", re.IGNORECASE
)
CREDIT_CARD_LINK_PATTERN = re.compile(r"\bcredit\s+cards?\b", re.IGNORECASE)

BUSINESS_PATTERN = re.compile(r"business", re.IGNORECASE)

# "0% Introductory APR", "0% interest", "0.00% APR", "zero percent APR".
# Перед нулём не может стоять цифра или точка: "10% APR", "18.0% APR" не подходят.
PROMO_APR_PATTERN = re.compile(
    r"(?:(?<![\d.])0(?:\.0+)?\s*%|\bzero\s+percent)\s*(?:introductory\s+)?(?:apr|interest)\b",
    re.IGNORECASE,
)

# Элементы с "card" в class или section с "offer" в class
CARD_OR_OFFER_SELECTOR = '[class*="card"], section[class*="offer"]'


def has_business_indicator(text: str) -> bool:
    return BUSINESS_PATTERN.search(text) is not None


def has_promo_apr(text: str) -> bool:
    return PROMO_APR_PATTERN.search(text) is not None


class SectionMatcher(ABC):
    """
    Базовая стратегия поиска предложения.

    section_selector задает, какие элементы страницы проверять,
    matches() решает, содержит ли текст секции нужное предложение.
    """

    section_selector: str = CARD_OR_OFFER_SELECTOR

    @abstractmethod
    def matches(self, text: str) -> bool:
        """
        Проверка текста одной секции.

        Args:
            text: Видимый текст секции

        Returns:
            True если секция содержит искомое предложение
        """
        pass


class BusinessPromoAprMatcher(SectionMatcher):
    """
    Бизнес-карта с промо-ставкой 0%.

    Оба признака должны встретиться в одной и той же секции:
    потребительские карты с 0% APR и бизнес-карты без промо не подходят.
    """

    def matches(self, text: str) -> bool:
        if not text:
            return False
        return has_business_indicator(text) and has_promo_apr(text)
