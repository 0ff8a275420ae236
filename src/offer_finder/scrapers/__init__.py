from .bank_site_resolver import BankSiteResolver
from .base import BaseScraper
from .business_card_offer import BusinessCardOfferDetector

__all__ = ["BaseScraper", "BankSiteResolver", "BusinessCardOfferDetector"]
