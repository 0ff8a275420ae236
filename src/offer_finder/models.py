from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional


class StepOutcome(str, Enum):
    """Результат необязательного шага навигации."""

    SUCCEEDED = "succeeded"
    NOT_APPLICABLE = "not_applicable"
    FAILED = "failed"


@dataclass
class OfferVerdict:
    """Итог проверки сайта банка на наличие предложения."""

    found: bool
    analyzed_url: str
    matched_text: Optional[str] = None


@dataclass
class LookupResult:
    """Результат полного поиска для одного банка."""

    bank_name: str
    website: Optional[str] = None
    verdict: Optional[OfferVerdict] = None

    @property
    def offer_found(self) -> bool:
        return self.verdict is not None and self.verdict.found


@dataclass
class LogEntry:
    """Запись в логе."""

    id: str
    timestamp: datetime
    level: str  # "INFO" | "WARNING" | "ERROR"
    message: str
