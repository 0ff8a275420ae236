"""Поиск сайта банка и проверка предложения по бизнес-картам."""
from .models import LogEntry, LookupResult, OfferVerdict, StepOutcome

__version__ = "0.1.0"

__all__ = [
    "LogEntry",
    "LookupResult",
    "OfferVerdict",
    "StepOutcome",
]
