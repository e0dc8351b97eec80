# 💱 storefront/domain/currency/__init__.py
"""
💱 Пакет `domain.currency` публікує контракти валютних операцій.
"""

from .interfaces import (
    BASE_CURRENCY,
    CurrencyCode,
    CurrencyRateNotFoundError,
    ICurrencyConverter,
    ICurrencyRatesProvider,
    RateValue,
)

__all__ = [
    "BASE_CURRENCY",
    "CurrencyCode",
    "CurrencyRateNotFoundError",
    "ICurrencyConverter",
    "ICurrencyRatesProvider",
    "RateValue",
]
