# 💱 storefront/infrastructure/currency/__init__.py
from .currency_converter import CurrencyConverter, format_amount
from .currency_manager import CurrencyManager
from .currency_selection import SELECTED_CURRENCY_KEY, CurrencySelection

__all__ = [
    "CurrencyConverter",
    "format_amount",
    "CurrencyManager",
    "SELECTED_CURRENCY_KEY",
    "CurrencySelection",
]
