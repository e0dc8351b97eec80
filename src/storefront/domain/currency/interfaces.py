# 💱 storefront/domain/currency/interfaces.py
"""
💱 Контракти валютного домену.

🔹 `CurrencyCode` — нормалізований ISO-код (верхній регістр, без пробілів).
🔹 `ICurrencyConverter` — синхронна конвертація суми між валютами на знімку курсів.
🔹 `ICurrencyRatesProvider` — асинхронне джерело таблиці курсів з TTL.

Таблиця курсів: `{код: скільки одиниць базової валюти коштує 1 одиниця коду}`,
тобто для бази LKR: `{"LKR": 1, "USD": 300}`.
"""

from __future__ import annotations

# 🔠 Системні імпорти
from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Dict, Union

# 🧩 Внутрішні модулі проєкту
from storefront.errors.custom_errors import ConversionError


class CurrencyCode(str):
    """🔤 Код валюти у канонічній формі."""

    def __new__(cls, value: object) -> "CurrencyCode":
        return super().__new__(cls, str(value or "").strip().upper())


BASE_CURRENCY = CurrencyCode("LKR")                             # 🏦 Валюта, в якій бекенд зберігає та фільтрує ціни

RateValue = Union[Decimal, int, float, str]


class CurrencyRateNotFoundError(ConversionError):
    """🚫 Для однієї з валют пари немає курсу."""

    def __init__(self, from_currency: str, to_currency: str) -> None:
        super().__init__(
            f"Немає курсу для конвертації {from_currency} → {to_currency}",
            details=f"{from_currency}->{to_currency}",
        )
        self.from_currency = from_currency
        self.to_currency = to_currency


class ICurrencyConverter(ABC):
    """🔁 Конвертер на знімку курсів."""

    @abstractmethod
    def convert(self, amount: float, from_currency: str, to_currency: str) -> float:
        """Конвертує суму; при `from == to` повертає її без змін."""

    @abstractmethod
    def supports(self, currency: str) -> bool:
        """True, якщо для валюти є курс."""


class ICurrencyRatesProvider(ABC):
    """📈 Постачальник курсів."""

    @abstractmethod
    def get_converter(self) -> ICurrencyConverter:
        """Знімок поточної таблиці курсів."""

    @abstractmethod
    def get_all_rates(self) -> Dict[str, Decimal]:
        """Копія таблиці курсів."""

    @abstractmethod
    async def refresh_if_stale(self) -> None:
        """Оновлює курси, якщо минув TTL."""

    @abstractmethod
    async def close(self) -> None:
        """Закриває мережеві ресурси."""
