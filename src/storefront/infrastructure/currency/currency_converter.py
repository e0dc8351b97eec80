# 💱 storefront/infrastructure/currency/currency_converter.py
"""
💱 Stateless-конвертер, що працює зі «знімком» валютних курсів у Decimal.

🔹 Курс валюти — скільки одиниць базової валюти (LKR) коштує 1 одиниця валюти.
🔹 Результат квантується до 4 знаків (ROUND_HALF_EVEN); округлення до копійок
   робить уже викликач (слайдер, URL).
🔹 `from == to` → сума повертається без змін.
🔹 `format_amount` — відображення суми у валюті (LKR без копійок, USD з двома знаками).
"""

from __future__ import annotations

# 🔠 Системні імпорти
import logging                                                  # 🧾 Логування операцій
import math                                                     # ♾️ Перевірка скінченності
from dataclasses import dataclass                               # 🧱 Іммутабельний контекст
from decimal import Decimal, InvalidOperation, ROUND_HALF_EVEN, ROUND_HALF_UP
from typing import Dict, Mapping, Optional, Union               # 📐 Типи курсів

# 🧩 Внутрішні модулі проєкту
from storefront.domain.currency.interfaces import (
    BASE_CURRENCY,
    CurrencyRateNotFoundError,
    ICurrencyConverter,
)
from storefront.errors.custom_errors import ConversionError
from storefront.shared.utils.logger import LOG_NAME

# ================================
# 🧾 ЛОГЕР
# ================================
logger = logging.getLogger(f"{LOG_NAME}.currency")


# ================================
# 📏 НАЛАШТУВАННЯ КВАНТУВАННЯ
# ================================
_RESULT_QUANTUM = Decimal("0.0001")                             # 📐 Проміжна точність конверсії
_DISPLAY_DECIMALS: Dict[str, int] = {
    "LKR": 0,                                                   # 🇱🇰 Рупія без центів
    "USD": 2,                                                   # 🇺🇸 Долар
}
_SYMBOLS: Dict[str, str] = {
    "LKR": "Rs. ",
    "USD": "$",
}


# ================================
# 🧰 ДОПОМІЖНІ ФУНКЦІЇ
# ================================
def _to_decimal(value: object) -> Decimal:
    """🧮 Безпечно приводить значення до Decimal через рядкове представлення."""
    if isinstance(value, Decimal):
        if not value.is_finite():
            raise ValueError(f"Нескінченне значення: {value!r}")
        return value
    if isinstance(value, bool):
        raise ValueError(f"Невалідне числове значення: {value!r}")
    if isinstance(value, float) and not math.isfinite(value):
        raise ValueError(f"Нескінченне значення: {value!r}")
    try:
        normalized = Decimal(str(value).strip())                # 🧼 Позбавляємося артефактів float
    except (InvalidOperation, TypeError) as exc:
        raise ValueError(f"Невалідне числове значення: {value!r}") from exc
    if not normalized.is_finite():
        raise ValueError(f"Нескінченне значення: {value!r}")
    return normalized


def format_amount(amount: Union[Decimal, float, int], currency: Optional[str]) -> str:
    """
    💬 Форматує суму для відображення.

    >>> format_amount(1234.5, "LKR")
    'Rs. 1,235'
    >>> format_amount(16.666, "USD")
    '$16.67'
    """
    code = (currency or "").strip().upper()
    value = _to_decimal(amount)
    digits = _DISPLAY_DECIMALS.get(code)
    if digits is None:
        return f"{code} {value.quantize(Decimal('0.01'), rounding=ROUND_HALF_UP):,.2f}".strip()
    quantized = value.quantize(Decimal(1).scaleb(-digits), rounding=ROUND_HALF_UP)
    return f"{_SYMBOLS[code]}{quantized:,.{digits}f}"


# ================================
# ⚙️ КОНТЕКСТ ВИКОНАННЯ
# ================================
@dataclass(frozen=True)
class _Ctx:
    """⚙️ Контекст обчислень: курси та стратегія округлення."""

    rates: Dict[str, Decimal]                                   # 💱 {"USD": Decimal("300")}
    rounding: str                                               # 🔁 ROUND_* константа


# ================================
# 💱 КОНВЕРТЕР
# ================================
class CurrencyConverter(ICurrencyConverter):
    """
    💱 Синхронний конвертер на базі знімка курсів.

    - Внутрішньо працює лише з Decimal, float тільки на межі API.
    - Невідома валюта → `CurrencyRateNotFoundError`, нечислова сума → `ConversionError`.
    """

    _ctx: _Ctx

    def __init__(
        self,
        rates: Mapping[str, Union[Decimal, int, float, str]],
        *,
        rounding: str = ROUND_HALF_EVEN,
        base_currency: str = BASE_CURRENCY,
    ) -> None:
        if not isinstance(rates, Mapping):
            raise TypeError("rates повинен бути Mapping[str, Decimal|int|float|str].")

        normalized: Dict[str, Decimal] = {}
        for key, value in rates.items():
            currency = (key or "").upper().strip()
            if not currency:
                continue
            rate = _to_decimal(value)
            if rate <= 0:
                logger.warning("⚠️ Пропускаю непридатний курс %s = %s", currency, rate)
                continue
            normalized[currency] = rate

        base = base_currency.upper()
        if base not in normalized:                              # 🏦 Гарантуємо наявність базової валюти
            normalized[base] = Decimal("1")
            logger.debug("ℹ️ Додано базову валюту %s = 1", base)

        object.__setattr__(self, "_ctx", _Ctx(rates=normalized, rounding=rounding))
        logger.debug("💱 CurrencyConverter готовий (валют: %d)", len(normalized))

    # ================================
    # 🧮 ТОЧНА КОНВЕРТАЦІЯ
    # ================================
    def _convert_decimal(self, amount: Decimal, from_currency: str, to_currency: str) -> Decimal:
        from_ccy = (from_currency or "").upper()
        to_ccy = (to_currency or "").upper()
        if from_ccy == to_ccy:
            return amount
        try:
            from_rate = self._ctx.rates[from_ccy]               # 📈 База за 1 одиницю джерела
            to_rate = self._ctx.rates[to_ccy]                   # 📉 База за 1 одиницю цілі
        except KeyError as missing:
            logger.warning("❌ Відсутній курс для %s → %s", from_ccy, to_ccy)
            raise CurrencyRateNotFoundError(from_ccy, to_ccy) from missing

        result = (amount * from_rate / to_rate).quantize(_RESULT_QUANTUM, rounding=self._ctx.rounding)
        logger.debug("✅ %s %s → %s %s", amount, from_ccy, result, to_ccy)
        return result

    def convert_decimal(self, amount: Union[Decimal, float, int, str], from_currency: str, to_currency: str) -> Decimal:
        """💰 Decimal API для точних обчислень (форматування, тести)."""
        try:
            value = _to_decimal(amount)
        except ValueError as exc:
            raise ConversionError(str(exc), details=f"{from_currency}->{to_currency}") from exc
        return self._convert_decimal(value, from_currency, to_currency)

    def convert(self, amount: float, from_currency: str, to_currency: str) -> float:
        """🧮 float на вході/виході, Decimal усередині."""
        return float(self.convert_decimal(amount, from_currency, to_currency))

    def supports(self, currency: str) -> bool:
        return (currency or "").upper() in self._ctx.rates

    @property
    def rates(self) -> Dict[str, Decimal]:
        return dict(self._ctx.rates)


__all__ = ["CurrencyConverter", "format_amount"]
