# 🔄 storefront/domain/filters/reconciliation.py
"""
🔄 Перерахунок цінового діапазону при зміні валюти відображення.

Усі функції чисті: вхідні дані (валюти, межі, діапазон, прапорці) передаються явно,
нічого не читається з мутабельного стану сторінки.

Алгоритм `reconcile_currency_change`:
    1. конвертуємо поточний діапазон старої валюти в нову;
    2. округлюємо кожну межу до 2 знаків;
    3. `clamp_range` у межах нової валюти (з мінімальним розривом `step`);
    4. збій конвертації або вироджений результат → `[0, default_max]`.
"""

from __future__ import annotations

# 🔠 Системні імпорти
import logging
from typing import Optional

# 🧩 Внутрішні модулі проєкту
from storefront.domain.currency.interfaces import ICurrencyConverter
from storefront.domain.filters.bounds import resolve_bounds
from storefront.domain.filters.entities import CurrencyBounds, PriceRange
from storefront.domain.filters.rounding import round2
from storefront.errors.custom_errors import ConversionError
from storefront.shared.utils.logger import LOG_NAME

logger = logging.getLogger(f"{LOG_NAME}.reconciliation")

_EPS = 1e-9                                                     # 🎯 Допуск float-порівнянь розриву


# ================================
# 🏷️ ПРИЧИНИ ПРОПУСКУ
# ================================
SKIP_SAME_CURRENCY = "same_currency"
SKIP_INITIAL_MOUNT = "initial_mount"
SKIP_SLIDING = "sliding"
SKIP_MANUAL = "manually_adjusted"
SKIP_URL_PRICE = "url_price"


def should_reconcile(
    old_currency: Optional[str],
    new_currency: str,
    *,
    initial_mount: bool,
    sliding: bool,
    manually_adjusted: bool,
    url_has_price: bool,
) -> Optional[str]:
    """
    Вирішує, чи треба перераховувати діапазон.

    Returns:
        None — перераховуємо; інакше рядок-причина пропуску (для логів і метрик).
        Drag має найвищий пріоритет серед охоронців.
    """
    if not old_currency or str(old_currency).upper() == str(new_currency).upper():
        return SKIP_SAME_CURRENCY
    if sliding:
        return SKIP_SLIDING
    if initial_mount:
        return SKIP_INITIAL_MOUNT
    if url_has_price:
        return SKIP_URL_PRICE
    if manually_adjusted:
        return SKIP_MANUAL
    return None


# ================================
# 📏 ОБМЕЖЕННЯ ДІАПАЗОНУ
# ================================
def clamp_range(price: PriceRange, bounds: CurrencyBounds) -> PriceRange:
    """
    `low` у [0, max], `high` у [low, max]; якщо розрив менший за `step`,
    `high` піднімається до `low + step` (але не вище `max`).

    Raises:
        ValueError: нескінченні межі.
    """
    if not price.is_finite():
        raise ValueError(f"Нескінченний діапазон: {price!r}")
    top = float(bounds.max)
    low = min(max(price.low, 0.0), top)
    high = min(max(price.high, low), top)
    if high - low < bounds.step - _EPS:
        high = min(round2(low + bounds.step), top)
    return PriceRange(low, high)


def is_degenerate(price: PriceRange, bounds: CurrencyBounds) -> bool:
    return price.high - price.low < bounds.step - _EPS


def default_range(currency: Optional[str]) -> PriceRange:
    return resolve_bounds(currency).default_range()


# ================================
# 🔄 ПЕРЕРАХУНОК
# ================================
def reconcile_currency_change(
    current_range: PriceRange,
    old_currency: str,
    new_currency: str,
    converter: ICurrencyConverter,
) -> PriceRange:
    """
    Конвертує живий діапазон `old_currency` → `new_currency` і вписує його в нові межі.

    Ніколи не кидає: помилки конвертації логуються й замінюються на `[0, default_max]`.
    """
    bounds = resolve_bounds(new_currency)
    try:
        converted = PriceRange(
            round2(converter.convert(current_range.low, old_currency, new_currency)),
            round2(converter.convert(current_range.high, old_currency, new_currency)),
        )
        result = clamp_range(converted, bounds)
    except (ConversionError, ValueError) as exc:
        logger.warning(
            "⚠️ Перерахунок %s → %s не вдався (%s), беру діапазон за замовчуванням",
            old_currency,
            new_currency,
            exc,
        )
        return bounds.default_range()

    if is_degenerate(result, bounds):
        logger.warning("⚠️ Вироджений діапазон %s у %s → за замовчуванням", result.as_list(), new_currency)
        return bounds.default_range()

    logger.debug(
        "🔄 %s %s → %s %s",
        current_range.as_list(),
        old_currency,
        result.as_list(),
        new_currency,
    )
    return result


__all__ = [
    "SKIP_SAME_CURRENCY",
    "SKIP_INITIAL_MOUNT",
    "SKIP_SLIDING",
    "SKIP_MANUAL",
    "SKIP_URL_PRICE",
    "should_reconcile",
    "clamp_range",
    "is_degenerate",
    "default_range",
    "reconcile_currency_change",
]
