# 📐 storefront/domain/filters/rounding.py
"""
📐 Округлення цін для слайдера та URL.

Округлюємо через Decimal (ROUND_HALF_UP), щоб `0.125 → 0.13`, а не артефакти float.
"""

from __future__ import annotations

# 🔠 Системні імпорти
import math
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

_CENT = Decimal("0.01")
_UNIT = Decimal("1")


def _to_decimal(value: float) -> Decimal:
    if isinstance(value, bool) or not isinstance(value, (int, float, Decimal)):
        raise ValueError(f"Очікувалось число, отримано: {value!r}")
    if isinstance(value, float) and not math.isfinite(value):
        raise ValueError(f"Нескінченне значення: {value!r}")
    try:
        return Decimal(str(value))
    except InvalidOperation as exc:
        raise ValueError(f"Невалідне числове значення: {value!r}") from exc


def round2(value: float) -> float:
    """Округлює до 2 знаків після коми (валюта відображення)."""
    return float(_to_decimal(value).quantize(_CENT, rounding=ROUND_HALF_UP))


def round_unit(value: float) -> int:
    """Округлює до цілої одиниці (ціни базової валюти в URL)."""
    return int(_to_decimal(value).quantize(_UNIT, rounding=ROUND_HALF_UP))


__all__ = ["round2", "round_unit"]
