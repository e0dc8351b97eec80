# 🎚️ storefront/domain/filters/__init__.py
"""🎚️ Доменна логіка фільтрів: сутності, межі, округлення, стан slider-а, перерахунок валют."""

from .bounds import COARSE_BOUNDS, FINE_BOUNDS, resolve_bounds
from .entities import (
    CurrencyBounds,
    DecodedFilters,
    FilterState,
    PriceRange,
    ProductQuery,
    SortField,
    SortOrder,
)
from .interaction import SliderInteraction, SliderPhase
from .interfaces import IKeyValueStorage, IPriceRangeStore
from .reconciliation import (
    clamp_range,
    default_range,
    is_degenerate,
    reconcile_currency_change,
    should_reconcile,
)
from .rounding import round2, round_unit

__all__ = [
    "COARSE_BOUNDS",
    "FINE_BOUNDS",
    "resolve_bounds",
    "CurrencyBounds",
    "DecodedFilters",
    "FilterState",
    "PriceRange",
    "ProductQuery",
    "SortField",
    "SortOrder",
    "SliderInteraction",
    "SliderPhase",
    "IKeyValueStorage",
    "IPriceRangeStore",
    "clamp_range",
    "default_range",
    "is_degenerate",
    "reconcile_currency_change",
    "should_reconcile",
    "round2",
    "round_unit",
]
