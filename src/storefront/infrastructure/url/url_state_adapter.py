# 🔗 storefront/infrastructure/url/url_state_adapter.py
"""
🔗 URL State Adapter — відображення між станом фільтрів і query string.

🔹 У `FilterState` ціни у валюті відображення, у URL — завжди цілі числа в базовій
   валюті (LKR), тож посилання не залежить від обраної валюти.
🔹 `decode` — URL → `FilterState` (+ чи були цінові параметри, чи чекає категорія списку).
🔹 `encode` — `FilterState` → параметри URL.
🔹 `to_query` — URL → канонічний `ProductQuery`; лише його зміна запускає запит товарів.
"""

from __future__ import annotations

# 🔠 Системні імпорти
import logging
import re
from typing import Dict, Mapping, Optional, Sequence, Tuple

# 🧩 Внутрішні модулі проєкту
from storefront.domain.currency.interfaces import BASE_CURRENCY, ICurrencyConverter
from storefront.domain.filters.bounds import resolve_bounds
from storefront.domain.filters.entities import (
    DecodedFilters,
    FilterState,
    PriceRange,
    ProductQuery,
    SortField,
    SortOrder,
)
from storefront.domain.filters.rounding import round2, round_unit
from storefront.domain.products.entities import Category
from storefront.errors.custom_errors import ConversionError
from storefront.shared.utils.logger import LOG_NAME

logger = logging.getLogger(f"{LOG_NAME}.url")

# ================================
# 🏷️ НАЗВИ ПАРАМЕТРІВ
# ================================
PAGE = "page"
SEARCH = "search"
CATEGORY = "category"
MIN_PRICE = "minPrice"
MAX_PRICE = "maxPrice"
FEATURED = "featured"
IN_STOCK = "inStock"
SORT = "sort"
ORDER = "order"
LEGACY_SORT = "sortBy"
LEGACY_ORDER = "sortOrder"

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def parse_int(value: Optional[str], default: int = 0) -> int:
    """Бере ведуче ціле число (`"15000abc"` → 15000, `"12.7"` → 12), інакше `default`."""
    match = _LEADING_INT.match(value or "")
    return int(match.group(1)) if match else default


def has_price_params(params: Mapping[str, str]) -> bool:
    return MIN_PRICE in params or MAX_PRICE in params


def resolve_category(token: str, categories: Optional[Sequence[Category]]) -> Tuple[str, bool]:
    """
    slug/id з URL → id категорії.

    Returns:
        (id або "", pending) — pending=True, якщо список ще не завантажено.
    """
    if not token:
        return "", False
    if categories is None:
        return "", True
    for category in categories:
        if category.matches(token):
            return category.id, False
    logger.debug("🗂️ Категорію %r не знайдено серед %d", token, len(categories))
    return "", False


class UrlStateAdapter:
    """🔗 Кодек стану фільтрів ↔ параметри URL."""

    def __init__(self, *, page_size: int = 12, base_currency: str = BASE_CURRENCY) -> None:
        self._page_size = max(1, int(page_size))
        self._base = base_currency

    # ================================
    # 📥 DECODE
    # ================================
    def decode(
        self,
        params: Mapping[str, str],
        categories: Optional[Sequence[Category]],
        currency: str,
        converter: ICurrencyConverter,
        current_range: Optional[PriceRange] = None,
    ) -> DecodedFilters:
        """
        URL → стан фільтрів у валюті `currency`.

        Без цінових параметрів зберігається `current_range` (живий діапазон слайдера),
        щоб навігація не скидала вибір користувача.
        """
        category, category_pending = resolve_category(params.get(CATEGORY, ""), categories)
        with_price = has_price_params(params)
        if with_price:
            price = self._decode_price(params, currency, converter)
        else:
            price = current_range or resolve_bounds(currency).default_range()

        state = FilterState(
            search=params.get(SEARCH, ""),
            category=category,
            min_price=price.low,
            max_price=price.high,
            featured=params.get(FEATURED) == "true",
            in_stock=params.get(IN_STOCK) == "true",
            sort_by=SortField.parse(params.get(SORT) or params.get(LEGACY_SORT)),
            sort_order=SortOrder.parse(params.get(ORDER) or params.get(LEGACY_ORDER)),
        )
        logger.debug("📥 decode %s → %s (price_params=%s)", dict(params), state, with_price)
        return DecodedFilters(state=state, has_price_params=with_price, category_pending=category_pending)

    def _decode_price(self, params: Mapping[str, str], currency: str, converter: ICurrencyConverter) -> PriceRange:
        bounds = resolve_bounds(currency)
        min_base = parse_int(params.get(MIN_PRICE))
        max_base = parse_int(params.get(MAX_PRICE))
        try:
            low = round2(converter.convert(min_base, self._base, currency)) if min_base > 0 else 0.0
            high = (
                round2(converter.convert(max_base, self._base, currency))
                if max_base > 0
                else float(bounds.default_max)
            )
        except ConversionError as exc:
            logger.warning("⚠️ Ціну з URL не сконвертовано в %s: %s", currency, exc, extra=exc.to_log_extra())
            return bounds.default_range()

        top = float(bounds.max)
        low = max(0.0, min(low, top))
        high = max(low, min(high, top))
        return PriceRange(low, high)

    # ================================
    # 📤 ENCODE
    # ================================
    def encode(
        self,
        state: FilterState,
        currency: str,
        converter: ICurrencyConverter,
        *,
        include_flags: bool = False,
    ) -> Dict[str, str]:
        """
        Стан фільтрів → параметри URL.

        Порожні рядки та False пропускаються (крім `include_flags=True` для кнопки «Застосувати»),
        ціни пишуться завжди, бо 0 — осмислене значення.
        """
        params: Dict[str, str] = {}
        if state.search:
            params[SEARCH] = state.search
        if state.category:
            params[CATEGORY] = state.category
        try:
            params[MIN_PRICE] = str(self.to_base(state.min_price, currency, converter))
            params[MAX_PRICE] = str(self.to_base(state.max_price, currency, converter))
        except (ConversionError, ValueError) as exc:
            params.pop(MIN_PRICE, None)
            logger.warning("⚠️ Ціни не закодовано (%s → %s): %s", currency, self._base, exc)
        if state.featured or include_flags:
            params[FEATURED] = "true" if state.featured else "false"
        if state.in_stock or include_flags:
            params[IN_STOCK] = "true" if state.in_stock else "false"
        params[SORT] = state.sort_by.value
        params[ORDER] = state.sort_order.value
        logger.debug("📤 encode %s → %s", state, params)
        return params

    def to_base(self, amount: float, currency: str, converter: ICurrencyConverter) -> int:
        """Ціна відображення → ціле в базовій валюті (спершу 2 знаки, потім ціле)."""
        return round_unit(converter.convert(round2(amount), currency, self._base))

    # ================================
    # 🔍 КАНОНІЧНИЙ ЗАПИТ
    # ================================
    def to_query(
        self,
        params: Mapping[str, str],
        state: FilterState,
        currency: str,
        converter: ICurrencyConverter,
    ) -> ProductQuery:
        """
        URL + локальний стан → `ProductQuery`.

        Цінові параметри URL беруться як є (це вже базова валюта); без них — живий
        діапазон, переведений у базову валюту.
        """
        page = parse_int(params.get(PAGE), 1)
        with_price = has_price_params(params)
        min_price: Optional[int] = None
        max_price: Optional[int] = None
        try:
            if with_price:
                min_price = max(0, parse_int(params.get(MIN_PRICE)))
                max_raw = parse_int(params.get(MAX_PRICE))
                max_price = (
                    max_raw if max_raw > 0 else self.to_base(resolve_bounds(currency).default_max, currency, converter)
                )
            else:
                min_price = self.to_base(state.min_price, currency, converter)
                max_price = self.to_base(state.max_price, currency, converter)
        except (ConversionError, ValueError) as exc:
            logger.warning("⚠️ Запит без цінового фільтра: %s", exc)
            min_price = max_price = None

        query = ProductQuery(
            page=page if page > 0 else 1,
            limit=self._page_size,
            search=params.get(SEARCH, ""),
            category=state.category,
            min_price=min_price,
            max_price=max_price,
            featured=params.get(FEATURED) == "true",
            in_stock=params.get(IN_STOCK) == "true",
            sort=SortField.parse(params.get(SORT) or params.get(LEGACY_SORT)),
            order=SortOrder.parse(params.get(ORDER) or params.get(LEGACY_ORDER)),
        )
        logger.debug("🔍 to_query (price_params=%s) → %s", with_price, query)
        return query


__all__ = [
    "PAGE",
    "SEARCH",
    "CATEGORY",
    "MIN_PRICE",
    "MAX_PRICE",
    "FEATURED",
    "IN_STOCK",
    "SORT",
    "ORDER",
    "parse_int",
    "has_price_params",
    "resolve_category",
    "UrlStateAdapter",
]
