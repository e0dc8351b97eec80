# 🧾 storefront/domain/filters/entities.py
"""
🧾 Сутності фільтра списку товарів.

🔹 `FilterState` — стан форми фільтрів; ціни у *валюті відображення*.
🔹 `PriceRange` — пара [min, max] для слайдера та сховища.
🔹 `CurrencyBounds` — домен і крок слайдера для валюти.
🔹 `ProductQuery` — канонічний обʼєкт після декодування URL; ціни у *базовій валюті* (int).
"""

from __future__ import annotations

# 🔠 Системні імпорти
import math                                                     # ♾️ Перевірка скінченності
from dataclasses import dataclass, replace                      # 🧱 Іммʼютабельні DTO
from enum import Enum                                           # 🔖 Сортування
from typing import Any, Dict, Optional, Sequence                # 🧰 Типи


# ================================
# 🔖 ПЕРЕЛІКИ СОРТУВАННЯ
# ================================
class SortField(str, Enum):
    CREATED_AT = "createdAt"
    TITLE = "title"
    PRICE = "price"
    FEATURED = "featured"

    @classmethod
    def parse(cls, value: Any, default: Optional["SortField"] = None) -> "SortField":
        try:
            return cls(str(value))
        except ValueError:
            return default or cls.CREATED_AT


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"

    @classmethod
    def parse(cls, value: Any, default: Optional["SortOrder"] = None) -> "SortOrder":
        try:
            return cls(str(value).lower())
        except ValueError:
            return default or cls.DESC


# ================================
# 📏 ДІАПАЗОН ТА МЕЖІ
# ================================
@dataclass(frozen=True, slots=True)
class PriceRange:
    """📏 Пара [low, high] в одній валюті."""

    low: float
    high: float

    @classmethod
    def from_values(cls, values: Any) -> "PriceRange":
        """
        Будує діапазон із 2-елементної послідовності скінченних чисел.

        Raises:
            ValueError: форма або значення некоректні.
        """
        if isinstance(values, (str, bytes)) or not isinstance(values, Sequence) or len(values) != 2:
            raise ValueError(f"Очікувалась пара чисел, отримано: {values!r}")
        low, high = values
        for item in (low, high):
            if isinstance(item, bool) or not isinstance(item, (int, float)) or not math.isfinite(item):
                raise ValueError(f"Некоректне значення діапазону: {item!r}")
        return cls(float(low), float(high))

    def ordered(self) -> "PriceRange":
        """Міняє межі місцями, якщо low > high."""
        return self if self.low <= self.high else PriceRange(self.high, self.low)

    def is_finite(self) -> bool:
        return math.isfinite(self.low) and math.isfinite(self.high)

    def as_list(self) -> list:
        return [self.low, self.high]


@dataclass(frozen=True, slots=True)
class CurrencyBounds:
    """🎚️ Домен слайдера у конкретній валюті."""

    min: float
    max: float
    step: float
    default_max: float

    def default_range(self) -> PriceRange:
        return PriceRange(0.0, float(self.default_max))


# ================================
# 🧾 СТАН ФОРМИ ФІЛЬТРІВ
# ================================
@dataclass(frozen=True)
class FilterState:
    """🧾 Фільтри у валюті відображення."""

    search: str = ""
    category: str = ""
    min_price: float = 0.0
    max_price: float = 0.0
    featured: bool = False
    in_stock: bool = False
    sort_by: SortField = SortField.CREATED_AT
    sort_order: SortOrder = SortOrder.DESC

    @classmethod
    def defaults(cls, bounds: CurrencyBounds) -> "FilterState":
        return cls(min_price=0.0, max_price=float(bounds.default_max))

    @property
    def price_range(self) -> PriceRange:
        return PriceRange(self.min_price, self.max_price)

    def with_price(self, price: PriceRange) -> "FilterState":
        return replace(self, min_price=price.low, max_price=price.high)

    def with_changes(self, **changes: Any) -> "FilterState":
        return replace(self, **changes)


@dataclass(frozen=True)
class DecodedFilters:
    """📥 Результат декодування URL."""

    state: FilterState
    has_price_params: bool = False
    category_pending: bool = False                              # ⏳ Категорія є в URL, але список ще не завантажено


# ================================
# 🔍 КАНОНІЧНИЙ ЗАПИТ
# ================================
@dataclass(frozen=True)
class ProductQuery:
    """🔍 Параметри для виконавця запитів; зміна цього обʼєкта і лише її → fetch."""

    page: int = 1
    limit: int = 12
    search: str = ""
    category: str = ""
    min_price: Optional[int] = None
    max_price: Optional[int] = None
    featured: bool = False
    in_stock: bool = False
    sort: SortField = SortField.CREATED_AT
    order: SortOrder = SortOrder.DESC

    def to_params(self) -> Dict[str, str]:
        """Параметри HTTP-запиту; порожні поля не передаються."""
        params: Dict[str, str] = {"page": str(self.page), "limit": str(self.limit)}
        if self.search:
            params["search"] = self.search
        if self.category:
            params["category"] = self.category
        if self.min_price is not None:
            params["minPrice"] = str(self.min_price)
        if self.max_price is not None:
            params["maxPrice"] = str(self.max_price)
        if self.featured:
            params["featured"] = "true"
        if self.in_stock:
            params["inStock"] = "true"
        params["sort"] = self.sort.value
        params["order"] = self.order.value
        return params


__all__ = [
    "SortField",
    "SortOrder",
    "PriceRange",
    "CurrencyBounds",
    "FilterState",
    "DecodedFilters",
    "ProductQuery",
]
