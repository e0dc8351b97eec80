# 📦 storefront/domain/products/entities.py
"""
📦 Сутності каталогу, які повертає сервіс товарів.

🔹 `Category` — id, назва, slug (URL може нести будь-що з двох).
🔹 `Product` — мінімальний набір полів для списку; ціна завжди в базовій валюті.
🔹 `Pagination` / `ProductPage` — сторінка результатів.
🔹 Усі `from_payload` толерантні до форми JSON (`_id` або `id`, відсутні поля).
"""

from __future__ import annotations

# 🔠 Системні імпорти
import logging
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Any, Mapping, Optional, Sequence, Tuple

# 🧩 Внутрішні модулі проєкту
from storefront.shared.utils.logger import LOG_NAME

logger = logging.getLogger(f"{LOG_NAME}.products")


def _as_id(payload: Mapping[str, Any]) -> str:
    return str(payload.get("_id") or payload.get("id") or "")


def _as_int(value: Any, default: int) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


@dataclass(frozen=True, slots=True)
class Category:
    """🗂️ Категорія каталогу."""

    id: str
    name: str = ""
    slug: str = ""

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "Category":
        return cls(
            id=_as_id(payload),
            name=str(payload.get("name") or ""),
            slug=str(payload.get("slug") or ""),
        )

    def matches(self, token: str) -> bool:
        """True, якщо `token` — slug або id цієї категорії."""
        return bool(token) and token in (self.slug, self.id)


@dataclass(frozen=True, slots=True)
class Product:
    """🛍️ Товар у списку (ціна в базовій валюті)."""

    id: str
    title: str
    price: Decimal
    category: str = ""
    featured: bool = False
    in_stock: bool = True
    images: Tuple[str, ...] = ()

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "Product":
        try:
            price = Decimal(str(payload.get("price", 0) or 0))
        except InvalidOperation:
            logger.warning("⚠️ Некоректна ціна товару %r: %r", _as_id(payload), payload.get("price"))
            price = Decimal("0")
        category = payload.get("category")
        if isinstance(category, Mapping):                       # 🔗 populate() на бекенді
            category = _as_id(category)
        stock = payload.get("stock")
        in_stock = bool(payload.get("inStock", True)) if stock is None else _as_int(stock, 0) > 0
        images = payload.get("images") or ()
        return cls(
            id=_as_id(payload),
            title=str(payload.get("title") or ""),
            price=price,
            category=str(category or ""),
            featured=bool(payload.get("featured", False)),
            in_stock=in_stock,
            images=tuple(str(img.get("url", "")) if isinstance(img, Mapping) else str(img) for img in images),
        )


@dataclass(frozen=True, slots=True)
class Pagination:
    """📄 Метадані сторінки."""

    page: int = 1
    limit: int = 12
    total: int = 0
    pages: int = 0

    @classmethod
    def from_payload(cls, payload: Optional[Mapping[str, Any]], *, fallback_limit: int = 12) -> "Pagination":
        payload = payload or {}
        return cls(
            page=_as_int(payload.get("page"), 1),
            limit=_as_int(payload.get("limit"), fallback_limit),
            total=_as_int(payload.get("total"), 0),
            pages=_as_int(payload.get("pages"), 0),
        )


@dataclass(frozen=True, slots=True)
class ProductPage:
    """📚 Сторінка товарів + пагінація."""

    items: Tuple[Product, ...] = ()
    pagination: Pagination = field(default_factory=Pagination)

    @classmethod
    def of(cls, items: Sequence[Product], pagination: Pagination) -> "ProductPage":
        return cls(items=tuple(items), pagination=pagination)


__all__ = ["Category", "Product", "Pagination", "ProductPage"]
