# 🧩 storefront/domain/products/interfaces.py
"""
🧩 Контракт виконавця запитів до каталогу.
"""
from abc import ABC, abstractmethod
from typing import List

from storefront.domain.filters.entities import ProductQuery
from .entities import Category, ProductPage


class IProductQueryExecutor(ABC):
    """Отримує сторінку товарів за зібраними параметрами (ціни в базовій валюті)."""

    @abstractmethod
    async def fetch_products(self, query: ProductQuery) -> ProductPage:
        """Повертає сторінку товарів або піднімає ProductQueryError."""

    @abstractmethod
    async def fetch_categories(self) -> List[Category]:
        """Повертає список категорій для резолву slug/id з URL."""

    @abstractmethod
    async def close(self) -> None:
        """Закриває HTTP-ресурси."""
