# 📦 storefront/domain/products/__init__.py
"""📦 Сутності каталогу та контракт виконавця запитів."""

from .entities import Category, Pagination, Product, ProductPage
from .interfaces import IProductQueryExecutor

__all__ = ["Category", "Pagination", "Product", "ProductPage", "IProductQueryExecutor"]
