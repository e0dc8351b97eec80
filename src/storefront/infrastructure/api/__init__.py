# 🌐 storefront/infrastructure/api/__init__.py
from .product_query_executor import HttpProductQueryExecutor

__all__ = ["HttpProductQueryExecutor"]
