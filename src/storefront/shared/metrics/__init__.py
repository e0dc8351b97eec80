# 📊 storefront/shared/metrics/__init__.py
"""
📊 Пакет метрик Prometheus.

🔹 Лічильники комітів фільтрів, запитів товарів, записів сховища й реконсиляцій валют.
🔹 Експортер `/metrics`, що вмикається з конфігу.
"""

from __future__ import annotations

# 🔢 Метрики сторінки списку
from .listing import (
    CURRENCY_RECONCILIATIONS,
    FILTER_COMMITS,
    PRODUCT_FETCH_FAILURE,
    PRODUCT_FETCH_STALE,
    PRODUCT_FETCH_SUCCESS,
    RANGE_STORE_WRITES,
)

# 🚀 Експортер Prometheus
from .exporters import maybe_start_prometheus

__all__ = [
    "FILTER_COMMITS",
    "PRODUCT_FETCH_SUCCESS",
    "PRODUCT_FETCH_FAILURE",
    "PRODUCT_FETCH_STALE",
    "RANGE_STORE_WRITES",
    "CURRENCY_RECONCILIATIONS",
    "maybe_start_prometheus",
]
