# 📊 storefront/shared/metrics/listing.py
"""
📊 Лічильники Prometheus для сторінки списку товарів.
"""

from __future__ import annotations

# 🌐 Зовнішні бібліотеки
from prometheus_client import Counter                           # 🔢 Монотонні лічильники

FILTER_COMMITS = Counter(
    "storefront_filter_commits_total",
    "Фільтри, записані в URL після debounce-вікна",
    ["source"],
)
PRODUCT_FETCH_SUCCESS = Counter(
    "storefront_product_fetch_success_total",
    "Успішні запити списку товарів",
)
PRODUCT_FETCH_FAILURE = Counter(
    "storefront_product_fetch_failure_total",
    "Невдалі запити списку товарів",
    ["reason"],
)
PRODUCT_FETCH_STALE = Counter(
    "storefront_product_fetch_stale_total",
    "Відповіді, відкинуті через новіший запит (last-request-wins)",
)
RANGE_STORE_WRITES = Counter(
    "storefront_range_store_writes_total",
    "Записи цінових діапазонів у сховище",
    ["result"],
)
CURRENCY_RECONCILIATIONS = Counter(
    "storefront_currency_reconciliations_total",
    "Перерахунки слайдера після зміни валюти",
    ["outcome"],
)
