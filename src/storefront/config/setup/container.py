# 📦 storefront/config/setup/container.py
"""
📦 Контейнер залежностей сторінки каталогу.

🔹 Створює сервіси в правильному порядку DI з `ConfigService`.
🔹 Дозволяє підмінити сховище, URL і HTTP-транспорт (тести, вбудовування).
🔹 `build_listing_page()` — готова до `mount()` сторінка; `close()` — graceful shutdown.
"""

from __future__ import annotations

# 🌐 Зовнішні бібліотеки
import httpx                                                             # 🌐 Тип транспорту для клієнтів

# 🔠 Системні імпорти
import logging                                                           # 🧾 Базові засоби логування
from typing import Any, Optional                                         # 🧮 Допоміжні типи

# 🧩 Внутрішні модулі проєкту
from storefront.config.config_service import ConfigService
from storefront.domain.currency.interfaces import BASE_CURRENCY
from storefront.domain.filters.interfaces import IKeyValueStorage
from storefront.infrastructure.api.product_query_executor import HttpProductQueryExecutor
from storefront.infrastructure.currency.currency_manager import CurrencyManager
from storefront.infrastructure.currency.currency_selection import CurrencySelection
from storefront.infrastructure.data_storage.key_value_storage import InMemoryKeyValueStorage, JsonFileKeyValueStorage
from storefront.infrastructure.data_storage.range_store import PersistedRangeStore
from storefront.infrastructure.url.query_location import QueryLocation
from storefront.infrastructure.url.url_state_adapter import UrlStateAdapter
from storefront.listing.listing_page import ListingPage
from storefront.shared.metrics.exporters import maybe_start_prometheus
from storefront.shared.utils.logger import LOG_NAME, init_logging_from_config

logger = logging.getLogger(f"{LOG_NAME}.container")


def _float_or_default(value: Any, default: float) -> float:
    """Повертає float або запасне значення, якщо каст неможливий."""
    if value is None:
        return default
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def bootstrap_logging(config: Optional[ConfigService] = None) -> logging.Logger:
    """Зчитує розділ `logging` і запускає кореневий логер."""
    cfg = config or ConfigService()
    return init_logging_from_config(cfg.get_section("logging"))


class Container:
    """
    Координує ініціалізацію інфраструктурних сервісів і сторінки каталогу.
    """

    def __init__(
        self,
        config: ConfigService,
        *,
        storage: Optional[IKeyValueStorage] = None,
        location: Optional[QueryLocation] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.config = config
        logger.info("🚀 Стартуємо побудову контейнера залежностей")
        self._bootstrap_metrics_if_enabled()
        self._setup_storage(storage)
        self._setup_currency(transport)
        self._setup_listing(location, transport)
        logger.info("✅ Контейнер ініціалізовано успішно")

    def _bootstrap_metrics_if_enabled(self) -> None:
        if maybe_start_prometheus(self.config.get_section("metrics")):
            logger.debug("📈 Prometheus-експортер запущено контейнером")

    def _setup_storage(self, storage: Optional[IKeyValueStorage]) -> None:
        if storage is not None:
            self.storage = storage
        else:
            path = self.config.get("files.storage")
            self.storage = JsonFileKeyValueStorage(path) if path else InMemoryKeyValueStorage()
        self.range_store = PersistedRangeStore(
            self.storage,
            debounce_sec=_float_or_default(self.config.get("storage.range_save_debounce_sec"), 0.3),
        )

    def _setup_currency(self, transport: Optional[httpx.AsyncBaseTransport]) -> None:
        self.currency_manager = CurrencyManager(self.config, transport=transport)
        self.currency_selection = CurrencySelection(
            self.storage,
            default=str(self.config.get("currency.default", BASE_CURRENCY) or BASE_CURRENCY),
        )

    def _setup_listing(self, location: Optional[QueryLocation], transport: Optional[httpx.AsyncBaseTransport]) -> None:
        self.location = location or QueryLocation()
        self.url_adapter = UrlStateAdapter(
            page_size=int(self.config.get("listing.page_size", 12) or 12),
            base_currency=str(self.config.get("currency.base", BASE_CURRENCY) or BASE_CURRENCY),
        )
        self.product_executor = HttpProductQueryExecutor(
            str(self.config.get("api.base_url", "") or ""),
            timeout_sec=_float_or_default(self.config.get("api.timeout_sec"), 10.0),
            transport=transport,
        )

    async def build_listing_page(self) -> ListingPage:
        """Підтягує обрану валюту й збирає `ListingPage` (ще не змонтовану)."""
        await self.currency_selection.load()
        return ListingPage(
            executor=self.product_executor,
            rates=self.currency_manager,
            selection=self.currency_selection,
            range_store=self.range_store,
            location=self.location,
            adapter=self.url_adapter,
            commit_debounce_sec=_float_or_default(self.config.get("listing.commit_debounce_sec"), 0.8),
            slider_fallback_sec=_float_or_default(self.config.get("listing.slider_fallback_sec"), 1.0),
            category_retry_sec=_float_or_default(self.config.get("listing.category_retry_sec"), 5.0),
            category_retry_attempts=int(_float_or_default(self.config.get("listing.category_retry_attempts"), 3)),
        )

    async def close(self) -> None:
        """Дописує відкладені діапазони та закриває HTTP-клієнти."""
        await self.range_store.close()
        await self.product_executor.close()
        await self.currency_manager.close()
        logger.info("🔌 Контейнер закрито")


__all__ = ["Container", "bootstrap_logging"]
