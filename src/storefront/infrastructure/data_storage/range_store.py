# 📦 storefront/infrastructure/data_storage/range_store.py
"""
📦 PersistedRangeStore — останній закомічений ціновий діапазон на кожну валюту.

🔹 Ключ `priceRange_<CODE>`, значення — JSON-масив `[low, high]`.
🔹 `save` відкладений (~300 мс): кілька викликів у вікні → один запис останнього значення
   на кожну валюту.
🔹 `load` захищений: непарсабельний JSON або не пара чисел → None; значення поза
   `[0, bounds.max]` вписуються в межі.
🔹 Збої сховища не виходять назовні: значення сесії лишаються у памʼяті процесу.
"""

from __future__ import annotations

# 🔠 Системні імпорти
import json
import logging
from typing import Dict, Optional

# 🧩 Внутрішні модулі проєкту
from storefront.domain.currency.interfaces import CurrencyCode
from storefront.domain.filters.bounds import resolve_bounds
from storefront.domain.filters.entities import PriceRange
from storefront.domain.filters.interfaces import IKeyValueStorage, IPriceRangeStore
from storefront.errors.custom_errors import StorageError
from storefront.shared.metrics import RANGE_STORE_WRITES
from storefront.shared.utils.debounce import DebouncedTask
from storefront.shared.utils.logger import LOG_NAME

logger = logging.getLogger(f"{LOG_NAME}.range_store")

KEY_PREFIX = "priceRange_"
DEFAULT_SAVE_DEBOUNCE_SEC = 0.3


def range_key(currency: str) -> str:
    return f"{KEY_PREFIX}{CurrencyCode(currency)}"


def _compact(value: float) -> float:
    """5000.0 → 5000 у JSON."""
    return int(value) if float(value).is_integer() else value


class PersistedRangeStore(IPriceRangeStore):
    """📦 Debounced-сховище діапазонів із fallback у памʼять."""

    def __init__(self, storage: IKeyValueStorage, *, debounce_sec: float = DEFAULT_SAVE_DEBOUNCE_SEC) -> None:
        self._storage = storage
        self._pending: Dict[str, PriceRange] = {}               # ⏳ Валюта → останній незаписаний діапазон
        self._memory: Dict[str, str] = {}                       # 🧠 Fallback при збоях сховища
        self._writer = DebouncedTask(self._write_pending, debounce_sec, name="range-store")

    @property
    def pending(self) -> bool:
        return bool(self._pending)

    # ================================
    # 📖 ЧИТАННЯ
    # ================================
    async def load(self, currency: str) -> Optional[PriceRange]:
        code = CurrencyCode(currency)
        if code in self._pending:
            return self._pending[code]

        key = range_key(code)
        try:
            raw = await self._storage.get_item(key)
        except StorageError as exc:
            logger.warning("⚠️ Сховище недоступне, читаю %s з памʼяті: %s", key, exc, extra=exc.to_log_extra())
            raw = None
        if raw is None:
            raw = self._memory.get(key)
        if raw is None:
            return None

        try:
            parsed = json.loads(raw)
        except (TypeError, ValueError):
            logger.warning("⚠️ Зіпсований запис %s: %r", key, raw)
            return None
        try:
            price = PriceRange.from_values(parsed)
        except ValueError:
            logger.warning("⚠️ Запис %s не є парою чисел: %r", key, parsed)
            return None

        top = float(resolve_bounds(code).max)
        clamped = PriceRange(min(max(price.low, 0.0), top), min(max(price.high, 0.0), top)).ordered()
        if clamped != price:
            logger.debug("📏 %s вписано в межі: %s → %s", key, price.as_list(), clamped.as_list())
        return clamped

    # ================================
    # 💾 ЗАПИС
    # ================================
    def save(self, currency: str, price: PriceRange) -> None:
        if not price.is_finite():
            logger.warning("⚠️ Ігнорую нескінченний діапазон для %s: %r", currency, price)
            return
        code = CurrencyCode(currency)
        self._pending[code] = price
        logger.debug("⏳ Заплановано запис %s = %s", range_key(code), price.as_list())
        self._writer()

    async def clear(self, currency: str) -> None:
        code = CurrencyCode(currency)
        key = range_key(code)
        self._pending.pop(code, None)
        if not self._pending:
            self._writer.cancel()
        self._memory.pop(key, None)
        try:
            await self._storage.remove_item(key)
        except StorageError as exc:
            logger.warning("⚠️ Не вдалося видалити %s: %s", key, exc, extra=exc.to_log_extra())
        logger.info("🧹 Діапазон %s очищено", key)

    async def flush(self) -> None:
        await self._writer.flush()

    async def join(self) -> None:
        """Чекає завершення вже запланованого запису."""
        await self._writer.join()

    async def close(self) -> None:
        await self.flush()

    async def _write_pending(self) -> None:
        pending, self._pending = self._pending, {}
        for code, price in pending.items():
            key = range_key(code)
            value = json.dumps([_compact(price.low), _compact(price.high)])
            try:
                await self._storage.set_item(key, value)
            except StorageError as exc:
                self._memory[key] = value
                RANGE_STORE_WRITES.labels(result="fallback").inc()
                logger.warning("⚠️ Запис %s лише у памʼять: %s", key, exc, extra=exc.to_log_extra())
                continue
            self._memory.pop(key, None)
            RANGE_STORE_WRITES.labels(result="ok").inc()
            logger.info("💾 %s = %s", key, value)


__all__ = ["KEY_PREFIX", "DEFAULT_SAVE_DEBOUNCE_SEC", "range_key", "PersistedRangeStore"]
