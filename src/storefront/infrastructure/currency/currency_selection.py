# 🪙 storefront/infrastructure/currency/currency_selection.py
"""
🪙 Обрана валюта відображення.

🔹 Зберігається у key/value-сховищі під ключем `selectedCurrency` (за замовчуванням LKR).
🔹 `change(new)` на ту саму валюту нічого не робить; інакше сповіщує підписників `(old, new)`.
"""

from __future__ import annotations

# 🔠 Системні імпорти
import logging
from typing import Callable, List

# 🧩 Внутрішні модулі проєкту
from storefront.domain.currency.interfaces import BASE_CURRENCY, CurrencyCode
from storefront.domain.filters.interfaces import IKeyValueStorage
from storefront.errors.custom_errors import StorageError
from storefront.shared.utils.logger import LOG_NAME

logger = logging.getLogger(f"{LOG_NAME}.currency")

SELECTED_CURRENCY_KEY = "selectedCurrency"

CurrencyListener = Callable[[str, str], None]


class CurrencySelection:
    """🪙 Тримач поточної валюти відображення."""

    def __init__(self, storage: IKeyValueStorage, *, default: str = BASE_CURRENCY) -> None:
        self._storage = storage
        self._current = CurrencyCode(default)
        self._listeners: List[CurrencyListener] = []

    @property
    def current(self) -> str:
        return self._current

    async def load(self) -> str:
        """Підтягує збережену валюту; збій сховища → значення за замовчуванням."""
        try:
            stored = await self._storage.get_item(SELECTED_CURRENCY_KEY)
        except StorageError as exc:
            logger.warning("⚠️ Не вдалося прочитати обрану валюту: %s", exc, extra=exc.to_log_extra())
            stored = None
        if stored and stored.strip():
            self._current = CurrencyCode(stored)
        logger.debug("🪙 Валюта відображення: %s", self._current)
        return self._current

    async def change(self, new_currency: str) -> bool:
        """
        Змінює валюту відображення.

        Returns:
            bool: False, якщо валюта та сама.
        """
        new_code = CurrencyCode(new_currency)
        if not new_code or new_code == self._current:
            return False
        old_code, self._current = self._current, new_code
        try:
            await self._storage.set_item(SELECTED_CURRENCY_KEY, new_code)
        except StorageError as exc:
            logger.warning("⚠️ Не вдалося зберегти валюту %s: %s", new_code, exc, extra=exc.to_log_extra())
        logger.info("🪙 Валюта відображення: %s → %s", old_code, new_code)
        for listener in list(self._listeners):
            listener(old_code, new_code)
        return True

    def subscribe(self, listener: CurrencyListener) -> Callable[[], None]:
        """Підписка на зміну валюти; повертає функцію відписки."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe


__all__ = ["SELECTED_CURRENCY_KEY", "CurrencySelection"]
