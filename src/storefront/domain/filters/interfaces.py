# 🧩 storefront/domain/filters/interfaces.py
"""
🧩 Контракти сховищ, з якими працює сторінка фільтрів.
"""

from __future__ import annotations

# 🔠 Системні імпорти
from abc import ABC, abstractmethod
from typing import Optional

# 🧩 Внутрішні модулі проєкту
from storefront.domain.filters.entities import PriceRange


class IKeyValueStorage(ABC):
    """💾 Рядкове key/value-сховище (аналог localStorage)."""

    @abstractmethod
    async def get_item(self, key: str) -> Optional[str]:
        """Значення або None, якщо ключа немає."""

    @abstractmethod
    async def set_item(self, key: str, value: str) -> None:
        """Записує значення; збій → `StorageError`."""

    @abstractmethod
    async def remove_item(self, key: str) -> None:
        """Видаляє ключ (відсутній ключ — не помилка)."""


class IPriceRangeStore(ABC):
    """📦 Останній закомічений діапазон ціни на кожну валюту."""

    @abstractmethod
    async def load(self, currency: str) -> Optional[PriceRange]:
        """Діапазон, вписаний у межі валюти, або None для відсутніх / зіпсованих даних."""

    @abstractmethod
    def save(self, currency: str, price: PriceRange) -> None:
        """Планує відкладений запис (останнє значення перемагає)."""

    @abstractmethod
    async def clear(self, currency: str) -> None:
        """Видаляє запис валюти."""

    @abstractmethod
    async def flush(self) -> None:
        """Негайно записує всі відкладені значення."""


__all__ = ["IKeyValueStorage", "IPriceRangeStore"]
