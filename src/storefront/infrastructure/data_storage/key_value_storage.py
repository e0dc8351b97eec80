# 💾 storefront/infrastructure/data_storage/key_value_storage.py
"""
💾 Рядкові key/value-сховища для налаштувань вітрини.

🔹 `JsonFileKeyValueStorage` — один JSON-обʼєкт на диску: лінивий кеш, `asyncio.Lock`,
   атомарна заміна через tmp-файл.
🔹 `InMemoryKeyValueStorage` — для тестів і сесій без диска.
"""

from __future__ import annotations

# 🌐 Зовнішні бібліотеки
import aiofiles                                                 # 📄 Асинхронне читання/запис JSON-файлу

# 🔠 Системні імпорти
import asyncio                                                  # 🔐 Lock
import contextlib                                               # 🧹 suppress для прибирання tmp
import json                                                     # 📄 Формат файлу
import logging                                                  # 🧾 Логування операцій
import os                                                       # 🗂️ Атомарний replace
from pathlib import Path                                        # 📁 Директорія файлу
from typing import Dict, Optional                               # 🧰 Типи

# 🧩 Внутрішні модулі проєкту
from storefront.domain.filters.interfaces import IKeyValueStorage
from storefront.errors.custom_errors import StorageError
from storefront.shared.utils.logger import LOG_NAME

logger = logging.getLogger(f"{LOG_NAME}.storage")


class InMemoryKeyValueStorage(IKeyValueStorage):
    """🧠 Сховище у памʼяті процесу."""

    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self._items: Dict[str, str] = dict(initial or {})

    async def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    async def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    async def remove_item(self, key: str) -> None:
        self._items.pop(key, None)

    def snapshot(self) -> Dict[str, str]:
        return dict(self._items)


class JsonFileKeyValueStorage(IKeyValueStorage):
    """📄 Сховище в одному JSON-файлі; кожна зміна записується одразу (debounce робить викликач)."""

    def __init__(self, file_path: str) -> None:
        self._file_path = str(file_path)
        self._lock = asyncio.Lock()                             # 🔐 Захист кешу та запису
        self._cache: Optional[Dict[str, str]] = None            # 🧠 Лінивий кеш
        logger.info("💾 JsonFileKeyValueStorage init (file=%s)", self._file_path)

    async def get_item(self, key: str) -> Optional[str]:
        async with self._lock:
            await self._ensure_cache_loaded()
            assert self._cache is not None
            return self._cache.get(key)

    async def set_item(self, key: str, value: str) -> None:
        async with self._lock:
            await self._ensure_cache_loaded()
            assert self._cache is not None
            self._cache[key] = str(value)
            await self._write_locked(key)

    async def remove_item(self, key: str) -> None:
        async with self._lock:
            await self._ensure_cache_loaded()
            assert self._cache is not None
            if self._cache.pop(key, None) is not None:
                await self._write_locked(key)

    # ================================
    # 🧠 ВНУТРІШНЯ ЛОГІКА
    # ================================
    async def _ensure_cache_loaded(self) -> None:
        if self._cache is not None:
            return
        try:
            async with aiofiles.open(self._file_path, "r", encoding="utf-8") as file_handle:
                content = await file_handle.read()
        except FileNotFoundError:
            logger.info("📄 Файл сховища не знайдено, стартуємо з порожнього.")
            self._cache = {}
            return
        except OSError as exc:
            raise StorageError("Не вдалося прочитати сховище", details=str(exc)) from exc

        try:
            raw = json.loads(content) if content.strip() else {}
        except json.JSONDecodeError as exc:
            logger.warning("⚠️ Некоректний JSON у %s (%s). Стартуємо з порожнього.", self._file_path, exc)
            raw = {}
        if not isinstance(raw, dict):
            logger.warning("⚠️ Очікувався JSON-обʼєкт у %s, отримано %s", self._file_path, type(raw).__name__)
            raw = {}
        self._cache = {str(k): v if isinstance(v, str) else json.dumps(v) for k, v in raw.items()}
        logger.debug("📖 Сховище завантажено: %d ключ(ів)", len(self._cache))

    async def _write_locked(self, key: str) -> None:
        assert self._cache is not None
        payload = json.dumps(dict(sorted(self._cache.items())), indent=2, ensure_ascii=False)
        tmp_path = f"{self._file_path}.tmp"
        try:
            Path(self._file_path).parent.mkdir(parents=True, exist_ok=True)
            async with aiofiles.open(tmp_path, "w", encoding="utf-8") as file_handle:
                await file_handle.write(payload)
            os.replace(tmp_path, self._file_path)               # 🔀 Атомарно підміняємо
        except OSError as exc:
            with contextlib.suppress(OSError):
                os.remove(tmp_path)
            raise StorageError("Не вдалося записати сховище", details=str(exc), key=key) from exc
        logger.debug("💾 Сховище збережено → %s", self._file_path)


__all__ = ["InMemoryKeyValueStorage", "JsonFileKeyValueStorage"]
