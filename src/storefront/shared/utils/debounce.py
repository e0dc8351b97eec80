# ⏳ storefront/shared/utils/debounce.py
"""
⏳ DebouncedTask — відкладений виклик на asyncio, де перемагають аргументи останнього виклику.

🔹 Кожен виклик скасовує попередню задачу й заново запускає таймер на `wait_sec`.
🔹 Колбек може бути як звичайною функцією, так і корутиною.
🔹 `flush()` виконує відкладений виклик негайно, `cancel()` — відкидає його.
"""

from __future__ import annotations

# 🔠 Системні імпорти
import asyncio                                                  # 🔁 Задачі та таймери
import inspect                                                  # 🔍 Перевірка awaitable-результату
import logging                                                  # 🧾 Логування
from typing import Any, Callable, Dict, Optional, Tuple         # 🧰 Типи

# 🧩 Внутрішні модулі проєкту
from storefront.shared.utils.logger import LOG_NAME

logger = logging.getLogger(f"{LOG_NAME}.debounce")


class DebouncedTask:
    """⏳ Об'єкт-власник одного відкладеного виклику (не більше одного в польоті)."""

    def __init__(self, func: Callable[..., Any], wait_sec: float, *, name: str = "debounced") -> None:
        self._func = func
        self._wait_sec = max(0.0, float(wait_sec))
        self._name = name
        self._task: Optional[asyncio.Task] = None
        self._args: Tuple[Any, ...] = ()
        self._kwargs: Dict[str, Any] = {}

    @property
    def wait_sec(self) -> float:
        return self._wait_sec

    @property
    def pending(self) -> bool:
        """True, поки таймер ще не спрацював."""
        return self._task is not None and not self._task.done()

    def __call__(self, *args: Any, **kwargs: Any) -> None:
        """Планує виклик; попередній (якщо був) витісняється новими аргументами."""
        self._args, self._kwargs = args, kwargs
        if self.pending:
            assert self._task is not None
            self._task.cancel()
            logger.debug("♻️ %s: попередній виклик витіснено", self._name)
        self._task = asyncio.get_running_loop().create_task(self._delayed())

    def cancel(self) -> bool:
        """Скасовує відкладений виклик. Повертає True, якщо було що скасовувати."""
        if not self.pending:
            return False
        assert self._task is not None
        self._task.cancel()
        self._task = None
        logger.debug("🛑 %s: скасовано", self._name)
        return True

    async def flush(self) -> None:
        """Виконує відкладений виклик негайно (якщо він є)."""
        if not self.cancel():
            return
        await self._invoke()

    async def join(self) -> None:
        """Чекає, доки поточна відкладена задача відпрацює або буде скасована."""
        task = self._task
        if task is not None:
            await asyncio.wait({task})

    # ================================
    # 🧠 ВНУТРІШНЯ ЛОГІКА
    # ================================
    async def _delayed(self) -> None:
        try:
            await asyncio.sleep(self._wait_sec)
        except asyncio.CancelledError:
            return                                              # 🔁 Витіснено новим викликом
        if self._task is asyncio.current_task():
            self._task = None                                   # ✅ Таймер відпрацював, виклик уже не «pending»
        await self._invoke()

    async def _invoke(self) -> None:
        args, kwargs = self._args, self._kwargs
        logger.debug("🚀 %s: виконую відкладений виклик", self._name)
        try:
            result = self._func(*args, **kwargs)
            if inspect.isawaitable(result):
                await result
        except asyncio.CancelledError:
            raise
        except Exception:
            logger.exception("❌ %s: помилка у відкладеному виклику", self._name)


__all__ = ["DebouncedTask"]
