# ⏱️ storefront/listing/filter_committer.py
"""
⏱️ DebouncedFilterCommitter — зводить серію змін фільтрів в один запис URL.

🔹 `apply(state, currency)` у межах вікна (~800 мс) перезапускає таймер; перемагає останній стан.
🔹 Після вікна: `encode` → `page=1` → `location.replace(...)` → `on_settled(currency, changed)`.
🔹 `commit_now(...)` пише одразу (кнопка «Застосувати»), скасовуючи відкладений commit.
"""

from __future__ import annotations

# 🔠 Системні імпорти
import logging
from typing import Callable, Optional

# 🧩 Внутрішні модулі проєкту
from storefront.domain.currency.interfaces import ICurrencyConverter
from storefront.domain.filters.entities import FilterState
from storefront.infrastructure.url.query_location import QueryLocation
from storefront.infrastructure.url.url_state_adapter import PAGE, UrlStateAdapter
from storefront.shared.metrics import FILTER_COMMITS
from storefront.shared.utils.debounce import DebouncedTask
from storefront.shared.utils.logger import LOG_NAME

logger = logging.getLogger(f"{LOG_NAME}.committer")

DEFAULT_COMMIT_DEBOUNCE_SEC = 0.8

SettledCallback = Callable[[str, bool], None]


class DebouncedFilterCommitter:
    """⏱️ Не більше одного відкладеного commit-у за раз."""

    def __init__(
        self,
        adapter: UrlStateAdapter,
        location: QueryLocation,
        converter_provider: Callable[[], ICurrencyConverter],
        *,
        wait_sec: float = DEFAULT_COMMIT_DEBOUNCE_SEC,
        on_settled: Optional[SettledCallback] = None,
    ) -> None:
        self._adapter = adapter
        self._location = location
        self._converter_provider = converter_provider
        self._on_settled = on_settled
        self._task = DebouncedTask(self._commit, wait_sec, name="filter-commit")

    @property
    def pending(self) -> bool:
        return self._task.pending

    def apply(self, state: FilterState, currency: str, *, source: str = "filters") -> None:
        """Планує commit; попередній незавершений витісняється."""
        logger.debug("⏱️ apply(%s) від %s у %s", state, source, currency)
        self._task(state, currency, source)

    def commit_now(self, state: FilterState, currency: str, *, include_flags: bool = False, source: str = "apply") -> bool:
        """Негайний commit без debounce. Повертає True, якщо URL змінився."""
        if self._task.cancel():
            logger.debug("🛑 Відкладений commit замінено негайним")
        return self._commit(state, currency, source, include_flags=include_flags)

    def cancel(self) -> bool:
        return self._task.cancel()

    async def flush(self) -> None:
        await self._task.flush()

    async def join(self) -> None:
        await self._task.join()

    def _commit(self, state: FilterState, currency: str, source: str, *, include_flags: bool = False) -> bool:
        params = self._adapter.encode(state, currency, self._converter_provider(), include_flags=include_flags)
        params[PAGE] = "1"
        changed = self._location.replace(params)
        FILTER_COMMITS.labels(source=source).inc()
        logger.info("✅ Фільтри закомічено (%s, %s): %s", source, currency, params)
        if self._on_settled is not None:
            self._on_settled(currency, changed)
        return changed


__all__ = ["DEFAULT_COMMIT_DEBOUNCE_SEC", "DebouncedFilterCommitter"]
