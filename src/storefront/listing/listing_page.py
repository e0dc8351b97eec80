# 🛍️ storefront/listing/listing_page.py
"""
🛍️ ListingPage — сторінка каталогу з фільтрами, слайдером ціни та пагінацією.

Тримає чотири представлення одного стану узгодженими:
    • живе значення слайдера (`slider.value`);
    • локальний `FilterState` (валюта відображення);
    • збережений діапазон на валюту (`range_store`);
    • query string (`location`, ціни в базовій валюті).

Потік: взаємодія → DebouncedFilterCommitter → URL → `_on_url_changed` → `ProductQuery` →
запит товарів, лише якщо запит змінився. Зміна валюти йде паралельним шляхом
(`on_currency_changed`) і не пише URL та не запускає запит.
"""

from __future__ import annotations

# 🔠 Системні імпорти
import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, List, Mapping, Optional, Set, Tuple

# 🧩 Внутрішні модулі проєкту
from storefront.domain.currency.interfaces import BASE_CURRENCY, ICurrencyConverter, ICurrencyRatesProvider
from storefront.domain.filters.bounds import resolve_bounds
from storefront.domain.filters.entities import CurrencyBounds, FilterState, PriceRange, ProductQuery, SortField, SortOrder
from storefront.domain.filters.interaction import SliderInteraction
from storefront.domain.filters.interfaces import IPriceRangeStore
from storefront.domain.filters.reconciliation import (
    SKIP_MANUAL,
    clamp_range,
    reconcile_currency_change,
    should_reconcile,
)
from storefront.domain.products.entities import Category, Pagination, Product
from storefront.domain.products.interfaces import IProductQueryExecutor
from storefront.errors.custom_errors import ConversionError, ProductQueryError
from storefront.errors.reason_codes import ReasonCode, render_reason
from storefront.errors.reason_mapper import map_error_to_reason
from storefront.infrastructure.currency.currency_converter import format_amount
from storefront.infrastructure.currency.currency_selection import CurrencySelection
from storefront.infrastructure.url.query_location import QueryLocation
from storefront.infrastructure.url.url_state_adapter import PAGE, UrlStateAdapter, has_price_params
from storefront.listing.filter_committer import DEFAULT_COMMIT_DEBOUNCE_SEC, DebouncedFilterCommitter
from storefront.listing.slider import DEFAULT_SLIDER_FALLBACK_SEC, PriceSliderController
from storefront.shared.metrics import (
    CURRENCY_RECONCILIATIONS,
    PRODUCT_FETCH_FAILURE,
    PRODUCT_FETCH_STALE,
    PRODUCT_FETCH_SUCCESS,
)
from storefront.shared.utils.debounce import DebouncedTask
from storefront.shared.utils.logger import LOG_NAME

logger = logging.getLogger(f"{LOG_NAME}.listing")

# 🔁 Поля, зміна яких одразу (через debounce) комітиться в URL
_INSTANT_KEYS = frozenset({"category", "featured", "in_stock", "sort_by", "sort_order"})

DEFAULT_CATEGORY_RETRY_SEC = 5.0
DEFAULT_CATEGORY_RETRY_ATTEMPTS = 3


# ================================
# 🖼️ СТАН ВІДОБРАЖЕННЯ
# ================================
@dataclass(frozen=True)
class ListingError:
    reason: ReasonCode
    message: str


@dataclass
class ListingView:
    products: Tuple[Product, ...] = ()
    pagination: Pagination = field(default_factory=Pagination)
    loading: bool = False
    error: Optional[ListingError] = None


# ================================
# 🛍️ СТОРІНКА
# ================================
class ListingPage:
    """🛍️ Власник усього стану фільтрів сторінки каталогу."""

    def __init__(
        self,
        *,
        executor: IProductQueryExecutor,
        rates: ICurrencyRatesProvider,
        selection: CurrencySelection,
        range_store: IPriceRangeStore,
        location: QueryLocation,
        adapter: UrlStateAdapter,
        commit_debounce_sec: float = DEFAULT_COMMIT_DEBOUNCE_SEC,
        slider_fallback_sec: float = DEFAULT_SLIDER_FALLBACK_SEC,
        category_retry_sec: float = DEFAULT_CATEGORY_RETRY_SEC,
        category_retry_attempts: int = DEFAULT_CATEGORY_RETRY_ATTEMPTS,
    ) -> None:
        self._executor = executor
        self._rates = rates
        self._selection = selection
        self._range_store = range_store
        self._location = location
        self._adapter = adapter

        bounds = resolve_bounds(selection.current)
        self.view = ListingView()
        self.filters = FilterState.defaults(bounds)
        self.search_input = ""
        self.drawer_open = False
        self.categories: Optional[List[Category]] = None
        self.category_pending = False

        self.interaction = SliderInteraction()
        self.slider = PriceSliderController(
            self.interaction,
            self._on_slider_commit,
            initial=bounds.default_range(),
            fallback_sec=slider_fallback_sec,
            on_interrupt=self._on_drag_interrupted_commit,
        )
        self.committer = DebouncedFilterCommitter(
            adapter,
            location,
            self._converter,
            wait_sec=commit_debounce_sec,
            on_settled=self._on_commit_settled,
        )
        self._category_retry = DebouncedTask(self._retry_categories, category_retry_sec, name="category-retry")
        self._category_retry_attempts = max(0, int(category_retry_attempts))
        self._category_failures = 0

        self._previous_currency: str = selection.current
        self._initial_mount = True
        self._mounted = False
        self._last_query: Optional[ProductQuery] = None
        self._fetch_seq = 0
        self._fetch_tasks: Set[asyncio.Task] = set()
        self._unsubscribers: List[Callable[[], None]] = []

    # ================================
    # 🔎 ПОХІДНІ ЗНАЧЕННЯ
    # ================================
    @property
    def currency(self) -> str:
        return self._selection.current

    @property
    def bounds(self) -> CurrencyBounds:
        return resolve_bounds(self.currency)

    @property
    def last_query(self) -> Optional[ProductQuery]:
        return self._last_query

    def _converter(self) -> ICurrencyConverter:
        return self._rates.get_converter()

    # ================================
    # 🚀 ЖИТТЄВИЙ ЦИКЛ
    # ================================
    async def mount(self) -> None:
        """Курси → категорії → збережений діапазон → синхронізація з URL (і перший запит)."""
        await self._rates.refresh_if_stale()
        categories_loaded = await self._load_categories()

        currency = self.currency
        self._previous_currency = currency
        stored = await self._range_store.load(currency)
        initial = stored or self.bounds.default_range()
        logger.info("🛍️ mount: валюта=%s, діапазон=%s (%s)", currency, initial.as_list(), "збережений" if stored else "типовий")
        self.slider.set_value(initial)
        self.filters = self.filters.with_price(initial)

        self._unsubscribers = [
            self._location.subscribe(self._on_url_changed),
            self._selection.subscribe(self.on_currency_changed),
        ]
        self._mounted = True
        self._sync_from_url(self._location.params)
        self._initial_mount = False
        if not categories_loaded and self._category_retry_attempts:
            self._category_retry()

    async def unmount(self) -> None:
        """Зупиняє таймери й слухачів, дописує відкладені діапазони."""
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers = []
        self._mounted = False
        self.committer.cancel()
        self.slider.cancel()
        self._category_retry.cancel()
        self.interaction.reset()
        await self._range_store.flush()
        for task in list(self._fetch_tasks):
            task.cancel()
        if self._fetch_tasks:
            await asyncio.gather(*self._fetch_tasks, return_exceptions=True)
        logger.info("👋 unmount")

    async def wait_idle(self) -> None:
        """Чекає відкладений commit і всі запити в польоті (для тестів та graceful shutdown)."""
        await self.committer.join()
        while self._fetch_tasks:
            await asyncio.gather(*list(self._fetch_tasks), return_exceptions=True)

    async def reload_categories(self) -> bool:
        """
        Повторно тягне категорії та перерезолвлює категорію з URL.

        Returns:
            bool: True, якщо список завантажено.
        """
        if not await self._load_categories():
            return False
        if self._mounted and self._location.get("category"):
            logger.info("🗂️ Категорії прийшли, перерезолвлюю категорію з URL")
            self._sync_from_url(self._location.params)
        return True

    async def _load_categories(self) -> bool:
        try:
            self.categories = await self._executor.fetch_categories()
        except ProductQueryError as exc:
            logger.warning("⚠️ Категорії не завантажено: %s", exc, extra=exc.to_log_extra())
            self.categories = None                              # ⏳ Категорія з URL лишається pending
            return False
        self._category_failures = 0
        return True

    async def _retry_categories(self) -> None:
        if not self._mounted or await self.reload_categories():
            return
        self._category_failures += 1
        if self._category_failures < self._category_retry_attempts:
            self._category_retry()
        else:
            logger.warning("⚠️ Категорії недоступні після %d спроб, фільтр категорії вимкнено", self._category_failures)
            self.categories = []
            self.category_pending = False

    # ================================
    # ✍️ ВВЕДЕННЯ КОРИСТУВАЧА
    # ================================
    def on_search_change(self, text: str) -> None:
        self.search_input = text
        self.filters = self.filters.with_changes(search=text)
        self.committer.apply(self.filters, self.currency, source="search")

    def on_filter_change(self, key: str, value: Any) -> None:
        """
        Зміна поля фільтра форми.

        `category`, `featured`, `in_stock`, `sort_by`, `sort_order` комітяться через debounce;
        ціни змінюються лише слайдером.
        """
        if key == "search":
            self.on_search_change(str(value or ""))
            return
        if key == "sort_by":
            value = SortField.parse(value)
        elif key == "sort_order":
            value = SortOrder.parse(value)
        elif key in ("featured", "in_stock"):
            value = bool(value)
        elif key == "category":
            value = str(value or "")
        else:
            raise ValueError(f"Невідоме поле фільтра: {key!r}")
        self.filters = self.filters.with_changes(**{key: value})
        if key in _INSTANT_KEYS:
            self.committer.apply(self.filters, self.currency, source=key)

    def on_slide(self, values: Any) -> bool:
        return self.slider.on_slide(values, self.interaction.origin_currency or self.currency)

    def on_slide_committed(self, values: Any) -> bool:
        return self.slider.on_slide_committed(values, self.currency)

    def apply_filters(self) -> bool:
        """Кнопка «Застосувати»: негайний commit локальних фільтрів."""
        state = self.filters.with_changes(search=self.search_input)
        changed = self.committer.commit_now(state, self.currency, include_flags=True, source="apply")
        self.close_drawer()
        return changed

    async def clear_filters(self) -> None:
        """Скидає фільтри до типових, видаляє збережений діапазон валюти та чистить URL."""
        self.committer.cancel()
        self.slider.cancel()
        self.interaction.reset()
        bounds = self.bounds
        self.filters = FilterState.defaults(bounds)
        self.search_input = ""
        self.slider.set_value(bounds.default_range())
        await self._range_store.clear(self.currency)
        if not self._location.replace({}):
            self._maybe_fetch(self._location.params)
        self.close_drawer()
        logger.info("🧹 Фільтри очищено (%s)", self.currency)

    def change_page(self, page: int) -> None:
        self._location.set_param(PAGE, str(max(1, int(page))))

    def open_drawer(self) -> None:
        self.drawer_open = True

    def close_drawer(self) -> None:
        self.drawer_open = False

    def format_price(self, amount: float, from_currency: str = BASE_CURRENCY) -> str:
        """Сума з `from_currency` у валюті відображення."""
        currency = self.currency
        try:
            return format_amount(self._converter().convert(amount, from_currency, currency), currency)
        except (ConversionError, ValueError) as exc:
            logger.warning("⚠️ Ціну не сконвертовано для показу: %s", exc)
            return format_amount(amount, from_currency)

    # ================================
    # 🎚️ СЛАЙДЕР
    # ================================
    def _on_slider_commit(self, price: PriceRange, origin_currency: str) -> None:
        price = clamp_range(price.ordered(), resolve_bounds(origin_currency))
        self.slider.set_value(price)
        self.filters = self.filters.with_price(price)
        self._range_store.save(origin_currency, price)
        try:
            converter = self._converter()
            logger.info(
                "🎚️ Commit %s %s = [%s, %s] %s",
                price.as_list(),
                origin_currency,
                self._adapter.to_base(price.low, origin_currency, converter),
                self._adapter.to_base(price.high, origin_currency, converter),
                BASE_CURRENCY,
            )
        except (ConversionError, ValueError) as exc:
            logger.warning("⚠️ Закомічений діапазон не переведено в базову валюту: %s", exc)
        self.committer.apply(self.filters, origin_currency, source="slider")

    def _on_drag_interrupted_commit(self) -> None:
        if self.committer.cancel():
            logger.debug("🛑 Новий drag скасував відкладений commit")

    def _on_commit_settled(self, currency: str, url_changed: bool) -> None:
        self.close_drawer()
        self.interaction.settle()
        if currency != self.currency and not url_changed:
            logger.debug("🔁 Commit у %s, а валюта вже %s, перебудовую з URL", currency, self.currency)
            self._rebuild_from_url(self._location.params)

    # ================================
    # 🔗 СИНХРОНІЗАЦІЯ З URL
    # ================================
    def _on_url_changed(self, params: Mapping[str, str]) -> None:
        skip = self.interaction.consume_skip()
        origin = self.interaction.origin_currency
        if skip and origin and origin != self.currency:
            logger.debug("🔁 Валюта змінилась під час commit-у (%s → %s), skip не враховано", origin, self.currency)
            skip = False
        if skip:
            logger.debug("⏭️ URL змінено нашим commit-ом, локальний стан не перебудовую")
            self._maybe_fetch(params)
            return
        self._sync_from_url(params)

    def _sync_from_url(self, params: Mapping[str, str]) -> None:
        if self.interaction.sliding:
            logger.debug("🖐️ Drag триває, локальний стан з URL не перебудовую")
        else:
            self._rebuild_from_url(params)
        self._maybe_fetch(params)

    def _rebuild_from_url(self, params: Mapping[str, str]) -> None:
        currency = self.currency
        decoded = self._adapter.decode(params, self.categories, currency, self._converter(), self.slider.value)
        state = decoded.state
        if decoded.has_price_params:
            price = clamp_range(state.price_range, resolve_bounds(currency))
            state = state.with_price(price)
            self.slider.set_value(price)
            self._range_store.save(currency, price)
        self.filters = state
        self.search_input = state.search
        self.category_pending = decoded.category_pending
        self._previous_currency = currency

    def _maybe_fetch(self, params: Mapping[str, str]) -> None:
        query = self._adapter.to_query(params, self.filters, self.currency, self._converter())
        if query == self._last_query:
            logger.debug("⏭️ Канонічний запит не змінився, запит товарів пропущено")
            return
        self._last_query = query
        self._start_fetch(query)

    # ================================
    # 💱 ЗМІНА ВАЛЮТИ
    # ================================
    def on_currency_changed(self, old_currency: str, new_currency: str) -> None:
        """Перерахунок діапазону слайдера; URL не пишеться, запит не запускається."""
        previous = self._previous_currency or old_currency
        url_has_price = has_price_params(self._location.params)
        reason = should_reconcile(
            previous,
            new_currency,
            initial_mount=self._initial_mount,
            sliding=self.interaction.sliding,
            manually_adjusted=self.interaction.has_manually_adjusted,
            url_has_price=url_has_price,
        )
        if reason is None:
            price = reconcile_currency_change(self.slider.value, previous, new_currency, self._converter())
            self._apply_price(price, new_currency)
            CURRENCY_RECONCILIATIONS.labels(outcome="reconciled").inc()
            logger.info("💱 %s → %s: слайдер %s", previous, new_currency, price.as_list())
            return

        CURRENCY_RECONCILIATIONS.labels(outcome=reason).inc()
        if url_has_price and not self.interaction.sliding and not self._initial_mount:
            logger.info("💱 %s → %s: діапазон береться з URL", previous, new_currency)
            self._rebuild_from_url(self._location.params)
        elif reason == SKIP_MANUAL:
            price = reconcile_currency_change(self.slider.value, previous, new_currency, self._converter())
            self._apply_price(price, new_currency)
            logger.info("💱 %s → %s: ручний діапазон переведено без скидання: %s", previous, new_currency, price.as_list())
        else:
            logger.debug("💱 %s → %s: перерахунок пропущено (%s)", previous, new_currency, reason)

    def _apply_price(self, price: PriceRange, currency: str) -> None:
        self.slider.set_value(price)
        self.filters = self.filters.with_price(price)
        self._previous_currency = currency

    # ================================
    # 🌐 ЗАПИТ ТОВАРІВ
    # ================================
    def _start_fetch(self, query: ProductQuery) -> None:
        self._fetch_seq += 1
        seq = self._fetch_seq
        self.view.loading = True
        task = asyncio.get_running_loop().create_task(self._fetch(query, seq))
        self._fetch_tasks.add(task)
        task.add_done_callback(self._fetch_tasks.discard)
        logger.info("🌐 Запит #%d: %s", seq, query.to_params())

    async def _fetch(self, query: ProductQuery, seq: int) -> None:
        try:
            page = await self._executor.fetch_products(query)
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            if seq != self._fetch_seq:
                PRODUCT_FETCH_STALE.inc()
                logger.debug("🗑️ Помилка застарілого запиту #%d відкинута", seq)
                return
            reason, ctx = map_error_to_reason(exc)
            if isinstance(exc, ProductQueryError):
                logger.warning("⚠️ Запит #%d не вдався: %s", seq, exc, extra=exc.to_log_extra())
            else:
                logger.exception("❌ Неочікувана помилка запиту #%d", seq)
            PRODUCT_FETCH_FAILURE.labels(reason=reason.value).inc()
            self.view.error = ListingError(reason=reason, message=render_reason(reason, ctx))
            self.view.loading = False
            return

        if seq != self._fetch_seq:
            PRODUCT_FETCH_STALE.inc()
            logger.debug("🗑️ Відповідь застарілого запиту #%d відкинута (актуальний #%d)", seq, self._fetch_seq)
            return
        self.view.products = page.items
        self.view.pagination = page.pagination
        self.view.error = None
        self.view.loading = False
        PRODUCT_FETCH_SUCCESS.inc()


__all__ = ["ListingError", "ListingView", "ListingPage"]
