# tests/listing/conftest.py
import asyncio
from dataclasses import dataclass
from decimal import Decimal
from typing import Dict, List, Optional

import pytest

from storefront.domain.currency.interfaces import ICurrencyRatesProvider
from storefront.domain.filters.entities import ProductQuery
from storefront.domain.products.entities import Category, Pagination, Product, ProductPage
from storefront.domain.products.interfaces import IProductQueryExecutor
from storefront.infrastructure.currency.currency_converter import CurrencyConverter
from storefront.infrastructure.currency.currency_selection import CurrencySelection
from storefront.infrastructure.data_storage.key_value_storage import InMemoryKeyValueStorage
from storefront.infrastructure.data_storage.range_store import PersistedRangeStore
from storefront.infrastructure.url.query_location import QueryLocation
from storefront.infrastructure.url.url_state_adapter import UrlStateAdapter
from storefront.listing.listing_page import ListingPage

CATEGORIES = [Category(id="c1", name="Взуття", slug="shoes"), Category(id="c2", name="Сумки", slug="bags")]


class FakeRates(ICurrencyRatesProvider):
    """1 USD = 300 LKR."""

    def __init__(self) -> None:
        self.refreshes = 0

    def get_converter(self) -> CurrencyConverter:
        return CurrencyConverter({"LKR": 1, "USD": 300})

    def get_all_rates(self) -> Dict[str, Decimal]:
        return self.get_converter().rates

    async def refresh_if_stale(self) -> None:
        self.refreshes += 1

    async def close(self) -> None:
        pass


class FakeExecutor(IProductQueryExecutor):
    """Записує запити; `gates[i]` притримує i-ту відповідь, `errors[i]` її ламає."""

    def __init__(self, categories: Optional[List[Category]] = None, categories_error: Optional[Exception] = None):
        self.queries: List[ProductQuery] = []
        self.gates: Dict[int, asyncio.Event] = {}
        self.errors: Dict[int, Exception] = {}
        self._categories = list(CATEGORIES if categories is None else categories)
        self.categories_error = categories_error
        self.category_calls = 0

    async def fetch_products(self, query: ProductQuery) -> ProductPage:
        index = len(self.queries)
        self.queries.append(query)
        gate = self.gates.get(index)
        if gate is not None:
            await gate.wait()
        if index in self.errors:
            raise self.errors[index]
        product = Product(id=f"p{index}", title=f"Товар #{index}", price=Decimal(5000))
        return ProductPage.of([product], Pagination(page=query.page, limit=query.limit, total=1, pages=1))

    async def fetch_categories(self) -> List[Category]:
        self.category_calls += 1
        if self.categories_error is not None:
            raise self.categories_error
        return list(self._categories)

    async def close(self) -> None:
        pass


class CountingStorage(InMemoryKeyValueStorage):
    def __init__(self, initial=None):
        super().__init__(initial)
        self.writes = []

    async def set_item(self, key, value):
        self.writes.append((key, value))
        await super().set_item(key, value)

    def range_writes(self):
        return [(key, value) for key, value in self.writes if key.startswith("priceRange_")]


@dataclass
class Harness:
    page: ListingPage
    executor: FakeExecutor
    storage: CountingStorage
    range_store: PersistedRangeStore
    location: QueryLocation
    selection: CurrencySelection
    rates: FakeRates

    async def settle(self) -> None:
        """Чекає commit, запити та відкладений запис діапазону."""
        await self.page.wait_idle()
        await self.range_store.join()

    @property
    def fetches_after_mount(self) -> List[ProductQuery]:
        return self.executor.queries[1:]


@pytest.fixture
def make_harness():
    def _make(
        query: str = "",
        *,
        currency: str = "LKR",
        stored: Optional[Dict[str, str]] = None,
        executor: Optional[FakeExecutor] = None,
        commit_sec: float = 0.01,
        fallback_sec: float = 5.0,
        category_retry_sec: float = 5.0,
        category_retry_attempts: int = 3,
    ) -> Harness:
        storage = CountingStorage(stored)
        range_store = PersistedRangeStore(storage, debounce_sec=0.01)
        location = QueryLocation.from_query_string(query)
        selection = CurrencySelection(storage, default=currency)
        rates = FakeRates()
        executor = executor or FakeExecutor()
        page = ListingPage(
            executor=executor,
            rates=rates,
            selection=selection,
            range_store=range_store,
            location=location,
            adapter=UrlStateAdapter(page_size=12),
            commit_debounce_sec=commit_sec,
            slider_fallback_sec=fallback_sec,
            category_retry_sec=category_retry_sec,
            category_retry_attempts=category_retry_attempts,
        )
        return Harness(page, executor, storage, range_store, location, selection, rates)

    return _make


@pytest.fixture
def fake_executor():
    """Фабрика FakeExecutor для тестів, яким потрібні затримки чи помилки."""
    return FakeExecutor
