"""
🧪 test_url_state_adapter.py — кодек фільтрів ↔ параметри URL

Перевіряє:
- Декодування цін з базової валюти у валюту відображення
- Межові випадки: відʼємні, нульові, завеликі, «брудні» числа
- Застарілі назви параметрів сортування та розвʼязання категорії
- Кодування стану (ціни завжди в LKR, прапорці для «Застосувати»)
- Побудову канонічного ProductQuery
"""

import pytest

from storefront.domain.filters.entities import FilterState, PriceRange, ProductQuery, SortField, SortOrder
from storefront.domain.products.entities import Category
from storefront.infrastructure.url.url_state_adapter import UrlStateAdapter, parse_int, resolve_category

CATEGORIES = [Category(id="c1", name="Взуття", slug="shoes"), Category(id="c2", name="Сумки", slug="bags")]


@pytest.fixture
def adapter() -> UrlStateAdapter:
    return UrlStateAdapter(page_size=12)


@pytest.mark.parametrize(
    "raw, expected",
    [("15000", 15000), ("15000abc", 15000), ("12.7", 12), (" -5", -5), ("abc", 0), (None, 0), ("", 0)],
)
def test_parse_int_is_lenient(raw, expected):
    assert parse_int(raw) == expected


def test_resolve_category():
    assert resolve_category("shoes", CATEGORIES) == ("c1", False)
    assert resolve_category("c2", CATEGORIES) == ("c2", False)
    assert resolve_category("hats", CATEGORIES) == ("", False)
    assert resolve_category("shoes", None) == ("", True)
    assert resolve_category("", None) == ("", False)


def test_decode_price_in_base_currency(adapter, converter):
    decoded = adapter.decode({"minPrice": "0", "maxPrice": "15000"}, CATEGORIES, "LKR", converter)
    assert decoded.has_price_params
    assert decoded.state.price_range == PriceRange(0, 15000)


def test_decode_converts_to_display_currency(adapter, converter):
    decoded = adapter.decode({"minPrice": "5000", "maxPrice": "20000"}, CATEGORIES, "USD", converter)
    assert decoded.state.price_range == PriceRange(16.67, 66.67)


@pytest.mark.parametrize(
    "params, expected",
    [
        ({"minPrice": "-5", "maxPrice": "10000"}, PriceRange(0, 10000)),
        ({"minPrice": "1000", "maxPrice": "0"}, PriceRange(1000, 30000)),
        ({"minPrice": "1000"}, PriceRange(1000, 30000)),
        ({"minPrice": "0", "maxPrice": "999999"}, PriceRange(0, 30000)),
        ({"minPrice": "20000", "maxPrice": "5000"}, PriceRange(20000, 20000)),
        ({"minPrice": "abc", "maxPrice": "7000xyz"}, PriceRange(0, 7000)),
    ],
)
def test_decode_price_edge_cases(adapter, converter, params, expected):
    assert adapter.decode(params, CATEGORIES, "LKR", converter).state.price_range == expected


def test_decode_without_price_keeps_live_range(adapter, converter):
    decoded = adapter.decode({"search": "bag"}, CATEGORIES, "USD", converter, PriceRange(5, 25))
    assert not decoded.has_price_params
    assert decoded.state.price_range == PriceRange(5, 25)
    assert adapter.decode({}, CATEGORIES, "USD", converter).state.price_range == PriceRange(0, 30)


def test_decode_flags_sort_and_category(adapter, converter):
    params = {"category": "shoes", "featured": "true", "inStock": "1", "sortBy": "price", "sortOrder": "ASC"}
    state = adapter.decode(params, CATEGORIES, "LKR", converter).state
    assert state.category == "c1"
    assert state.featured is True
    assert state.in_stock is False                               # ✅ Лише буквальне "true"
    assert state.sort_by is SortField.PRICE
    assert state.sort_order is SortOrder.ASC


def test_decode_category_pending_until_list_loaded(adapter, converter):
    decoded = adapter.decode({"category": "shoes"}, None, "LKR", converter)
    assert decoded.category_pending
    assert decoded.state.category == ""


def test_decode_unknown_sort_falls_back(adapter, converter):
    state = adapter.decode({"sort": "random", "order": "sideways"}, CATEGORIES, "LKR", converter).state
    assert state.sort_by is SortField.CREATED_AT
    assert state.sort_order is SortOrder.DESC


def test_encode_defaults(adapter, converter):
    state = FilterState(min_price=0, max_price=30000)
    assert adapter.encode(state, "LKR", converter) == {
        "minPrice": "0",
        "maxPrice": "30000",
        "sort": "createdAt",
        "order": "desc",
    }


def test_encode_writes_prices_in_base_currency(adapter, converter):
    state = FilterState(search="bag", category="c2", min_price=16.67, max_price=66.67, in_stock=True)
    params = adapter.encode(state, "USD", converter)
    assert params["minPrice"] == "5001"
    assert params["maxPrice"] == "20001"
    assert params["search"] == "bag"
    assert params["category"] == "c2"
    assert params["inStock"] == "true"
    assert "featured" not in params


def test_encode_with_flags_for_apply_button(adapter, converter):
    params = adapter.encode(FilterState(min_price=0, max_price=30), "USD", converter, include_flags=True)
    assert params["featured"] == "false"
    assert params["inStock"] == "false"


def test_encode_decode_round_trip_in_base_currency(adapter, converter):
    state = FilterState(search="tee", category="c1", min_price=1500, max_price=12000, featured=True,
                        sort_by=SortField.TITLE, sort_order=SortOrder.ASC)
    params = adapter.encode(state, "LKR", converter)
    assert adapter.decode(params, CATEGORIES, "LKR", converter).state == state


def test_to_query_uses_url_prices_as_is(adapter, converter):
    params = {"page": "2", "minPrice": "5000", "maxPrice": "20000", "featured": "true", "sort": "price", "order": "asc"}
    state = FilterState(category="c1", min_price=16.67, max_price=66.67)
    assert adapter.to_query(params, state, "USD", converter) == ProductQuery(
        page=2,
        limit=12,
        category="c1",
        min_price=5000,
        max_price=20000,
        featured=True,
        sort=SortField.PRICE,
        order=SortOrder.ASC,
    )


def test_to_query_without_url_prices_converts_live_range(adapter, converter):
    query = adapter.to_query({}, FilterState(min_price=10, max_price=20), "USD", converter)
    assert (query.page, query.min_price, query.max_price) == (1, 3000, 6000)


def test_to_query_zero_max_uses_converted_default(adapter, converter):
    query = adapter.to_query({"minPrice": "0", "maxPrice": "0"}, FilterState(), "USD", converter)
    assert (query.min_price, query.max_price) == (0, 9000)


def test_to_query_conversion_failure_drops_price_filter(adapter, converter):
    query = adapter.to_query({"page": "0"}, FilterState(min_price=1, max_price=5), "EUR", converter)
    assert query.page == 1
    assert query.min_price is None and query.max_price is None
