"""
🧪 test_listing_page.py — сторінка каталогу від mount до запиту товарів

Перевіряє:
- Drag слайдера → один запис діапазону, один запис URL, один запит
- Закомічений діапазон упорядковується й вписується в межі до будь-якого запису
- Зміну валюти: перерахунок діапазону або «URL має пріоритет», без запису URL і запиту
- Ціни з URL при mount і зіпсований збережений діапазон
- Категорію з URL, коли список категорій приходить із запізненням
- Debounce серії змін фільтрів, «Застосувати», «Очистити»
- Last-request-wins і стан помилки
"""

import asyncio

import pytest

from storefront.domain.filters.entities import PriceRange, ProductQuery, SortField
from storefront.domain.filters.interaction import SliderPhase
from storefront.errors.custom_errors import ProductQueryError
from storefront.errors.reason_codes import ReasonCode


# ================================
# 🎚️ DRAG СЛАЙДЕРА
# ================================
@pytest.mark.asyncio
async def test_drag_commits_once(make_harness):
    h = make_harness()
    await h.page.mount()
    await h.settle()
    assert h.executor.queries == [ProductQuery(min_price=0, max_price=30000)]

    h.page.on_slide([1000, 20000])
    h.page.on_slide([5000, 20000])
    assert h.location.writes == 0
    assert h.page.interaction.sliding
    h.page.on_slide_committed([5000, 20000])
    await h.settle()

    assert h.storage.range_writes() == [("priceRange_LKR", "[5000, 20000]")]
    assert h.location.writes == 1
    assert h.location.params == {
        "minPrice": "5000",
        "maxPrice": "20000",
        "sort": "createdAt",
        "order": "desc",
        "page": "1",
    }
    assert h.fetches_after_mount == [ProductQuery(min_price=5000, max_price=20000)]
    assert h.page.slider.value == PriceRange(5000, 20000)
    assert h.page.interaction.phase is SliderPhase.IDLE
    assert h.page.interaction.has_manually_adjusted


@pytest.mark.asyncio
async def test_live_frames_never_write_or_fetch(make_harness):
    h = make_harness()
    await h.page.mount()
    for high in range(20000, 10000, -500):
        h.page.on_slide([0, high])
    await asyncio.sleep(0.05)

    assert h.page.slider.value == PriceRange(0, 10500)
    assert h.location.writes == 0
    assert h.storage.range_writes() == []
    assert len(h.executor.queries) == 1
    await h.page.unmount()


@pytest.mark.asyncio
async def test_invalid_slider_values_are_ignored(make_harness):
    h = make_harness()
    await h.page.mount()
    assert h.page.on_slide(["a", 5]) is False
    assert h.page.on_slide_committed([1, 2, 3]) is False
    assert h.page.interaction.phase is SliderPhase.IDLE
    assert h.page.slider.value == PriceRange(0, 30000)


@pytest.mark.asyncio
async def test_fallback_timer_commits_stuck_drag(make_harness):
    h = make_harness(fallback_sec=0.02)
    await h.page.mount()
    h.page.on_slide([2000, 10000])
    await asyncio.sleep(0.2)
    await h.settle()

    assert not h.page.interaction.sliding
    assert h.location.get("minPrice") == "2000"
    assert h.location.get("maxPrice") == "10000"
    assert h.storage.range_writes() == [("priceRange_LKR", "[2000, 10000]")]


@pytest.mark.asyncio
async def test_new_drag_cancels_pending_commit(make_harness):
    h = make_harness(commit_sec=0.05)
    await h.page.mount()
    h.page.on_slide([1000, 20000])
    h.page.on_slide_committed([1000, 20000])
    assert h.page.committer.pending

    h.page.on_slide([3000, 20000])
    assert not h.page.committer.pending
    assert h.page.interaction.sliding
    h.page.on_slide_committed([3000, 15000])
    await h.settle()

    assert h.location.writes == 1
    assert h.location.get("minPrice") == "3000"
    assert h.location.get("maxPrice") == "15000"
    assert h.fetches_after_mount == [ProductQuery(min_price=3000, max_price=15000)]


@pytest.mark.asyncio
async def test_reversed_commit_is_reordered_before_writes(make_harness):
    h = make_harness()
    await h.page.mount()
    h.page.on_slide([20000, 5000])
    h.page.on_slide_committed([20000, 5000])
    await h.settle()

    assert h.page.slider.value == PriceRange(5000, 20000)
    assert h.page.filters.price_range == PriceRange(5000, 20000)
    assert h.storage.range_writes() == [("priceRange_LKR", "[5000, 20000]")]
    assert (h.location.get("minPrice"), h.location.get("maxPrice")) == ("5000", "20000")
    assert h.fetches_after_mount == [ProductQuery(min_price=5000, max_price=20000)]


@pytest.mark.asyncio
async def test_out_of_range_commit_is_clamped_before_writes(make_harness):
    h = make_harness()
    await h.page.mount()
    await h.settle()
    h.page.on_slide_committed([-500, 99999])
    await h.settle()

    assert h.page.slider.value == PriceRange(0, 30000)
    assert h.page.filters.price_range == PriceRange(0, 30000)
    assert h.storage.range_writes() == [("priceRange_LKR", "[0, 30000]")]
    assert (h.location.get("minPrice"), h.location.get("maxPrice")) == ("0", "30000")
    assert h.fetches_after_mount == []                          # 🔁 Той самий запит, що й при mount


# ================================
# 💱 ЗМІНА ВАЛЮТИ
# ================================
@pytest.mark.asyncio
async def test_currency_change_reconciles_stored_range(make_harness):
    h = make_harness(stored={"priceRange_LKR": "[5000, 20000]"})
    await h.page.mount()
    await h.settle()
    assert h.executor.queries == [ProductQuery(min_price=5000, max_price=20000)]

    await h.selection.change("USD")
    await h.settle()

    assert h.page.slider.value == PriceRange(16.67, 66.67)
    assert h.page.filters.price_range == PriceRange(16.67, 66.67)
    assert h.location.writes == 0
    assert h.fetches_after_mount == []


@pytest.mark.asyncio
async def test_currency_change_rederives_from_url_prices(make_harness):
    h = make_harness("minPrice=5000&maxPrice=20000")
    await h.page.mount()
    await h.selection.change("USD")
    await h.settle()

    assert h.page.slider.value == PriceRange(16.67, 66.67)
    assert h.location.writes == 0
    assert h.fetches_after_mount == []
    assert dict(h.storage.range_writes()) == {
        "priceRange_LKR": "[5000, 20000]",
        "priceRange_USD": "[16.67, 66.67]",
    }


@pytest.mark.asyncio
async def test_currency_change_after_manual_drag_converts_range(make_harness):
    h = make_harness()
    await h.page.mount()
    h.page.on_slide_committed([5000, 20000])
    await h.settle()
    h.location.replace({"search": "bag"})
    await h.settle()
    assert h.page.slider.value == PriceRange(5000, 20000)

    await h.selection.change("USD")
    assert h.page.slider.value == PriceRange(16.67, 66.67)
    assert h.page.filters.price_range == PriceRange(16.67, 66.67)
    assert h.location.params == {"search": "bag"}

    h.page.on_filter_change("featured", True)
    await h.settle()
    assert (h.location.get("minPrice"), h.location.get("maxPrice")) == ("5001", "20001")


@pytest.mark.asyncio
async def test_currency_change_round_trip_stays_within_bounds(make_harness):
    h = make_harness(stored={"priceRange_LKR": "[100, 200]"})
    await h.page.mount()
    await h.selection.change("USD")
    usd = h.page.slider.value
    assert usd == PriceRange(0.33, 1.33)
    await h.selection.change("LKR")
    lkr = h.page.slider.value
    assert 0 <= lkr.low <= lkr.high <= 30000
    assert lkr.high - lkr.low >= 500
    await h.page.unmount()


@pytest.mark.asyncio
async def test_currency_change_during_drag_is_deferred(make_harness):
    h = make_harness()
    await h.page.mount()
    h.page.on_slide([5000, 20000])
    await h.selection.change("USD")
    assert h.page.slider.value == PriceRange(5000, 20000)    # ⏸️ Drag не перериваємо

    h.page.on_slide_committed([5000, 20000])
    await h.settle()

    assert h.location.get("minPrice") == "5000"               # 🔗 Commit у валюті початку drag-у
    assert h.location.get("maxPrice") == "20000"
    assert h.page.slider.value == PriceRange(16.67, 66.67)
    assert h.page.filters.price_range == PriceRange(16.67, 66.67)
    assert h.fetches_after_mount == [ProductQuery(min_price=5000, max_price=20000)]


@pytest.mark.asyncio
async def test_format_price_follows_display_currency(make_harness):
    h = make_harness()
    await h.page.mount()
    assert h.page.format_price(5000) == "Rs. 5,000"
    await h.selection.change("USD")
    assert h.page.format_price(5000) == "$16.67"


# ================================
# 🔗 URL ТА ЗБЕРЕЖЕНИЙ ДІАПАЗОН ПРИ MOUNT
# ================================
@pytest.mark.asyncio
async def test_mount_takes_prices_from_url(make_harness):
    h = make_harness("minPrice=0&maxPrice=15000")
    await h.page.mount()
    await h.settle()

    assert h.page.slider.value == PriceRange(0, 15000)
    assert h.page.filters.price_range == PriceRange(0, 15000)
    assert h.executor.queries == [ProductQuery(min_price=0, max_price=15000)]
    assert h.storage.range_writes() == [("priceRange_LKR", "[0, 15000]")]
    assert h.rates.refreshes == 1


@pytest.mark.asyncio
async def test_mount_with_corrupted_stored_range(make_harness):
    h = make_harness(stored={"priceRange_LKR": "not json"})
    await h.page.mount()
    assert h.page.slider.value == PriceRange(0, 30000)
    assert h.page.filters.price_range == PriceRange(0, 30000)


@pytest.mark.asyncio
async def test_mount_in_usd_uses_fine_bounds(make_harness):
    h = make_harness(currency="USD")
    await h.page.mount()
    await h.settle()
    assert h.page.slider.value == PriceRange(0, 30)
    assert h.executor.queries == [ProductQuery(min_price=0, max_price=9000)]


@pytest.mark.asyncio
async def test_mount_resolves_category_and_legacy_sort(make_harness):
    h = make_harness("category=shoes&sortBy=price&sortOrder=asc&page=3")
    await h.page.mount()
    await h.settle()

    query = h.executor.queries[0]
    assert (query.category, query.sort, query.page) == ("c1", SortField.PRICE, 3)
    assert h.page.filters.category == "c1"
    assert not h.page.category_pending


@pytest.mark.asyncio
async def test_category_load_failure_is_not_fatal(make_harness, fake_executor):
    executor = fake_executor(categories_error=ProductQueryError("down", status_code=502))
    h = make_harness("category=shoes", executor=executor)
    await h.page.mount()
    await h.settle()

    assert h.page.categories is None
    assert h.page.category_pending
    assert h.page.filters.category == ""
    assert len(h.executor.queries) == 1
    await h.page.unmount()


@pytest.mark.asyncio
async def test_url_category_resolves_when_list_arrives_late(make_harness, fake_executor):
    executor = fake_executor(categories_error=ProductQueryError("down", status_code=502))
    h = make_harness("category=shoes", executor=executor, category_retry_sec=0.01)
    await h.page.mount()
    assert h.page.category_pending

    executor.categories_error = None
    await asyncio.sleep(0.05)
    await h.settle()

    assert h.executor.category_calls == 2
    assert h.page.filters.category == "c1"
    assert not h.page.category_pending
    assert h.executor.queries[0].category == ""
    assert h.fetches_after_mount == [ProductQuery(category="c1", min_price=0, max_price=30000)]
    assert h.location.writes == 0


@pytest.mark.asyncio
async def test_category_retries_stop_after_limit(make_harness, fake_executor):
    executor = fake_executor(categories_error=ProductQueryError("down", status_code=502))
    h = make_harness("category=shoes", executor=executor, category_retry_sec=0.01, category_retry_attempts=2)
    await h.page.mount()
    await asyncio.sleep(0.1)
    await h.settle()

    assert h.executor.category_calls == 3
    assert h.page.categories == []
    assert not h.page.category_pending
    assert len(h.executor.queries) == 1


# ================================
# 🧾 ФІЛЬТРИ ФОРМИ
# ================================
@pytest.mark.asyncio
async def test_burst_of_filter_changes_is_one_commit(make_harness):
    h = make_harness()
    await h.page.mount()
    h.page.on_filter_change("featured", True)
    h.page.on_filter_change("sort_by", "price")
    h.page.on_filter_change("category", "c2")
    h.page.on_search_change("bag")
    await h.settle()

    assert h.location.writes == 1
    assert len(h.fetches_after_mount) == 1
    query = h.fetches_after_mount[0]
    assert (query.search, query.category, query.featured, query.sort) == ("bag", "c2", True, SortField.PRICE)


@pytest.mark.asyncio
async def test_unknown_filter_key_raises(make_harness):
    h = make_harness()
    with pytest.raises(ValueError):
        h.page.on_filter_change("colour", "red")


@pytest.mark.asyncio
async def test_apply_commits_immediately_with_flags(make_harness):
    h = make_harness(commit_sec=10)
    await h.page.mount()
    h.page.open_drawer()
    h.page.on_search_change("tee")
    assert h.page.committer.pending

    assert h.page.apply_filters() is True
    assert not h.page.committer.pending
    assert not h.page.drawer_open
    assert h.location.get("search") == "tee"
    assert h.location.get("featured") == "false"
    assert h.location.get("inStock") == "false"
    await h.settle()
    assert h.fetches_after_mount[0].search == "tee"


@pytest.mark.asyncio
async def test_change_page_rewrites_only_page(make_harness):
    h = make_harness("minPrice=1000&maxPrice=9000&search=bag")
    await h.page.mount()
    h.page.change_page(2)
    await h.settle()

    assert h.location.params == {"minPrice": "1000", "maxPrice": "9000", "search": "bag", "page": "2"}
    assert h.fetches_after_mount == [ProductQuery(page=2, search="bag", min_price=1000, max_price=9000)]


@pytest.mark.asyncio
async def test_clear_filters_resets_everything(make_harness):
    h = make_harness()
    await h.page.mount()
    h.page.on_slide([5000, 20000])
    h.page.on_slide_committed([5000, 20000])
    await h.settle()
    assert "priceRange_LKR" in h.storage.snapshot()

    h.page.open_drawer()
    await h.page.clear_filters()
    await h.settle()

    assert h.location.params == {}
    assert "priceRange_LKR" not in h.storage.snapshot()
    assert h.page.slider.value == PriceRange(0, 30000)
    assert not h.page.interaction.has_manually_adjusted
    assert not h.page.drawer_open
    assert h.page.last_query == ProductQuery(min_price=0, max_price=30000)


@pytest.mark.asyncio
async def test_clear_filters_on_clean_page_does_not_refetch(make_harness):
    h = make_harness()
    await h.page.mount()
    await h.settle()
    await h.page.clear_filters()
    await h.settle()
    assert len(h.executor.queries) == 1


# ================================
# 🌐 ЗАПИТИ ТОВАРІВ
# ================================
@pytest.mark.asyncio
async def test_last_request_wins(make_harness, fake_executor):
    executor = fake_executor()
    gate = asyncio.Event()
    executor.gates[0] = gate
    h = make_harness(executor=executor)
    await h.page.mount()
    assert h.page.view.loading

    h.page.change_page(2)
    await asyncio.sleep(0.01)
    assert [p.id for p in h.page.view.products] == ["p1"]

    gate.set()
    await h.settle()
    assert [p.id for p in h.page.view.products] == ["p1"]
    assert h.page.view.pagination.page == 2
    assert not h.page.view.loading


@pytest.mark.asyncio
async def test_stale_error_is_discarded(make_harness, fake_executor):
    executor = fake_executor()
    executor.gates[0] = asyncio.Event()
    executor.errors[0] = ProductQueryError("down", status_code=500)
    h = make_harness(executor=executor)
    await h.page.mount()
    h.page.change_page(2)
    await asyncio.sleep(0.01)
    executor.gates[0].set()
    await h.settle()
    assert h.page.view.error is None


@pytest.mark.asyncio
async def test_fetch_error_sets_error_view(make_harness, fake_executor):
    executor = fake_executor()
    executor.errors[0] = ProductQueryError("down", status_code=503)
    h = make_harness(executor=executor)
    await h.page.mount()
    await h.settle()

    assert h.page.view.error is not None
    assert h.page.view.error.reason is ReasonCode.HTTP_STATUS
    assert h.page.view.error.message == "Failed to fetch products (HTTP 503)."
    assert not h.page.view.loading

    h.page.change_page(2)
    await h.settle()
    assert h.page.view.error is None


@pytest.mark.asyncio
async def test_unmount_flushes_pending_range_and_stops_listening(make_harness):
    h = make_harness(commit_sec=10)
    await h.page.mount()
    await h.settle()
    h.page.on_slide([1000, 9000])
    h.page.on_slide_committed([1000, 9000])
    await h.page.unmount()

    assert h.storage.range_writes() == [("priceRange_LKR", "[1000, 9000]")]
    assert h.location.writes == 0
    h.location.replace({"page": "4"})
    await asyncio.sleep(0)
    assert len(h.executor.queries) == 1
