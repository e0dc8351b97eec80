"""
🧪 test_filter_committer.py — DebouncedFilterCommitter

Перевіряє:
- N викликів apply у вікні → один запис URL з останнім станом і page=1
- commit_now скасовує відкладений commit
- on_settled отримує валюту й ознаку зміни URL
"""

import pytest

from storefront.domain.filters.entities import FilterState
from storefront.infrastructure.url.query_location import QueryLocation
from storefront.infrastructure.url.url_state_adapter import UrlStateAdapter
from storefront.listing.filter_committer import DebouncedFilterCommitter


@pytest.fixture
def location():
    return QueryLocation({"page": "5"})


@pytest.fixture
def settled():
    return []


@pytest.fixture
def committer(location, converter, settled):
    return DebouncedFilterCommitter(
        UrlStateAdapter(),
        location,
        lambda: converter,
        wait_sec=0.01,
        on_settled=lambda currency, changed: settled.append((currency, changed)),
    )


@pytest.mark.asyncio
async def test_burst_results_in_single_write(committer, location, settled):
    for text in ("b", "ba", "bag"):
        committer.apply(FilterState(search=text, max_price=30000), "LKR", source="search")
    assert committer.pending
    await committer.join()

    assert location.writes == 1
    assert location.params == {"search": "bag", "minPrice": "0", "maxPrice": "30000",
                               "sort": "createdAt", "order": "desc", "page": "1"}
    assert settled == [("LKR", True)]


@pytest.mark.asyncio
async def test_unchanged_url_still_settles(committer, location, settled):
    state = FilterState(max_price=30)
    committer.apply(state, "USD")
    await committer.join()
    committer.apply(state, "USD")
    await committer.join()

    assert location.writes == 1
    assert location.get("maxPrice") == "9000"
    assert settled == [("USD", True), ("USD", False)]


@pytest.mark.asyncio
async def test_commit_now_replaces_pending(committer, location, settled):
    committer.apply(FilterState(search="old", max_price=30000), "LKR")
    assert committer.commit_now(FilterState(search="new", max_price=30000), "LKR", include_flags=True) is True
    assert not committer.pending
    await committer.join()

    assert location.get("search") == "new"
    assert location.get("featured") == "false"
    assert location.writes == 1
    assert settled == [("LKR", True)]


@pytest.mark.asyncio
async def test_cancel_and_flush(committer, location):
    committer.apply(FilterState(max_price=30000), "LKR")
    assert committer.cancel() is True
    await committer.flush()
    assert location.writes == 0

    committer.apply(FilterState(search="x", max_price=30000), "LKR")
    await committer.flush()
    assert location.get("search") == "x"
