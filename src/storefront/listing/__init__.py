# 🛍️ storefront/listing/__init__.py
"""🛍️ Сторінка каталогу: слайдер ціни, debounce-commit фільтрів, синхронізація з URL."""

from .filter_committer import DebouncedFilterCommitter
from .listing_page import ListingError, ListingPage, ListingView
from .slider import PriceSliderController

__all__ = [
    "DebouncedFilterCommitter",
    "ListingError",
    "ListingPage",
    "ListingView",
    "PriceSliderController",
]
