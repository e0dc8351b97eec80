# 🔗 storefront/infrastructure/url/__init__.py
from .query_location import QueryLocation
from .url_state_adapter import UrlStateAdapter, has_price_params, parse_int, resolve_category

__all__ = ["QueryLocation", "UrlStateAdapter", "has_price_params", "parse_int", "resolve_category"]
