# 💾 storefront/infrastructure/data_storage/__init__.py
from .key_value_storage import InMemoryKeyValueStorage, JsonFileKeyValueStorage
from .range_store import KEY_PREFIX, PersistedRangeStore, range_key

__all__ = [
    "InMemoryKeyValueStorage",
    "JsonFileKeyValueStorage",
    "KEY_PREFIX",
    "PersistedRangeStore",
    "range_key",
]
