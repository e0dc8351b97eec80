# 🧭 storefront/infrastructure/url/query_location.py
"""
🧭 QueryLocation — query string поточної сторінки зі слухачами змін (замість роутера).

Слухачі викликаються синхронно, лише якщо параметри справді змінилися.
"""

from __future__ import annotations

# 🔠 Системні імпорти
import logging
from typing import Callable, Dict, List, Mapping, Optional
from urllib.parse import parse_qsl, urlencode

# 🧩 Внутрішні модулі проєкту
from storefront.shared.utils.logger import LOG_NAME

logger = logging.getLogger(f"{LOG_NAME}.location")

LocationListener = Callable[[Dict[str, str]], None]


class QueryLocation:
    def __init__(self, params: Optional[Mapping[str, str]] = None) -> None:
        self._params: Dict[str, str] = {str(k): str(v) for k, v in (params or {}).items()}
        self._listeners: List[LocationListener] = []
        self._writes = 0

    @classmethod
    def from_query_string(cls, query: str) -> "QueryLocation":
        return cls(dict(parse_qsl(query.lstrip("?"), keep_blank_values=True)))

    @property
    def params(self) -> Dict[str, str]:
        return dict(self._params)

    @property
    def query_string(self) -> str:
        return urlencode(self._params)

    @property
    def writes(self) -> int:
        """Кількість фактичних змін URL за життя обʼєкта."""
        return self._writes

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        return self._params.get(key, default)

    def has(self, key: str) -> bool:
        return key in self._params

    def replace(self, params: Mapping[str, str]) -> bool:
        """Повністю замінює query string. Повертає False, якщо нічого не змінилось."""
        new_params = {str(k): str(v) for k, v in params.items()}
        if new_params == self._params:
            logger.debug("🧭 URL без змін: %s", self.query_string)
            return False
        self._params = new_params
        self._writes += 1
        logger.info("🧭 URL → ?%s", self.query_string)
        for listener in list(self._listeners):
            listener(self.params)
        return True

    def set_param(self, key: str, value: str) -> bool:
        params = self.params
        params[key] = str(value)
        return self.replace(params)

    def subscribe(self, listener: LocationListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe


__all__ = ["QueryLocation", "LocationListener"]
