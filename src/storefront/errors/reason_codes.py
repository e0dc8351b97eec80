# 🧮 storefront/errors/reason_codes.py
"""
🧮 Перелік причин помилок для стану помилки списку товарів та їх тексти.
"""

from __future__ import annotations

# 🔠 Системні імпорти
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping


class ReasonCode(str, Enum):
    """🧮 Причина, яку бачить шар відображення."""

    HTTP_TIMEOUT = "http_timeout"
    HTTP_CONNECTION = "http_connection"
    HTTP_STATUS = "http_status"
    BAD_RESPONSE = "bad_response"
    INTERNAL = "internal"


_MESSAGES: Mapping[ReasonCode, str] = MappingProxyType(
    {
        ReasonCode.HTTP_TIMEOUT: "Failed to fetch products: the catalog did not respond in time.",
        ReasonCode.HTTP_CONNECTION: "Failed to fetch products: the catalog is unreachable.",
        ReasonCode.HTTP_STATUS: "Failed to fetch products (HTTP {status_code}).",
        ReasonCode.BAD_RESPONSE: "Failed to fetch products: unexpected response.",
        ReasonCode.INTERNAL: "Failed to fetch products.",
    }
)


def render_reason(code: ReasonCode, ctx: Mapping[str, Any]) -> str:
    """Підставляє `ctx` у шаблон; відсутні ключі дають базовий текст."""
    template = _MESSAGES.get(code, _MESSAGES[ReasonCode.INTERNAL])
    try:
        return template.format(**ctx)
    except (KeyError, IndexError):
        return _MESSAGES[ReasonCode.INTERNAL]


__all__ = ["ReasonCode", "render_reason"]
