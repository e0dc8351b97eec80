# 🧭 storefront/errors/reason_mapper.py
"""
🧭 Мапить винятки → `ReasonCode` + контекст для тексту помилки.

🔹 Наші `ProductQueryError` розбираються за `status_code` та `details`.
🔹 Сирі винятки httpx (таймаути, зʼєднання, статуси) мапляться напряму.
🔹 Решта → `INTERNAL`.
"""

from __future__ import annotations

# 🌐 Зовнішні бібліотеки
import httpx                                                    # 🌐 Винятки HTTP-клієнта

# 🔠 Системні імпорти
import logging
from typing import Any, Dict, Optional, Tuple

# 🧩 Внутрішні модулі проєкту
from storefront.shared.utils.logger import LOG_NAME
from .custom_errors import ProductQueryError
from .reason_codes import ReasonCode

logger = logging.getLogger(f"{LOG_NAME}.errors.reason_mapper")


def map_error_to_reason(exc: BaseException) -> Tuple[ReasonCode, Dict[str, Any]]:
    """Повертає (reason_code, ctx) для винятку."""
    logger.debug("🔎 map_error_to_reason", extra={"exc_type": type(exc).__name__})

    if isinstance(exc, ProductQueryError):
        if exc.status_code is not None:
            return ReasonCode.HTTP_STATUS, {"status_code": exc.status_code}
        cause = exc.__cause__
        if cause is not None:
            mapped = _map_httpx_errors(cause)
            if mapped:
                return mapped
        if exc.details == "bad_response":
            return ReasonCode.BAD_RESPONSE, {}
        return ReasonCode.HTTP_CONNECTION, {}

    mapped = _map_httpx_errors(exc)
    if mapped:
        return mapped

    logger.warning("❓ Unknown error mapped to INTERNAL", extra={"exc_type": type(exc).__name__})
    return ReasonCode.INTERNAL, {}


def _map_httpx_errors(exc: BaseException) -> Optional[Tuple[ReasonCode, Dict[str, Any]]]:
    """ReasonCode для httpx-винятків або None."""
    if isinstance(exc, httpx.TimeoutException):
        return ReasonCode.HTTP_TIMEOUT, {}
    if isinstance(exc, httpx.HTTPStatusError):
        return ReasonCode.HTTP_STATUS, {"status_code": exc.response.status_code}
    if isinstance(exc, httpx.TransportError):
        return ReasonCode.HTTP_CONNECTION, {}
    return None


__all__ = ["map_error_to_reason"]
