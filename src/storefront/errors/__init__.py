# 🚨 storefront/errors/__init__.py
"""
🚨 Пакет обробки помилок: ієрархія винятків та мапінг причин для UI.
"""

from .custom_errors import (
    AppError,
    ConversionError,
    ErrorCode,
    ProductQueryError,
    StorageError,
    UserVisibleError,
)
from .reason_codes import ReasonCode, render_reason
from .reason_mapper import map_error_to_reason

__all__ = [
    "AppError",
    "ConversionError",
    "ErrorCode",
    "ProductQueryError",
    "StorageError",
    "UserVisibleError",
    "ReasonCode",
    "render_reason",
    "map_error_to_reason",
]
