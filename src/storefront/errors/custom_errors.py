# 🚨 storefront/errors/custom_errors.py
"""
🚨 Ієрархія винятків storefront.

🔹 `AppError` — базовий виняток із `message` та необовʼязковими `details`.
🔹 `UserVisibleError` — помилки, текст яких можна показати у стані помилки списку.
🔹 `ConversionError` / `StorageError` — відновлювані локально (fallback до безпечних значень).
🔹 `ProductQueryError` — збій запиту до каталогу, піднімається в шар відображення.
"""

from __future__ import annotations

# 🔠 Системні імпорти
import logging                                                  # 🧾 Логування створення винятків
from typing import Dict, Optional                               # 📐 Типізація

# 🧩 Внутрішні модулі проєкту
from storefront.shared.utils.logger import LOG_NAME

logger = logging.getLogger(f"{LOG_NAME}.errors")


# ================================
# ⚠️ КОДИ ПОМИЛОК
# ================================
class ErrorCode:
    """⚠️ Короткі коди для `extra` у логах."""

    CONVERSION = "conversion_error"
    STORAGE = "storage_error"
    NETWORK = "network_error"
    UNKNOWN = "unknown_error"


# ================================
# 🧠 БАЗОВІ ВИНЯТКИ
# ================================
class AppError(Exception):
    """🧠 Базовий виняток застосунку."""

    code: str = ErrorCode.UNKNOWN

    def __init__(self, message: str, *, details: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details

    def to_log_extra(self) -> Dict[str, object]:
        """📦 Словник для `logger.*(extra=...)`."""
        extra: Dict[str, object] = {"error_code": self.code}
        if self.details:
            extra["details"] = self.details
        return extra


class UserVisibleError(AppError):
    """👀 Помилка, повідомлення якої безпечно показати користувачу."""


# ================================
# 🧾 ПРЕДМЕТНІ ВИНЯТКИ
# ================================
class ConversionError(AppError):
    """💱 Невідома валюта або нечислова / нескінченна сума."""

    code = ErrorCode.CONVERSION


class StorageError(AppError):
    """💾 Сховище недоступне або повернуло непридатні дані."""

    code = ErrorCode.STORAGE

    def __init__(self, message: str, *, details: Optional[str] = None, key: Optional[str] = None) -> None:
        super().__init__(message, details=details)
        self.key = key

    def to_log_extra(self) -> Dict[str, object]:
        extra = super().to_log_extra()
        if self.key:
            extra["key"] = self.key
        return extra


class ProductQueryError(UserVisibleError):
    """🌐 Збій запиту списку товарів чи категорій."""

    code = ErrorCode.NETWORK

    def __init__(
        self,
        message: str,
        *,
        details: Optional[str] = None,
        url: Optional[str] = None,
        status_code: Optional[int] = None,
    ) -> None:
        super().__init__(message, details=details)
        self.url = url
        self.status_code = status_code
        logger.debug("🌐 ProductQueryError created", extra={"url": url, "status_code": status_code})

    def to_log_extra(self) -> Dict[str, object]:
        extra = super().to_log_extra()
        if self.url:
            extra["url"] = self.url
        if self.status_code is not None:
            extra["status_code"] = self.status_code
        return extra


__all__ = [
    "ErrorCode",
    "AppError",
    "UserVisibleError",
    "ConversionError",
    "StorageError",
    "ProductQueryError",
]
