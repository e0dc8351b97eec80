# 🧰 storefront/shared/utils/__init__.py
"""
🧰 Спільні утиліти: логування та відкладені (debounced) виклики.
"""

from __future__ import annotations

# 🔠 Логування
from .logger import (
    LOG_NAME,
    LoggingConfig,
    get_logger,
    init_logging,
    init_logging_from_config,
)

# ⏳ Debounce
from .debounce import DebouncedTask

__all__ = [
    "LOG_NAME",
    "LoggingConfig",
    "get_logger",
    "init_logging",
    "init_logging_from_config",
    "DebouncedTask",
]
