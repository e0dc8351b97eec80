# 🚀 storefront/shared/metrics/exporters.py
"""
🚀 Легкий bootstrap HTTP-експортера `/metrics`.
"""

from __future__ import annotations

# 🌐 Зовнішні бібліотеки
from prometheus_client import start_http_server

# 🔠 Системні імпорти
import logging
from typing import Any, Mapping, Optional

# 🧩 Внутрішні модулі проєкту
from storefront.shared.utils.logger import LOG_NAME

logger = logging.getLogger(f"{LOG_NAME}.metrics")

_started = False


def maybe_start_prometheus(node: Optional[Mapping[str, Any]]) -> bool:
    """
    Запускає експортер, якщо в конфігу `metrics.enabled: true`.

    Returns:
        bool: True, якщо експортер запущено саме цим викликом.
    """
    global _started
    node = node or {}
    if _started or not node.get("enabled"):
        return False
    port = int(node.get("port") or 9108)
    addr = str(node.get("addr") or "0.0.0.0")
    try:
        start_http_server(port, addr=addr)
    except OSError as exc:
        logger.warning("⚠️ Не вдалося запустити Prometheus-експортер на %s:%s: %s", addr, port, exc)
        return False
    _started = True
    logger.info("📊 Prometheus-експортер слухає %s:%s", addr, port)
    return True
