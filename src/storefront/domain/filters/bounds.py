# 🎚️ storefront/domain/filters/bounds.py
"""
🎚️ Межі слайдера ціни для валюти відображення.

🔹 Детермінована функція без I/O: та сама валюта → ті самі межі.
🔹 Невідома, порожня або `None` валюта → грубий рівень базової валюти.
"""

from __future__ import annotations

# 🔠 Системні імпорти
import logging
from typing import Dict, Optional

# 🧩 Внутрішні модулі проєкту
from storefront.domain.filters.entities import CurrencyBounds
from storefront.shared.utils.logger import LOG_NAME

logger = logging.getLogger(f"{LOG_NAME}.bounds")


# ================================
# 📏 РІВНІ МЕЖ
# ================================
FINE_BOUNDS = CurrencyBounds(min=0.0, max=150.0, step=1.0, default_max=30.0)            # 🇺🇸 Дрібний крок
COARSE_BOUNDS = CurrencyBounds(min=0.0, max=30000.0, step=500.0, default_max=30000.0)   # 🇱🇰 Базова валюта

_TIERS: Dict[str, CurrencyBounds] = {
    "USD": FINE_BOUNDS,
    "LKR": COARSE_BOUNDS,
}


def resolve_bounds(currency: Optional[str]) -> CurrencyBounds:
    """
    Повертає межі `{min, max, step, default_max}` для валюти.

    Args:
        currency: код валюти в будь-якому регістрі; `None`/"" дозволені.
    """
    code = (currency or "").strip().upper()
    bounds = _TIERS.get(code)
    if bounds is None:
        logger.debug("🎚️ Невідома валюта %r → межі базової валюти", currency)
        return COARSE_BOUNDS
    return bounds


__all__ = ["FINE_BOUNDS", "COARSE_BOUNDS", "resolve_bounds"]
