# 🎚️ storefront/listing/slider.py
"""
🎚️ Обробка подій слайдера ціни.

🔹 `on_slide` — живі кадри drag-у: лише візуальне значення, жодних записів і запитів.
🔹 `on_slide_committed` — кінець drag-у: передає закомічений діапазон у `on_commit`.
🔹 Fallback-таймер (~1 с без кадрів) завершує «завислий» drag останнім живим значенням.
"""

from __future__ import annotations

# 🔠 Системні імпорти
import logging
from typing import Any, Callable, Optional

# 🧩 Внутрішні модулі проєкту
from storefront.domain.filters.entities import PriceRange
from storefront.domain.filters.interaction import SliderInteraction
from storefront.domain.filters.rounding import round2
from storefront.shared.utils.debounce import DebouncedTask
from storefront.shared.utils.logger import LOG_NAME

logger = logging.getLogger(f"{LOG_NAME}.slider")

DEFAULT_SLIDER_FALLBACK_SEC = 1.0

CommitCallback = Callable[[PriceRange, str], None]


def _rounded(values: Any) -> Optional[PriceRange]:
    try:
        price = PriceRange.from_values(values)
    except ValueError:
        return None
    return PriceRange(round2(price.low), round2(price.high))


class PriceSliderController:
    """🎚️ Візуальне значення слайдера та переходи drag-у."""

    def __init__(
        self,
        interaction: SliderInteraction,
        on_commit: CommitCallback,
        *,
        initial: Optional[PriceRange] = None,
        fallback_sec: float = DEFAULT_SLIDER_FALLBACK_SEC,
        on_interrupt: Optional[Callable[[], None]] = None,
    ) -> None:
        self._interaction = interaction
        self._on_commit = on_commit
        self._on_interrupt = on_interrupt
        self._value = initial or PriceRange(0.0, 0.0)
        self._drag_currency: Optional[str] = None
        self._fallback = DebouncedTask(self._on_timeout, fallback_sec, name="slider-fallback")

    @property
    def value(self) -> PriceRange:
        return self._value

    def set_value(self, price: PriceRange) -> None:
        """Зовнішнє оновлення (URL, перерахунок валюти, очищення)."""
        if price != self._value:
            logger.debug("🎚️ slider ← %s", price.as_list())
        self._value = price

    def on_slide(self, values: Any, currency: str) -> bool:
        """Живий кадр drag-у. Повертає False для некоректного значення."""
        price = _rounded(values)
        if price is None:
            logger.warning("⚠️ Некоректне значення слайдера: %r", values)
            return False
        if self._interaction.begin_drag(currency) and self._on_interrupt is not None:
            self._on_interrupt()
        self._drag_currency = self._interaction.origin_currency
        self._value = price
        self._fallback()
        return True

    def on_slide_committed(self, values: Any, currency: str) -> bool:
        """Кінець drag-у. Повертає False для некоректного значення."""
        price = _rounded(values)
        if price is None:
            logger.warning("⚠️ Некоректне закомічене значення слайдера: %r", values)
            return False
        self._fallback.cancel()
        self._finish(price, currency)
        return True

    def cancel(self) -> None:
        self._fallback.cancel()

    def _on_timeout(self) -> None:
        if not self._interaction.sliding:
            return
        logger.warning("⏰ Drag без завершення, комічу останнє значення %s", self._value.as_list())
        self._finish(self._value, self._drag_currency or "")

    def _finish(self, price: PriceRange, currency: str) -> None:
        self._value = price
        origin = self._interaction.end_drag(currency)
        self._drag_currency = None
        self._on_commit(price, origin)


__all__ = ["DEFAULT_SLIDER_FALLBACK_SEC", "PriceSliderController"]
