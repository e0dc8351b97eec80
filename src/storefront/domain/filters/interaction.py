# 🖐️ storefront/domain/filters/interaction.py
"""
🖐️ Арбітр взаємодії зі слайдером ціни.

Замість трьох незалежних прапорців (`sliding`, `skip_next_url_sync`,
`has_manually_adjusted`) тримаємо один іммʼютабельний стан із фазою:

    IDLE ──drag start──▶ DRAGGING ──drag end / timeout──▶ COMMITTING ──debounce──▶ IDLE
                             ▲                                 │
                             └───────── новий drag ────────────┘ (скасовує commit)

🔹 `skip_next_url_sync` можливий лише у фазі COMMITTING.
🔹 `origin_currency` — валюта, в якій почався drag; відома у DRAGGING / COMMITTING.
🔹 `manually_adjusted` живе до `reset()` («Очистити фільтри»).
"""

from __future__ import annotations

# 🔠 Системні імпорти
import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional

# 🧩 Внутрішні модулі проєкту
from storefront.shared.utils.logger import LOG_NAME

logger = logging.getLogger(f"{LOG_NAME}.interaction")


class SliderPhase(str, Enum):
    IDLE = "idle"
    DRAGGING = "dragging"
    COMMITTING = "committing"


@dataclass(frozen=True)
class _State:
    phase: SliderPhase = SliderPhase.IDLE
    origin_currency: Optional[str] = None
    skip_next_url_sync: bool = False
    manually_adjusted: bool = False

    def __post_init__(self) -> None:
        if self.phase is SliderPhase.IDLE and self.origin_currency is not None:
            raise ValueError("IDLE не має валюти drag-у")
        if self.phase is not SliderPhase.IDLE and not self.origin_currency:
            raise ValueError(f"{self.phase.value} потребує валюти drag-у")
        if self.skip_next_url_sync and self.phase is not SliderPhase.COMMITTING:
            raise ValueError("skip_next_url_sync дозволено лише у COMMITTING")


class SliderInteraction:
    """🖐️ Тегований стан взаємодії; кожен перехід логується на DEBUG."""

    def __init__(self) -> None:
        self._state = _State()

    # ================================
    # 🔎 ПОХІДНІ ПРАПОРЦІ
    # ================================
    @property
    def phase(self) -> SliderPhase:
        return self._state.phase

    @property
    def sliding(self) -> bool:
        return self._state.phase is SliderPhase.DRAGGING

    @property
    def skip_next_url_sync(self) -> bool:
        return self._state.skip_next_url_sync

    @property
    def has_manually_adjusted(self) -> bool:
        return self._state.manually_adjusted

    @property
    def origin_currency(self) -> Optional[str]:
        return self._state.origin_currency

    # ================================
    # 🔁 ПЕРЕХОДИ
    # ================================
    def begin_drag(self, currency: str) -> bool:
        """
        Live-подія слайдера. Повертає True, якщо цим перервано очікуваний commit
        (COMMITTING → DRAGGING), і викликач має скасувати debounce.
        """
        state = self._state
        if state.phase is SliderPhase.DRAGGING:
            return False
        interrupted = state.phase is SliderPhase.COMMITTING
        self._move(replace(state, phase=SliderPhase.DRAGGING, origin_currency=str(currency), skip_next_url_sync=False))
        return interrupted

    def end_drag(self, currency: str) -> str:
        """
        Drag завершено (commit або fallback-таймер): DRAGGING → COMMITTING.

        Returns:
            str: валюта, в якій почався drag (нею кодуємо commit).
        """
        state = self._state
        origin = state.origin_currency if state.phase is SliderPhase.DRAGGING else None
        origin = origin or str(currency)
        self._move(
            _State(
                phase=SliderPhase.COMMITTING,
                origin_currency=origin,
                skip_next_url_sync=True,
                manually_adjusted=True,
            )
        )
        return origin

    def consume_skip(self) -> bool:
        """URL-слухач: True, якщо цю перебудову треба пропустити; прапорець знімається."""
        if not self._state.skip_next_url_sync:
            return False
        self._move(replace(self._state, skip_next_url_sync=False))
        return True

    def settle(self) -> None:
        """Debounce-вікно відпрацювало: COMMITTING → IDLE. В інших фазах нічого не робить."""
        if self._state.phase is SliderPhase.COMMITTING:
            self._move(_State(manually_adjusted=self._state.manually_adjusted))

    def reset(self) -> None:
        """Повне скидання (очищення фільтрів / unmount)."""
        self._move(_State())

    # ================================
    # 🧠 ВНУТРІШНЄ
    # ================================
    def _move(self, new_state: _State) -> None:
        if new_state != self._state:
            logger.debug(
                "🖐️ %s → %s (origin=%s skip=%s manual=%s)",
                self._state.phase.value,
                new_state.phase.value,
                new_state.origin_currency,
                new_state.skip_next_url_sync,
                new_state.manually_adjusted,
            )
        self._state = new_state

    def __repr__(self) -> str:
        return f"SliderInteraction({self._state!r})"


__all__ = ["SliderPhase", "SliderInteraction"]
