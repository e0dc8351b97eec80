# 💵 storefront/infrastructure/currency/currency_manager.py
"""
💵 CurrencyManager — життєвий цикл валютних курсів.

🎯 Призначення:
    • асинхронно отримує курси з `GET {api}/currency/rates`, кешує їх і оновлює не частіше TTL;
    • зберігає останні вдалі курси на диску, а без мережі й файлу бере fallback з конфігів;
    • видає `CurrencyConverter` як знімок поточної таблиці.

⚙️ Нотатки:
    • бекенд віддає «одиниць валюти за 1 LKR» (`{"LKR": 1, "USD": 0.0033}`),
      усередині тримаємо обернене значення: «LKR за 1 одиницю валюти»;
    • квант курсів у кеші/файлі — 4 знаки після коми (ROUND_HALF_EVEN).
"""

from __future__ import annotations

# 🌐 Зовнішні бібліотеки
import aiofiles                                                     # 💽 Асинхронна робота з файлами
import httpx                                                        # 🌐 HTTP-клієнт

# 🔠 Системні імпорти
import asyncio                                                      # 🔁 Локи та паузи між спробами
import json                                                         # 📄 Серіалізація кешу курсів
import logging                                                      # 🧾 Логи сервісу
import os                                                           # 📂 Атомарна заміна файлу
import time                                                         # ⏱️ TTL
from decimal import Decimal, InvalidOperation, ROUND_HALF_EVEN      # 💰 Аритметика й округлення
from pathlib import Path                                            # 📂 Директорія кешу
from typing import Any, Dict, Mapping, Optional, Union, cast        # 📐 Типізація

# 🧩 Внутрішні модулі проєкту
from storefront.config.config_service import ConfigService
from storefront.domain.currency.interfaces import BASE_CURRENCY, ICurrencyRatesProvider
from storefront.infrastructure.currency.currency_converter import CurrencyConverter
from storefront.shared.utils.logger import LOG_NAME

logger = logging.getLogger(f"{LOG_NAME}.currency")


class CurrencyManager(ICurrencyRatesProvider):
    """
    🏦 Керує курсами валют і надає конвертери-знімки.
    """

    _RATE_QUANTUM = Decimal("0.0001")  # квант збереження/порівняння курсів
    _ROUNDING = ROUND_HALF_EVEN        # стратегія округлення

    def __init__(
        self,
        config_service: ConfigService,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._config = config_service
        self._lock = asyncio.Lock()                                  # 🔐 Захист оновлення курсів
        self._transport = transport                                  # 🧪 MockTransport у тестах

        base_url = str(self._config.get("api.base_url", "") or "").rstrip("/")
        if not base_url:
            raise ValueError("Config 'api.base_url' is required.")
        self._api_url = f"{base_url}/currency/rates"
        self._rate_file_path: Optional[str] = self._config.get("files.currency_rates")

        self._base = str(self._config.get("currency.base", BASE_CURRENCY) or BASE_CURRENCY).upper()
        self._timeout = float(self._config.get("api.timeout_sec", 10) or 10)
        self._retries = int(self._config.get("currency.retry_attempts", 2) or 1)
        self._retry_delay = float(self._config.get("currency.retry_delay_sec", 1) or 0)
        self._ttl_sec = int(self._config.get("currency.ttl_sec", 3600) or 0)

        # ── Стан ────────────────────────────────────────────────────────────
        self._rates: Dict[str, Decimal] = {}                         # 💱 LKR за одиницю валюти
        self._client: Optional[httpx.AsyncClient] = None
        self._last_update_ts: float = 0.0
        self._init_lock = asyncio.Lock()
        logger.debug("⚙️ CurrencyManager: url=%s file=%s ttl=%s", self._api_url, self._rate_file_path, self._ttl_sec)

    # ================================
    # 🔓 ПУБЛІЧНИЙ ІНТЕРФЕЙС
    # ================================
    def get_converter(self) -> CurrencyConverter:
        """Знімок поточних курсів; до ініціалізації — fallback з конфігів."""
        snapshot = self._rates.copy() or self._fallback_rates()
        return CurrencyConverter(snapshot, rounding=self._ROUNDING, base_currency=self._base)

    def get_all_rates(self) -> Dict[str, Decimal]:
        return self._rates.copy()

    @property
    def last_update_ts(self) -> float:
        return self._last_update_ts

    def is_cache_fresh(self) -> bool:
        return (time.time() - self._last_update_ts) < max(0, self._ttl_sec)

    async def initialize(self) -> None:
        """Піднімає кеш із диску (або fallback) і створює HTTP-клієнт."""
        async with self._init_lock:
            if not self._rates:
                self._rates = await self._load_rates_from_file()
            if not self._client:
                self._client = httpx.AsyncClient(timeout=self._timeout, transport=self._transport)
                logger.info("🔧 CurrencyManager ініціалізовано з курсами: %s", self._rates)

    async def ensure_initialized(self) -> None:
        if self._client and self._rates:
            return
        await self.initialize()

    async def close(self) -> None:
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            logger.info("🔌 HTTP-клієнт менеджера валют закрито.")

    async def refresh_if_stale(self) -> None:
        """🔄 Оновлює курси тільки якщо минув TTL."""
        await self.ensure_initialized()
        if self.is_cache_fresh():
            logger.debug("⏱️ Курси свіжі (TTL). Оновлення пропущено.")
            return
        logger.info("⏰ TTL вичерпано — оновлюю курси…")
        await self.update_all_rates()

    async def update_all_rates(self) -> bool:
        """
        🔄 Примусово оновлює курси з API.

        Returns:
            bool: True, якщо таблицю курсів оновлено.
        """
        await self.ensure_initialized()
        payload = await self._fetch_api_data()
        if payload is None:
            logger.warning("⚠️ Не вдалося отримати курси, лишаю попередні значення.")
            return False

        async with self._lock:
            rates = self._process_api_data(payload)
            if not rates:
                logger.warning("⚠️ API повернуло порожню або некоректну таблицю курсів.")
                return False
            changed = rates != self._rates
            self._rates = rates
            self._last_update_ts = time.time()
            if changed:
                await self._save_rates_to_file()
            logger.info("🕒 Курси оновлено: %s", self._rates)
            return True

    async def set_rate_manually(self, currency: str, rate: Union[Decimal, float, int, str]) -> None:
        """✍️ Ручна установка курсу (LKR за 1 одиницю валюти)."""
        await self.ensure_initialized()
        safe_rate = self._to_decimal(rate)
        if safe_rate <= 0:
            raise ValueError("Невалідний курс (повинен бути > 0).")
        ccy = (currency or "").upper().strip()
        if not ccy:
            raise ValueError("Порожній код валюти.")
        async with self._lock:
            self._rates[ccy] = self._quantize_rate(safe_rate)
            await self._save_rates_to_file()
            self._last_update_ts = time.time()
            logger.info("✍️ Курс для %s встановлено вручну: %s", ccy, self._rates[ccy])

    # ================================
    # 🔒 ВНУТРІШНЯ ЛОГІКА
    # ================================
    def _process_api_data(self, payload: Mapping[str, Any]) -> Dict[str, Decimal]:
        """`{"USD": 0.0033}` (одиниць за 1 LKR) → `{"USD": Decimal("303.0303")}`."""
        rates: Dict[str, Decimal] = {}
        for code, raw in payload.items():
            ccy = str(code or "").upper().strip()
            if not ccy:
                continue
            try:
                per_base = self._to_decimal(raw)
            except ValueError:
                logger.warning("⚠️ Неможливо конвертувати курс %s: %r", ccy, raw)
                continue
            if per_base <= 0:
                logger.warning("⚠️ Пропускаю непридатний курс %s: %s", ccy, per_base)
                continue
            rates[ccy] = self._quantize_rate(Decimal(1) / per_base)
        if rates:
            rates[self._base] = Decimal("1.0000")
        return rates

    async def _fetch_api_data(self) -> Optional[Mapping[str, Any]]:
        """Кілька спроб `GET /currency/rates` з паузою між ними."""
        if not self._client:
            await self.ensure_initialized()
        client = cast(httpx.AsyncClient, self._client)

        attempts = max(1, self._retries)
        for attempt in range(attempts):
            try:
                response = await client.get(self._api_url)
                response.raise_for_status()
                body = response.json()
                rates = (body.get("data") or {}).get("rates") if isinstance(body, dict) else None
                if isinstance(rates, dict):
                    logger.info("✅ Курси з API отримано.")
                    return rates
                logger.warning("⚠️ Відповідь API курсів без data.rates: %r", type(body).__name__)
                return None
            except (httpx.HTTPError, ValueError) as exc:
                logger.error("❌ Спроба %s/%s: помилка API курсів — %s", attempt + 1, attempts, exc)
                if attempt < attempts - 1:
                    await asyncio.sleep(max(0.0, self._retry_delay))
        return None

    def _fallback_rates(self) -> Dict[str, Decimal]:
        fallback = self._config.get("currency.fallback_rates", {}) or {}
        rates = self._process_api_data(fallback) if isinstance(fallback, dict) else {}
        rates.setdefault(self._base, Decimal("1.0000"))
        return rates

    async def _load_rates_from_file(self) -> Dict[str, Decimal]:
        """Кеш курсів із файлу; будь-яка проблема → fallback із конфігів."""
        if not self._rate_file_path:
            return self._fallback_rates()
        try:
            async with aiofiles.open(self._rate_file_path, "r", encoding="utf-8") as f:
                content = await f.read()
            parsed = json.loads(content)
            if not isinstance(parsed, dict):
                raise ValueError("Очікувався об'єкт (dict) у кеш-файлі курсів.")
            rates = {str(k).upper(): self._quantize_rate(self._to_decimal(v)) for k, v in parsed.items()}
            logger.info("📖 Завантажено кешовані курси: %s", rates)
        except (OSError, ValueError) as exc:
            logger.warning("⚠️ Не вдалося прочитати файл курсів (%s). Використовуються резервні значення.", exc)
            return self._fallback_rates()
        rates[self._base] = Decimal("1.0000")
        return rates

    async def _save_rates_to_file(self) -> None:
        """Атомарно пише кеш (tmp → replace); збій запису лише логується."""
        if not self._rate_file_path:
            return
        path = Path(self._rate_file_path)
        tmp_path = path.with_suffix(path.suffix + ".tmp")
        data = {k: str(v) for k, v in self._rates.items()}
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            async with aiofiles.open(tmp_path, "w", encoding="utf-8") as f:
                await f.write(json.dumps(data, ensure_ascii=False, indent=2))
            os.replace(tmp_path, path)
            logger.debug("💾 Курси збережено у %s", path)
        except OSError as exc:
            logger.warning("⚠️ Не вдалося зберегти курси у %s: %s", path, exc)

    @classmethod
    def _quantize_rate(cls, value: Decimal) -> Decimal:
        return value.quantize(cls._RATE_QUANTUM, rounding=cls._ROUNDING)

    @staticmethod
    def _to_decimal(value: Any) -> Decimal:
        if isinstance(value, bool):
            raise ValueError(f"Невалідний курс: {value!r}")
        try:
            result = value if isinstance(value, Decimal) else Decimal(str(value).strip())
        except (InvalidOperation, TypeError) as exc:
            raise ValueError(f"Невалідний курс: {value!r}") from exc
        if not result.is_finite():
            raise ValueError(f"Невалідний курс: {value!r}")
        return result


__all__ = ["CurrencyManager"]
