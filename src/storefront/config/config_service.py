# ⚙️ storefront/config/config_service.py
"""
⚙️ config_service.py — Сервіс для доступу до статичної конфігурації.

🔹 Клас `ConfigService`:
- Завантажує конфігурацію з config.yaml, config.json та .env.
- Надає метод .get() з ключами через крапку ('api.base_url').
- Працює як Singleton; `set()` для рантайм-перевизначень, `reset()` для тестів.
"""

# 🌐 Зовнішні бібліотеки
import yaml                                  # 📦 YAML-парсинг
from dotenv import load_dotenv              # 🔐 Завантаження змінних із .env

# 🔠 Системні імпорти
import copy                                 # 🧬 Глибока копія для get_section
import json                                 # 📄 Робота з JSON-файлами
import logging                              # 🧾 Логування
import os                                   # 📁 Доступ до змінних середовища
from pathlib import Path                    # 📁 Побудова шляху до файлів
from typing import Any, Dict, Optional      # 🧩 Типізація

# 🧩 Внутрішні модулі проєкту
from storefront.shared.utils.logger import LOG_NAME

logger = logging.getLogger(f"{LOG_NAME}.config")

# 🔐 Змінні середовища → ключі конфігу
_ENV_KEYS: Dict[str, str] = {
    "STOREFRONT_API_URL": "api.base_url",
    "STOREFRONT_STORAGE_FILE": "files.storage",
    "STOREFRONT_RATES_FILE": "files.currency_rates",
    "STOREFRONT_LOG_LEVEL": "logging.level",
}


# ============================
# ⚙️ СЕРВІС ДОСТУПУ ДО КОНФІГІВ
# ============================
class ConfigService:
    """
    ⚙️ Надає доступ до всіх конфігураційних параметрів вітрини.
    Працює як Singleton — конфігурація зчитується лише один раз.
    """

    _instance: Optional["ConfigService"] = None    # 🧩 Singleton-екземпляр
    _config: Dict[str, Any]                        # 📦 Обʼєднана конфігурація

    def __new__(cls) -> "ConfigService":
        if cls._instance is None:
            instance = super().__new__(cls)
            instance._config = {}
            instance._load_all_configs()
            cls._instance = instance
            logger.debug("🔄 Singleton ConfigService створено і конфігурація завантажена")
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """🧹 Скидає singleton (наступний виклик перечитає всі джерела)."""
        cls._instance = None

    def _load_all_configs(self) -> None:
        """
        📥 Завантажує всі джерела конфігурації в один словник.
        Порядок: config.yaml (база) → config.json (локальні правки) → .env (найвищий пріоритет).
        """
        base_dir = Path(__file__).parent

        # --- 1. YAML-файл ---
        try:
            with open(base_dir / "config.yaml", "r", encoding="utf-8") as f:
                self._deep_update(self._config, yaml.safe_load(f) or {})
        except (FileNotFoundError, yaml.YAMLError) as e:
            logger.warning("⚠️ Не вдалося завантажити config.yaml: %s", e)

        # --- 2. JSON-файл (необовʼязковий) ---
        json_path = base_dir / "config.json"
        if json_path.exists():
            try:
                with open(json_path, "r", encoding="utf-8") as f:
                    self._deep_update(self._config, json.load(f))
            except (OSError, json.JSONDecodeError) as e:
                logger.warning("⚠️ Не вдалося завантажити config.json: %s", e)

        # --- 3. .env змінні ---
        load_dotenv()
        env_vars = {key: os.getenv(env) for env, key in _ENV_KEYS.items() if os.getenv(env)}
        self._deep_update(self._config, self._unflatten_dict(env_vars))

        logger.info("✅ Конфігурацію успішно завантажено.")

    def get(self, key: str, default: Any = None) -> Any:
        """
        🔑 Отримує значення конфігурації за ключем (наприклад: 'currency.ttl_sec').

        Args:
            key (str): Ключ у форматі з крапкою.
            default (Any): Значення за замовчуванням, якщо ключ не знайдено.
        """
        value: Any = self._config
        for k in key.split("."):
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default
        return value

    def get_section(self, key: str) -> Dict[str, Any]:
        """📦 Копія вкладеного розділу (порожній dict, якщо його немає)."""
        value = self.get(key, {})
        return copy.deepcopy(value) if isinstance(value, dict) else {}

    def set(self, key: str, value: Any) -> None:
        """✍️ Рантайм-перевизначення значення (тести, CLI-прапорці)."""
        self._deep_update(self._config, self._unflatten_dict({key: value}))
        logger.debug("✍️ %s = %r", key, value)

    # ===============================
    # 🔧 ДОПОМІЖНІ МЕТОДИ ЗЛИТТЯ КОНФІГІВ
    # ===============================
    @staticmethod
    def _unflatten_dict(d: Dict[str, Any]) -> Dict[str, Any]:
        """
        🔁 Перетворює ключі з крапками в ієрархічний словник.
        'api.base_url' → {'api': {'base_url': ...}}
        """
        result: Dict[str, Any] = {}
        for key, value in d.items():
            parts = key.split(".")
            d_ref = result
            for part in parts[:-1]:
                d_ref = d_ref.setdefault(part, {})
            d_ref[parts[-1]] = value
        return result

    def _deep_update(self, source: Dict[str, Any], overrides: Dict[str, Any]) -> None:
        """🔁 Рекурсивно обʼєднує два словники."""
        for key, value in overrides.items():
            if isinstance(value, dict) and isinstance(source.get(key), dict):
                self._deep_update(source[key], value)
            else:
                source[key] = value
