# 📜 storefront/shared/utils/logger.py
"""
📜 Єдина схема логування для storefront-фільтрів.

🔹 Налаштовує логер `storefront` (консоль + файл із ротацією за часом).
🔹 Вміє писати файл у JSON-форматі та приглушувати шумні сторонні бібліотеки (httpx, asyncio).
🔹 Дочірні логери модулів беруться через `get_logger("listing")` → `storefront.listing`.
"""
from __future__ import annotations

# 🔠 Системні імпорти
import json                                                     # 📦 Серіалізація JSON-записів
import logging                                                  # 🪵 Стандартні логери
import sys                                                      # 🖥️ stdout для консолі
import threading                                                # 🔒 Захист повторної ініціалізації
from dataclasses import dataclass, field                        # 🧱 DTO-конфіг
from logging.handlers import TimedRotatingFileHandler           # 📁 Ротація лог-файлу
from pathlib import Path                                        # 📂 Створення директорії логів
from typing import Any, Dict, Optional, Union                   # 🧰 Типи

# ================================
# 🧾 КОНСТАНТИ МОДУЛЯ
# ================================
LOG_NAME: str = "storefront"                                    # 🏷️ Корінь усіх логерів проєкту
PLAIN_FORMAT: str = "%(asctime)s [%(levelname)s] %(name)s.%(funcName)s:%(lineno)d - %(message)s"
CONSOLE_FORMAT: str = "[%(levelname).1s] %(name)s: %(message)s"

_RESERVED_ATTRS = frozenset(
    {
        "args", "asctime", "created", "exc_info", "exc_text", "filename", "funcName",
        "levelname", "levelno", "lineno", "message", "module", "msecs", "msg", "name",
        "pathname", "process", "processName", "relativeCreated", "stack_info",
        "taskName", "thread", "threadName",
    }
)                                                               # 🚫 Службові поля LogRecord

_lock = threading.Lock()


# ================================
# 🧾 DTO КОНФІГУРАЦІЇ
# ================================
@dataclass
class LoggingConfig:
    """Налаштування логування (значення за замовчуванням придатні для локального запуску)."""

    level: str = "INFO"
    console: bool = True
    json: bool = False
    file: Optional[str] = "logs/storefront.log"                 # 📁 None → без файлового виводу
    when: str = "midnight"
    backup_count: int = 7
    suppress: Dict[str, str] = field(default_factory=dict)      # 🙊 {"httpx": "WARNING"}
    console_level: str = "INFO"
    file_level: str = "DEBUG"


# ================================
# 🧰 ФОРМАТТЕР
# ================================
class JsonFormatter(logging.Formatter):
    """Перетворює запис логу на плаский JSON, додаючи поля з `extra=`."""

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "time": self.formatTime(record, datefmt="%Y-%m-%d %H:%M:%S"),
            "level": record.levelname,
            "name": record.name,
            "func": record.funcName,
            "line": record.lineno,
            "message": record.getMessage(),
        }
        for key, value in record.__dict__.items():
            if key.startswith("_") or key in _RESERVED_ATTRS or key in payload:
                continue
            try:
                json.dumps(value)                               # ✅ Серіалізоване як є
                payload[key] = value
            except (TypeError, ValueError):
                payload[key] = repr(value)                      # 🔄 Решту через repr
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)


# ================================
# 🛠️ ДОПОМІЖНІ ФУНКЦІЇ
# ================================
def _to_level(value: Union[str, int, None], default: int) -> int:
    """Приводить 'debug' / 10 / None до числового рівня."""
    if isinstance(value, int):
        return value
    if not value:
        return default
    return getattr(logging, str(value).upper(), default)


def _file_handler(cfg: LoggingConfig, fmt: logging.Formatter) -> logging.Handler:
    """Файловий хендлер із ротацією; директорію створюємо заздалегідь."""
    path = Path(str(cfg.file))
    path.parent.mkdir(parents=True, exist_ok=True)
    handler = TimedRotatingFileHandler(
        filename=str(path),
        when=cfg.when,
        backupCount=cfg.backup_count,
        encoding="utf-8",
    )
    handler.setFormatter(fmt)
    handler.setLevel(_to_level(cfg.file_level, logging.DEBUG))
    return handler


# ================================
# 🚀 ПУБЛІЧНИЙ API
# ================================
def init_logging(cfg: Optional[LoggingConfig] = None) -> logging.Logger:
    """
    Ініціалізує логер `storefront`. Повторний виклик замінює лише наші хендлери.

    Returns:
        logging.Logger: кореневий логер застосунку.
    """
    cfg = cfg or LoggingConfig()
    with _lock:
        root = logging.getLogger(LOG_NAME)
        root.setLevel(
            min(
                _to_level(cfg.level, logging.INFO),
                _to_level(cfg.console_level, logging.INFO),
                _to_level(cfg.file_level, logging.DEBUG) if cfg.file else logging.CRITICAL,
            )
        )

        for handler in list(root.handlers):                     # 🧹 Прибираємо попередню конфігурацію
            if isinstance(handler, (logging.StreamHandler, TimedRotatingFileHandler)):
                root.removeHandler(handler)
                handler.close()

        if cfg.console:
            console = logging.StreamHandler(sys.stdout)
            console.setFormatter(logging.Formatter(CONSOLE_FORMAT))
            console.setLevel(_to_level(cfg.console_level, logging.INFO))
            root.addHandler(console)

        if cfg.file:
            fmt = JsonFormatter() if cfg.json else logging.Formatter(PLAIN_FORMAT)
            root.addHandler(_file_handler(cfg, fmt))

        for name, level in (cfg.suppress or {}).items():
            logging.getLogger(name).setLevel(_to_level(level, logging.WARNING))

        root.info(
            "✅ Logging initialized | level=%s console=%s json=%s file=%s",
            cfg.level.upper(),
            "ON" if cfg.console else "OFF",
            "ON" if cfg.json else "OFF",
            cfg.file or "-",
        )
        return root


def init_logging_from_config(node: Optional[Dict[str, Any]]) -> logging.Logger:
    """
    Ініціалізує логування з розділу `logging` ConfigService.

    Args:
        node: словник на кшталт {"level": "DEBUG", "file": null, "json": true}.
    """
    node = node or {}
    defaults = LoggingConfig()
    cfg = LoggingConfig(
        level=str(node.get("level") or defaults.level),
        console=bool(node.get("console", defaults.console)),
        json=bool(node.get("json", defaults.json)),
        file=node.get("file", defaults.file),
        when=str(node.get("when") or defaults.when),
        backup_count=int(node.get("backup_count") or defaults.backup_count),
        suppress=dict(node.get("suppress") or {}),
        console_level=str(node.get("console_level") or node.get("level") or defaults.console_level),
        file_level=str(node.get("file_level") or defaults.file_level),
    )
    return init_logging(cfg)


def get_logger(suffix: Optional[str] = None) -> logging.Logger:
    """Повертає `storefront` або `storefront.<suffix>`."""
    return logging.getLogger(LOG_NAME if not suffix else f"{LOG_NAME}.{suffix}")


__all__ = [
    "LOG_NAME",
    "LoggingConfig",
    "JsonFormatter",
    "init_logging",
    "init_logging_from_config",
    "get_logger",
]
