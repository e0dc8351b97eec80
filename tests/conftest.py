# tests/conftest.py
import sys
from pathlib import Path

import pytest

# 1) Додаємо src у sys.path, щоб працював імпорт "storefront.…" без встановлення пакета
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from storefront.infrastructure.currency.currency_converter import CurrencyConverter  # noqa: E402


# 2) Спільні фікстури
@pytest.fixture
def converter() -> CurrencyConverter:
    """💱 1 USD = 300 LKR."""
    return CurrencyConverter({"LKR": 1, "USD": 300})
