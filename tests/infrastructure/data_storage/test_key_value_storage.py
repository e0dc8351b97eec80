"""
🧪 test_key_value_storage.py — JSON-файлове сховище

Перевіряє:
- Запис і читання між екземплярами
- Порожній/зіпсований файл → порожнє сховище
- Видалення ключа
"""

import json

import pytest

from storefront.infrastructure.data_storage.key_value_storage import JsonFileKeyValueStorage


@pytest.mark.asyncio
async def test_set_and_get_persist_between_instances(tmp_path):
    path = tmp_path / "nested" / "storage.json"
    storage = JsonFileKeyValueStorage(str(path))
    await storage.set_item("selectedCurrency", "USD")

    assert json.loads(path.read_text(encoding="utf-8")) == {"selectedCurrency": "USD"}
    assert await JsonFileKeyValueStorage(str(path)).get_item("selectedCurrency") == "USD"
    assert not (tmp_path / "nested" / "storage.json.tmp").exists()


@pytest.mark.asyncio
async def test_missing_and_corrupted_file(tmp_path):
    assert await JsonFileKeyValueStorage(str(tmp_path / "absent.json")).get_item("x") is None

    broken = tmp_path / "broken.json"
    broken.write_text("{oops", encoding="utf-8")
    assert await JsonFileKeyValueStorage(str(broken)).get_item("x") is None


@pytest.mark.asyncio
async def test_non_string_values_are_kept_as_json(tmp_path):
    path = tmp_path / "storage.json"
    path.write_text(json.dumps({"priceRange_LKR": [0, 30000]}), encoding="utf-8")
    assert await JsonFileKeyValueStorage(str(path)).get_item("priceRange_LKR") == "[0, 30000]"


@pytest.mark.asyncio
async def test_remove_item(tmp_path):
    path = tmp_path / "storage.json"
    storage = JsonFileKeyValueStorage(str(path))
    await storage.set_item("a", "1")
    await storage.set_item("b", "2")
    await storage.remove_item("a")
    await storage.remove_item("missing")

    assert json.loads(path.read_text(encoding="utf-8")) == {"b": "2"}
