# 🛍️ storefront/__init__.py
"""
🛍️ storefront — синхронізація фільтрів каталогу та цінового діапазону.

🔹 `domain` — чисті сутності фільтра, межі слайдера, машина станів взаємодії, реконсиляція валют.
🔹 `infrastructure` — конвертер і курси валют, сховище діапазонів, URL-адаптер, HTTP-клієнт каталогу.
🔹 `listing` — сторінка списку товарів: слайдер, debounced-коміт фільтрів, запити товарів.
"""

__version__ = "0.3.0"
