# 🏗️ storefront/infrastructure/__init__.py
"""🏗️ Інфраструктура: валюти, сховища, URL, HTTP-клієнт каталогу."""
