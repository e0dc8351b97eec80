# 🏛️ storefront/domain/__init__.py
"""🏛️ Доменний шар: валюта, фільтри каталогу, товари."""
