# 🧩 storefront/shared/__init__.py
"""🧩 Наскрізні компоненти: утиліти, метрики."""
