# 🌐 storefront/infrastructure/api/product_query_executor.py
"""
🌐 HttpProductQueryExecutor — клієнт каталогу товарів на `httpx.AsyncClient`.

🔹 `GET {api}/products?page=&limit=&search=&category=&minPrice=&maxPrice=&featured=&inStock=&sort=&order=`
🔹 `GET {api}/categories`
🔹 Відповідь: `{"data": [...], "pagination": {...}}`.
🔹 Будь-який збій (таймаут, зʼєднання, не-2xx, неочікуваний JSON) → `ProductQueryError`.
   Повторних спроб тут немає.
"""

from __future__ import annotations

# 🌐 Зовнішні бібліотеки
import httpx                                                    # 🌐 Асинхронний HTTP-клієнт

# 🔠 Системні імпорти
import logging
from typing import Any, List, Mapping, Optional

# 🧩 Внутрішні модулі проєкту
from storefront.domain.filters.entities import ProductQuery
from storefront.domain.products.entities import Category, Pagination, Product, ProductPage
from storefront.domain.products.interfaces import IProductQueryExecutor
from storefront.errors.custom_errors import ProductQueryError
from storefront.shared.utils.logger import LOG_NAME

logger = logging.getLogger(f"{LOG_NAME}.api")


class HttpProductQueryExecutor(IProductQueryExecutor):
    """🌐 Виконавець запитів до REST-бекенду вітрини."""

    def __init__(
        self,
        base_url: str,
        *,
        timeout_sec: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        if not base_url:
            raise ValueError("base_url is required")
        self._base_url = base_url.rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            timeout=timeout_sec,
            transport=transport,
            headers={"Accept": "application/json"},
        )
        logger.info("🌐 HttpProductQueryExecutor → %s (timeout=%.1fs)", self._base_url, timeout_sec)

    async def fetch_products(self, query: ProductQuery) -> ProductPage:
        params = query.to_params()
        body = await self._get_json("/products", params)
        items = body.get("data")
        if not isinstance(items, list):
            raise ProductQueryError(
                "Каталог повернув неочікувану відповідь",
                details="bad_response",
                url=f"{self._base_url}/products",
            )
        products = [Product.from_payload(item) for item in items if isinstance(item, Mapping)]
        pagination = Pagination.from_payload(body.get("pagination"), fallback_limit=query.limit)
        logger.info("📦 Отримано %d товар(ів), сторінка %d/%d", len(products), pagination.page, pagination.pages)
        return ProductPage.of(products, pagination)

    async def fetch_categories(self) -> List[Category]:
        body = await self._get_json("/categories", None)
        items = body.get("data")
        if not isinstance(items, list):
            raise ProductQueryError(
                "Каталог повернув неочікувану відповідь",
                details="bad_response",
                url=f"{self._base_url}/categories",
            )
        categories = [Category.from_payload(item) for item in items if isinstance(item, Mapping)]
        logger.debug("🗂️ Категорій: %d", len(categories))
        return categories

    async def close(self) -> None:
        if not self._client.is_closed:
            await self._client.aclose()
            logger.info("🔌 HTTP-клієнт каталогу закрито.")

    # ================================
    # 🧠 ВНУТРІШНЄ
    # ================================
    async def _get_json(self, path: str, params: Optional[Mapping[str, str]]) -> Mapping[str, Any]:
        url = f"{self._base_url}{path}"
        try:
            response = await self._client.get(path, params=params)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise ProductQueryError(
                f"Каталог відповів {exc.response.status_code}",
                url=url,
                status_code=exc.response.status_code,
            ) from exc
        except httpx.HTTPError as exc:
            raise ProductQueryError("Каталог недоступний", details=type(exc).__name__, url=url) from exc

        try:
            body = response.json()
        except ValueError as exc:
            raise ProductQueryError("Відповідь каталогу не є JSON", details="bad_response", url=url) from exc
        if not isinstance(body, Mapping):
            raise ProductQueryError("Каталог повернув неочікувану відповідь", details="bad_response", url=url)
        return body


__all__ = ["HttpProductQueryExecutor"]
