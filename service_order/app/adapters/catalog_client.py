"""
Catalog service client for the Order service.
"""

from typing import Optional

import httpx

from shared.errors import ExternalServiceError, NotFoundError
from shared.logging import get_logger
from shared.models import Book
from shared.replication import outbound_headers


class CatalogClient:
    """Reads and decrements stock on one chosen catalog replica."""

    def __init__(self, http_client: httpx.AsyncClient):
        self.http_client = http_client
        self.logger = get_logger("order.catalog_client")

    async def get_book(self, base_url: str, book_id: int) -> Book:
        response = await self._request("GET", f"{base_url}/info/{book_id}", book_id)
        return Book.model_validate(response.json())

    async def set_quantity(self, base_url: str, book_id: int, quantity: int) -> Book:
        response = await self._request(
            "PATCH",
            f"{base_url}/update/{book_id}",
            book_id,
            json={"quantity": quantity},
        )
        return Book.model_validate(response.json())

    async def _request(self, method: str, url: str, book_id: int, json: Optional[dict] = None) -> httpx.Response:
        try:
            response = await self.http_client.request(method, url, json=json, headers=outbound_headers())
        except httpx.HTTPError as e:
            self.logger.error("Catalog service HTTP error", method=method, url=url, error=str(e))
            raise ExternalServiceError("catalog", "Purchase failed", details={"http_error": str(e)})

        if response.status_code == 404:
            raise NotFoundError("Book not found", details={"book_id": book_id})
        if response.status_code >= 400:
            self.logger.error("Catalog service error", method=method, url=url, status_code=response.status_code)
            raise ExternalServiceError(
                "catalog",
                "Purchase failed",
                details={"status_code": response.status_code},
            )
        return response
