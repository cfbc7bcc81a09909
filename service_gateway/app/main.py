"""
API Gateway service for the Storefront.
"""

from typing import Any, Dict, List, Optional

import httpx

from shared.base_service import BaseService
from shared.config import ServiceConfig
from shared.dispatcher import ReplicaSet, configure_replicas
from shared.errors import DownstreamResponseError, ExternalServiceError

from .adapters.catalog_client import CatalogClient
from .adapters.order_client import OrderClient
from .caching.cache_manager import CacheManager


class GatewayService(BaseService):
    """API Gateway service implementation."""

    def __init__(
        self,
        config: Optional[ServiceConfig] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        super().__init__("gateway", 3000, config=config, http_client=http_client)

        # Separate cursors per role; reads and writes rotate independently
        self.catalog_replicas = configure_replicas(self.config.catalog_replicas, self.config.catalog_url)
        self.order_replicas = configure_replicas(self.config.order_replicas, self.config.order_url)

        self.catalog_client = CatalogClient(self.http_client)
        self.order_client = OrderClient(self.http_client)
        self.cache_manager = CacheManager(
            self.config.cache_enabled,
            self.config.cache_max,
            metrics=self.metrics,
        )

        self._setup_gateway_routes()

    def _pick(self, role: str, replicas: ReplicaSet) -> str:
        chosen = replicas.next()
        self.metrics.increment_counter("downstream_requests_total", role=role, replica=chosen)
        return chosen

    def _setup_gateway_routes(self):
        """Set up gateway routes."""

        @self.app.get("/")
        async def root():
            """Root endpoint."""
            return {
                "service": "gateway",
                "message": "Welcome to the Storefront API",
                "endpoints": {
                    "search": "GET /search/{topic}",
                    "info": "GET /info/{id}",
                    "purchase": "POST /purchase/{id}",
                },
                "replication": {
                    "cacheEnabled": self.cache_manager.enabled,
                    "cacheMax": self.cache_manager.cache.max_entries,
                    "catalogReplicas": self.catalog_replicas.addresses,
                    "orderReplicas": self.order_replicas.addresses,
                },
            }

        @self.app.get("/search/{topic}")
        async def search(topic: str):
            return await self.search(topic)

        @self.app.get("/info/{book_id}")
        async def info(book_id: int):
            return await self.info(book_id)

        @self.app.post("/purchase/{book_id}")
        async def purchase(book_id: int):
            return await self.purchase(book_id)

        @self.app.post("/cache/invalidate/{book_id}")
        async def invalidate(book_id: int):
            """Invalidation signal sent by catalog replicas before a write."""
            existed = self.cache_manager.invalidate_book_info(book_id)
            return {"message": "Cache invalidated", "id": book_id, "existed": existed}

        @self.app.get("/cache/stats")
        async def cache_stats():
            return self.cache_manager.stats()

    async def search(self, topic: str) -> List[Dict[str, Any]]:
        """Search is never cached; any downstream failure is a generic error."""
        catalog_url = self._pick("catalog", self.catalog_replicas)
        try:
            results = await self.catalog_client.search(catalog_url, topic)
        except DownstreamResponseError as exc:
            raise ExternalServiceError("catalog", "Internal server error", details=exc.details)

        self.logger.info("Search successful", topic=topic, results=len(results), catalog=catalog_url)
        return results

    async def info(self, book_id: int) -> Dict[str, Any]:
        """Serve from the cache, or fetch from a catalog replica and cache it."""
        cached = self.cache_manager.get_book_info(book_id)
        if cached is not None:
            return cached

        catalog_url = self._pick("catalog", self.catalog_replicas)
        try:
            book = await self.catalog_client.get_info(catalog_url, book_id)
        except DownstreamResponseError as exc:
            # Structured not-found is forwarded as-is; anything else is generic
            if exc.status_code == 404:
                raise
            raise ExternalServiceError("catalog", "Internal server error", details=exc.details)

        self.cache_manager.set_book_info(book_id, book)
        self.logger.info("Info retrieved", book_id=book_id, title=book.get("title"), catalog=catalog_url)
        return book

    async def purchase(self, book_id: int) -> Dict[str, Any]:
        """Writes go straight to an order replica and never touch the cache.

        Error responses from the order replica (not found, out of stock) are
        forwarded unchanged.
        """
        order_url = self._pick("order", self.order_replicas)
        result = await self.order_client.purchase(order_url, book_id)
        self.logger.info(
            "Purchase successful",
            book_id=book_id,
            order_id=result.get("order", {}).get("id"),
            order_replica=order_url,
        )
        return result


def create_app():
    """Create gateway service application."""
    service = GatewayService()
    return service.app


def main():
    service = GatewayService()
    service.run()


if __name__ == "__main__":
    main()
