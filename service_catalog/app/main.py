"""
Catalog service for the Storefront.
"""

from typing import Any, Dict, List, Optional

import httpx
from fastapi import Body, Request

from shared.base_service import BaseService
from shared.config import ServiceConfig
from shared.errors import NotFoundError
from shared.models import Book, BookUpdate
from shared.replication import PeerReplicator, is_replicated
from shared.store import RecordStore
from shared.tracing import trace_operation

from .adapters.gateway_client import GatewayClient


class CatalogService(BaseService):
    """Catalog replica implementation."""

    def __init__(
        self,
        config: Optional[ServiceConfig] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        store: Optional[RecordStore] = None,
    ):
        super().__init__("catalog", 4000, config=config, http_client=http_client)
        self.store = store or RecordStore(self.config.db_file or "catalog.json", name="catalog")
        self.gateway_client = GatewayClient(self.config.gateway_url, self.http_client, metrics=self.metrics)
        self.replicator = PeerReplicator(
            self.config.peer_url,
            self.http_client,
            service_name="catalog",
            metrics=self.metrics,
        )

        self._setup_catalog_routes()

    def _setup_catalog_routes(self):
        """Set up catalog-specific routes."""

        @self.app.get("/")
        async def root():
            """Root endpoint."""
            return {
                "service": "catalog",
                "message": "Storefront - Catalog Service",
                "version": "1.0.0",
                "peer": self.replicator.peer_url,
                "gateway": self.gateway_client.gateway_url,
            }

        @self.app.get("/search/{topic}", response_model=List[Book])
        async def search(topic: str):
            """Books whose topic contains ``topic``, case-insensitively."""
            return await self.search(topic)

        @self.app.get("/info/{book_id}", response_model=Book)
        async def info(book_id: int):
            return await self.get_book(book_id)

        @self.app.get("/books", response_model=List[Book])
        async def list_books():
            return await self.store.load()

        @self.app.patch("/update/{book_id}", response_model=Book)
        async def update(book_id: int, request: Request, update: Optional[BookUpdate] = Body(None)):
            """Update quantity and/or price, then replicate to the peer."""
            return await self.update_book(
                book_id,
                update or BookUpdate(),
                replicated=is_replicated(request),
            )

    async def search(self, topic: str) -> List[Dict[str, Any]]:
        needle = topic.lower()
        catalog = await self.store.load()
        results = [book for book in catalog if needle in str(book.get("topic", "")).lower()]
        self.logger.info("Search", topic=topic, results=len(results))
        return results

    async def get_book(self, book_id: int) -> Dict[str, Any]:
        catalog = await self.store.load()
        index = self._find_index(catalog, book_id)
        if index is None:
            raise NotFoundError("Book not found", details={"book_id": book_id})

        book = catalog[index]
        self.logger.info("Info request", book_id=book_id, title=book.get("title"))
        return book

    async def update_book(self, book_id: int, update: BookUpdate, replicated: bool = False) -> Book:
        """Apply one write to the local store and forward it to the peer.

        Order matters: the gateway is told to drop its cached copy before
        the store changes, and the peer only hears about the write after it
        was persisted here. The record is read before the invalidation call
        and written after it, so two overlapping updates on this replica can
        lose one of them (last save wins).
        """
        with trace_operation("catalog.update", book_id=book_id, replicated=replicated):
            catalog = await self.store.load()
            index = self._find_index(catalog, book_id)
            if index is None:
                raise NotFoundError("Book not found", details={"book_id": book_id})

            await self.gateway_client.invalidate(book_id)

            changes = update.changes()
            catalog[index].update(changes)
            await self.store.save(catalog)
            self.metrics.increment_counter(
                "book_updates_total",
                origin="replicated" if replicated else "client",
            )

            # Forwarded writes stop here; re-forwarding would loop between peers
            if not replicated:
                await self.replicator.push("PATCH", f"/update/{book_id}", changes)

            book = Book.model_validate(catalog[index])
            self.observability.log_business_event(
                "book_updated",
                book_id=book_id,
                quantity=book.quantity,
                price=book.price,
                replicated=replicated,
            )
            return book

    @staticmethod
    def _find_index(catalog: List[Dict[str, Any]], book_id: int) -> Optional[int]:
        for index, book in enumerate(catalog):
            if book.get("id") == book_id:
                return index
        return None

    async def start(self):
        """Seed the store on first run."""
        if self.config.seed_file:
            self.store.seed_if_missing(self.config.seed_file)
        await super().start()

    async def _check_dependencies(self) -> Dict[str, str]:
        return {"store": "ok" if self.store.exists else "missing"}


def create_app():
    """Create catalog service application."""
    service = CatalogService()
    return service.app


def main():
    service = CatalogService()
    service.run()


if __name__ == "__main__":
    main()
