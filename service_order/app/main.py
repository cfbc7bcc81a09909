"""
Order service for the Storefront.
"""

from typing import Any, Dict, List, Optional

import httpx
from fastapi import Request

from shared.base_service import BaseService
from shared.config import ServiceConfig
from shared.dispatcher import configure_replicas
from shared.errors import NotFoundError, OutOfStockError, StorefrontException, ValidationError
from shared.models import Order, ReplicatedOrder
from shared.replication import PeerReplicator, is_replicated
from shared.store import RecordStore
from shared.tracing import trace_operation

from .adapters.catalog_client import CatalogClient
from .sequence import OrderIdSequence


class OrderService(BaseService):
    """Order replica implementation."""

    def __init__(
        self,
        config: Optional[ServiceConfig] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        store: Optional[RecordStore] = None,
    ):
        super().__init__("order", 5000, config=config, http_client=http_client)
        self.store = store or RecordStore(self.config.db_file or "orders.json", name="order")
        self.catalog_replicas = configure_replicas(self.config.catalog_replicas, self.config.catalog_url)
        self.catalog_client = CatalogClient(self.http_client)
        self.replicator = PeerReplicator(
            self.config.peer_url,
            self.http_client,
            service_name="order",
            metrics=self.metrics,
        )

        # In-memory collection, persisted in full after every change
        self.orders: List[Dict[str, Any]] = []
        self.sequence = OrderIdSequence()
        self._loaded = False

        self._setup_order_routes()

    def _setup_order_routes(self):
        """Set up order-specific routes."""

        @self.app.get("/")
        async def root():
            """Root endpoint."""
            return {
                "service": "order",
                "message": "Storefront - Order Service",
                "version": "1.0.0",
                "peer": self.replicator.peer_url,
                "catalogReplicas": self.catalog_replicas.addresses,
            }

        @self.app.post("/purchase/{book_id}")
        async def purchase(book_id: int, request: Request):
            """Buy one copy of a book."""
            return await self.purchase(book_id, replicated=is_replicated(request))

        @self.app.post("/replicate/order")
        async def replicate_order(payload: ReplicatedOrder):
            """Accept an order created by the peer replica."""
            return await self.receive_replicated_order(payload)

        @self.app.get("/orders")
        async def list_orders():
            await self._ensure_loaded()
            return self.orders

        @self.app.get("/orders/{order_id}")
        async def get_order(order_id: int):
            await self._ensure_loaded()
            for order in self.orders:
                if order.get("id") == order_id:
                    return order
            raise NotFoundError("Order not found", details={"order_id": order_id})

    async def purchase(self, book_id: int, replicated: bool = False) -> Dict[str, Any]:
        """Run one purchase against a single catalog replica.

        Stock is read and decremented on the same replica, chosen once per
        purchase. Nothing is reserved between the read and the decrement, so
        concurrent purchases of the last copy can all succeed.
        """
        with self.metrics.time_operation("purchase_duration_seconds"), \
                trace_operation("order.purchase", book_id=book_id, replicated=replicated):
            await self._ensure_loaded()
            catalog_url = self.catalog_replicas.next()

            try:
                book = await self.catalog_client.get_book(catalog_url, book_id)
                self.logger.info(
                    "Purchase request",
                    book_id=book_id,
                    title=book.title,
                    quantity=book.quantity,
                    catalog=catalog_url,
                )

                if book.quantity <= 0:
                    raise OutOfStockError(details={"book_id": book_id})

                remaining = book.quantity - 1
                await self.catalog_client.set_quantity(catalog_url, book_id, remaining)
            except StorefrontException as exc:
                self.metrics.increment_counter("purchases_total", outcome=exc.code.lower())
                raise

            order = Order(
                id=self.sequence.next_id(),
                book_id=book_id,
                book_title=book.title,
                price=book.price,
            )
            record = order.to_record()
            self.orders.append(record)
            await self.store.save(self.orders)
            self.metrics.increment_counter("purchases_total", outcome="completed")

            if not replicated:
                await self.replicator.push("POST", "/replicate/order", record)

            self.observability.log_business_event(
                "purchase_completed",
                order_id=order.id,
                book_id=book_id,
                remaining_quantity=remaining,
            )
            return {
                "message": "Purchase successful!",
                "order": record,
                "remainingQuantity": remaining,
            }

    async def receive_replicated_order(self, payload: ReplicatedOrder) -> Dict[str, Any]:
        """Store an order pushed by the peer; duplicates are a no-op."""
        await self._ensure_loaded()
        if payload.id is None:
            raise ValidationError("Invalid replicated order")

        existed = any(order.get("id") == payload.id for order in self.orders)
        if existed:
            self.logger.info("Replicated order already exists, ignored", order_id=payload.id)
        else:
            self.orders.append(payload.to_record())
            self.sequence.advance_past(payload.id)
            await self.store.save(self.orders)
            self.logger.info("Received replicated order", order_id=payload.id)

        self.metrics.increment_counter("replicated_orders_total", existed=str(existed).lower())
        return {"message": "Replicated order processed", "id": payload.id, "existed": existed}

    async def _ensure_loaded(self):
        """Load the order store and seed the id sequence once per process."""
        if self._loaded:
            return
        orders = await self.store.load()
        # Another request may have finished loading while this one waited
        if not self._loaded:
            self.orders = orders
            self.sequence = OrderIdSequence.from_orders(orders)
            self._loaded = True
            self.logger.info("Orders loaded", count=len(orders), next_id=self.sequence.peek())

    async def start(self):
        """Seed the store on first run and load existing orders."""
        if self.config.seed_file:
            self.store.seed_if_missing(self.config.seed_file)
        await self._ensure_loaded()
        await super().start()

    async def _check_dependencies(self) -> Dict[str, str]:
        return {"store": "ok" if self.store.exists else "missing"}


def create_app():
    """Create order service application."""
    service = OrderService()
    return service.app


def main():
    service = OrderService()
    service.run()


if __name__ == "__main__":
    main()
