"""
In-process storefront topology for integration tests.

One gateway, two catalog replicas and two order replicas, each with its own
store under ``tmp_path``, all talking through a shared InProcessNetwork.
"""

from dataclasses import dataclass
from pathlib import Path

import httpx
import pytest

import sys
import os
sys.path.append(os.path.join(os.path.dirname(__file__), '..', '..'))

from service_catalog.app.main import CatalogService
from service_gateway.app.main import GatewayService
from service_order.app.main import OrderService
from shared.config import get_config
from shared.test_helpers import InProcessNetwork, TestDataFactory, read_store, write_store

GATEWAY = "http://gateway"
CATALOG_A = "http://catalog-a"
CATALOG_B = "http://catalog-b"
ORDER_A = "http://order-a"
ORDER_B = "http://order-b"


@dataclass
class Storefront:
    network: InProcessNetwork
    gateway: GatewayService
    catalogs: dict
    orders: dict
    stores: dict

    def client(self, base_url: str = GATEWAY) -> httpx.AsyncClient:
        """Client for a test acting as an external caller."""
        return httpx.AsyncClient(transport=self.network, base_url=base_url)

    def books(self, replica: str) -> dict:
        return {book["id"]: book for book in read_store(self.stores[replica])}

    def order_records(self, replica: str) -> list:
        return read_store(self.stores[replica])


def build_storefront(root: Path) -> Storefront:
    network = InProcessNetwork()
    stores = {}

    catalogs = {}
    for url, peer in ((CATALOG_A, CATALOG_B), (CATALOG_B, CATALOG_A)):
        name = httpx.URL(url).host
        stores[url] = write_store(root / f"{name}.json", TestDataFactory.create_books())
        config = get_config("catalog", 4000, db_file=str(stores[url]), peer_url=peer, gateway_url=GATEWAY)
        catalogs[url] = CatalogService(config=config, http_client=network.client())
        network.register(url, catalogs[url].app)

    orders = {}
    for url, peer in ((ORDER_A, ORDER_B), (ORDER_B, ORDER_A)):
        name = httpx.URL(url).host
        stores[url] = write_store(root / f"{name}.json", [])
        config = get_config(
            "order",
            5000,
            db_file=str(stores[url]),
            peer_url=peer,
            catalog_replicas=f"{CATALOG_A},{CATALOG_B}",
        )
        orders[url] = OrderService(config=config, http_client=network.client())
        network.register(url, orders[url].app)

    gateway_config = get_config(
        "gateway",
        3000,
        catalog_replicas=f"{CATALOG_A},{CATALOG_B}",
        order_replicas=f"{ORDER_A},{ORDER_B}",
        cache_max=30,
    )
    gateway = GatewayService(config=gateway_config, http_client=network.client())
    network.register(GATEWAY, gateway.app)

    return Storefront(network=network, gateway=gateway, catalogs=catalogs, orders=orders, stores=stores)


@pytest.fixture
def storefront(tmp_path):
    return build_storefront(tmp_path)
