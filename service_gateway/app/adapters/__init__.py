"""
Adapters package for the Gateway Service.

Contains HTTP client wrappers for the catalog and order replicas. These
adapters encapsulate:

- Request paths and shapes
- Error handling that maps to shared errors

Replica selection happens in the gateway; adapters are handed the chosen
base URL on every call.
"""

from .catalog_client import CatalogClient
from .order_client import OrderClient

__all__ = [
    "CatalogClient",
    "OrderClient",
]
