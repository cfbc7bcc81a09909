"""
Adapters package for the Order service.

Contains the HTTP client used to read and decrement catalog stock.
"""

from .catalog_client import CatalogClient

__all__ = [
    "CatalogClient",
]
