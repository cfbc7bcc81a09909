"""
Catalog service client for Gateway.
"""

from typing import Any, Dict, List
from urllib.parse import quote

from .base_client import DownstreamClient


class CatalogClient(DownstreamClient):
    """Read-only client for catalog replicas."""

    service = "catalog"

    async def search(self, base_url: str, topic: str) -> List[Dict[str, Any]]:
        return await self._call("GET", f"{base_url}/search/{quote(topic, safe='')}")

    async def get_info(self, base_url: str, book_id: int) -> Dict[str, Any]:
        return await self._call("GET", f"{base_url}/info/{book_id}")
