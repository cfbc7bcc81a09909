"""
Order service client for Gateway.
"""

from typing import Any, Dict

from .base_client import DownstreamClient


class OrderClient(DownstreamClient):
    """Write client for order replicas."""

    service = "order"

    async def purchase(self, base_url: str, book_id: int) -> Dict[str, Any]:
        return await self._call("POST", f"{base_url}/purchase/{book_id}")
