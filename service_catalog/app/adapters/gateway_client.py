"""
Gateway cache invalidation client for the Catalog service.
"""

from typing import Optional

import httpx

from shared.logging import get_logger
from shared.metrics import MetricsCollector
from shared.replication import outbound_headers


class GatewayClient:
    """Sends cache invalidation signals to the gateway before a write."""

    def __init__(
        self,
        gateway_url: Optional[str],
        http_client: httpx.AsyncClient,
        metrics: Optional[MetricsCollector] = None,
    ):
        self.gateway_url = gateway_url.rstrip("/") if gateway_url else None
        self.http_client = http_client
        self.metrics = metrics
        self.logger = get_logger("catalog.gateway_client")

    async def invalidate(self, book_id: int) -> Optional[bool]:
        """Ask the gateway to drop its cached info for ``book_id``.

        Returns whether the gateway held an entry, or None when the signal
        was skipped or failed. Failures never propagate: the write that
        triggered the signal goes ahead regardless.
        """
        if not self.gateway_url:
            return None

        try:
            response = await self.http_client.post(
                f"{self.gateway_url}/cache/invalidate/{book_id}",
                headers=outbound_headers(),
            )
            response.raise_for_status()
            existed = bool(response.json().get("existed"))
        except (httpx.HTTPError, ValueError) as exc:
            self.logger.error("Cache invalidate failed", book_id=book_id, error=str(exc))
            self._record("error")
            return None

        self.logger.info("Sent cache invalidate to gateway", book_id=book_id, existed=existed)
        self._record("ok")
        return existed

    def _record(self, result: str) -> None:
        if self.metrics:
            self.metrics.increment_counter("replication_total", target="gateway", result=result)
