"""
Best-effort replication between peer replicas.

A write accepted by one replica is pushed once to its peer, carrying the
forwarding marker header. The receiving replica applies it locally and does
not forward it again, which is the only guard against replication loops.
Failed pushes are logged and dropped: there is no retry and no queue, so the
peers may silently diverge.
"""

from typing import Any, Dict, Optional

import httpx
from fastapi import Request

from .logging import get_logger, get_request_id
from .metrics import MetricsCollector

REPLICATED_HEADER = "X-Replicated"
REQUEST_ID_HEADER = "X-Request-ID"


def is_replicated(request: Request) -> bool:
    """True when the request was forwarded by a peer replica."""
    return request.headers.get(REPLICATED_HEADER) == "1"


def outbound_headers(replicated: bool = False) -> Dict[str, str]:
    """Headers for an inter-service call made while serving a request."""
    headers: Dict[str, str] = {}
    request_id = get_request_id()
    if request_id:
        headers[REQUEST_ID_HEADER] = request_id
    if replicated:
        headers[REPLICATED_HEADER] = "1"
    return headers


class PeerReplicator:
    """Pushes writes to the peer replica, once, with the forwarding marker."""

    def __init__(
        self,
        peer_url: Optional[str],
        http_client: httpx.AsyncClient,
        *,
        service_name: str,
        metrics: Optional[MetricsCollector] = None,
    ):
        self.peer_url = peer_url.rstrip("/") if peer_url else None
        self.http_client = http_client
        self.metrics = metrics
        self.logger = get_logger(f"{service_name}.replication")

    @property
    def enabled(self) -> bool:
        return bool(self.peer_url)

    async def push(self, method: str, path: str, payload: Any) -> bool:
        """Forward one write to the peer.

        Returns True when the peer acknowledged it. Never raises for network
        or HTTP failures; those are logged and reported as False.
        """
        if not self.peer_url:
            return False

        url = f"{self.peer_url}{path}"
        try:
            response = await self.http_client.request(
                method,
                url,
                json=payload,
                headers=outbound_headers(replicated=True),
            )
            response.raise_for_status()
        except httpx.HTTPError as exc:
            self.logger.error("Replication to peer failed", method=method, url=url, error=str(exc))
            self._record("error")
            return False

        self.logger.info("Replicated write to peer", method=method, url=url)
        self._record("ok")
        return True

    def _record(self, result: str) -> None:
        if self.metrics:
            self.metrics.increment_counter("replication_total", target="peer", result=result)
