"""
Adapters package for the Catalog service.

Contains the HTTP client used to signal cache invalidations to the gateway.
Replication to the peer catalog goes through ``shared.replication``.
"""

from .gateway_client import GatewayClient

__all__ = [
    "GatewayClient",
]
