"""
Shared request handling for the gateway's downstream clients.
"""

from typing import Any

import httpx

from shared.errors import DownstreamResponseError, ExternalServiceError
from shared.logging import get_logger
from shared.replication import outbound_headers


class DownstreamClient:
    """Calls one replica chosen by the caller and decodes its JSON reply.

    A replica that answers with an error status raises
    DownstreamResponseError carrying that status and body; a replica that
    cannot be reached raises ExternalServiceError.
    """

    service = "downstream"

    def __init__(self, http_client: httpx.AsyncClient):
        self.http_client = http_client
        self.logger = get_logger(f"gateway.{self.service}_client")

    async def _call(self, method: str, url: str) -> Any:
        try:
            response = await self.http_client.request(method, url, headers=outbound_headers())
        except httpx.HTTPError as e:
            self.logger.error(f"{self.service.title()} service HTTP error", method=method, url=url, error=str(e))
            raise ExternalServiceError(self.service, "unreachable", details={"http_error": str(e)})

        if response.status_code >= 400:
            self.logger.warning(
                f"{self.service.title()} service error response",
                method=method,
                url=url,
                status_code=response.status_code,
            )
            raise DownstreamResponseError(self.service, response.status_code, _decode(response))

        try:
            return response.json()
        except ValueError as e:
            raise ExternalServiceError(self.service, "invalid JSON response", details={"error": str(e)})


def _decode(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return {"error": response.text}
