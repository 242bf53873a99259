"""HTTP forwarding to the upstream API."""

import traceback
from typing import Any

import httpx

from core.envelopes import map_upstream_result
from core.exceptions import (
    UpstreamConnectionError,
    UpstreamError,
    UpstreamTimeoutError,
    UpstreamTransportError,
)
from core.protocols import RequestLogger
from core.request_types import PreparedRequest, UpstreamResult

ROUTE_NAME = "1inch"


class UpstreamClient:
    """Send prepared requests upstream, one attempt each."""

    def __init__(self, client: httpx.AsyncClient, timeout: float = 30.0) -> None:
        self._client = client
        self._timeout = timeout

    async def forward(
        self,
        prepared: PreparedRequest,
        logger: RequestLogger,
    ) -> tuple[int, Any]:
        """Send ``prepared`` and map the upstream answer to ``(status, payload)``."""
        try:
            result = await self.send(prepared)
            status, payload = map_upstream_result(result, prepared.target_url)
        except (UpstreamError, UpstreamTransportError) as e:
            logger.log_error(ROUTE_NAME, e.status_code, str(e))
            raise

        logger.log_forward(prepared.method, prepared.target_url, result.status_code)
        return status, payload

    async def send(self, prepared: PreparedRequest) -> UpstreamResult:
        """Execute the outbound request and return its raw result."""
        request_kwargs: dict[str, Any] = {"headers": prepared.headers, "timeout": self._timeout}
        if prepared.method == "POST":
            request_kwargs["json"] = prepared.body

        try:
            response = await self._client.request(
                prepared.method,
                prepared.target_url,
                **request_kwargs,
            )
        except httpx.TimeoutException as e:
            raise UpstreamTimeoutError(
                f"Upstream timeout: {e}",
                url=prepared.target_url,
                stack=traceback.format_exc(),
            ) from e
        except (httpx.RequestError, httpx.InvalidURL) as e:
            raise UpstreamConnectionError(
                str(e) or type(e).__name__,
                url=prepared.target_url,
                stack=traceback.format_exc(),
            ) from e

        return UpstreamResult(status_code=response.status_code, content=response.content)
