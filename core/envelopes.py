"""Map upstream results and proxy errors to response payloads."""

import json
import math
from datetime import UTC, datetime
from typing import Any

from core.config import Config
from core.exceptions import ProxyError, UpstreamError, UpstreamFormatError
from core.request_types import UpstreamResult

SUCCESS_STATUS = 200


def map_upstream_result(result: UpstreamResult, target_url: str) -> tuple[int, Any]:
    """Turn an upstream response into ``(status, payload)`` for the caller.

    Raises:
        UpstreamError: upstream answered with a non-2xx status
        UpstreamFormatError: upstream answered 2xx with a body that is not JSON
    """
    if not result.ok:
        raise UpstreamError(result.text, result.status_code, target_url)

    try:
        data = json.loads(result.content, parse_constant=_reject_constant, parse_float=_finite_float)
    except ValueError as e:
        raise UpstreamFormatError(f"Upstream returned invalid JSON: {e}", url=target_url) from e
    return SUCCESS_STATUS, data


def _finite_float(text: str) -> float:
    value = float(text)
    if math.isinf(value):
        raise ValueError(f"Out of range float value {text} is not valid JSON")
    return value


def _reject_constant(name: str) -> Any:
    raise ValueError(f"Out of range float value {name} is not valid JSON")


def error_payload(error: ProxyError, config: Config) -> dict[str, Any]:
    """Build the JSON error envelope for ``error``."""
    return error.to_payload(include_diagnostics=config.is_development)


def health_payload(config: Config) -> dict[str, Any]:
    """Static description returned by ``GET /``."""
    prefix = config.upstream.allowed_prefix
    return {
        "status": "OK",
        "message": "1inch API Proxy is running",
        "environment": config.proxy.environment,
        "hasAuthorization": config.has_authorization,
        "timestamp": datetime.now(UTC).isoformat(),
        "usage": f"Add the 1inch API URL after the domain, e.g., /{prefix}/fusion/orders/v1.0/1/order/active",
    }
