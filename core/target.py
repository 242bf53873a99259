"""Target URL derivation and validation.

The whole target URL travels in the inbound request, either as the path
(``/https://api.1inch.dev/swap/v6.0/1/quote?...``) or as a ``url`` parameter
in the query string or JSON body. The derived URL must start with the
allowed prefix before anything is sent upstream.
"""

from typing import Any

from core.exceptions import InvalidTargetError, MissingTargetError
from core.request_types import InboundRequest


def derive_target(inbound: InboundRequest) -> str:
    """Return the target URL for a request, or an empty string if none is present."""
    url = inbound.query_params.get("url")
    if url:
        return url

    if inbound.method == "POST":
        body_url = _body_url(inbound.body)
        if body_url:
            return body_url

    target = inbound.path.lstrip("/")
    if target and inbound.query_string:
        target = f"{target}?{inbound.query_string}"
    return target


def validate_target(url: str, allowed_prefix: str) -> str:
    """Return ``url`` unchanged if it is allowed, otherwise raise."""
    if not url:
        raise MissingTargetError()
    # Plain prefix match, no parsing or normalization
    if not url.startswith(allowed_prefix):
        raise InvalidTargetError(url, allowed_prefix)
    return url


def is_health_check(inbound: InboundRequest) -> bool:
    """A bare ``GET /`` asks for the health payload rather than a forward.

    An empty ``?url=`` counts as absent, so ``GET /?url=`` is a health check
    while ``POST /?url=`` is a missing-target error.
    """
    return inbound.method == "GET" and not inbound.path.strip("/") and not inbound.query_params.get("url")


def _body_url(body: Any) -> str | None:
    if not isinstance(body, dict):
        return None
    url = body.get("url")
    return url if isinstance(url, str) else None
