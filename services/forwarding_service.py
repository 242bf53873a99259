"""Prepare inbound requests for forwarding to the upstream API."""

from typing import Any

from core.config import Config
from core.exceptions import ConfigurationError
from core.headers import HeaderBuilder
from core.request_types import InboundRequest, PreparedRequest
from core.target import derive_target, validate_target


class ForwardingService:
    """Derive, validate and decorate the single upstream request for an inbound one."""

    def __init__(self, config: Config, header_builder: HeaderBuilder | None = None) -> None:
        self._config = config
        self._headers = header_builder or HeaderBuilder(config.upstream.authorization)

    def prepare(self, inbound: InboundRequest) -> PreparedRequest:
        """Build the outbound request, raising a ProxyError if it must not be sent."""
        if not self._config.has_authorization:
            raise ConfigurationError()

        target_url = validate_target(derive_target(inbound), self._config.upstream.allowed_prefix)

        body = None
        if inbound.method == "POST":
            body = self._outbound_body(inbound.body)

        return PreparedRequest(
            method=inbound.method,
            target_url=target_url,
            headers=self._headers.build_upstream_headers(),
            body=body,
        )

    @staticmethod
    def _outbound_body(body: Any) -> Any:
        """Send the nested ``data`` field when present, otherwise the whole body."""
        if isinstance(body, dict) and body.get("data"):
            return body["data"]
        return body if body is not None else {}
