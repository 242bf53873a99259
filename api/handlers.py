"""FastAPI route handlers."""

import json
from json import JSONDecodeError
from typing import Any

from fastapi import Request
from fastapi.responses import JSONResponse

from core.config import Config
from core.envelopes import health_payload
from core.exceptions import InvalidJSON, ProxyError, RequestTooLarge
from core.protocols import RequestLogger
from core.request_types import InboundRequest
from core.target import is_health_check
from ui.log_utils import write_incoming_log

MAX_BODY_SIZE = 50 * 1024 * 1024  # 50MB


async def _parse_json_body(request: Request) -> Any:
    """Parse request body as JSON; an empty body parses to an empty object."""
    raw_body = await request.body()
    if len(raw_body) > MAX_BODY_SIZE:
        raise RequestTooLarge()

    text_body = raw_body.decode("utf-8", errors="replace")
    if not text_body.strip():
        return {}
    try:
        return json.loads(text_body)
    except (JSONDecodeError, ValueError) as e:
        raise InvalidJSON(f"Invalid JSON: {e}") from e


def _raw_path(request: Request) -> str:
    """Path exactly as sent by the client, without percent-decoding."""
    raw_path = request.scope.get("raw_path")
    if raw_path is None:
        return request.url.path
    # Some servers include the query string in raw_path
    return raw_path.decode("latin-1").split("?", 1)[0]


def _raw_query(request: Request) -> str:
    return request.scope.get("query_string", b"").decode("latin-1")


async def _read_inbound(request: Request) -> InboundRequest:
    body = None
    if request.method == "POST":
        body = await _parse_json_body(request)

    inbound = InboundRequest(
        method=request.method,
        path=_raw_path(request),
        query_string=_raw_query(request),
        query_params=dict(request.query_params),
        body=body,
    )
    write_incoming_log(request.method, request.url.path, dict(request.headers), body)
    return inbound


async def handle_health(request: Request, config: Config, logger: RequestLogger) -> JSONResponse:
    """Handle ``GET /``: health payload, or a forward when ``?url=`` is given."""
    inbound = InboundRequest(
        method=request.method,
        path=_raw_path(request),
        query_string=_raw_query(request),
        query_params=dict(request.query_params),
    )
    if is_health_check(inbound):
        return JSONResponse(health_payload(config))
    return await handle_proxy(request, config, logger)


async def handle_proxy(request: Request, config: Config, logger: RequestLogger) -> JSONResponse:
    """Forward a GET or POST request to the upstream API."""
    try:
        inbound = await _read_inbound(request)
        prepared = request.app.state.forwarding_service.prepare(inbound)
    except ProxyError as e:
        logger.log_rejected(request.method, request.url.path, e.status_code, str(e))
        raise

    upstream = request.app.state.upstream_client
    status, payload = await upstream.forward(prepared, logger)
    return JSONResponse(payload, status_code=status)
