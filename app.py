"""FastAPI application factory."""

import traceback
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from api.handlers import handle_health, handle_proxy
from core.config import Config
from core.envelopes import error_payload
from core.exceptions import FETCH_ERROR_MESSAGE, ProxyError
from core.headers import HeaderBuilder
from core.protocols import RequestLogger
from services.forwarding_service import ForwardingService
from services.upstream import UpstreamClient


def create_app(
    config: Config,
    logger: RequestLogger,
    transport: httpx.AsyncBaseTransport | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    ``transport`` replaces the network transport of the upstream client,
    which lets tests stand in a fake upstream.
    """
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        limits = httpx.Limits(max_connections=100, max_keepalive_connections=20)
        client = httpx.AsyncClient(
            timeout=config.upstream.timeout,
            limits=limits,
            transport=transport,
        )
        app.state.upstream_client = UpstreamClient(client, timeout=config.upstream.timeout)
        app.state.forwarding_service = ForwardingService(
            config=config,
            header_builder=HeaderBuilder(config.upstream.authorization),
        )
        try:
            yield
        finally:
            await client.aclose()

    app = FastAPI(title="1inch API Proxy", version="0.1.0", lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(config.proxy.cors_origins),
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
    )

    @app.exception_handler(ProxyError)
    async def proxy_error_handler(request: Request, exc: ProxyError):
        return JSONResponse(error_payload(exc, config), status_code=exc.status_code)

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.log_error("proxy", 500, f"{type(exc).__name__}: {exc}")
        payload = {"error": FETCH_ERROR_MESSAGE, "message": str(exc)}
        if config.is_development:
            payload["stack"] = "".join(traceback.format_exception(exc))
        return JSONResponse(payload, status_code=500)

    @app.get("/")
    async def root(request: Request):
        return await handle_health(request, config, logger)

    @app.post("/")
    async def proxy_root(request: Request):
        return await handle_proxy(request, config, logger)

    @app.api_route("/{target:path}", methods=["GET", "POST"])
    async def proxy_target(request: Request, target: str):
        return await handle_proxy(request, config, logger)

    return app
