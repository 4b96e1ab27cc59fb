"""FastAPI application factory."""

from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI, Request

from api.handlers import handle_preflight, handle_proxy
from core.config import Config
from core.headers import HeaderBuilder
from core.protocols import RequestLogger
from core.rewrite import LinkRewriter
from services.relay_service import RelayService
from services.upstream import UpstreamClient


def create_app(
    config: Config,
    logger: RequestLogger,
    transport: httpx.AsyncBaseTransport | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    ``transport`` replaces the network transport of the upstream client,
    which lets tests serve upstream responses in-process.
    """
    header_builder = HeaderBuilder(config.relay.user_agent, config.cors)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        limits = httpx.Limits(max_connections=100, max_keepalive_connections=20)
        client = httpx.AsyncClient(
            timeout=config.relay.timeout,
            limits=limits,
            follow_redirects=True,
            transport=transport,
        )
        app.state.relay_service = RelayService(
            settings=config.relay,
            logger=logger,
            upstream=UpstreamClient(client),
            header_builder=header_builder,
            rewriter=LinkRewriter(config.relay.base_path, config.relay.target_param),
        )
        try:
            yield
        finally:
            await client.aclose()

    app = FastAPI(title="Ultraviolet Relay", version="0.1.0", lifespan=lifespan)

    @app.middleware("http")
    async def cors_headers(request: Request, call_next):
        if request.method == "OPTIONS":
            response = await handle_preflight(request)
        else:
            response = await call_next(request)
        response.headers.update(header_builder.build_cors_headers(request.headers.get("origin")))
        return response

    @app.get(config.relay.base_path)
    async def proxy(request: Request):
        return await handle_proxy(request, config, logger)

    return app
