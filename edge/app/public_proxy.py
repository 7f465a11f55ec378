"""Public resource proxy: ``GET /proxy`` relays one fixed external text file."""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI

from edge.app.api.proxy import router as proxy_router
from edge.app.config.settings import PublicProxySettings, get_public_proxy_settings
from edge.app.core import AccessLogMiddleware, RequestIDMiddleware, register_exception_handlers
from edge.app.security.cors import CORSHeadersMiddleware
from edge.app.services.public_resource import PublicResourceClient

logger = logging.getLogger("edge")


def create_app(
    settings: PublicProxySettings | None = None,
    http_client: httpx.AsyncClient | None = None,
) -> FastAPI:
    settings = settings or get_public_proxy_settings()
    resource = PublicResourceClient(
        settings.upstream_url,
        timeout_seconds=settings.upstream_timeout_seconds,
        client=http_client,
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(f"Listening on port {settings.port}")
        try:
            yield
        finally:
            await resource.aclose()

    app = FastAPI(
        title="Public Resource Proxy",
        version="0.1.0",
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.public_resource = resource

    register_exception_handlers(app)

    # add_middleware wraps, so the last one added runs first
    app.add_middleware(CORSHeadersMiddleware, headers=settings.cors_headers)
    app.add_middleware(AccessLogMiddleware)
    app.add_middleware(RequestIDMiddleware)

    app.include_router(proxy_router)
    return app
