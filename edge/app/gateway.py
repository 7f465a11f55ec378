"""Static file and bot-service gateway.

Stages, outermost first: request id, access log, CORS headers, OPTIONS
short-circuit, static files, then the router (bot-service proxy or 404).
"""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI

from edge.app.api.bot_service import build_bot_service_router
from edge.app.config.settings import GatewaySettings, get_gateway_settings
from edge.app.core import AccessLogMiddleware, RequestIDMiddleware, register_exception_handlers
from edge.app.security.cors import CORSHeadersMiddleware, PreflightMiddleware
from edge.app.services.reverse_proxy import ReverseProxy
from edge.app.services.static_files import StaticFilesMiddleware

logger = logging.getLogger("edge")


def create_app(
    settings: GatewaySettings | None = None,
    http_client: httpx.AsyncClient | None = None,
) -> FastAPI:
    settings = settings or get_gateway_settings()
    bot_service = ReverseProxy(
        settings.bot_service_url,
        settings.bot_service_prefix,
        client=http_client,
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(f"Listening on port {settings.port}")
        try:
            yield
        finally:
            await bot_service.aclose()

    app = FastAPI(
        title="Bot Service Gateway",
        version="0.1.0",
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.bot_service = bot_service

    register_exception_handlers(app)

    # add_middleware wraps, so the last one added runs first
    app.add_middleware(StaticFilesMiddleware, directory=settings.static_root)
    app.add_middleware(PreflightMiddleware)
    app.add_middleware(CORSHeadersMiddleware, headers=settings.cors_headers)
    app.add_middleware(AccessLogMiddleware)
    app.add_middleware(RequestIDMiddleware)

    app.include_router(build_bot_service_router(settings.bot_service_prefix))
    return app
