"""Shared error handlers.

Upstream failures are not mapped to distinct statuses: every failure becomes
the same generic 500 body.
"""
from __future__ import annotations

import logging

import httpx
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

logger = logging.getLogger("edge")


def _request_context(request: Request) -> dict:
    return {
        "method": request.method,
        "path": request.url.path,
        "query": request.url.query,
        "client_ip": request.client.host if request.client else None,
    }


def internal_error_response(request: Request) -> JSONResponse:
    request_id = getattr(request.state, "request_id", "unknown")
    return JSONResponse(
        status_code=500,
        content={
            "code": "INTERNAL_ERROR",
            "message": "An internal error occurred",
            "request_id": request_id,
        },
    )


async def upstream_exception_handler(request: Request, exc: httpx.HTTPError):
    upstream_url = None
    try:
        upstream_url = str(exc.request.url)
    except RuntimeError:
        # Errors raised before a request was attached carry no URL
        pass
    logger.error(
        "Upstream request failed",
        extra={"upstream_url": upstream_url, **_request_context(request)},
        exc_info=exc,
    )
    return internal_error_response(request)


async def global_exception_handler(request: Request, exc: Exception):
    logger.error("Unhandled exception", extra=_request_context(request), exc_info=exc)
    return internal_error_response(request)


def register_exception_handlers(app: FastAPI) -> None:
    """Install the generic 500 handlers on an application."""
    app.add_exception_handler(httpx.HTTPError, upstream_exception_handler)
    app.add_exception_handler(Exception, global_exception_handler)
