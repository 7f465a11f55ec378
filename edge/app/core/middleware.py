from __future__ import annotations

import logging
import time
import uuid
from datetime import datetime, timezone

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from edge.app.core.logging import request_id_var

access_logger = logging.getLogger("edge.access")


def format_access_line(
    client_ip: str | None,
    method: str,
    target: str,
    http_version: str,
    status: int,
    length: str | None,
    when: datetime,
) -> str:
    """Render one request in Common Log Format."""
    timestamp = when.astimezone(timezone.utc).strftime("%d/%b/%Y:%H:%M:%S %z")
    return (
        f'{client_ip or "-"} - - [{timestamp}] '
        f'"{method} {target} HTTP/{http_version}" {status} {length or "-"}'
    )


class RequestIDMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        request_id = str(uuid.uuid4())
        request.state.request_id = request_id

        token = request_id_var.set(request_id)
        try:
            response = await call_next(request)
            response.headers["X-Request-ID"] = request_id
            return response
        finally:
            request_id_var.reset(token)


class AccessLogMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        started = datetime.now(timezone.utc)
        start_time = time.perf_counter()

        status = 500
        length = None
        try:
            response = await call_next(request)
            status = response.status_code
            length = response.headers.get("content-length")
            return response
        finally:
            latency = time.perf_counter() - start_time
            target = request.url.path
            if request.url.query:
                target = f"{target}?{request.url.query}"
            client_ip = request.client.host if request.client else None

            access_logger.info(
                format_access_line(
                    client_ip,
                    request.method,
                    target,
                    request.scope.get("http_version", "1.1"),
                    status,
                    length,
                    started,
                ),
                extra={
                    "request_id": getattr(request.state, "request_id", None),
                    "method": request.method,
                    "path": request.url.path,
                    "status": status,
                    "latency_ms": round(latency * 1000, 2),
                    "client_ip": client_ip,
                },
            )
