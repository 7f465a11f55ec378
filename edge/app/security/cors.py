from __future__ import annotations

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from edge.app.core.errors import global_exception_handler


class CORSHeadersMiddleware(BaseHTTPMiddleware):
    """Attach a fixed set of CORS headers to every response.

    Unlike Starlette's CORSMiddleware the headers do not depend on the
    request's Origin, and values already set downstream are overwritten.
    Unhandled errors are turned into the generic 500 here so that response
    carries the headers too.
    """

    def __init__(self, app, headers: dict[str, str]):
        super().__init__(app)
        self.headers = dict(headers)

    async def dispatch(self, request: Request, call_next):
        try:
            response = await call_next(request)
        except Exception as exc:
            response = await global_exception_handler(request, exc)
        for name, value in self.headers.items():
            response.headers[name] = value
        return response


class PreflightMiddleware(BaseHTTPMiddleware):
    """Answer every OPTIONS request with an empty 204."""

    async def dispatch(self, request: Request, call_next):
        if request.method == "OPTIONS":
            return Response(status_code=204)
        return await call_next(request)
