"""Path-prefix reverse proxy.

Strips a fixed prefix from the request path, forwards the request to a fixed
upstream and streams the upstream response back unchanged.
"""
from __future__ import annotations

import logging
from urllib.parse import quote

import httpx
from fastapi import Request
from starlette.background import BackgroundTask
from starlette.responses import StreamingResponse

logger = logging.getLogger(__name__)

# Meaningful for a single connection only; never relayed in either direction
HOP_BY_HOP_HEADERS = frozenset(
    {
        "connection",
        "keep-alive",
        "proxy-authenticate",
        "proxy-authorization",
        "te",
        "trailer",
        "transfer-encoding",
        "upgrade",
    }
)


def strip_prefix(path: str, prefix: str) -> str:
    """Remove ``prefix`` from ``path``, keeping the remainder absolute.

    >>> strip_prefix("/bot-service/foo", "/bot-service")
    '/foo'
    >>> strip_prefix("/bot-service", "/bot-service")
    '/'
    """
    if not path.startswith(prefix):
        raise ValueError(f"path {path!r} does not start with {prefix!r}")
    remainder = path[len(prefix):]
    if not remainder.startswith("/"):
        remainder = f"/{remainder}"
    return remainder


def build_upstream_url(base_url: str, path: str, query: str = "") -> str:
    url = f"{base_url.rstrip('/')}{path}"
    if query:
        url = f"{url}?{query}"
    return url


def forwardable_request_headers(headers) -> list[tuple[str, str]]:
    # httpx sets Host and Content-Length for the upstream request itself
    dropped = HOP_BY_HOP_HEADERS | {"host", "content-length"}
    return [(key, value) for key, value in headers.items() if key.lower() not in dropped]


def relayable_response_headers(raw_headers) -> list[tuple[bytes, bytes]]:
    return [
        (key.lower(), value)
        for key, value in raw_headers
        if key.decode("latin-1").lower() not in HOP_BY_HOP_HEADERS
    ]


class ReverseProxy:
    def __init__(self, base_url: str, prefix: str, client: httpx.AsyncClient | None = None):
        self.base_url = base_url.rstrip("/")
        self.prefix = prefix
        self._client = client or httpx.AsyncClient(timeout=None, follow_redirects=False)

    def upstream_url_for(self, request: Request) -> str:
        raw_path = request.scope.get("raw_path")
        # raw_path keeps percent-encoding; some servers append the query to it
        raw = raw_path.decode("latin-1").split("?", 1)[0] if raw_path else ""
        if raw.startswith(self.prefix):
            path = strip_prefix(raw, self.prefix)
        else:
            # Prefix itself was percent-encoded; fall back to the decoded path
            path = quote(strip_prefix(request.url.path, self.prefix), safe="/")
        return build_upstream_url(self.base_url, path, request.url.query)

    async def forward(self, request: Request) -> StreamingResponse:
        """Send ``request`` upstream and relay status, headers and body."""
        url = self.upstream_url_for(request)
        logger.debug("Forwarding %s %s to %s", request.method, request.url.path, url)

        upstream_request = self._client.build_request(
            method=request.method,
            url=url,
            headers=forwardable_request_headers(request.headers),
            content=await request.body(),
        )
        upstream_response = await self._client.send(upstream_request, stream=True)

        response = StreamingResponse(
            upstream_response.aiter_raw(),
            status_code=upstream_response.status_code,
            background=BackgroundTask(upstream_response.aclose),
        )
        response.raw_headers = relayable_response_headers(upstream_response.headers.raw)
        return response

    async def aclose(self) -> None:
        await self._client.aclose()
