from __future__ import annotations

import httpx


class PublicResourceClient:
    """Fetches one fixed external resource on demand.

    No caching and no retries: every call is one round-trip.
    """

    def __init__(
        self,
        url: str,
        timeout_seconds: float | None = None,
        client: httpx.AsyncClient | None = None,
    ):
        self.url = url
        self.timeout_seconds = timeout_seconds
        self._client = client or httpx.AsyncClient(
            timeout=self.timeout_seconds,
            follow_redirects=True,
        )

    async def fetch(self) -> httpx.Response:
        """Return the upstream response, raising httpx.HTTPStatusError on non-2xx."""
        response = await self._client.get(self.url)
        response.raise_for_status()
        return response

    async def aclose(self) -> None:
        await self._client.aclose()
