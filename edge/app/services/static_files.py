from __future__ import annotations

import logging
from pathlib import Path

from starlette.exceptions import HTTPException
from starlette.staticfiles import StaticFiles
from starlette.types import ASGIApp, Receive, Scope, Send

logger = logging.getLogger(__name__)


class StaticFilesMiddleware:
    """Serve a file from ``directory`` when one matches, else fall through.

    ``StaticFiles`` mounted on a route answers misses with 404 itself; here a
    miss hands the request on to the wrapped application instead.
    """

    def __init__(self, app: ASGIApp, directory: str | Path):
        self.app = app
        self.directory = Path(directory)
        # html=True serves index.html for directories
        self.static = StaticFiles(directory=self.directory, html=True, check_dir=False)
        if not self.directory.is_dir():
            logger.warning("Static root not found: %s", self.directory)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http" or scope["method"] not in ("GET", "HEAD"):
            await self.app(scope, receive, send)
            return

        try:
            response = await self.static.get_response(self.static.get_path(scope), scope)
        except HTTPException:
            # Missing, unreadable or outside the root
            await self.app(scope, receive, send)
            return

        # A 404.html page is still a miss
        if response.status_code == 404:
            await self.app(scope, receive, send)
            return

        await response(scope, receive, send)
