#!/usr/bin/env python3
"""
Launch one of the edge services with uvicorn.

Usage:
  edge-serve public-proxy
  edge-serve gateway --reload

The listening port comes from the PORT environment variable (default 3000).
"""
from __future__ import annotations

import argparse

import uvicorn

from edge.app.config.settings import get_gateway_settings, get_public_proxy_settings
from edge.app.core.logging import setup_logging

SERVICES = {
    "public-proxy": ("edge.app.public_proxy:create_app", get_public_proxy_settings),
    "gateway": ("edge.app.gateway:create_app", get_gateway_settings),
}


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run an edge HTTP service")
    parser.add_argument("service", choices=sorted(SERVICES))
    parser.add_argument("--reload", action="store_true", help="Reload on code changes")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    factory, load_settings = SERVICES[args.service]
    settings = load_settings()

    setup_logging(
        level=settings.log_level,
        json_output=settings.log_json,
        log_file=settings.log_file or None,
    )

    uvicorn.run(
        factory,
        factory=True,
        host=settings.host,
        port=settings.port,
        reload=args.reload,
        log_level=settings.log_level.lower(),
        # Keep the handlers installed by setup_logging
        log_config=None,
        access_log=False,
    )


if __name__ == "__main__":
    main()
