from fastapi import APIRouter, Request

from edge.app.services.reverse_proxy import ReverseProxy

FORWARDED_METHODS = ["GET", "PUT", "POST", "DELETE"]


def build_bot_service_router(prefix: str) -> APIRouter:
    """Route every path starting with ``prefix`` to the bot service.

    The pattern is a plain prefix match, so ``/bot-service`` and
    ``/bot-service/anything`` are both forwarded.
    """
    router = APIRouter()

    @router.api_route(f"{prefix}{{rest:path}}", methods=FORWARDED_METHODS)
    async def forward_to_bot_service(rest: str, request: Request):
        proxy: ReverseProxy = request.app.state.bot_service
        return await proxy.forward(request)

    return router
