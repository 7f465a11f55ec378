from fastapi import APIRouter, Depends, Request, Response

from edge.app.services.public_resource import PublicResourceClient

router = APIRouter()


def get_public_resource(request: Request) -> PublicResourceClient:
    return request.app.state.public_resource


@router.get("/proxy")
async def proxy(resource: PublicResourceClient = Depends(get_public_resource)):
    """Relay the fixed external resource verbatim."""
    upstream = await resource.fetch()
    return Response(
        content=upstream.content,
        status_code=200,
        media_type=upstream.headers.get("content-type", "text/plain; charset=utf-8"),
    )
