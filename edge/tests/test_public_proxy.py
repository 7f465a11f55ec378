import httpx
import pytest
from fastapi.testclient import TestClient

from edge.app.config.settings import PublicProxySettings
from edge.app.public_proxy import create_app
from edge.app.services.public_resource import PublicResourceClient

UPSTREAM_URL = "https://elm-lang.org/assets/public-opinion.txt"
PUBLIC_OPINION = (
    "Public opinion in this country is everything.\n"
    "With public sentiment, nothing can fail.\n"
)


def test_proxy_returns_upstream_body(public_proxy_client, respx_mock):
    route = respx_mock.get(UPSTREAM_URL).mock(
        return_value=httpx.Response(200, text=PUBLIC_OPINION)
    )

    response = public_proxy_client.get("/proxy")

    assert response.status_code == 200
    assert response.text == PUBLIC_OPINION
    assert response.headers["content-type"].startswith("text/plain")
    assert route.call_count == 1


def test_proxy_sets_allow_origin(public_proxy_client, respx_mock):
    respx_mock.get(UPSTREAM_URL).mock(return_value=httpx.Response(200, text="x"))

    response = public_proxy_client.get("/proxy")

    assert response.headers["access-control-allow-origin"] == "*"
    assert "access-control-allow-methods" not in response.headers


def test_proxy_ignores_query_and_body(public_proxy_client, respx_mock):
    route = respx_mock.get(UPSTREAM_URL).mock(
        return_value=httpx.Response(200, text=PUBLIC_OPINION)
    )

    response = public_proxy_client.request(
        "GET", "/proxy?page=2", content=b"ignored"
    )

    assert response.status_code == 200
    assert str(route.calls.last.request.url) == UPSTREAM_URL
    assert route.calls.last.request.content == b""


def test_proxy_fetches_once_per_request(public_proxy_client, respx_mock):
    route = respx_mock.get(UPSTREAM_URL).mock(
        return_value=httpx.Response(200, text=PUBLIC_OPINION)
    )

    first = public_proxy_client.get("/proxy")
    second = public_proxy_client.get("/proxy")

    assert first.content == second.content
    assert route.call_count == 2


def test_proxy_follows_redirects(public_proxy_client, respx_mock):
    moved = "https://elm-lang.org/assets/moved.txt"
    respx_mock.get(UPSTREAM_URL).mock(
        return_value=httpx.Response(301, headers={"Location": moved})
    )
    respx_mock.get(moved).mock(return_value=httpx.Response(200, text="moved"))

    response = public_proxy_client.get("/proxy")

    assert response.status_code == 200
    assert response.text == "moved"


@pytest.mark.parametrize("upstream_status", [404, 500, 503])
def test_proxy_upstream_error_status_is_500(public_proxy_client, respx_mock, upstream_status):
    respx_mock.get(UPSTREAM_URL).mock(return_value=httpx.Response(upstream_status))

    response = public_proxy_client.get("/proxy")

    assert response.status_code == 500
    data = response.json()
    assert data["code"] == "INTERNAL_ERROR"
    assert data["request_id"] == response.headers["x-request-id"]
    assert response.headers["access-control-allow-origin"] == "*"


def test_proxy_upstream_unreachable_is_500(public_proxy_client, respx_mock):
    respx_mock.get(UPSTREAM_URL).mock(side_effect=httpx.ConnectError("connection refused"))

    response = public_proxy_client.get("/proxy")

    assert response.status_code == 500
    assert response.json()["message"] == "An internal error occurred"


def test_proxy_rejects_other_methods(public_proxy_client):
    response = public_proxy_client.post("/proxy")
    assert response.status_code == 405


def test_unknown_path_is_404(public_proxy_client):
    response = public_proxy_client.get("/elsewhere")
    assert response.status_code == 404
    assert response.headers["access-control-allow-origin"] == "*"


def test_configured_upstream_url_is_used(respx_mock):
    other = "https://example.org/quote.txt"
    route = respx_mock.get(other).mock(return_value=httpx.Response(200, text="quote"))

    settings = PublicProxySettings(_env_file=None, upstream_url=other)
    with TestClient(create_app(settings)) as client:
        response = client.get("/proxy")

    assert response.text == "quote"
    assert route.called


def test_injected_http_client_is_used():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, content=b"from transport")

    http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    settings = PublicProxySettings(_env_file=None, upstream_url=UPSTREAM_URL)

    with TestClient(create_app(settings, http_client=http_client)) as client:
        response = client.get("/proxy")

    assert response.content == b"from transport"
    assert http_client.is_closed


def test_public_resource_client_has_no_timeout_by_default():
    resource = PublicResourceClient(UPSTREAM_URL)
    assert resource._client.timeout == httpx.Timeout(None)


def test_public_resource_client_timeout_is_configurable():
    resource = PublicResourceClient(UPSTREAM_URL, timeout_seconds=2.5)
    assert resource._client.timeout == httpx.Timeout(2.5)


def test_unhandled_error_keeps_allow_origin(public_proxy_settings, monkeypatch):
    app = create_app(public_proxy_settings)

    async def fail():
        raise RuntimeError("decoder crashed")

    monkeypatch.setattr(app.state.public_resource, "fetch", fail)

    with TestClient(app) as client:
        response = client.get("/proxy")

    assert response.status_code == 500
    assert response.json()["code"] == "INTERNAL_ERROR"
    assert response.headers["access-control-allow-origin"] == "*"
