import pytest
from fastapi.testclient import TestClient

from edge.app.config.settings import GatewaySettings, PublicProxySettings
from edge.app.gateway import create_app as create_gateway_app
from edge.app.public_proxy import create_app as create_public_proxy_app

UPSTREAM_URL = "https://elm-lang.org/assets/public-opinion.txt"
BOT_SERVICE_URL = "http://localhost:4081"


@pytest.fixture
def static_root(tmp_path):
    """Static directory with a handful of files."""
    root = tmp_path / "public"
    root.mkdir()
    (root / "hello.txt").write_bytes(b"hello from disk\n")
    (root / "index.html").write_text("<h1>index</h1>", encoding="utf-8")
    (root / "public").mkdir()
    (root / "public" / "existing-file.txt").write_bytes(b"\x00binary\xffbytes\n")
    return root


@pytest.fixture
def gateway_settings(static_root):
    return GatewaySettings(
        _env_file=None,
        static_root=static_root,
        bot_service_url=BOT_SERVICE_URL,
    )


@pytest.fixture
def gateway_client(gateway_settings):
    app = create_gateway_app(gateway_settings)
    with TestClient(app) as client:
        yield client


@pytest.fixture
def public_proxy_settings():
    return PublicProxySettings(_env_file=None, upstream_url=UPSTREAM_URL)


@pytest.fixture
def public_proxy_client(public_proxy_settings):
    app = create_public_proxy_app(public_proxy_settings)
    with TestClient(app) as client:
        yield client
