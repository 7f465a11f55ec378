import pytest

from edge import serve


@pytest.fixture
def captured_run(monkeypatch):
    calls = []
    monkeypatch.setattr(serve.uvicorn, "run", lambda app, **kwargs: calls.append((app, kwargs)))
    monkeypatch.setattr(serve, "setup_logging", lambda **kwargs: None)
    serve.get_gateway_settings.cache_clear()
    serve.get_public_proxy_settings.cache_clear()
    yield calls
    serve.get_gateway_settings.cache_clear()
    serve.get_public_proxy_settings.cache_clear()


@pytest.mark.parametrize(
    "service,factory",
    [
        ("public-proxy", "edge.app.public_proxy:create_app"),
        ("gateway", "edge.app.gateway:create_app"),
    ],
)
def test_main_runs_selected_service_on_port(monkeypatch, captured_run, service, factory):
    monkeypatch.setenv("PORT", "4000")

    serve.main([service])

    app, kwargs = captured_run[0]
    assert app == factory
    assert kwargs["factory"] is True
    assert kwargs["port"] == 4000
    assert kwargs["reload"] is False


def test_main_rejects_unknown_service(captured_run):
    with pytest.raises(SystemExit):
        serve.main(["database"])
