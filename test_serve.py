from watchgate import serve
from watchgate.config import Settings


def test_main_runs_uvicorn_with_configured_address(monkeypatch):
    calls = []
    monkeypatch.setattr(serve, "get_settings", lambda: Settings(_env_file=None, host="0.0.0.0", port=9100))
    monkeypatch.setattr(serve.uvicorn, "run", lambda app, **kwargs: calls.append((app, kwargs)))

    serve.main()

    assert calls == [("watchgate.main:app", {"host": "0.0.0.0", "port": 9100, "workers": 1})]
