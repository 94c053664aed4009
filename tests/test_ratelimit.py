import time

from credgen.config import DEFAULTS
from credgen.web.api import create_app


def _client(**overrides):
    settings = DEFAULTS.copy()
    settings.update(overrides)
    return create_app(settings).test_client()


def test_allows_up_to_limit_then_blocks():
    c = _client(rate_limit=2)
    assert c.post("/api/generate-password").status_code == 200
    assert c.post("/api/generate-username").status_code == 200
    res = c.post("/api/generate-credentials")
    assert res.status_code == 429
    assert res.get_json() == {"error": "Too many requests. Try again later."}
    assert int(res.headers["Retry-After"]) >= 1
    assert res.headers["X-Frame-Options"] == "DENY"


def test_clients_are_counted_separately():
    c = _client(rate_limit=1)
    assert c.post("/api/generate-password", environ_base={"REMOTE_ADDR": "10.0.0.1"}).status_code == 200
    assert c.post("/api/generate-password", environ_base={"REMOTE_ADDR": "10.0.0.1"}).status_code == 429
    assert c.post("/api/generate-password", environ_base={"REMOTE_ADDR": "10.0.0.2"}).status_code == 200


def test_window_expires():
    c = _client(rate_limit=1, rate_window_seconds=1)
    assert c.post("/api/generate-password").status_code == 200
    assert c.post("/api/generate-password").status_code == 429
    time.sleep(1.5)
    assert c.post("/api/generate-password").status_code == 200


def test_only_api_routes_are_limited():
    c = _client(rate_limit=1)
    assert c.post("/api/generate-password").status_code == 200
    for _ in range(3):
        assert c.get("/missing").status_code == 404
        assert c.options("/api/generate-password").status_code == 204


def test_apps_do_not_share_counters():
    assert _client(rate_limit=1).post("/api/generate-password").status_code == 200
    assert _client(rate_limit=1).post("/api/generate-password").status_code == 200
