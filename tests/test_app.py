import pytest

from dictionary_backend.app.core.config import config
from learning_backend.main import get_app as get_learning_app
from run_main import create_unified_app


def test_health_check(client):
    assert client.get("/").json() == {"status": "Unified backend running!"}


def test_validation_errors_are_400(client):
    res = client.post("/auth/login", json={"email": "a@b.c"})
    assert res.status_code == 400
    assert res.json()["detail"][0]["loc"] == ["body", "password"]


def test_both_backends_are_mounted(app):
    paths = {getattr(route, "path", None) for route in app.routes}
    assert {"/auth/login", "/sessions", "/settings/sync", "/translate", "/practice/sessions"} <= paths
    assert {"/dictionary/words", "/admin/lists", "/images/search", "/admin/cleanup/audio"} <= paths


def test_missing_secret_key(monkeypatch):
    monkeypatch.setattr(config, "SECRET_KEY", None)
    with pytest.raises(ValueError):
        get_learning_app()
    with pytest.raises(RuntimeError):
        create_unified_app()
