from fastapi.testclient import TestClient

from src.blogsmith.api.main import app


client = TestClient(app)


def test_root_and_health():
    r = client.get("/")
    assert r.status_code == 200
    assert r.json()["name"] == "Blogsmith API"

    for path in ("/health", "/api/health"):
        r = client.get(path)
        assert r.status_code == 200
        body = r.json()
        assert body["status"] == "ok"
        assert body["timestamp"].endswith("Z")
        assert body["components"]["upstream_configured"] is False


def test_diag_reports_readiness_without_leaking_key(monkeypatch):
    r = client.get("/diag/llm")
    assert r.status_code == 200
    assert r.json()["ready"] is False

    monkeypatch.setenv("DEEPSEEK_API_KEY", "sk-secret")
    r = client.get("/api/diag/llm")
    body = r.json()
    assert body["has_api_key"] is True
    assert body["ready"] is True
    assert body["model"] == "deepseek-chat"
    assert "sk-secret" not in r.text
