from fastapi.testclient import TestClient

from src.blogsmith.api.main import app
from src.blogsmith.observability.metrics import sanitize_path


client = TestClient(app)


def test_metrics_endpoint_exposes_histogram():
    r = client.get("/health")
    assert r.status_code == 200

    m = client.get("/metrics")
    assert m.status_code == 200
    body = m.text

    assert "# HELP blogsmith_request_latency_seconds" in body
    assert "# TYPE blogsmith_request_latency_seconds histogram" in body
    assert 'path="/health"' in body
    assert "blogsmith_fragments_relayed_total" in body


def test_sanitize_path_keeps_two_segments():
    assert sanitize_path("") == "/"
    assert sanitize_path("/") == "/"
    assert sanitize_path("/health?x=1") == "/health"
    assert sanitize_path("/api/generate") == "/api/generate"
    assert sanitize_path("/api/diag/llm") == "/api/diag"
