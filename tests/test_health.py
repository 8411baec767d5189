"""
Tests for health check and metrics endpoints.
"""
from fastapi.testclient import TestClient
from listener.main import app

client = TestClient(app)


def test_health_liveness():
    r = client.get("/health")
    assert r.status_code == 200
    data = r.json()
    assert data["status"] == "ok"
    assert data["service"] == "listener"
    assert data["version"] == "0.1.0"
    assert "timestamp" in data


def test_health_readiness():
    r = client.get("/health/ready")
    # Should be 200 (ready) or 503 (not ready)
    assert r.status_code in [200, 503]
    data = r.json()
    assert data["service"] == "listener"
    assert data["checks"]["queue"]["status"] == "ok"
    assert "memory" in data["checks"]


def test_metrics_endpoint():
    client.post("/", content="{}", headers={"X-GitHub-Event": "push"})

    r = client.get("/metrics")
    assert r.status_code == 200
    content = r.text
    assert "http_requests_total" in content
    assert "app_up" in content
    assert "listener_ip_checks_total" in content
    assert "listener_events_total" in content


def test_request_id_generated():
    r = client.get("/health")
    assert "x-request-id" in r.headers


def test_request_id_propagated():
    r = client.get("/health", headers={"x-request-id": "test-request-id-123"})
    assert r.headers["x-request-id"] == "test-request-id-123"
