"""Tests for health endpoints."""


def test_liveness(client, fake_s3):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"
    assert "time" in response.json()
    assert "head_bucket" not in fake_s3.calls


def test_ready(client):
    response = client.get("/health/ready")
    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "ready"
    assert body["components"][0]["name"] == "storage"
    assert body["components"][0]["status"] == "healthy"


def test_not_ready_when_storage_down(client, fake_s3):
    fake_s3.fail("head_bucket", "ServiceUnavailable")

    response = client.get("/health/ready")

    assert response.status_code == 503
    body = response.json()
    assert body["status"] == "not_ready"
    assert body["components"][0]["status"] == "unhealthy"
    assert "ServiceUnavailable" in body["components"][0]["message"]
