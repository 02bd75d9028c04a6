"""Tests for the health check endpoint."""


def test_health_endpoint_returns_200(client):
    """Test that health endpoint returns 200 status."""
    response = client.get("/healthz")
    assert response.status_code == 200


def test_health_endpoint_returns_json(client):
    """Test that health endpoint returns JSON with status ok."""
    response = client.get("/healthz")
    assert response.get_json() == {"status": "ok", "service": "finplan"}
