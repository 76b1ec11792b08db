"""
Integration tests for health, readiness and metrics endpoints.
"""

import pytest
from django.urls import reverse


@pytest.mark.django_db
@pytest.mark.integration
class TestHealthEndpoints:
    """Integration tests for the probes."""

    def test_health(self, client):
        response = client.get(reverse("health"))
        assert response.status_code == 200
        assert response.json() == {"status": "healthy", "service": "storefront-core-service"}

    def test_health_db(self, client):
        response = client.get(reverse("health-db"))
        assert response.status_code == 200
        assert response.json()["database"] == "connected"

    def test_health_cache(self, client):
        response = client.get(reverse("health-cache"))
        assert response.status_code == 200
        assert response.json()["cache"] == "connected"

    def test_ready(self, client):
        response = client.get(reverse("ready"))
        assert response.status_code == 200
        assert response.json()["checks"] == {"database": True, "cache": True}

    def test_metrics(self, client):
        client.get(reverse("health"))
        response = client.get(reverse("metrics"))
        assert response.status_code == 200
        assert b"http_requests_total" in response.content

    def test_no_admin_site(self, client):
        assert client.get("/admin/").status_code == 404
