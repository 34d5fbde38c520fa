import pytest
from rest_framework.test import APIClient


@pytest.mark.django_db
def test_inventory_health_and_service_health():
    client = APIClient()
    resp_health = client.get("/api/v1/inventory/health/")
    assert resp_health.status_code == 200
    assert resp_health.json()["app"] == "inventory"

    resp_service = client.get("/health/")
    assert resp_service.status_code == 200
    assert resp_service.json() == {"status": "ok", "service": "stockpilot-api"}


@pytest.mark.django_db
def test_schema_lists_inventory_routes():
    client = APIClient()
    resp = client.get("/api/schema/?format=json")
    assert resp.status_code == 200
    assert "/api/v1/inventory/movements/" in resp.json()["paths"]


# EOF
