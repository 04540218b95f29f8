# tests/test_health.py

from __future__ import annotations

from fastapi.testclient import TestClient

from catalog_api.main import app

client = TestClient(app)


def test_health_ok():
    r = client.get("/health")
    assert r.status_code == 200

    data = r.json()
    assert data["status"] == "ok"
    assert data["service"] == "product-catalog-api"
    assert data["version"] == "0.1.0"

    # conftest.py sets ENVIRONMENT=test
    assert data["env"] == "test"


def test_module_app_uses_memory_store_in_tests():
    assert app.state.settings.store_backend == "memory"
