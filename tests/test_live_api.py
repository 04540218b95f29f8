# tests/test_live_api.py
# Smoke tests against a running service. Skipped unless CATALOG_BASE_URL is set,
# e.g. CATALOG_BASE_URL=http://localhost:8000 pytest tests/test_live_api.py
import uuid

import requests


def test_health_ok(base_url: str):
    r = requests.get(f"{base_url}/health", timeout=10)
    assert r.status_code == 200, r.text
    assert r.json()["status"] == "ok"


def test_openapi_exposes_products_route(base_url: str):
    r = requests.get(f"{base_url}/openapi.json", timeout=10)
    assert r.status_code == 200, r.text
    paths = r.json().get("paths", {})
    assert "/products" in paths, f"available paths: {sorted(paths.keys())}"


def test_product_lifecycle(base_url: str):
    product_id = f"smoke-{uuid.uuid4().hex[:8]}"
    payload = {
        "id": product_id,
        "name": "Wireless Mouse",
        "category": "Electronics",
        "brand": "TechGear",
        "price": 24.99,
        "inStock": True,
        "features": ["Ergonomic design"],
        "rating": 4.5,
    }

    r = requests.post(f"{base_url}/products", json=payload, timeout=10)
    assert r.status_code == 201, r.text

    r = requests.post(f"{base_url}/products", json=payload, timeout=10)
    assert r.status_code == 409, r.text

    r = requests.get(f"{base_url}/products/categories", timeout=10)
    assert "Electronics" in r.json()

    r = requests.put(f"{base_url}/products/{product_id}", json={"price": 20}, timeout=10)
    assert r.status_code == 200, r.text
    assert r.json()["price"] == 20

    r = requests.delete(f"{base_url}/products/{product_id}", timeout=10)
    assert r.status_code == 200, r.text

    r = requests.get(f"{base_url}/products/{product_id}", timeout=10)
    assert r.status_code == 404, r.text
