import os
from datetime import datetime, timedelta, timezone
from typing import Callable

import pytest

# Environment defaults so the module-level app (catalog_api.main:app) is test-safe.
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("LOG_LEVEL", "INFO")
os.environ.setdefault("STORE_BACKEND", "memory")

from fastapi.testclient import TestClient  # noqa: E402

from catalog_api.core.config import Settings  # noqa: E402
from catalog_api.core.db import create_db_engine  # noqa: E402
from catalog_api.main import create_app  # noqa: E402
from catalog_api.repositories import ProductRepository  # noqa: E402
from catalog_api.stores.json_file import JsonFileProductStore  # noqa: E402
from catalog_api.stores.memory import InMemoryProductStore  # noqa: E402
from catalog_api.stores.sql import SqlProductStore  # noqa: E402

WIRELESS_MOUSE = {
    "name": "Wireless Mouse",
    "category": "Electronics",
    "brand": "TechGear",
    "price": 24.99,
    "inStock": True,
    "features": ["Ergonomic design"],
    "rating": 4.5,
}


class FakeClock:
    """Deterministic clock: every call moves one second forward."""

    def __init__(self, start: datetime = datetime(2026, 1, 1, tzinfo=timezone.utc)) -> None:
        self.now = start

    def __call__(self) -> datetime:
        self.now = self.now + timedelta(seconds=1)
        return self.now


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def product_data() -> Callable[..., dict]:
    def _make(**overrides) -> dict:
        data = dict(WIRELESS_MOUSE)
        data["features"] = list(WIRELESS_MOUSE["features"])
        data.update(overrides)
        return data

    return _make


@pytest.fixture(params=["memory", "json", "sql"])
def store(request, tmp_path, clock):
    """Every store backend, each isolated per test."""
    if request.param == "memory":
        s = InMemoryProductStore(clock=clock)
    elif request.param == "json":
        s = JsonFileProductStore(tmp_path / "db.json", clock=clock)
    else:
        s = SqlProductStore(create_db_engine("sqlite://"), clock=clock)
    s.prepare()
    yield s
    s.close()


@pytest.fixture
def repository(store) -> ProductRepository:
    return ProductRepository(store)


@pytest.fixture
def settings() -> Settings:
    return Settings(ENVIRONMENT="test", STORE_BACKEND="memory")


@pytest.fixture
def app(settings, store):
    return create_app(settings=settings, store=store)


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture
def memory_client(settings, clock):
    """Single-backend client for HTTP-only behaviour."""
    with TestClient(create_app(settings=settings, store=InMemoryProductStore(clock=clock))) as c:
        yield c


# Live HTTP tests against a running container (opt-in).
@pytest.fixture(scope="session")
def base_url() -> str:
    url = os.getenv("CATALOG_BASE_URL", "").strip()
    if not url:
        pytest.skip("CATALOG_BASE_URL not set; live HTTP tests skipped")
    return url.rstrip("/")
