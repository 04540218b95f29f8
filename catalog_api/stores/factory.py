from __future__ import annotations

from catalog_api.core.config import Settings
from catalog_api.core.db import create_db_engine
from catalog_api.stores.base import ProductStore
from catalog_api.stores.json_file import JsonFileProductStore
from catalog_api.stores.memory import InMemoryProductStore
from catalog_api.stores.sql import SqlProductStore


def build_store(settings: Settings) -> ProductStore:
    """Instantiate the backend selected by STORE_BACKEND. No I/O happens until first use."""
    if settings.store_backend == "memory":
        return InMemoryProductStore()
    if settings.store_backend == "json":
        return JsonFileProductStore(settings.data_file)
    if settings.store_backend == "sql":
        engine = create_db_engine(settings.database_url_resolved)
        return SqlProductStore(engine, create_tables=settings.db_create_tables)
    raise ValueError(f"Unknown store backend: {settings.store_backend!r}")
