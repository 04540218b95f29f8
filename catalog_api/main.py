from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from catalog_api.api.errors import register_exception_handlers
from catalog_api.api.routes import health_router
from catalog_api.api.routes import router as products_router
from catalog_api.core.config import Settings, get_settings
from catalog_api.core.logging import configure_logging, get_logger
from catalog_api.middlewares.request_id import RequestIdMiddleware
from catalog_api.repositories import ProductRepository
from catalog_api.seed import load_seed_document, seed_repository
from catalog_api.stores.base import ProductStore
from catalog_api.stores.factory import build_store

logger = get_logger(__name__)


def create_app(settings: Optional[Settings] = None, store: Optional[ProductStore] = None) -> FastAPI:
    """
    Build an application around its own store.

    Tests pass an isolated store; the module-level ``app`` builds one from
    settings (STORE_BACKEND).
    """
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    store = store if store is not None else build_store(settings)
    repository = ProductRepository(store)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        store.prepare()
        if settings.seed_file:
            result = seed_repository(repository, load_seed_document(settings.seed_file), replace=settings.seed_replace)
            logger.info("Seeded %d products from %s", result.total, settings.seed_file)

        # Key parameters only, never DATABASE_URL (may carry a password).
        logger.info(
            "%s %s started (env=%s, store=%s, cors=%s)",
            settings.app_name,
            settings.app_version,
            settings.environment,
            settings.store_backend,
            settings.cors_origins_list(),
        )
        try:
            yield
        finally:
            store.close()

    app = FastAPI(title=settings.app_name, version=settings.app_version, lifespan=lifespan)
    app.state.settings = settings
    app.state.store = store
    app.state.repository = repository

    app.add_middleware(RequestIdMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list(),
        allow_credentials=False,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Accept", "X-Request-Id"],
        expose_headers=["X-Request-Id"],
    )

    register_exception_handlers(app)

    app.include_router(health_router)
    app.include_router(products_router)
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("catalog_api.main:app", host="0.0.0.0", port=8000)
