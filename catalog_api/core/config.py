from __future__ import annotations

from functools import lru_cache
from typing import List, Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Configuration for product-catalog-api.

    The store backend is chosen with STORE_BACKEND:

    - memory: process-local dict, lost on restart (tests, demos).
    - json:   a json-server style document (``{"products": [...]}``) at DATA_FILE.
    - sql:    SQLAlchemy database at DATABASE_URL (or built from DB_* pieces).
    """

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # --- Service ---
    app_name: str = Field(default="product-catalog-api", validation_alias="APP_NAME")
    app_version: str = Field(default="0.1.0", validation_alias="APP_VERSION")
    environment: str = Field(default="local", validation_alias="ENVIRONMENT")
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")

    # --- Store ---
    store_backend: Literal["memory", "json", "sql"] = Field(default="json", validation_alias="STORE_BACKEND")
    data_file: str = Field(default="db.json", validation_alias="DATA_FILE")

    # --- Seed ---
    seed_file: Optional[str] = Field(default=None, validation_alias="SEED_FILE")
    seed_replace: bool = Field(default=False, validation_alias="SEED_REPLACE")

    # --- CORS (CSV allow-list) ---
    cors_allowed_origins: str = Field(
        default="http://localhost:5173,http://localhost:3000",
        validation_alias="CORS_ALLOWED_ORIGINS",
    )

    def cors_origins_list(self) -> List[str]:
        return [x.strip() for x in self.cors_allowed_origins.split(",") if x.strip()]

    # --- Client service layer ---
    catalog_base_url: str = Field(default="http://localhost:8000", validation_alias="CATALOG_BASE_URL")
    client_timeout_seconds: float = Field(default=10.0, validation_alias="CLIENT_TIMEOUT_SECONDS")

    # -------------------------
    # Database (STORE_BACKEND=sql)
    # -------------------------
    # Option A: full URL, used as-is when set.
    database_url: Optional[str] = Field(default=None, validation_alias="DATABASE_URL")

    # Option B: pieces. Without DB_HOST the service falls back to a local SQLite file.
    db_dialect: str = Field(default="postgresql+psycopg", validation_alias="DB_DIALECT")
    db_host: Optional[str] = Field(default=None, validation_alias="DB_HOST")
    db_port: int = Field(default=5432, validation_alias="DB_PORT")
    db_name: str = Field(default="catalog_db", validation_alias="DB_NAME")
    db_user: str = Field(default="catalog_app", validation_alias="DB_USER")
    db_password: Optional[str] = Field(default=None, validation_alias="DB_PASSWORD")

    db_create_tables: bool = Field(default=True, validation_alias="DB_CREATE_TABLES")

    @property
    def database_url_resolved(self) -> str:
        """
        Return DATABASE_URL when defined, otherwise build it from DB_*.

        Never log the result: it may carry DB_PASSWORD.
        """
        if self.database_url and self.database_url.strip():
            return self.database_url.strip()

        if not self.db_host:
            return "sqlite:///./catalog.db"

        pwd = self.db_password or ""
        return f"{self.db_dialect}://{self.db_user}:{pwd}@{self.db_host}:{self.db_port}/{self.db_name}"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
