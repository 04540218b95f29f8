from __future__ import annotations

from datetime import datetime
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

RESERVED_IDS = frozenset({"categories"})


class CatalogModel(BaseModel):
    """camelCase on the wire (inStock, createdAt), snake_case in Python."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class ProductCreate(CatalogModel):
    """
    Incoming product data, validated before it reaches a store.

    Strict: "24.99" is not a price and "yes" is not a boolean. Only ``id``
    is lenient, numeric ids from seed files become strings.
    """

    model_config = ConfigDict(strict=True)

    id: Optional[str] = None
    name: str = Field(min_length=1)
    category: str = Field(min_length=1)
    brand: str = Field(min_length=1)
    price: float = Field(default=0.0, ge=0, allow_inf_nan=False)
    in_stock: bool = False
    features: List[str] = Field(default_factory=list)
    rating: float = Field(default=0.0, ge=0, le=5, allow_inf_nan=False)

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value: Any) -> Any:
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("id")
    @classmethod
    def _addressable_id(cls, value: Optional[str]) -> Optional[str]:
        # Ids are a single path segment under /products; "categories" is a route.
        if value is not None and ("/" in value or value in RESERVED_IDS):
            raise ValueError("id must not contain '/' or be a reserved name")
        return value

    @field_validator("name", "category", "brand")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be blank")
        return value


class ProductRead(CatalogModel):
    id: str
    name: str
    category: str
    brand: str
    price: float
    in_stock: bool
    features: List[str]
    rating: float
    created_at: datetime
    updated_at: datetime

    def field_values(self) -> dict[str, Any]:
        """Mutable fields only (no id, no timestamps), snake_case keys."""
        return self.model_dump(exclude={"id", "created_at", "updated_at"})


class DeleteResult(BaseModel):
    message: str
    id: str
