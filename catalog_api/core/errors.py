"""Catalog domain exceptions.

Raised by the repository and the stores. The HTTP layer translates them into
JSON error responses (see ``catalog_api.api.errors``).
"""

from __future__ import annotations

from typing import Any, Dict, List


class CatalogError(Exception):
    """Base class for every error the catalog reports to its callers."""


class NotFound(CatalogError):
    """No product matches the requested id."""

    def __init__(self, product_id: str) -> None:
        self.product_id = product_id
        super().__init__(f"Product {product_id!r} not found")


class ValidationError(CatalogError):
    """Client-supplied data violates the product constraints.

    ``errors`` holds one ``{"field": ..., "message": ...}`` entry per problem,
    using wire (camelCase) field names.
    """

    def __init__(self, errors: List[Dict[str, Any]]) -> None:
        self.errors = errors
        super().__init__("Invalid product data: " + ", ".join(self.fields))

    @property
    def fields(self) -> List[str]:
        seen: List[str] = []
        for err in self.errors:
            field = str(err.get("field", ""))
            if field not in seen:
                seen.append(field)
        return seen


class DuplicateId(CatalogError):
    """A product with the same id already exists."""

    def __init__(self, product_id: str) -> None:
        self.product_id = product_id
        super().__init__(f"Product {product_id!r} already exists")


class StoreError(CatalogError):
    """The underlying persistence backend failed."""
