from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Callable, Dict, List
from uuid import uuid4

from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

from catalog_api.core.errors import DuplicateId, NotFound, ValidationError
from catalog_api.core.logging import get_logger
from catalog_api.schemas import ProductCreate, ProductRead
from catalog_api.stores.base import ProductStore

logger = get_logger(__name__)

MUTABLE_FIELDS = ("name", "category", "brand", "price", "in_stock", "features", "rating")

# Patches may use wire names (inStock) or Python names (in_stock).
_FIELD_BY_KEY: Dict[str, str] = {}
for _name in MUTABLE_FIELDS:
    _FIELD_BY_KEY[_name] = _name
    _FIELD_BY_KEY[to_camel(_name)] = _name


def merge_product_fields(existing: Mapping[str, Any], patch: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Overlay ``patch`` onto ``existing`` field by field.

    A key present in ``patch`` wins, even when its value is None. Keys that
    are not mutable product fields (id, createdAt, unknown keys) are dropped.
    """
    merged = {name: existing[name] for name in MUTABLE_FIELDS if name in existing}
    for key, value in patch.items():
        name = _FIELD_BY_KEY.get(key)
        if name is not None:
            merged[name] = value
    return merged


def _errors_from_pydantic(exc: PydanticValidationError) -> List[Dict[str, Any]]:
    errors = []
    for err in exc.errors():
        loc = err.get("loc") or ()
        field = str(loc[0]) if loc else "body"
        # Merged update data is keyed by Python names; report wire names.
        field = to_camel(field) if field in MUTABLE_FIELDS else field
        errors.append({"field": field, "message": err.get("msg", "invalid")})
    return errors


def validate_product_data(data: Any) -> ProductCreate:
    """Validate a request body or seed entry; raises ValidationError naming the offending fields."""
    if not isinstance(data, Mapping):
        raise ValidationError([{"field": "body", "message": "expected a JSON object"}])
    try:
        return ProductCreate.model_validate(dict(data))
    except PydanticValidationError as e:
        raise ValidationError(_errors_from_pydantic(e)) from e


def _new_id() -> str:
    return str(uuid4())


class ProductRepository:
    """CRUD and query operations over a ProductStore."""

    def __init__(self, store: ProductStore, id_factory: Callable[[], str] = _new_id) -> None:
        self._store = store
        self._id_factory = id_factory

    def list(self) -> List[ProductRead]:
        return self._store.list_all()

    def get_by_id(self, product_id: str) -> ProductRead:
        product = self._store.get(product_id)
        if product is None:
            raise NotFound(product_id)
        return product

    def exists(self, product_id: str) -> bool:
        return self._store.get(product_id) is not None

    def list_by_category(self, category: str) -> List[ProductRead]:
        return self._store.list_by_category(category)

    def list_categories(self) -> List[str]:
        return self._store.list_categories()

    def create(self, data: Mapping[str, Any]) -> ProductRead:
        fields = validate_product_data(data)
        product_id = fields.id or self._id_factory()
        if self.exists(product_id):
            raise DuplicateId(product_id)

        product = self._store.insert(product_id, fields)
        logger.info("Product created: %s", product.id)
        return product

    def update(self, product_id: str, patch: Mapping[str, Any]) -> ProductRead:
        existing = self.get_by_id(product_id)
        if not isinstance(patch, Mapping):
            raise ValidationError([{"field": "body", "message": "expected a JSON object"}])

        patch_id = patch.get("id")
        if patch_id is not None and str(patch_id) != product_id:
            raise ValidationError([{"field": "id", "message": "id cannot be changed"}])

        fields = validate_product_data(merge_product_fields(existing.field_values(), patch))
        product = self._store.replace(product_id, fields)
        if product is None:
            # Deleted between the read and the write.
            raise NotFound(product_id)

        logger.info("Product updated: %s", product_id)
        return product

    def delete(self, product_id: str) -> None:
        if not self._store.delete(product_id):
            raise NotFound(product_id)
        logger.info("Product deleted: %s", product_id)

    def clear(self) -> None:
        self._store.clear()
        logger.info("Product catalog cleared")
