from __future__ import annotations

import threading
from typing import Dict, List, Optional

from catalog_api.core.errors import DuplicateId
from catalog_api.schemas import ProductCreate, ProductRead
from catalog_api.stores.base import ProductStore


class InMemoryProductStore(ProductStore):
    """Process-local store. Records are copied in and out so callers never share state."""

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._records: Dict[str, ProductRead] = {}
        self._lock = threading.RLock()

    def list_all(self) -> List[ProductRead]:
        with self._lock:
            return [r.model_copy(deep=True) for r in self._records.values()]

    def get(self, product_id: str) -> Optional[ProductRead]:
        with self._lock:
            record = self._records.get(product_id)
            return record.model_copy(deep=True) if record else None

    def insert(self, product_id: str, fields: ProductCreate) -> ProductRead:
        with self._lock:
            if product_id in self._records:
                raise DuplicateId(product_id)
            record = self._new_record(product_id, fields)
            self._records[product_id] = record
            return record.model_copy(deep=True)

    def replace(self, product_id: str, fields: ProductCreate) -> Optional[ProductRead]:
        with self._lock:
            existing = self._records.get(product_id)
            if existing is None:
                return None
            record = self._replaced_record(existing, fields)
            self._records[product_id] = record
            return record.model_copy(deep=True)

    def delete(self, product_id: str) -> bool:
        with self._lock:
            return self._records.pop(product_id, None) is not None

    def clear(self) -> None:
        with self._lock:
            self._records.clear()
