from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Callable, List, Optional

from catalog_api.schemas import ProductCreate, ProductRead


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ProductStore(ABC):
    """
    Persistence contract shared by every backend.

    Stores hold validated records only; the repository validates first.
    Stores stamp createdAt/updatedAt, keep insertion order when listing, and
    raise DuplicateId / StoreError (catalog_api.core.errors) on failure.
    Concurrent replaces of the same id are last-write-wins.
    """

    def __init__(self, clock: Callable[[], datetime] = utcnow) -> None:
        self._clock = clock

    def prepare(self) -> None:
        """Make the backend ready for use (tables, files). Default: nothing to do."""

    def close(self) -> None:
        """Release backend resources. Default: nothing to release."""

    @abstractmethod
    def list_all(self) -> List[ProductRead]:
        ...

    @abstractmethod
    def get(self, product_id: str) -> Optional[ProductRead]:
        ...

    def list_by_category(self, category: str) -> List[ProductRead]:
        return [p for p in self.list_all() if p.category == category]

    def list_categories(self) -> List[str]:
        return sorted({p.category for p in self.list_all()})

    @abstractmethod
    def insert(self, product_id: str, fields: ProductCreate) -> ProductRead:
        ...

    @abstractmethod
    def replace(self, product_id: str, fields: ProductCreate) -> Optional[ProductRead]:
        """Overwrite the mutable fields of ``product_id``. None when it does not exist."""

    @abstractmethod
    def delete(self, product_id: str) -> bool:
        ...

    @abstractmethod
    def clear(self) -> None:
        ...

    # Helpers for record-based backends.

    def _new_record(self, product_id: str, fields: ProductCreate) -> ProductRead:
        now = self._clock()
        return ProductRead(
            id=product_id,
            created_at=now,
            updated_at=now,
            **fields.model_dump(exclude={"id"}),
        )

    def _replaced_record(self, existing: ProductRead, fields: ProductCreate) -> ProductRead:
        return ProductRead(
            id=existing.id,
            created_at=existing.created_at,
            updated_at=self._clock(),
            **fields.model_dump(exclude={"id"}),
        )
