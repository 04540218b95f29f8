from __future__ import annotations

import json
import os
import tempfile
import threading
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from pydantic import ValidationError as PydanticValidationError

from catalog_api.core.errors import DuplicateId, StoreError
from catalog_api.core.logging import get_logger
from catalog_api.schemas import ProductCreate, ProductRead
from catalog_api.stores.base import ProductStore

logger = get_logger(__name__)


class JsonFileProductStore(ProductStore):
    """
    json-server style store: one JSON document holding ``{"products": [...]}``.

    The document is read once, on first use, and rewritten after every
    mutation (write to a temp file in the same directory, then os.replace).
    A missing file is an empty catalog. Hand-written documents may use
    numeric ids and omit createdAt/updatedAt; those are filled in on load.
    Other top-level keys are kept untouched.
    """

    def __init__(self, path: Union[str, os.PathLike], *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._path = Path(path)
        self._lock = threading.RLock()
        self._records: Optional[Dict[str, ProductRead]] = None
        self._extra: Dict[str, Any] = {}

    @property
    def path(self) -> Path:
        return self._path

    def prepare(self) -> None:
        with self._lock:
            self._load()

    def list_all(self) -> List[ProductRead]:
        with self._lock:
            return [r.model_copy(deep=True) for r in self._load().values()]

    def get(self, product_id: str) -> Optional[ProductRead]:
        with self._lock:
            record = self._load().get(product_id)
            return record.model_copy(deep=True) if record else None

    def insert(self, product_id: str, fields: ProductCreate) -> ProductRead:
        with self._lock:
            records = self._load()
            if product_id in records:
                raise DuplicateId(product_id)
            record = self._new_record(product_id, fields)
            records[product_id] = record
            self._flush(records)
            return record.model_copy(deep=True)

    def replace(self, product_id: str, fields: ProductCreate) -> Optional[ProductRead]:
        with self._lock:
            records = self._load()
            existing = records.get(product_id)
            if existing is None:
                return None
            record = self._replaced_record(existing, fields)
            records[product_id] = record
            self._flush(records)
            return record.model_copy(deep=True)

    def delete(self, product_id: str) -> bool:
        with self._lock:
            records = self._load()
            if records.pop(product_id, None) is None:
                return False
            self._flush(records)
            return True

    def clear(self) -> None:
        with self._lock:
            records = self._load()
            records.clear()
            self._flush(records)

    def _load(self) -> Dict[str, ProductRead]:
        if self._records is not None:
            return self._records

        if not self._path.exists():
            self._records = {}
            return self._records

        try:
            document = json.loads(self._path.read_text(encoding="utf-8") or "{}")
        except (OSError, ValueError) as e:
            logger.exception("Cannot read data file %s", self._path)
            raise StoreError(f"Cannot read data file {self._path}") from e

        if not isinstance(document, dict) or not isinstance(document.get("products", []), list):
            raise StoreError(f"Data file {self._path} must be an object with a 'products' list")

        now = self._clock()
        records: Dict[str, ProductRead] = {}
        for index, raw in enumerate(document.get("products", [])):
            record = self._parse_record(index, raw, now)
            if record.id in records:
                raise StoreError(f"Data file {self._path} has duplicate id {record.id!r}")
            records[record.id] = record

        self._extra = {k: v for k, v in document.items() if k != "products"}
        self._records = records
        logger.info("Loaded %d products from %s", len(records), self._path)
        return records

    def _parse_record(self, index: int, raw: Any, now) -> ProductRead:
        if not isinstance(raw, dict):
            raise StoreError(f"Data file {self._path}: products[{index}] is not an object")

        # Hand-edited files get the same checks as API input.
        try:
            fields = ProductCreate.model_validate(raw)
            if fields.id is None:
                raise StoreError(f"Data file {self._path}: products[{index}] has no id")
            created_at = raw.get("createdAt", now)
            return ProductRead.model_validate(
                {
                    **fields.model_dump(),
                    "created_at": created_at,
                    "updated_at": raw.get("updatedAt", created_at),
                }
            )
        except PydanticValidationError as e:
            raise StoreError(f"Data file {self._path}: products[{index}] is invalid") from e

    def _flush(self, records: Dict[str, ProductRead]) -> None:
        document = dict(self._extra)
        document["products"] = [r.model_dump(mode="json", by_alias=True) for r in records.values()]

        directory = self._path.parent
        try:
            directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(prefix=f".{self._path.name}.", suffix=".tmp", dir=directory)
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as fh:
                    json.dump(document, fh, indent=2)
                    fh.write("\n")
                os.replace(tmp_name, self._path)
            except BaseException:
                if os.path.exists(tmp_name):
                    os.remove(tmp_name)
                raise
        except OSError as e:
            # Memory and disk now disagree; reload from disk on next access.
            self._records = None
            logger.exception("Cannot write data file %s", self._path)
            raise StoreError(f"Cannot write data file {self._path}") from e
