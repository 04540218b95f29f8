"""
Load a catalog seed document into a store.

The document has the json-server shape::

    {"products": [{"id": "1", "name": "...", "category": "...", ...}, ...]}

Every entry goes through the repository, so seeded records obey the same
rules as records created over HTTP.

  python -m catalog_api.seed products.json            # upsert by id
  python -m catalog_api.seed products.json --replace  # wipe the store first
"""

from __future__ import annotations

import argparse
import json
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Union

from catalog_api.core.config import get_settings
from catalog_api.core.errors import CatalogError, ValidationError
from catalog_api.core.logging import configure_logging, get_logger
from catalog_api.repositories import ProductRepository, validate_product_data
from catalog_api.stores.factory import build_store

logger = get_logger(__name__)


class SeedError(Exception):
    """The seed document is unreadable, malformed, or holds an invalid product."""


@dataclass(frozen=True)
class SeedResult:
    created: int = 0
    updated: int = 0

    @property
    def total(self) -> int:
        return self.created + self.updated


def load_seed_document(path: Union[str, Path]) -> List[Dict[str, Any]]:
    """Read a seed file and return its ``products`` list."""
    path = Path(path)
    try:
        document = json.loads(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise SeedError(f"Cannot read seed file {path}: {e}") from e
    except ValueError as e:
        raise SeedError(f"Seed file {path} is not valid JSON: {e}") from e

    if not isinstance(document, dict) or not isinstance(document.get("products"), list):
        raise SeedError(f"Seed file {path} must be an object with a 'products' list")
    return document["products"]


def seed_repository(
    repository: ProductRepository,
    products: Sequence[Any],
    replace: bool = False,
) -> SeedResult:
    """
    Write ``products`` through ``repository``.

    replace=True clears the store first. Otherwise an entry whose id already
    exists replaces that record entirely (omitted fields take their defaults)
    and the rest are created. All entries are validated, and ids checked for
    duplicates, before anything is written.
    """
    validated = []
    seen_ids = set()
    for index, item in enumerate(products):
        try:
            fields = validate_product_data(item)
        except ValidationError as e:
            raise SeedError(f"products[{index}]: {e}") from e
        if fields.id is not None:
            if fields.id in seen_ids:
                raise SeedError(f"products[{index}]: duplicate id {fields.id!r}")
            seen_ids.add(fields.id)
        validated.append(fields)

    if replace:
        repository.clear()

    created = updated = 0
    for fields in validated:
        data = fields.model_dump(by_alias=True)
        if fields.id and repository.exists(fields.id):
            repository.update(fields.id, data)
            updated += 1
        else:
            repository.create(data)
            created += 1

    logger.info("Seed complete: %d created, %d updated", created, updated)
    return SeedResult(created=created, updated=updated)


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Load a {\"products\": [...]} seed document into the catalog store.")
    parser.add_argument("path", type=Path, help="Seed JSON file")
    parser.add_argument("--replace", action="store_true", help="Delete every existing product first")
    args = parser.parse_args(argv)

    settings = get_settings()
    configure_logging(settings.log_level)

    store = build_store(settings)
    try:
        store.prepare()
        result = seed_repository(ProductRepository(store), load_seed_document(args.path), replace=args.replace)
    except (SeedError, CatalogError) as e:
        print(f"Seeding failed: {e}", file=sys.stderr)
        return 1
    finally:
        store.close()

    print(f"Seeded {result.total} products ({result.created} created, {result.updated} updated) into {settings.store_backend} store")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
