from __future__ import annotations

from contextlib import contextmanager
from datetime import timezone
from typing import Iterator, List, Optional

from sqlalchemy import delete, select
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from catalog_api.core.db import Base, make_sessionmaker
from catalog_api.core.errors import DuplicateId, StoreError
from catalog_api.core.logging import get_logger
from catalog_api.models import Product
from catalog_api.schemas import ProductCreate, ProductRead
from catalog_api.stores.base import ProductStore

logger = get_logger(__name__)


def _to_record(row: Product) -> ProductRead:
    created_at, updated_at = row.created_at, row.updated_at
    # SQLite hands back naive datetimes; everything we write is UTC.
    if created_at.tzinfo is None:
        created_at = created_at.replace(tzinfo=timezone.utc)
    if updated_at.tzinfo is None:
        updated_at = updated_at.replace(tzinfo=timezone.utc)

    return ProductRead(
        id=row.id,
        name=row.name,
        category=row.category,
        brand=row.brand,
        price=row.price,
        in_stock=row.in_stock,
        features=list(row.features or []),
        rating=row.rating,
        created_at=created_at,
        updated_at=updated_at,
    )


def _apply_fields(row: Product, fields: ProductCreate) -> None:
    row.name = fields.name
    row.category = fields.category
    row.brand = fields.brand
    row.price = fields.price
    row.in_stock = fields.in_stock
    row.features = list(fields.features)
    row.rating = fields.rating


class SqlProductStore(ProductStore):
    """SQLAlchemy-backed store; one session per operation."""

    def __init__(self, engine: Engine, *args, create_tables: bool = True, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._engine = engine
        self._sessionmaker = make_sessionmaker(engine)
        self._create_tables = create_tables

    def prepare(self) -> None:
        if not self._create_tables:
            return
        try:
            Base.metadata.create_all(bind=self._engine)
        except SQLAlchemyError as e:
            logger.exception("Cannot create tables")
            raise StoreError("Cannot create tables") from e

    def close(self) -> None:
        self._engine.dispose()

    @contextmanager
    def _session(self) -> Iterator[Session]:
        db = self._sessionmaker()
        try:
            yield db
        except IntegrityError:
            db.rollback()
            raise
        except SQLAlchemyError as e:
            db.rollback()
            logger.exception("Database operation failed")
            raise StoreError("Database operation failed") from e
        finally:
            db.close()

    def list_all(self) -> List[ProductRead]:
        with self._session() as db:
            rows = db.execute(select(Product).order_by(Product.seq)).scalars().all()
            return [_to_record(r) for r in rows]

    def get(self, product_id: str) -> Optional[ProductRead]:
        with self._session() as db:
            row = self._get_row(db, product_id)
            return _to_record(row) if row else None

    def list_by_category(self, category: str) -> List[ProductRead]:
        with self._session() as db:
            stmt = select(Product).where(Product.category == category).order_by(Product.seq)
            return [_to_record(r) for r in db.execute(stmt).scalars().all()]

    def list_categories(self) -> List[str]:
        with self._session() as db:
            stmt = select(Product.category).distinct().order_by(Product.category)
            return list(db.execute(stmt).scalars().all())

    def insert(self, product_id: str, fields: ProductCreate) -> ProductRead:
        now = self._clock()
        row = Product(id=product_id, created_at=now, updated_at=now)
        _apply_fields(row, fields)
        try:
            with self._session() as db:
                if self._get_row(db, product_id) is not None:
                    raise DuplicateId(product_id)
                db.add(row)
                db.commit()
                db.refresh(row)
                return _to_record(row)
        except IntegrityError as e:
            # Lost a race with a concurrent insert of the same id.
            raise DuplicateId(product_id) from e

    def replace(self, product_id: str, fields: ProductCreate) -> Optional[ProductRead]:
        with self._session() as db:
            row = self._get_row(db, product_id)
            if row is None:
                return None
            _apply_fields(row, fields)
            row.updated_at = self._clock()
            db.commit()
            db.refresh(row)
            return _to_record(row)

    def delete(self, product_id: str) -> bool:
        with self._session() as db:
            result = db.execute(delete(Product).where(Product.id == product_id))
            db.commit()
            return result.rowcount > 0

    def clear(self) -> None:
        with self._session() as db:
            db.execute(delete(Product))
            db.commit()

    @staticmethod
    def _get_row(db: Session, product_id: str) -> Optional[Product]:
        return db.execute(select(Product).where(Product.id == product_id)).scalars().first()
