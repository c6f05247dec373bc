"""
Product catalogue persistence.
"""
from typing import List, Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from pricing_api.domain.value_objects import Sku
from pricing_api.models.product import Product


class ProductRepository:

    def __init__(self, session: Session) -> None:
        self._session = session

    def get_by_sku(self, sku: Sku) -> Optional[Product]:
        stmt = select(Product).where(Product.sku == sku.value)
        return self._session.execute(stmt).scalar_one_or_none()

    def exists_by_sku(self, sku: Sku) -> bool:
        stmt = select(Product.id).where(Product.sku == sku.value).limit(1)
        return self._session.execute(stmt).scalar_one_or_none() is not None

    def list(self, offset: int = 0, limit: int = 100) -> List[Product]:
        stmt = select(Product).order_by(Product.sku).offset(offset).limit(limit)
        return list(self._session.execute(stmt).scalars().all())

    def count(self) -> int:
        return self._session.execute(select(func.count(Product.id))).scalar_one()

    def add(self, product: Product) -> Product:
        self._session.add(product)
        self._session.flush()
        return product
