# minimarket/repositories/product_repo.py
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from minimarket.core.errors import StoreError
from minimarket.models.product import Product


class SqlProductRepository:
    """
    Data access layer for the product catalog.

    - Pure DB operations; documents come back unvalidated so the catalog
      service can check them at its own boundary.
    - No FastAPI, no business logic.
    """

    def __init__(self, session: Session):
        self.session = session

    def load_catalog(self) -> list[dict[str, Any]]:
        try:
            rows = self.session.exec(select(Product).order_by(Product.created_at, Product.id)).all()
        except SQLAlchemyError as e:
            raise StoreError(str(e)) from e
        return [row.model_dump() for row in rows]

    def replace_all(self, products: list[Product]) -> int:
        """
        Delete every product and insert `products` in one transaction.
        Used by the seed command.
        """
        try:
            for row in self.session.exec(select(Product)).all():
                self.session.delete(row)
            self.session.flush()
            self.session.add_all(products)
            self.session.commit()
        except SQLAlchemyError as e:
            self.session.rollback()
            raise StoreError(str(e)) from e
        return len(products)
