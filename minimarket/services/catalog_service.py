# minimarket/services/catalog_service.py
import logging
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from minimarket.core.errors import MalformedCatalog, NotFound
from minimarket.repositories.protocols import CatalogStore
from minimarket.schemas.product import ProductRead

logger = logging.getLogger(__name__)


def validate_catalog(raw: Any) -> list[ProductRead]:
    """
    Check raw catalog documents once, at the load boundary.

    Every document must have a non-empty id, name and category, and a
    numeric price. One bad document rejects the whole response: no
    partial catalogs flow further in.

    Raises:
        MalformedCatalog: naming the first offending index.
    """
    if not isinstance(raw, list):
        raise MalformedCatalog("Invalid product data format: expected an array")

    products: list[ProductRead] = []
    seen: set[str] = set()
    for index, doc in enumerate(raw):
        if not isinstance(doc, dict):
            raise MalformedCatalog(f"Invalid product at index {index}: expected an object")
        try:
            product = ProductRead.model_validate(doc)
        except PydanticValidationError as e:
            fields = ", ".join(".".join(str(p) for p in err["loc"]) for err in e.errors())
            raise MalformedCatalog(
                f"Invalid product at index {index}: missing or invalid fields ({fields})"
            ) from e
        if product.id in seen:
            raise MalformedCatalog(f"Invalid product at index {index}: duplicate id {product.id!r}")
        seen.add(product.id)
        products.append(product)

    return products


class CatalogService:
    """
    Read-only access to the product catalog.

    Responsibilities:
      - load raw documents from the store and validate them wholesale
      - single-product lookup
      - category filter + case-insensitive name search
    """

    def __init__(self, store: CatalogStore):
        self.store = store

    def load_catalog(self) -> list[ProductRead]:
        """StoreError from the collaborator propagates unchanged."""
        products = validate_catalog(self.store.load_catalog())
        logger.debug("Loaded %d products", len(products))
        return products

    def get_product(self, product_id: str) -> ProductRead:
        for product in self.load_catalog():
            if product.id == product_id:
                return product
        raise NotFound("Product not found")

    def list_products(
        self,
        category: str | None = None,
        search: str | None = None,
    ) -> list[ProductRead]:
        """
        Filter the catalog.

        - category None or "all" => every category
        - search matches anywhere in the name, case-insensitively
        """
        products = self.load_catalog()

        if category and category != "all":
            products = [p for p in products if p.category == category]

        if search:
            needle = search.strip().lower()
            products = [p for p in products if needle in p.name.lower()]

        return products
