# minimarket/seed.py
"""
Replace the product catalog with a JSON file.

    python -m minimarket.seed                  # bundled data/products.json
    python -m minimarket.seed path/to/catalog.json

The file is validated as a whole before anything is written.
"""

import json
import logging
import sys
from pathlib import Path

from sqlmodel import Session

from minimarket.core.errors import MalformedCatalog, StoreError
from minimarket.database import create_db_and_tables, engine
from minimarket.models import order as _order_models  # noqa: F401
from minimarket.models import user as _user_models  # noqa: F401
from minimarket.models.product import Product
from minimarket.repositories.product_repo import SqlProductRepository
from minimarket.services.catalog_service import validate_catalog

logger = logging.getLogger(__name__)

DEFAULT_CATALOG = Path(__file__).parent / "data" / "products.json"


def load_products(path: Path) -> list[Product]:
    raw = json.loads(path.read_text(encoding="utf-8"))
    return [Product(**product.model_dump()) for product in validate_catalog(raw)]


def seed(session: Session, path: Path = DEFAULT_CATALOG) -> int:
    """Validate `path` and swap it in as the catalog. Returns the product count."""
    products = load_products(path)
    return SqlProductRepository(session).replace_all(products)


def main(argv: list[str] | None = None) -> int:
    logging.basicConfig(level=logging.INFO)
    args = sys.argv[1:] if argv is None else argv
    path = Path(args[0]) if args else DEFAULT_CATALOG

    create_db_and_tables()
    try:
        with Session(engine) as session:
            count = seed(session, path)
    except (OSError, ValueError, MalformedCatalog, StoreError) as e:
        logger.error("Error: %s", e)
        return 1

    logger.info("%d products seeded successfully", count)
    return 0


if __name__ == "__main__":
    sys.exit(main())
