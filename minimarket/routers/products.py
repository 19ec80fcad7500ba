# minimarket/routers/products.py
from fastapi import APIRouter, Depends
from sqlmodel import Session

from minimarket.database import get_session
from minimarket.repositories.product_repo import SqlProductRepository
from minimarket.schemas.product import ProductRead
from minimarket.services.catalog_service import CatalogService

router = APIRouter(prefix="/products", tags=["Products"])


def get_catalog_service(session: Session = Depends(get_session)) -> CatalogService:
    return CatalogService(SqlProductRepository(session))


@router.get("", response_model=list[ProductRead])
def list_products(
    category: str | None = None,
    search: str | None = None,
    service: CatalogService = Depends(get_catalog_service),
):
    """
    List catalog products.

    Query:
      - category: "fruits" | "vegetables" | "all" (default: all)
      - search: case-insensitive substring of the product name
    """
    return service.list_products(category=category, search=search)


@router.get("/{product_id}", response_model=ProductRead)
def get_product(
    product_id: str,
    service: CatalogService = Depends(get_catalog_service),
):
    """Get a single product by id (404 if unknown)."""
    return service.get_product(product_id)
