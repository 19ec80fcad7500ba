# minimarket/routers/cart.py
from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from minimarket.core.auth import require_identity
from minimarket.core.config import get_settings
from minimarket.database import get_session
from minimarket.repositories.product_repo import SqlProductRepository
from minimarket.schemas.cart import CartItemAdd, CartItemUpdate, CartSummary
from minimarket.schemas.order import OrderRead
from minimarket.schemas.user import Identity
from minimarket.services.cart_slot import CartSlot, slot_for
from minimarket.services.catalog_service import CatalogService
from minimarket.services.session import ShopSession, open_shop_session

router = APIRouter(prefix="/cart", tags=["Cart"])


def get_cart_slot(identity: Identity = Depends(require_identity)) -> CartSlot:
    """Durable slot for the caller's cart, one file per account."""
    settings = get_settings()
    return slot_for(settings.CART_SLOT_DIR, settings.CART_STORAGE_KEY, identity.id)


def get_shop_session(
    session: Session = Depends(get_session),
    identity: Identity = Depends(require_identity),
    slot: CartSlot = Depends(get_cart_slot),
) -> ShopSession:
    return open_shop_session(session, identity, slot)


@router.get("", response_model=CartSummary)
def get_my_cart(shop: ShopSession = Depends(get_shop_session)):
    """
    Get the current user's cart with derived totals.

    Auth:
      - Requires a valid bearer token; guests keep their cart client-side.
    """
    return shop.cart.summary()


@router.post("", response_model=CartSummary)
def add_to_cart(
    payload: CartItemAdd,
    session: Session = Depends(get_session),
    shop: ShopSession = Depends(get_shop_session),
):
    """
    Add a catalog product to the cart (merges with an existing line).

    The product is snapshotted now; later catalog edits do not change it.
    Stock is not checked.
    """
    product = CatalogService(SqlProductRepository(session)).get_product(payload.product_id)
    shop.cart.add_item(product, payload.quantity)
    return shop.cart.summary()


@router.patch("/{product_id}", response_model=CartSummary)
def update_cart_item(
    product_id: str,
    payload: CartItemUpdate,
    shop: ShopSession = Depends(get_shop_session),
):
    """
    Set a line's quantity; 0 or less removes it.
    """
    shop.cart.update_quantity(product_id, payload.quantity)
    return shop.cart.summary()


@router.delete("/{product_id}", response_model=CartSummary)
def remove_cart_item(
    product_id: str,
    shop: ShopSession = Depends(get_shop_session),
):
    """
    Remove a product from the cart. Unknown ids are ignored.
    """
    shop.cart.remove_item(product_id)
    return shop.cart.summary()


@router.delete("", response_model=CartSummary)
def clear_cart(shop: ShopSession = Depends(get_shop_session)):
    """
    Clear the entire cart.
    """
    shop.cart.clear()
    return shop.cart.summary()


@router.post("/checkout", response_model=OrderRead, status_code=status.HTTP_201_CREATED)
def checkout_cart(shop: ShopSession = Depends(get_shop_session)):
    """
    Turn the stored cart into an order and clear it.

    On failure the stored cart is left exactly as it was.
    """
    return shop.checkout()
