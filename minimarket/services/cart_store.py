# minimarket/services/cart_store.py
import json
import logging
from decimal import Decimal

from pydantic import ValidationError as PydanticValidationError

from minimarket.core.errors import InvalidQuantity
from minimarket.schemas.cart import CartLine, CartSummary
from minimarket.schemas.product import ProductRead
from minimarket.services import pricing
from minimarket.services.cart_slot import CartSlot, MemoryCartSlot

logger = logging.getLogger(__name__)


class CorruptCartSnapshot(ValueError):
    """Stored cart failed structural validation; internal to restore."""


class CartStore:
    """
    The current shopper's cart.

    Responsibilities:
      - keep at most one line per product id, in insertion (display) order
      - merge on add, overwrite on update, drop lines that reach quantity 0
      - write a snapshot to the durable slot after every mutation
      - restore from that slot on construction, silently starting empty
        when the snapshot is corrupted

    Stock is not enforced here: a cart may hold more units than
    `product.stock`. Any clamp is a client-side policy.
    """

    def __init__(self, slot: CartSlot | None = None):
        self.slot: CartSlot = slot if slot is not None else MemoryCartSlot()
        self._lines: dict[str, CartLine] = {}
        self._restore()

    # ---- internal helpers ----

    def _restore(self) -> None:
        serialized = self.slot.load()
        if serialized is None:
            return
        try:
            self._lines = self._parse_snapshot(serialized)
        except CorruptCartSnapshot as e:
            logger.warning("Corrupted cart data detected, clearing cart: %s", e)
            self._lines = {}
            self.slot.clear()

    @staticmethod
    def _parse_snapshot(serialized: str) -> dict[str, CartLine]:
        try:
            data = json.loads(serialized)
        except ValueError as e:
            raise CorruptCartSnapshot(f"not valid JSON ({e})") from e

        if not isinstance(data, list):
            raise CorruptCartSnapshot("expected a list of cart lines")

        lines: dict[str, CartLine] = {}
        for index, entry in enumerate(data):
            if not isinstance(entry, dict):
                raise CorruptCartSnapshot(f"line {index} is not an object")

            product = entry.get("product")
            if not isinstance(product, dict) or not product.get("id"):
                raise CorruptCartSnapshot(f"line {index} has no product id")

            quantity = entry.get("quantity")
            if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
                raise CorruptCartSnapshot(f"line {index} has invalid quantity {quantity!r}")

            try:
                line = CartLine(product=ProductRead.model_validate(product), quantity=quantity)
            except PydanticValidationError as e:
                raise CorruptCartSnapshot(f"line {index} has an invalid product") from e

            if line.product_id in lines:
                raise CorruptCartSnapshot(f"duplicate product id {line.product_id!r}")
            lines[line.product_id] = line

        return lines

    def _persist(self) -> None:
        self.slot.save(self.serialize())

    @staticmethod
    def _check_quantity(quantity: int) -> int:
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
            raise InvalidQuantity(f"Quantity must be a positive integer (got {quantity!r})")
        return quantity

    # ---- public operations ----

    def serialize(self) -> str:
        """JSON array of {"product": {...}, "quantity": n} in display order."""
        return json.dumps([line.model_dump(mode="json") for line in self._lines.values()])

    def add_item(self, product: ProductRead, quantity: int = 1) -> CartLine:
        """
        Add `quantity` units of `product`.

        If the product is already in the cart its quantity grows by
        `quantity`; otherwise a new line is appended at the end.
        """
        self._check_quantity(quantity)

        existing = self._lines.get(product.id)
        if existing is not None:
            line = existing.model_copy(update={"quantity": existing.quantity + quantity})
            logger.debug("%s quantity updated in cart", existing.product.name)
        else:
            line = CartLine(product=product, quantity=quantity)
            logger.debug("%s added to cart", product.name)

        self._lines[product.id] = line
        self._persist()
        return line

    def update_quantity(self, product_id: str, quantity: int) -> CartLine | None:
        """
        Set a line's quantity exactly. `quantity <= 0` removes the line.
        Unknown product ids are ignored.
        """
        if quantity <= 0:
            self.remove_item(product_id)
            return None

        self._check_quantity(quantity)
        existing = self._lines.get(product_id)
        if existing is None:
            return None

        line = existing.model_copy(update={"quantity": quantity})
        self._lines[product_id] = line
        self._persist()
        return line

    def remove_item(self, product_id: str) -> None:
        """Remove a product from the cart (if present)."""
        removed = self._lines.pop(product_id, None)
        if removed is not None:
            logger.debug("%s removed from cart", removed.product.name)
            self._persist()

    def clear(self) -> None:
        """Empty the cart and drop the durable snapshot."""
        self._lines = {}
        self.slot.clear()

    def lines(self) -> tuple[CartLine, ...]:
        """Current lines in display order, as one consistent snapshot."""
        return tuple(self._lines.values())

    def get_line(self, product_id: str) -> CartLine | None:
        return self._lines.get(product_id)

    def item_count(self) -> int:
        return sum(line.quantity for line in self._lines.values())

    def subtotal(self) -> Decimal:
        return pricing.subtotal(self._lines.values())

    def is_empty(self) -> bool:
        return not self._lines

    def __len__(self) -> int:
        return len(self._lines)

    def summary(self) -> CartSummary:
        """Lines plus derived totals, all computed from one read of the cart."""
        lines = self.lines()
        totals = pricing.compute_totals(lines)
        return CartSummary(
            lines=list(lines),
            item_count=sum(line.quantity for line in lines),
            subtotal=totals.subtotal,
            tax=totals.tax,
            discount=totals.discount,
            total=totals.total,
        )
