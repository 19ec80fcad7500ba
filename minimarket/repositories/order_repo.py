# minimarket/repositories/order_repo.py
import logging
import secrets
import string
import time

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from minimarket.core.errors import StoreError
from minimarket.models.order import Order, OrderLine
from minimarket.schemas.order import OrderLineSnapshot, OrderPayload, OrderRead

logger = logging.getLogger(__name__)

_ID_ALPHABET = string.ascii_lowercase + string.digits


def generate_order_id() -> str:
    """ORD-<epoch ms>-<9 random base36 chars>."""
    suffix = "".join(secrets.choice(_ID_ALPHABET) for _ in range(9))
    return f"ORD-{int(time.time() * 1000)}-{suffix}"


class SqlOrderRepository:
    """
    Data access layer for orders and order_lines.

    NOTE:
      - Order rows and their lines are written in one transaction; any
        database error rolls it back and surfaces as StoreError.
      - Rows are never updated after insert.
    """

    def __init__(self, session: Session, default_status: str = "confirmed"):
        self.session = session
        self.default_status = default_status

    # ---- internal helpers ----

    def _lines_by_order(self, order_ids: list[str]) -> dict[str, list[OrderLine]]:
        grouped: dict[str, list[OrderLine]] = {oid: [] for oid in order_ids}
        if not order_ids:
            return grouped
        stmt = (
            select(OrderLine)
            .where(OrderLine.order_id.in_(order_ids))
            .order_by(OrderLine.order_id, OrderLine.position)
        )
        for line in self.session.exec(stmt).all():
            grouped[line.order_id].append(line)
        return grouped

    @staticmethod
    def _to_read(order: Order, lines: list[OrderLine]) -> OrderRead:
        return OrderRead(
            id=order.id,
            owner_id=order.owner_id,
            lines=tuple(
                OrderLineSnapshot(
                    product_id=line.product_id,
                    name=line.name,
                    price=line.price,
                    quantity=line.quantity,
                )
                for line in lines
            ),
            subtotal=order.subtotal,
            tax=order.tax,
            discount=order.discount,
            total=order.total,
            status=order.status,
            created_at=order.created_at,
        )

    # ---- persistence collaborator ----

    def create_order(self, payload: OrderPayload) -> OrderRead:
        try:
            last_seq = self.session.exec(select(func.max(Order.seq))).one()
            order = Order(
                id=generate_order_id(),
                owner_id=payload.owner_id,
                subtotal=payload.subtotal,
                tax=payload.tax,
                discount=payload.discount,
                total=payload.total,
                status=self.default_status,
                seq=(last_seq or 0) + 1,
            )
            self.session.add(order)
            self.session.flush()

            lines = [
                OrderLine(
                    order_id=order.id,
                    position=position,
                    product_id=snap.product_id,
                    name=snap.name,
                    price=snap.price,
                    quantity=snap.quantity,
                )
                for position, snap in enumerate(payload.lines)
            ]
            self.session.add_all(lines)
            self.session.commit()

            # Re-read after commit so the result carries the column-scaled values
            self.session.refresh(order)
            stored_lines = self._lines_by_order([order.id])[order.id]
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.error("Order insert failed: %s", e)
            raise StoreError(str(e)) from e

        return self._to_read(order, stored_lines)

    def list_orders_for_identity(self, identity_id: str) -> list[OrderRead]:
        try:
            stmt = select(Order).where(Order.owner_id == identity_id).order_by(Order.seq)
            orders = self.session.exec(stmt).all()
            lines = self._lines_by_order([o.id for o in orders])
        except SQLAlchemyError as e:
            raise StoreError(str(e)) from e
        return [self._to_read(o, lines[o.id]) for o in orders]

    def get_order_by_id(self, order_id: str) -> OrderRead | None:
        try:
            order = self.session.get(Order, order_id)
            if order is None:
                return None
            lines = self._lines_by_order([order.id])
        except SQLAlchemyError as e:
            raise StoreError(str(e)) from e
        return self._to_read(order, lines[order.id])
