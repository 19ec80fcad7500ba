import os

# Settings are read at import time; point them at throwaway storage first.
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("JWT_SECRET", "test-secret")

from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlmodel import SQLModel, Session

from minimarket.core.errors import StoreError
from minimarket.database import build_engine, get_session
from minimarket.main import app
from minimarket.models.product import Product
from minimarket.schemas.order import OrderPayload, OrderRead
from minimarket.schemas.product import ProductRead


def make_product(
    product_id: str = "apple",
    price: str = "10.00",
    name: str | None = None,
    category: str = "fruits",
    stock: int = 10,
) -> ProductRead:
    return ProductRead(
        id=product_id,
        name=name or product_id.title(),
        category=category,
        price=Decimal(price),
        image=f"/images/{product_id}.jpg",
        stock=stock,
    )


class InMemoryOrderStore:
    """Order store double: assigns ids and timestamps like the SQL store."""

    def __init__(self, status: str = "confirmed"):
        self.status = status
        self.orders: list[OrderRead] = []
        self.payloads: list[OrderPayload] = []
        self.fail_with: Exception | None = None
        self._clock = datetime(2024, 1, 1, tzinfo=timezone.utc)

    def create_order(self, payload: OrderPayload) -> OrderRead:
        if self.fail_with is not None:
            raise self.fail_with
        self.payloads.append(payload)
        self._clock += timedelta(minutes=1)
        order = OrderRead(
            id=f"ORD-{len(self.orders) + 1}",
            owner_id=payload.owner_id,
            lines=payload.lines,
            subtotal=payload.subtotal,
            tax=payload.tax,
            discount=payload.discount,
            total=payload.total,
            status=self.status,
            created_at=self._clock,
        )
        self.orders.append(order)
        return order

    def list_orders_for_identity(self, identity_id: str) -> list[OrderRead]:
        return [o for o in self.orders if o.owner_id == identity_id]

    def get_order_by_id(self, order_id: str) -> OrderRead | None:
        return next((o for o in self.orders if o.id == order_id), None)


@pytest.fixture
def order_store() -> InMemoryOrderStore:
    return InMemoryOrderStore()


@pytest.fixture
def failing_store() -> InMemoryOrderStore:
    store = InMemoryOrderStore()
    store.fail_with = StoreError("connection reset by peer")
    return store


@pytest.fixture
def engine():
    engine = build_engine("sqlite://")
    SQLModel.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def catalog(session) -> list[Product]:
    products = [
        Product(id="apple", name="Gala Apples", category="fruits", price=Decimal("2.50"), stock=20),
        Product(id="banana", name="Bananas", category="fruits", price=Decimal("0.75"), stock=50),
        Product(id="carrot", name="Carrots", category="vegetables", price=Decimal("1.25"), stock=0),
        Product(id="melon", name="Honeydew Melon", category="fruits", price=Decimal("30.00"), stock=3),
    ]
    session.add_all(products)
    session.commit()
    return products


@pytest.fixture
def client(session):
    def override_get_session():
        return session

    app.dependency_overrides[get_session] = override_get_session
    yield TestClient(app)
    app.dependency_overrides = {}
