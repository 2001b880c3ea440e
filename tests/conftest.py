"""
Shared fixtures: a throwaway SQLite database, the FastAPI app and factories.
"""

import os
import tempfile

_tmp_dir = tempfile.mkdtemp(prefix="harvest_hub_tests_")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_tmp_dir, 'harvest_hub.db')}"
os.environ["NOTIFICATIONS_ENABLED"] = "false"
os.environ["JWT_SECRET"] = "harvest-hub-test-signing-key-32b!"

from datetime import datetime  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from database.session import Base, SessionLocal, engine  # noqa: E402
from main import create_app  # noqa: E402
from models import User, ProducerProfile, Category, Product, Order, OrderItem, Payment  # noqa: E402
from services.auth_service import hash_password, create_access_token  # noqa: E402
from services.broadcaster import Broadcaster  # noqa: E402

PASSWORD = "Password123!"
PASSWORD_HASH = hash_password(PASSWORD, rounds=4)


class RecordingBroadcaster(Broadcaster):
    """Broadcaster that remembers every publish instead of needing sockets."""

    def __init__(self):
        super().__init__()
        self.events = []

    async def publish(self, group, event, payload):
        self.events.append((group, event, payload))
        return await super().publish(group, event, payload)


@pytest.fixture
def db():
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def app(db):
    return create_app()


@pytest.fixture
def recorder(app):
    broadcaster = RecordingBroadcaster()
    app.state.broadcaster = broadcaster
    return broadcaster


@pytest.fixture
def client(app):
    return TestClient(app)


class Factory:
    def __init__(self, db):
        self.db = db
        self._seq = 0

    def _next(self):
        self._seq += 1
        return self._seq

    def user(self, role="customer", verified=True, **kw):
        n = self._next()
        u = User(
            first_name=kw.pop("first_name", f"First{n}"),
            last_name=kw.pop("last_name", f"Last{n}"),
            email=kw.pop("email", f"user{n}@example.com"),
            password_hash=hash_password(kw.pop("password"), rounds=4) if "password" in kw else PASSWORD_HASH,
            role=role,
            is_verified=verified,
            **kw,
        )
        self.db.add(u)
        self.db.commit()
        return u

    def producer(self, approved=False, **kw):
        owner = kw.pop("user", None) or self.user(role="producer")
        pp = ProducerProfile(
            user_id=owner.id,
            business_name=kw.pop("business_name", f"Farm {owner.id}"),
            is_approved=approved,
            **kw,
        )
        self.db.add(pp)
        self.db.commit()
        return pp

    def category(self, name="Fruit"):
        c = Category(name=name)
        self.db.add(c)
        self.db.commit()
        return c

    def product(self, producer, approved=False, **kw):
        p = Product(
            producer_id=producer.id,
            name=kw.pop("name", f"Product {self._next()}"),
            price=kw.pop("price", 2.5),
            stock_quantity=kw.pop("stock_quantity", 10),
            is_approved=approved,
            **kw,
        )
        self.db.add(p)
        self.db.commit()
        return p

    def order(self, customer, producer, status="pending", total_amount=10.0, items=(), **kw):
        o = Order(
            customer_id=customer.id,
            producer_id=producer.id,
            status=status,
            total_amount=total_amount,
            **kw,
        )
        self.db.add(o)
        self.db.flush()
        for product, quantity in items:
            self.db.add(OrderItem(order_id=o.id, product_id=product.id, quantity=quantity))
        self.db.commit()
        return o

    def payment(self, order, amount, status="pending", created_at=None):
        p = Payment(order_id=order.id, amount=amount, status=status, created_at=created_at or datetime.utcnow())
        self.db.add(p)
        self.db.commit()
        return p


@pytest.fixture
def make(db):
    return Factory(db)


@pytest.fixture
def admin(make):
    return make.user(role="admin", verified=True, email="admin@harvesthub.com")


@pytest.fixture
def admin_token(admin):
    return create_access_token(admin)


@pytest.fixture
def auth(admin_token):
    return {"Authorization": f"Bearer {admin_token}"}
