# backend/create_demo_data.py
"""Seed a local database with an admin, producers, products, orders and payments."""
import logging
from datetime import datetime, timedelta

from database.session import Base, SessionLocal, engine
from models import User, ProducerProfile, Category, Product, Order, OrderItem, Payment
from services.auth_service import hash_password

logger = logging.getLogger(__name__)

ADMIN_EMAIL = "admin@harvesthub.com"
DEMO_PASSWORD = "Password123!"


def seed_demo_data(db) -> bool:
    """Returns False when data already exists."""
    if db.query(User).filter(User.email == ADMIN_EMAIL).first():
        logger.info("Demo data already present")
        return False

    now = datetime.utcnow()
    password = hash_password(DEMO_PASSWORD)

    admin = User(first_name="Admin", last_name="User", email=ADMIN_EMAIL, password_hash=password,
                 role="admin", is_verified=True)
    customer = User(first_name="Demo", last_name="Customer", email="customer@gmail.com",
                    password_hash=password, role="customer", is_verified=True)
    approved_owner = User(first_name="Demo", last_name="Producer", email="producer@gmail.com",
                          password_hash=password, role="producer", is_verified=True)
    pending_owner = User(first_name="Nora", last_name="Fields", email="nora@greenacre.example",
                         password_hash=password, role="producer")
    db.add_all([admin, customer, approved_owner, pending_owner])
    db.flush()

    valley = ProducerProfile(user_id=approved_owner.id, business_name="Valley Orchard",
                             description="Apples and stone fruit", is_approved=True)
    green_acre = ProducerProfile(user_id=pending_owner.id, business_name="Green Acre Farm",
                                 description="Seasonal vegetables")
    fruit = Category(name="Fruit")
    vegetables = Category(name="Vegetables")
    db.add_all([valley, green_acre, fruit, vegetables])
    db.flush()

    apples = Product(producer_id=valley.id, category_id=fruit.id, name="Honeycrisp Apples",
                     price=4.50, stock_quantity=120, is_approved=True)
    peaches = Product(producer_id=valley.id, category_id=fruit.id, name="Peaches",
                      price=5.25, stock_quantity=60)
    kale = Product(producer_id=green_acre.id, category_id=vegetables.id, name="Curly Kale",
                   price=3.00, stock_quantity=40)
    db.add_all([apples, peaches, kale])
    db.flush()

    delivered = Order(customer_id=customer.id, producer_id=valley.id, status="delivered",
                      total_amount=13.50, created_at=now - timedelta(days=3))
    fresh = Order(customer_id=customer.id, producer_id=valley.id, status="pending",
                  total_amount=9.00, created_at=now - timedelta(minutes=20))
    db.add_all([delivered, fresh])
    db.flush()

    db.add_all([
        OrderItem(order_id=delivered.id, product_id=apples.id, quantity=3),
        OrderItem(order_id=fresh.id, product_id=apples.id, quantity=2),
        Payment(order_id=delivered.id, amount=13.50, status="completed", created_at=now - timedelta(days=3)),
        Payment(order_id=fresh.id, amount=9.00, status="pending"),
    ])
    db.commit()
    return True


def create_demo_data():
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        if seed_demo_data(db):
            logger.info(f"Demo data created. Admin login: {ADMIN_EMAIL} / {DEMO_PASSWORD}")
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    create_demo_data()
