import os

# must be set before cakestore is imported, settings are read at import time
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["CELERY_TASK_ALWAYS_EAGER"] = "1"
os.environ["CELERY_BROKER_URL"] = "memory://"
os.environ["CELERY_RESULT_BACKEND"] = "cache+memory://"
os.environ["JWT_SECRET"] = "test-secret"
os.environ["TAX_RATE"] = "0.1"
os.environ["SHIPPING_PRICE"] = "30000"
os.environ["FREE_SHIPPING_THRESHOLD"] = "500000"
os.environ["ENABLE_FREE_SHIPPING"] = "1"

from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient

import cakestore.data.models  # noqa: F401
from cakestore.data.database import Base, SessionLocal, engine
from cakestore.data.models import (
    CategoryModel,
    OrderItemModel,
    OrderModel,
    ProductModel,
    ReviewModel,
    UserModel,
)
from cakestore.services.auth_service import hash_password
from helpers import PASSWORD


@pytest.fixture(scope="session")
def password_hash():
    return hash_password(PASSWORD)


@pytest.fixture(autouse=True)
def tables():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    from cakestore.main import app

    with TestClient(app) as c:
        yield c


@pytest.fixture
def make_user(db, password_hash):
    counter = {"n": 0}

    def _make(name="Alice", email=None, is_admin=False):
        counter["n"] += 1
        user = UserModel(
            name=name,
            email=email or f"user{counter['n']}@example.com",
            password=password_hash,
            is_admin=is_admin,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make


@pytest.fixture
def make_category(db):
    def _make(name="Cakes"):
        category = CategoryModel(name=name)
        db.add(category)
        db.commit()
        db.refresh(category)
        return category

    return _make


@pytest.fixture
def make_product(db):
    def _make(name="Cake", price=100000, stock=5, category=None, rating=0.0, num_reviews=0, is_active=True):
        product = ProductModel(
            name=name,
            price=price,
            count_in_stock=stock,
            category_id=category.id if category else None,
            rating=rating,
            num_reviews=num_reviews,
            is_active=is_active,
        )
        db.add(product)
        db.commit()
        db.refresh(product)
        return product

    return _make


@pytest.fixture
def make_order(db):
    """Writes an order straight to the tables, bypassing stock checks."""

    def _make(user, lines, paid=True):
        items_price = sum(p.price * qty for p, qty in lines)
        order = OrderModel(
            user_id=user.id,
            payment_method="COD",
            items_price=items_price,
            tax_price=0,
            shipping_price=0,
            total_price=items_price,
            is_paid=paid,
            paid_at=datetime.now(timezone.utc) if paid else None,
            shipping_address="1 Le Loi",
            shipping_city="Hanoi",
            shipping_postal_code="100000",
            shipping_country="Vietnam",
        )
        db.add(order)
        db.flush()
        for product, qty in lines:
            db.add(OrderItemModel(order_id=order.id, product_id=product.id, name=product.name, qty=qty, price=product.price))
        db.commit()
        db.refresh(order)
        return order

    return _make


@pytest.fixture
def make_review(db):
    def _make(user, product, rating):
        review = ReviewModel(product_id=product.id, user_id=user.id, name=user.name, rating=rating)
        db.add(review)
        db.commit()
        db.refresh(review)
        return review

    return _make

