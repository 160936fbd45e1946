from decimal import Decimal

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import OperationalError

from cakestore.data.models import OrderItemModel, OrderModel
from cakestore.domain.errors import (
    DatastoreError,
    ForbiddenError,
    NotFoundError,
    ValidationError,
    INSUFFICIENT_STOCK,
    PRODUCT_NOT_FOUND,
)
from cakestore.domain.schemas import OrderCreate
from cakestore.repos.order_repo import OrderRepo
from cakestore.repos.product_repo import ProductRepo
from cakestore.services.order_service import OrderService
from cakestore.services.pricing import PricingPolicy
from helpers import shipping_fields


def order_payload(*lines, **extra):
    return OrderCreate(
        order_items=[{"product_id": pid, "qty": qty, **extra} for pid, qty in lines],
        **shipping_fields(),
    )


def count(db, model):
    return db.execute(select(func.count()).select_from(model)).scalar_one()


def stock_of(db, product):
    db.expire_all()
    return ProductRepo(db).get_product(product.id).count_in_stock


def test_create_order_prices_server_side(db, make_user, make_product):
    user = make_user()
    product = make_product(name="Tiramisu", price=100000, stock=5)
    pricing = PricingPolicy(Decimal("0.1"), 20000, 500000, False)

    order = OrderService(db, pricing=pricing).create_order(user.id, order_payload((product.id, 3)))

    assert order["items_price"] == 300000
    assert order["tax_price"] == 30000
    assert order["shipping_price"] == 20000
    assert order["total_price"] == 350000
    assert order["is_paid"] is False
    assert [(i["product_id"], i["qty"], i["price"], i["name"]) for i in order["order_items"]] == [
        (product.id, 3, 100000, "Tiramisu")
    ]
    assert stock_of(db, product) == 2


def test_client_prices_are_ignored(db, make_user, make_product):
    user = make_user()
    product = make_product(price=100000, stock=5)

    order = OrderService(db).create_order(user.id, order_payload((product.id, 1), price=1))

    assert order["order_items"][0]["price"] == 100000
    assert order["items_price"] == 100000


def test_free_shipping_from_threshold(db, make_user, make_product):
    user = make_user()
    product = make_product(price=250000, stock=5)

    order = OrderService(db).create_order(user.id, order_payload((product.id, 2)))

    assert order["shipping_price"] == 0
    assert order["total_price"] == 550000


def test_insufficient_stock_writes_nothing(db, make_user, make_product):
    user = make_user()
    product = make_product(stock=5)

    with pytest.raises(ValidationError) as exc:
        OrderService(db).create_order(user.id, order_payload((product.id, 10)))

    assert exc.value.code == INSUFFICIENT_STOCK
    assert count(db, OrderModel) == 0
    assert count(db, OrderItemModel) == 0
    assert stock_of(db, product) == 5


def test_one_bad_line_rejects_whole_order(db, make_user, make_product):
    user = make_user()
    plenty = make_product(name="Plenty", stock=50)
    scarce = make_product(name="Scarce", stock=1)

    with pytest.raises(ValidationError) as exc:
        OrderService(db).create_order(user.id, order_payload((plenty.id, 3), (scarce.id, 2)))

    assert exc.value.code == INSUFFICIENT_STOCK
    assert count(db, OrderModel) == 0
    assert stock_of(db, plenty) == 50


def test_repeated_product_lines_are_checked_together(db, make_user, make_product):
    user = make_user()
    product = make_product(stock=5)

    with pytest.raises(ValidationError) as exc:
        OrderService(db).create_order(user.id, order_payload((product.id, 3), (product.id, 3)))
    assert exc.value.code == INSUFFICIENT_STOCK

    order = OrderService(db).create_order(user.id, order_payload((product.id, 2), (product.id, 3)))

    assert len(order["order_items"]) == 2
    assert stock_of(db, product) == 0


@pytest.mark.parametrize("case", ["inactive", "missing"])
def test_missing_or_inactive_product(db, make_user, make_product, case):
    user = make_user()
    product_id = make_product(is_active=False).id if case == "inactive" else 999

    with pytest.raises(ValidationError) as exc:
        OrderService(db).create_order(user.id, order_payload((product_id, 1)))

    assert exc.value.code == PRODUCT_NOT_FOUND
    assert count(db, OrderModel) == 0


def test_failed_items_insert_removes_order(db, make_user, make_product, monkeypatch):
    user = make_user()
    product = make_product(stock=5)

    def broken_add_items(self, items):
        raise OperationalError("INSERT INTO order_items", {}, Exception("disk I/O error"))

    monkeypatch.setattr(OrderRepo, "add_items", broken_add_items)

    with pytest.raises(DatastoreError):
        OrderService(db).create_order(user.id, order_payload((product.id, 1)))

    assert count(db, OrderModel) == 0
    assert count(db, OrderItemModel) == 0
    assert stock_of(db, product) == 5


def test_failed_decrement_is_applied_later(db, make_user, make_product, monkeypatch):
    user = make_user()
    product = make_product(stock=5)
    original = ProductRepo.decrement_stock
    calls = {"n": 0}

    def flaky_decrement(self, product_id, qty):
        calls["n"] += 1
        if calls["n"] == 1:
            raise OperationalError("UPDATE products", {}, Exception("database is locked"))
        return original(self, product_id, qty)

    monkeypatch.setattr(ProductRepo, "decrement_stock", flaky_decrement)

    order = OrderService(db).create_order(user.id, order_payload((product.id, 2)))

    # the order stands, the reconciliation task took care of the stock
    assert order["id"]
    assert calls["n"] == 2
    assert stock_of(db, product) == 3


def test_decrement_stock_is_conditional(db, make_product):
    product = make_product(stock=2)
    repo = ProductRepo(db)

    assert repo.decrement_stock(product.id, 3) == 0
    assert repo.decrement_stock(product.id, 2) == 1
    assert repo.decrement_stock(product.id, 1) == 0
    assert stock_of(db, product) == 0


def test_get_order_owner_or_admin(db, make_user, make_product, make_order):
    owner = make_user()
    stranger = make_user(name="Bob")
    admin = make_user(name="Admin", is_admin=True)
    order = make_order(owner, [(make_product(), 1)], paid=False)
    service = OrderService(db)

    assert service.get_order(order.id, owner)["id"] == order.id
    assert service.get_order(order.id, admin)["id"] == order.id
    with pytest.raises(ForbiddenError):
        service.get_order(order.id, stranger)
    with pytest.raises(NotFoundError):
        service.get_order(999, owner)


def test_list_my_orders_only_returns_own(db, make_user, make_product, make_order):
    alice = make_user()
    bob = make_user(name="Bob")
    product = make_product()
    mine = make_order(alice, [(product, 1)])
    make_order(bob, [(product, 1)])

    assert [o["id"] for o in OrderService(db).list_my_orders(alice.id)] == [mine.id]
    assert len(OrderService(db).list_orders()) == 2


def test_mark_paid_is_idempotent(db, make_user, make_product, make_order):
    owner = make_user()
    order = make_order(owner, [(make_product(), 1)], paid=False)
    service = OrderService(db)

    first = service.mark_paid(order.id, owner)
    second = service.mark_paid(order.id, owner)

    assert first["is_paid"] is True
    assert first["paid_at"] is not None
    assert second["paid_at"] == first["paid_at"]


def test_mark_paid_by_stranger_is_forbidden(db, make_user, make_product, make_order):
    order = make_order(make_user(), [(make_product(), 1)], paid=False)

    with pytest.raises(ForbiddenError):
        OrderService(db).mark_paid(order.id, make_user(name="Eve"))


def test_delivery_requires_payment(db, make_user, make_product, make_order):
    owner = make_user()
    order = make_order(owner, [(make_product(), 1)], paid=False)
    service = OrderService(db)

    with pytest.raises(ValidationError):
        service.mark_delivered(order.id)

    service.mark_paid(order.id, owner)
    delivered = service.mark_delivered(order.id)

    assert delivered["is_delivered"] is True
    assert delivered["delivered_at"] is not None
