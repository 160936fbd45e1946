# cakestore/services/order_service.py
from datetime import datetime, timezone

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from cakestore.data.models.order import OrderModel
from cakestore.data.models.order_item import OrderItemModel
from cakestore.data.models.user import UserModel
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
from cakestore.services.pricing import PricingPolicy
from cakestore.services.reconciliation_service import ReconciliationService
from cakestore.utils.logging import get_logger

logger = get_logger(__name__)


def order_to_dict(order: OrderModel) -> dict:
    return {
        "id": order.id,
        "user_id": order.user_id,
        "payment_method": order.payment_method,
        "items_price": order.items_price,
        "tax_price": order.tax_price,
        "shipping_price": order.shipping_price,
        "total_price": order.total_price,
        "is_paid": order.is_paid,
        "paid_at": order.paid_at,
        "is_delivered": order.is_delivered,
        "delivered_at": order.delivered_at,
        "shipping_address": order.shipping_address,
        "shipping_city": order.shipping_city,
        "shipping_postal_code": order.shipping_postal_code,
        "shipping_country": order.shipping_country,
        "order_items": [
            {
                "id": i.id,
                "product_id": i.product_id,
                "name": i.name,
                "qty": i.qty,
                "image": i.image,
                "price": i.price,
            }
            for i in order.items
        ],
        "created_at": order.created_at,
        "updated_at": order.updated_at,
    }


class OrderService:
    """
    Order domain use cases.
    Prices, tax and shipping are always computed here from the product rows,
    nothing money-related is read from the request.
    """

    def __init__(
        self,
        db: Session,
        pricing: PricingPolicy | None = None,
        reconciliation: ReconciliationService | None = None,
    ):
        self.repo = OrderRepo(db)
        self.product_repo = ProductRepo(db)
        self.pricing = pricing or PricingPolicy.from_settings()
        self.reconciliation = reconciliation or ReconciliationService()

    def create_order(self, user_id: int, payload: OrderCreate) -> dict:
        """
        Use Case: placing an order.

        1. Validates every line against the current product row (exists, active, stock)
        2. Computes items/tax/shipping/total server-side
        3. Persists the order, then its items (order deleted again if items fail)
        4. Decrements stock, failures are deferred to a reconciliation job
        """
        lines = []
        requested: dict[int, int] = {}
        items_price = 0

        for item in payload.order_items:
            product = self.product_repo.get_product(item.product_id)
            if not product or not product.is_active:
                raise ValidationError(f"Product {item.product_id} not found", code=PRODUCT_NOT_FOUND)

            #same product on several lines is checked against stock as a whole
            requested[product.id] = requested.get(product.id, 0) + item.qty
            if requested[product.id] > product.count_in_stock:
                raise ValidationError(
                    f"Insufficient stock for {product.name}: "
                    f"requested {requested[product.id]}, available {product.count_in_stock}",
                    code=INSUFFICIENT_STOCK,
                )

            items_price += product.price * item.qty
            lines.append((product, item.qty))

        quote = self.pricing.quote(items_price)

        try:
            order = self.repo.create_order(
                OrderModel(
                    user_id=user_id,
                    payment_method=payload.payment_method,
                    items_price=quote.items_price,
                    tax_price=quote.tax_price,
                    shipping_price=quote.shipping_price,
                    total_price=quote.total_price,
                    is_paid=False,
                    is_delivered=False,
                    shipping_address=payload.shipping_address,
                    shipping_city=payload.shipping_city,
                    shipping_postal_code=payload.shipping_postal_code,
                    shipping_country=payload.shipping_country,
                )
            )
        except SQLAlchemyError as e:
            self.repo.rollback()
            logger.error(f"Failed to persist order for user {user_id}: {e}")
            raise DatastoreError("Unable to create order") from e

        logger.info(f"Order {order.id} created for user {user_id}, total {quote.total_price}")

        try:
            self.repo.add_items(
                [
                    OrderItemModel(
                        order_id=order.id,
                        product_id=product.id,
                        name=product.name,
                        qty=qty,
                        image=product.image,
                        price=product.price,
                    )
                    for product, qty in lines
                ]
            )
        except SQLAlchemyError as e:
            self.repo.rollback()
            logger.error(f"Failed to insert items of order {order.id}, removing order: {e}")
            self._discard_order(order.id)
            raise DatastoreError("Unable to create order items") from e

        for product_id, qty in requested.items():
            self._decrement_stock(order.id, product_id, qty)

        return order_to_dict(self.repo.get_order(order.id))

    def _discard_order(self, order_id: int) -> None:
        try:
            self.repo.delete_order(order_id)
        except SQLAlchemyError as e:
            self.repo.rollback()
            logger.error(f"Compensating delete of order {order_id} failed: {e}")

    def _decrement_stock(self, order_id: int, product_id: int, qty: int) -> None:
        try:
            updated = self.product_repo.decrement_stock(product_id, qty)
        except SQLAlchemyError as e:
            self.product_repo.rollback()
            logger.error(
                f"Stock decrement failed for product {product_id} (order {order_id}), deferring: {e}"
            )
            self.reconciliation.schedule_stock_adjustment(product_id, qty, order_id)
            return

        if updated == 0:
            #someone bought the remaining stock between validation and now
            logger.warning(
                f"Product {product_id} oversold by order {order_id}: "
                f"stock below {qty}, left unchanged"
            )

    #queries

    def get_order(self, order_id: int, user: UserModel) -> dict:
        order = self.repo.get_order(order_id)

        if not order:
            raise NotFoundError("Order not found")

        if order.user_id != user.id and not user.is_admin:
            raise ForbiddenError("Not allowed to view this order")

        return order_to_dict(order)

    def list_my_orders(self, user_id: int) -> list[dict]:
        return [order_to_dict(o) for o in self.repo.list_by_user(user_id)]

    def list_orders(self) -> list[dict]:
        return [order_to_dict(o) for o in self.repo.list_orders()]

    #status changes

    def mark_paid(self, order_id: int, user: UserModel) -> dict:
        order = self.repo.get_order(order_id)

        if not order:
            raise NotFoundError("Order not found")

        if order.user_id != user.id and not user.is_admin:
            raise ForbiddenError("Not allowed to pay this order")

        if order.is_paid:
            return order_to_dict(order)

        order.is_paid = True
        order.paid_at = datetime.now(timezone.utc)
        self.repo.save(order)

        logger.info(f"Order {order_id} marked as paid by user {user.id}")
        return order_to_dict(self.repo.get_order(order_id))

    def mark_delivered(self, order_id: int) -> dict:
        order = self.repo.get_order(order_id)

        if not order:
            raise NotFoundError("Order not found")

        if not order.is_paid:
            raise ValidationError("Order must be paid before delivery")

        if not order.is_delivered:
            order.is_delivered = True
            order.delivered_at = datetime.now(timezone.utc)
            self.repo.save(order)
            logger.info(f"Order {order_id} marked as delivered")

        return order_to_dict(self.repo.get_order(order_id))
