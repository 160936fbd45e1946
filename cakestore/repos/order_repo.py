# cakestore/repos/order_repo.py
from sqlalchemy import select, delete, func
from sqlalchemy.orm import Session, selectinload

from cakestore.data.models.order import OrderModel
from cakestore.data.models.order_item import OrderItemModel
from cakestore.data.models.product import ProductModel


class OrderRepo:
    def __init__(self, db: Session):
        self.db = db

    def create_order(self, order: OrderModel) -> OrderModel:
        self.db.add(order)
        self.db.commit()
        self.db.refresh(order)
        return order

    def add_items(self, items: list[OrderItemModel]) -> list[OrderItemModel]:
        self.db.add_all(items)
        self.db.commit()
        return items

    def delete_order(self, order_id: int) -> None:
        self.db.execute(delete(OrderItemModel).where(OrderItemModel.order_id == order_id))
        self.db.execute(delete(OrderModel).where(OrderModel.id == order_id))
        self.db.commit()

    def get_order(self, order_id: int) -> OrderModel | None:
        return self.db.execute(
            select(OrderModel)
            .options(selectinload(OrderModel.items))
            .where(OrderModel.id == order_id)
            .execution_options(populate_existing=True)
        ).scalar_one_or_none()

    def list_by_user(self, user_id: int) -> list[OrderModel]:
        return list(
            self.db.execute(
                select(OrderModel)
                .options(selectinload(OrderModel.items))
                .where(OrderModel.user_id == user_id)
                .order_by(OrderModel.created_at.desc(), OrderModel.id.desc())
            ).scalars().all()
        )

    def list_orders(self) -> list[OrderModel]:
        return list(
            self.db.execute(
                select(OrderModel)
                .options(selectinload(OrderModel.items))
                .order_by(OrderModel.created_at.desc(), OrderModel.id.desc())
            ).scalars().all()
        )

    def save(self, order: OrderModel) -> OrderModel:
        self.db.commit()
        self.db.refresh(order)
        return order

    #purchase history, paid orders only

    def has_paid_order_with_product(self, user_id: int, product_id: int) -> bool:
        return self.db.execute(
            select(OrderModel.id)
            .join(OrderItemModel, OrderItemModel.order_id == OrderModel.id)
            .where(
                OrderModel.user_id == user_id,
                OrderModel.is_paid.is_(True),
                OrderItemModel.product_id == product_id,
            )
            .limit(1)
        ).first() is not None

    def paid_product_ids(self, user_id: int) -> list[int]:
        return list(
            self.db.execute(
                select(OrderItemModel.product_id)
                .join(OrderModel, OrderModel.id == OrderItemModel.order_id)
                .where(OrderModel.user_id == user_id, OrderModel.is_paid.is_(True))
                .distinct()
            ).scalars().all()
        )

    def paid_qty_by_category(self, user_id: int) -> list[tuple[int, int]]:
        """(category_id, total qty) over the user's paid orders, biggest first."""
        total = func.sum(OrderItemModel.qty)
        rows = self.db.execute(
            select(ProductModel.category_id, total)
            .select_from(OrderItemModel)
            .join(OrderModel, OrderModel.id == OrderItemModel.order_id)
            .join(ProductModel, ProductModel.id == OrderItemModel.product_id)
            .where(
                OrderModel.user_id == user_id,
                OrderModel.is_paid.is_(True),
                ProductModel.category_id.is_not(None),
            )
            .group_by(ProductModel.category_id)
            .order_by(total.desc(), ProductModel.category_id.asc())
        ).all()
        return [(category_id, int(qty)) for category_id, qty in rows]

    def rollback(self):
        self.db.rollback()
