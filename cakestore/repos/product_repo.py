# cakestore/repos/product_repo.py
from sqlalchemy import select, update, func, or_
from sqlalchemy.orm import Session, selectinload

from cakestore.data.models.product import ProductModel
from cakestore.data.models.order_item import OrderItemModel


def _sold_subquery():
    #all order lines count, paid or not
    return (
        select(
            OrderItemModel.product_id.label("product_id"),
            func.sum(OrderItemModel.qty).label("sold_qty"),
        )
        .group_by(OrderItemModel.product_id)
        .subquery()
    )


def _available():
    return ProductModel.is_active.is_(True), ProductModel.count_in_stock > 0


class ProductRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_product(self, product_id: int) -> ProductModel | None:
        return self.db.get(ProductModel, product_id)

    def get_active_product(self, product_id: int) -> ProductModel | None:
        return self.db.execute(
            select(ProductModel)
            .options(selectinload(ProductModel.category))
            .where(ProductModel.id == product_id, ProductModel.is_active.is_(True))
        ).scalar_one_or_none()

    def list_products(self, filters: dict, active_only: bool = True) -> list[tuple[ProductModel, int]]:
        sold = _sold_subquery()
        sold_qty = func.coalesce(sold.c.sold_qty, 0)

        stmt = (
            select(ProductModel, sold_qty.label("sold_qty"))
            .outerjoin(sold, sold.c.product_id == ProductModel.id)
            .options(selectinload(ProductModel.category))
        )

        if active_only:
            stmt = stmt.where(ProductModel.is_active.is_(True))
        elif filters.get("is_active") is not None:
            stmt = stmt.where(ProductModel.is_active.is_(filters["is_active"]))

        if filters.get("category_id"):
            stmt = stmt.where(ProductModel.category_id == filters["category_id"])
        if filters.get("brand"):
            stmt = stmt.where(ProductModel.brand == filters["brand"])
        if filters.get("search"):
            pattern = f"%{filters['search']}%"
            stmt = stmt.where(or_(ProductModel.name.ilike(pattern), ProductModel.description.ilike(pattern)))
        if filters.get("min_price") is not None:
            stmt = stmt.where(ProductModel.price >= filters["min_price"])
        if filters.get("max_price") is not None:
            stmt = stmt.where(ProductModel.price <= filters["max_price"])

        columns = {
            "created_at": ProductModel.created_at,
            "price": ProductModel.price,
            "name": ProductModel.name,
            "rating": ProductModel.rating,
            "sold_qty": sold_qty,
        }
        column = columns[filters.get("sort_by") or "created_at"]
        ordering = column.asc() if filters.get("sort_order") == "asc" else column.desc()
        stmt = stmt.order_by(ordering, ProductModel.id.asc())

        return [(p, int(s)) for p, s in self.db.execute(stmt).all()]

    def list_by_category(self, category_id: int, active_only: bool = True) -> list[ProductModel]:
        stmt = (
            select(ProductModel)
            .options(selectinload(ProductModel.category))
            .where(ProductModel.category_id == category_id)
        )
        if active_only:
            stmt = stmt.where(ProductModel.is_active.is_(True))
        return list(self.db.execute(stmt.order_by(ProductModel.name.asc())).scalars().all())

    def sold_quantities(self, product_ids: list[int]) -> dict[int, int]:
        if not product_ids:
            return {}
        rows = self.db.execute(
            select(OrderItemModel.product_id, func.sum(OrderItemModel.qty))
            .where(OrderItemModel.product_id.in_(product_ids))
            .group_by(OrderItemModel.product_id)
        ).all()
        return {pid: int(qty) for pid, qty in rows}

    def top_selling(self, limit: int) -> list[ProductModel]:
        sold = _sold_subquery()
        return list(
            self.db.execute(
                select(ProductModel)
                .join(sold, sold.c.product_id == ProductModel.id)
                .options(selectinload(ProductModel.category))
                .where(*_available())
                .order_by(sold.c.sold_qty.desc(), ProductModel.rating.desc(), ProductModel.id.asc())
                .limit(limit)
            ).scalars().all()
        )

    def top_rated(
        self,
        limit: int,
        category_id: int | None = None,
        exclude_ids: list[int] | None = None,
    ) -> list[ProductModel]:
        stmt = (
            select(ProductModel)
            .options(selectinload(ProductModel.category))
            .where(*_available())
        )
        if category_id is not None:
            stmt = stmt.where(ProductModel.category_id == category_id)
        if exclude_ids:
            stmt = stmt.where(ProductModel.id.not_in(exclude_ids))
        stmt = stmt.order_by(
            ProductModel.rating.desc(),
            ProductModel.num_reviews.desc(),
            ProductModel.id.asc(),
        ).limit(limit)
        return list(self.db.execute(stmt).scalars().all())

    def has_order_items(self, product_id: int) -> bool:
        return self.db.execute(
            select(OrderItemModel.id).where(OrderItemModel.product_id == product_id).limit(1)
        ).first() is not None

    def create_product(self, product: ProductModel) -> ProductModel:
        self.db.add(product)
        self.db.commit()
        self.db.refresh(product)
        return product

    def save(self, product: ProductModel) -> ProductModel:
        self.db.commit()
        self.db.refresh(product)
        return product

    def delete_product(self, product: ProductModel) -> None:
        self.db.delete(product)
        self.db.commit()

    def decrement_stock(self, product_id: int, qty: int) -> int:
        # update products set count_in_stock = count_in_stock - qty
        # where id = :id and count_in_stock >= qty  -> rowcount 0 means stock ran out
        result = self.db.execute(
            update(ProductModel)
            .where(ProductModel.id == product_id, ProductModel.count_in_stock >= qty)
            .values(count_in_stock=ProductModel.count_in_stock - qty)
        )
        self.db.commit()
        return result.rowcount

    def set_rating(self, product_id: int, rating: float, num_reviews: int) -> int:
        result = self.db.execute(
            update(ProductModel)
            .where(ProductModel.id == product_id)
            .values(rating=rating, num_reviews=num_reviews)
        )
        self.db.commit()
        return result.rowcount

    def list_ids(self) -> list[int]:
        return list(self.db.execute(select(ProductModel.id).order_by(ProductModel.id)).scalars().all())

    def rollback(self):
        self.db.rollback()
