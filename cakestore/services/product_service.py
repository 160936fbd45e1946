# cakestore/services/product_service.py
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from cakestore.data.models.product import ProductModel
from cakestore.domain.errors import DatastoreError, NotFoundError, ValidationError
from cakestore.domain.schemas import ProductIn, ProductUpdate
from cakestore.repos.category_repo import CategoryRepo
from cakestore.repos.product_repo import ProductRepo
from cakestore.utils.logging import get_logger

logger = get_logger(__name__)

SORT_FIELDS = ("created_at", "price", "name", "rating", "sold_qty")

# nullable columns, an explicit null clears them
CLEARABLE_FIELDS = ("category_id", "image", "brand", "description")


def product_to_dict(product: ProductModel, sold_qty: int = 0) -> dict:
    category = product.category
    return {
        "id": product.id,
        "name": product.name,
        "image": product.image,
        "brand": product.brand,
        "description": product.description,
        "price": product.price,
        "count_in_stock": product.count_in_stock,
        "category_id": product.category_id,
        "category": {"id": category.id, "name": category.name} if category else None,
        "rating": product.rating,
        "num_reviews": product.num_reviews,
        "is_active": product.is_active,
        "sold_qty": sold_qty,
        "created_at": product.created_at,
        "updated_at": product.updated_at,
    }


class ProductService:
    def __init__(self, db: Session):
        self.repo = ProductRepo(db)
        self.category_repo = CategoryRepo(db)

    def list_products(self, filters: dict, include_inactive: bool = False) -> list[dict]:
        if filters.get("sort_by") and filters["sort_by"] not in SORT_FIELDS:
            raise ValidationError(f"sort_by must be one of: {', '.join(SORT_FIELDS)}")
        if filters.get("sort_order") and filters["sort_order"] not in ("asc", "desc"):
            raise ValidationError("sort_order must be asc or desc")

        rows = self.repo.list_products(filters, active_only=not include_inactive)
        return [product_to_dict(p, sold) for p, sold in rows]

    def get_product(self, product_id: int, include_inactive: bool = False) -> dict:
        if include_inactive:
            product = self.repo.get_product(product_id)
        else:
            product = self.repo.get_active_product(product_id)

        if not product:
            raise NotFoundError("Product not found")

        sold = self.repo.sold_quantities([product.id]).get(product.id, 0)
        return product_to_dict(product, sold)

    def create_product(self, payload: ProductIn) -> dict:
        self._check_category(payload.category_id)

        try:
            product = self.repo.create_product(ProductModel(**payload.model_dump()))
        except SQLAlchemyError as e:
            self.repo.rollback()
            raise DatastoreError("Unable to create product") from e

        logger.info(f"Product {product.id} created: {product.name}")
        return product_to_dict(product)

    def update_product(self, product_id: int, payload: ProductUpdate) -> dict:
        product = self.repo.get_product(product_id)
        if not product:
            raise NotFoundError("Product not found")

        changes = {
            field: value
            for field, value in payload.model_dump(exclude_unset=True).items()
            if value is not None or field in CLEARABLE_FIELDS
        }
        if "category_id" in changes:
            self._check_category(changes["category_id"])

        #rating/num_reviews are not part of ProductUpdate, only RatingService writes them
        for field, value in changes.items():
            setattr(product, field, value)

        try:
            self.repo.save(product)
        except SQLAlchemyError as e:
            self.repo.rollback()
            raise DatastoreError("Unable to update product") from e

        logger.info(f"Product {product_id} updated: {sorted(changes)}")
        return self.get_product(product_id, include_inactive=True)

    def delete_product(self, product_id: int) -> dict:
        """
        Soft delete when any order line references the product,
        hard delete otherwise.
        """
        product = self.repo.get_product(product_id)
        if not product:
            raise NotFoundError("Product not found")

        try:
            if self.repo.has_order_items(product_id):
                product.is_active = False
                self.repo.save(product)
                logger.info(f"Product {product_id} deactivated (has orders)")
                return {
                    "deleted": False,
                    "soft_deleted": True,
                    "message": "Product deactivated (has existing orders)",
                }

            self.repo.delete_product(product)
        except SQLAlchemyError as e:
            self.repo.rollback()
            raise DatastoreError("Unable to delete product") from e

        logger.info(f"Product {product_id} permanently deleted")
        return {"deleted": True, "soft_deleted": False, "message": "Product permanently deleted"}

    def _check_category(self, category_id: int | None) -> None:
        if category_id is not None and not self.category_repo.get_category(category_id):
            raise ValidationError(f"Category {category_id} does not exist")
