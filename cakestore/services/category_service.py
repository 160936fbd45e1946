# cakestore/services/category_service.py
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from cakestore.data.models.category import CategoryModel
from cakestore.domain.errors import ConflictError, DatastoreError, NotFoundError
from cakestore.domain.schemas import CategoryIn, CategoryUpdate
from cakestore.repos.category_repo import CategoryRepo
from cakestore.repos.product_repo import ProductRepo
from cakestore.services.product_service import product_to_dict
from cakestore.utils.logging import get_logger

logger = get_logger(__name__)


def category_to_dict(category: CategoryModel) -> dict:
    return {
        "id": category.id,
        "name": category.name,
        "description": category.description,
        "created_at": category.created_at,
        "updated_at": category.updated_at,
    }


class CategoryService:
    def __init__(self, db: Session):
        self.repo = CategoryRepo(db)
        self.product_repo = ProductRepo(db)

    def list_categories(self) -> list[dict]:
        return [category_to_dict(c) for c in self.repo.list_categories()]

    def get_category(self, category_id: int) -> dict:
        return category_to_dict(self._get_or_404(category_id))

    def list_products(self, category_id: int) -> list[dict]:
        self._get_or_404(category_id)
        products = self.product_repo.list_by_category(category_id)
        sold = self.product_repo.sold_quantities([p.id for p in products])
        return [product_to_dict(p, sold.get(p.id, 0)) for p in products]

    def create_category(self, payload: CategoryIn) -> dict:
        try:
            created = self.repo.create_category(CategoryModel(**payload.model_dump()))
        except IntegrityError as e:
            self.repo.rollback()
            self._raise_write_error(e, payload.name)
        return category_to_dict(created)

    def update_category(self, category_id: int, payload: CategoryUpdate) -> dict:
        category = self._get_or_404(category_id)

        #name is required on the row, a null name is ignored; description may be cleared
        changes = payload.model_dump(exclude_unset=True)
        if changes.get("name") is None:
            changes.pop("name", None)

        for field, value in changes.items():
            setattr(category, field, value)

        try:
            self.repo.save(category)
        except IntegrityError as e:
            self.repo.rollback()
            self._raise_write_error(e, changes.get("name"), exclude_id=category_id)
        return category_to_dict(category)

    def _raise_write_error(self, error: IntegrityError, name: str | None, exclude_id: int | None = None):
        existing = self.repo.get_by_name(name) if name else None
        if existing and existing.id != exclude_id:
            raise ConflictError(f"Category '{name}' already exists") from error
        logger.error(f"Category write rejected: {error}")
        raise DatastoreError("Unable to save category") from error

    def delete_category(self, category_id: int) -> None:
        category = self._get_or_404(category_id)
        #products of the category are kept, their category_id becomes null
        try:
            self.repo.delete_category(category)
        except SQLAlchemyError as e:
            self.repo.rollback()
            raise DatastoreError("Unable to delete category") from e

    def _get_or_404(self, category_id: int) -> CategoryModel:
        category = self.repo.get_category(category_id)
        if not category:
            raise NotFoundError("Category not found")
        return category
