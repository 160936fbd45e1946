# cakestore/repos/category_repo.py
from sqlalchemy import select
from sqlalchemy.orm import Session

from cakestore.data.models.category import CategoryModel


class CategoryRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_category(self, category_id: int) -> CategoryModel | None:
        return self.db.get(CategoryModel, category_id)

    def get_by_name(self, name: str) -> CategoryModel | None:
        return self.db.execute(select(CategoryModel).where(CategoryModel.name == name)).scalar_one_or_none()

    def list_categories(self) -> list[CategoryModel]:
        return list(
            self.db.execute(select(CategoryModel).order_by(CategoryModel.name.asc())).scalars().all()
        )

    def create_category(self, category: CategoryModel) -> CategoryModel:
        self.db.add(category)
        self.db.commit()
        self.db.refresh(category)
        return category

    def save(self, category: CategoryModel) -> CategoryModel:
        self.db.commit()
        self.db.refresh(category)
        return category

    def delete_category(self, category: CategoryModel) -> None:
        self.db.delete(category)
        self.db.commit()

    def rollback(self):
        self.db.rollback()
