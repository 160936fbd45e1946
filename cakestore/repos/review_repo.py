# cakestore/repos/review_repo.py
from sqlalchemy import select
from sqlalchemy.orm import Session

from cakestore.data.models.review import ReviewModel


class ReviewRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_review(self, review_id: int) -> ReviewModel | None:
        return self.db.get(ReviewModel, review_id)

    def get_by_product_and_user(self, product_id: int, user_id: int) -> ReviewModel | None:
        return self.db.execute(
            select(ReviewModel).where(
                ReviewModel.product_id == product_id,
                ReviewModel.user_id == user_id,
            )
        ).scalar_one_or_none()

    def list_by_product(self, product_id: int) -> list[ReviewModel]:
        return list(
            self.db.execute(
                select(ReviewModel)
                .where(ReviewModel.product_id == product_id)
                .order_by(ReviewModel.created_at.desc(), ReviewModel.id.desc())
            ).scalars().all()
        )

    def ratings_for_product(self, product_id: int) -> list[float]:
        return list(
            self.db.execute(
                select(ReviewModel.rating).where(ReviewModel.product_id == product_id)
            ).scalars().all()
        )

    def create_review(self, review: ReviewModel) -> ReviewModel:
        # IntegrityError (unique product/user) propagates to the service
        self.db.add(review)
        self.db.commit()
        self.db.refresh(review)
        return review

    def save(self, review: ReviewModel) -> ReviewModel:
        self.db.commit()
        self.db.refresh(review)
        return review

    def delete_review(self, review: ReviewModel) -> None:
        self.db.delete(review)
        self.db.commit()

    def rollback(self):
        self.db.rollback()
