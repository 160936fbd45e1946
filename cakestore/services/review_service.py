# cakestore/services/review_service.py
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from cakestore.data.models.review import ReviewModel
from cakestore.data.models.user import UserModel
from cakestore.domain.errors import (
    ConflictError,
    DatastoreError,
    ForbiddenError,
    NotFoundError,
    ValidationError,
    DUPLICATE_REVIEW,
    NOT_PURCHASED,
)
from cakestore.domain.schemas import ReviewUpdate
from cakestore.repos.order_repo import OrderRepo
from cakestore.repos.review_repo import ReviewRepo
from cakestore.services.rating_service import RatingService
from cakestore.services.reconciliation_service import ReconciliationService
from cakestore.utils.logging import get_logger

logger = get_logger(__name__)


def review_to_dict(review: ReviewModel) -> dict:
    return {
        "id": review.id,
        "product_id": review.product_id,
        "user_id": review.user_id,
        "name": review.name,
        "rating": review.rating,
        "comment": review.comment,
        "created_at": review.created_at,
        "updated_at": review.updated_at,
    }


class ReviewService:
    """
    Reviews are gated on purchase: only a user with a paid order containing
    the product may review it, once. Every mutation refreshes the product rating.
    """

    def __init__(
        self,
        db: Session,
        rating_service: RatingService | None = None,
        reconciliation: ReconciliationService | None = None,
    ):
        self.repo = ReviewRepo(db)
        self.order_repo = OrderRepo(db)
        self.rating_service = rating_service or RatingService(db)
        self.reconciliation = reconciliation or ReconciliationService()

    def list_for_product(self, product_id: int) -> list[dict]:
        return [review_to_dict(r) for r in self.repo.list_by_product(product_id)]

    def get_review(self, review_id: int) -> dict:
        return review_to_dict(self._get_or_404(review_id))

    def create_review(
        self,
        product_id: int,
        user_id: int,
        rating: float,
        name: str,
        comment: str | None = None,
    ) -> dict:
        """
        Use Case: writing a review.

        1. Required fields present, rating in 1..5
        2. User has a paid order containing the product
        3. Insert (one review per product and user)
        4. Rating recompute, deferred on failure
        """
        if not product_id:
            raise ValidationError("product_id is required")
        if not user_id:
            raise ValidationError("user_id is required")
        if rating is None:
            raise ValidationError("rating is required")
        if not 1 <= rating <= 5:
            raise ValidationError("rating must be between 1 and 5")
        if not name or not name.strip():
            raise ValidationError("name is required")

        if not self.order_repo.has_paid_order_with_product(user_id, product_id):
            logger.warning(f"User {user_id} tried to review product {product_id} without a paid order")
            raise ValidationError("You can only review products you have purchased", code=NOT_PURCHASED)

        try:
            review = self.repo.create_review(
                ReviewModel(
                    product_id=product_id,
                    user_id=user_id,
                    name=name.strip(),
                    rating=rating,
                    comment=comment,
                )
            )
        except IntegrityError as e:
            self.repo.rollback()
            if self.repo.get_by_product_and_user(product_id, user_id):
                raise ConflictError("You have already reviewed this product", code=DUPLICATE_REVIEW) from e
            logger.error(f"Review insert rejected for product {product_id}: {e}")
            raise DatastoreError("Unable to create review") from e
        except SQLAlchemyError as e:
            self.repo.rollback()
            logger.error(f"Review insert failed for product {product_id}: {e}")
            raise DatastoreError("Unable to create review") from e

        logger.info(f"Review {review.id} created for product {product_id} by user {user_id}")

        self._refresh_rating(product_id)
        return review_to_dict(review)

    def update_review(self, review_id: int, user: UserModel, payload: ReviewUpdate) -> dict:
        review = self._get_owned(review_id, user)

        changes = payload.model_dump(exclude_unset=True, exclude_none=True)
        for field, value in changes.items():
            setattr(review, field, value.strip() if field == "name" else value)

        try:
            self.repo.save(review)
        except SQLAlchemyError as e:
            self.repo.rollback()
            raise DatastoreError("Unable to update review") from e

        self._refresh_rating(review.product_id)
        return review_to_dict(review)

    def delete_review(self, review_id: int, user: UserModel) -> dict:
        review = self._get_owned(review_id, user)
        product_id = review.product_id

        try:
            self.repo.delete_review(review)
        except SQLAlchemyError as e:
            self.repo.rollback()
            raise DatastoreError("Unable to delete review") from e

        logger.info(f"Review {review_id} deleted by user {user.id}")

        self._refresh_rating(product_id)
        return {"id": review_id}

    def _get_or_404(self, review_id: int) -> ReviewModel:
        review = self.repo.get_review(review_id)
        if not review:
            raise NotFoundError("Review not found")
        return review

    def _get_owned(self, review_id: int, user: UserModel) -> ReviewModel:
        review = self._get_or_404(review_id)
        if review.user_id != user.id and not user.is_admin:
            raise ForbiddenError("You can only change your own reviews")
        return review

    def _refresh_rating(self, product_id: int) -> None:
        #the review write already happened, a stale aggregate is tolerated
        try:
            self.rating_service.recompute(product_id)
        except (SQLAlchemyError, NotFoundError) as e:
            self.repo.rollback()
            logger.error(f"Rating recompute failed for product {product_id}, deferring: {e}")
            self.reconciliation.schedule_rating_recompute(product_id)
