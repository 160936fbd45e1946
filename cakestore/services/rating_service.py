# cakestore/services/rating_service.py
from decimal import Decimal, ROUND_HALF_UP

from sqlalchemy.orm import Session

from cakestore.domain.errors import NotFoundError
from cakestore.repos.product_repo import ProductRepo
from cakestore.repos.review_repo import ReviewRepo
from cakestore.utils.logging import get_logger

logger = get_logger(__name__)


def average_rating(ratings: list[float]) -> float:
    """Mean rounded half-up to one decimal, 0 for no ratings."""
    if not ratings:
        return 0.0
    total = sum((Decimal(str(r)) for r in ratings), Decimal("0"))
    mean = total / len(ratings)
    return float(mean.quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


class RatingService:
    def __init__(self, db: Session):
        self.product_repo = ProductRepo(db)
        self.review_repo = ReviewRepo(db)

    def recompute(self, product_id: int) -> dict:
        """
        Rebuilds Product.rating / num_reviews from the current review set.
        Safe to call any number of times.
        """
        product = self.product_repo.get_product(product_id)
        if not product:
            raise NotFoundError(f"Product {product_id} not found")

        ratings = self.review_repo.ratings_for_product(product_id)
        rating = average_rating(ratings)
        num_reviews = len(ratings)
        changed = product.rating != rating or product.num_reviews != num_reviews

        self.product_repo.set_rating(product_id, rating, num_reviews)

        logger.info(f"Product {product_id} rating recomputed: {rating} from {num_reviews} review(s)")
        return {"product_id": product_id, "rating": rating, "num_reviews": num_reviews, "changed": changed}
