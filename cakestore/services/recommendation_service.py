# cakestore/services/recommendation_service.py
from sqlalchemy.orm import Session

from cakestore.data.models.product import ProductModel
from cakestore.domain.errors import ValidationError
from cakestore.repos.order_repo import OrderRepo
from cakestore.repos.product_repo import ProductRepo
from cakestore.services.product_service import product_to_dict
from cakestore.utils.logging import get_logger

logger = get_logger(__name__)

DEFAULT_LIMIT = 6
MAX_LIMIT = 20


def _merge(base: list[ProductModel], extra: list[ProductModel], limit: int) -> list[ProductModel]:
    seen = {p.id for p in base}
    merged = list(base)
    for product in extra:
        if len(merged) >= limit:
            break
        if product.id not in seen:
            seen.add(product.id)
            merged.append(product)
    return merged


class RecommendationService:
    """
    Two strategies, both limited to active, in-stock products:
    - top-selling: by quantity sold, padded with best rated products
    - personalized: best rated products of the user's favourite category
      (by paid quantity) not bought yet, padded with top-selling
    """

    def __init__(self, db: Session):
        self.product_repo = ProductRepo(db)
        self.order_repo = OrderRepo(db)

    @staticmethod
    def check_limit(limit: int) -> None:
        if not 1 <= limit <= MAX_LIMIT:
            raise ValidationError(f"Limit must be between 1 and {MAX_LIMIT}")

    def recommend(self, user_id: int | None, limit: int = DEFAULT_LIMIT) -> list[dict]:
        if user_id:
            return self.personalized(user_id, limit)
        return self.top_selling(limit)

    def top_selling(self, limit: int = DEFAULT_LIMIT) -> list[dict]:
        self.check_limit(limit)
        return self._to_dicts(self._top_selling(limit))

    def personalized(self, user_id: int, limit: int = DEFAULT_LIMIT) -> list[dict]:
        self.check_limit(limit)

        categories = self.order_repo.paid_qty_by_category(user_id)
        if not categories:
            logger.info(f"No paid purchase history for user {user_id}, using top-selling")
            return self._to_dicts(self._top_selling(limit))

        category_id, qty = categories[0]
        logger.info(f"User {user_id} favourite category {category_id} ({qty} item(s) bought)")

        purchased = self.order_repo.paid_product_ids(user_id)
        products = self.product_repo.top_rated(limit, category_id=category_id, exclude_ids=purchased)

        if len(products) < limit:
            products = _merge(products, self._top_selling(limit), limit)

        logger.info(f"Returning {len(products)} personalized recommendation(s) for user {user_id}")
        return self._to_dicts(products)

    def _top_selling(self, limit: int) -> list[ProductModel]:
        products = self.product_repo.top_selling(limit)
        if len(products) < limit:
            #not enough sales yet, fill with the best rated products
            products = _merge(products, self.product_repo.top_rated(limit), limit)
        return products

    def _to_dicts(self, products: list[ProductModel]) -> list[dict]:
        sold = self.product_repo.sold_quantities([p.id for p in products])
        return [product_to_dict(p, sold.get(p.id, 0)) for p in products]
