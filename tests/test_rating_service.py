import pytest

from cakestore.domain.errors import NotFoundError
from cakestore.services.rating_service import RatingService, average_rating


@pytest.mark.parametrize(
    "ratings, expected",
    [
        ([], 0.0),
        ([4, 5], 4.5),
        ([4, 4, 5], 4.3),
        ([4.5, 5], 4.8),
        ([1, 2], 1.5),
        ([3], 3.0),
    ],
)
def test_average_rating(ratings, expected):
    assert average_rating(ratings) == expected


def test_recompute_writes_aggregate(db, make_user, make_product, make_review):
    product = make_product(rating=1.0, num_reviews=7)
    make_review(make_user(), product, 4)
    make_review(make_user(), product, 4)
    make_review(make_user(), product, 5)

    result = RatingService(db).recompute(product.id)

    assert result == {"product_id": product.id, "rating": 4.3, "num_reviews": 3, "changed": True}
    db.refresh(product)
    assert product.rating == 4.3
    assert product.num_reviews == 3


def test_recompute_is_idempotent(db, make_user, make_product, make_review):
    product = make_product()
    make_review(make_user(), product, 5)

    RatingService(db).recompute(product.id)
    again = RatingService(db).recompute(product.id)

    assert again["changed"] is False
    assert again["rating"] == 5.0


def test_recompute_without_reviews_resets_to_zero(db, make_product):
    product = make_product(rating=4.0, num_reviews=2)

    result = RatingService(db).recompute(product.id)

    assert result["rating"] == 0.0
    assert result["num_reviews"] == 0


def test_recompute_unknown_product(db):
    with pytest.raises(NotFoundError):
        RatingService(db).recompute(999)
