import pytest

from cakestore.domain.errors import ValidationError
from cakestore.services.recommendation_service import RecommendationService


def ids(products):
    return [p["id"] for p in products]


def test_top_selling_by_quantity(db, make_user, make_product, make_order):
    buyer = make_user()
    best = make_product(name="Best", rating=3.0)
    second = make_product(name="Second", rating=5.0)
    make_order(buyer, [(best, 5), (second, 3)], paid=False)

    products = RecommendationService(db).top_selling(2)

    assert ids(products) == [best.id, second.id]
    assert [p["sold_qty"] for p in products] == [5, 3]


def test_top_selling_skips_inactive_and_sold_out(db, make_user, make_product, make_order):
    buyer = make_user()
    available = make_product(name="Available")
    hidden = make_product(name="Hidden", is_active=False)
    sold_out = make_product(name="Sold out", stock=0)
    make_order(buyer, [(available, 1), (hidden, 10), (sold_out, 8)])

    assert ids(RecommendationService(db).top_selling(6)) == [available.id]


def test_top_selling_pads_with_best_rated(db, make_user, make_product, make_order):
    sold = make_product(name="Sold", rating=2.0)
    top = make_product(name="Top", rating=4.9, num_reviews=3)
    popular = make_product(name="Popular", rating=4.5, num_reviews=20)
    niche = make_product(name="Niche", rating=4.5, num_reviews=2)
    make_product(name="Hidden", rating=5.0, num_reviews=50, is_active=False)
    make_product(name="Sold out", rating=5.0, num_reviews=40, stock=0)
    make_order(make_user(), [(sold, 1)])

    assert ids(RecommendationService(db).top_selling(4)) == [sold.id, top.id, popular.id, niche.id]
    assert ids(RecommendationService(db).top_selling(6)) == [sold.id, top.id, popular.id, niche.id]


def test_personalized_prefers_favourite_category(db, make_user, make_category, make_product, make_order):
    cakes = make_category("Cakes")
    bread = make_category("Bread")
    bought = make_product(name="Bought cake", category=cakes, rating=5.0)
    good = make_product(name="Good cake", category=cakes, rating=4.0)
    better = make_product(name="Better cake", category=cakes, rating=4.8)
    make_product(name="Hidden cake", category=cakes, rating=5.0, is_active=False)
    make_product(name="Sold out cake", category=cakes, rating=4.9, stock=0)
    baguette = make_product(name="Baguette", category=bread, rating=5.0)
    user = make_user()
    make_order(user, [(bought, 3), (baguette, 1)])

    products = RecommendationService(db).personalized(user.id, 2)

    assert ids(products) == [better.id, good.id]
    assert products[0]["category"] == {"id": cakes.id, "name": "Cakes"}

    padded = RecommendationService(db).personalized(user.id, 6)
    assert ids(padded) == [better.id, good.id, bought.id, baguette.id]


def test_personalized_pads_with_top_selling(db, make_user, make_category, make_product, make_order):
    cakes = make_category("Cakes")
    bread = make_category("Bread")
    bought = make_product(name="Bought cake", category=cakes)
    only = make_product(name="Only cake left", category=cakes, rating=4.0)
    bestseller = make_product(name="Bestseller", category=bread)
    user = make_user()
    make_order(user, [(bought, 2)])
    make_order(make_user(), [(bestseller, 10)])

    products = RecommendationService(db).personalized(user.id, 3)

    assert ids(products) == [only.id, bestseller.id, bought.id]


def test_unpaid_history_falls_back_to_top_selling(db, make_user, make_category, make_product, make_order):
    cakes = make_category("Cakes")
    cake = make_product(name="Cake", category=cakes, rating=1.0)
    bestseller = make_product(name="Bestseller", rating=2.0)
    user = make_user()
    make_order(user, [(cake, 1)], paid=False)
    make_order(make_user(), [(bestseller, 4)])

    service = RecommendationService(db)

    assert ids(service.personalized(user.id, 2)) == ids(service.top_selling(2))
    assert ids(service.recommend(None, 2)) == [bestseller.id, cake.id]


def test_favourite_category_tie_goes_to_lowest_id(db, make_user, make_category, make_product, make_order):
    first = make_category("First")
    second = make_category("Second")
    a = make_product(name="A", category=first)
    b = make_product(name="B", category=second)
    pick = make_product(name="Pick", category=first, rating=3.0)
    make_product(name="Other", category=second, rating=4.0)
    user = make_user()
    make_order(user, [(a, 2), (b, 2)])

    assert ids(RecommendationService(db).personalized(user.id, 1)) == [pick.id]


@pytest.mark.parametrize("limit", [0, -1, 21])
def test_limit_bounds(db, limit):
    service = RecommendationService(db)

    with pytest.raises(ValidationError):
        service.top_selling(limit)
    with pytest.raises(ValidationError):
        service.personalized(1, limit)
