from cakestore.repos.product_repo import ProductRepo
from cakestore.tasks.reconcile import (
    apply_stock_adjustment_task,
    recompute_rating_task,
    reconcile_ratings_task,
)


def test_sweep_corrects_stale_ratings(db, make_user, make_product, make_review):
    stale = make_product(name="Stale", rating=1.0, num_reviews=9)
    make_review(make_user(), stale, 5)
    make_review(make_user(), stale, 4)
    fresh = make_product(name="Fresh", rating=3.0, num_reviews=1)
    make_review(make_user(), fresh, 3)

    result = reconcile_ratings_task.delay().get()

    assert result == {"checked": 2, "corrected": 1}
    db.expire_all()
    product = ProductRepo(db).get_product(stale.id)
    assert (product.rating, product.num_reviews) == (4.5, 2)


def test_stock_adjustment_applied(db, make_product):
    product = make_product(stock=5)

    result = apply_stock_adjustment_task.delay(product.id, 2, 1).get()

    assert result["status"] == "applied"
    db.expire_all()
    assert ProductRepo(db).get_product(product.id).count_in_stock == 3


def test_stock_adjustment_skipped_when_insufficient(db, make_product):
    product = make_product(stock=1)

    result = apply_stock_adjustment_task.delay(product.id, 2, 1).get()

    assert result == {"product_id": product.id, "order_id": 1, "status": "skipped"}
    db.expire_all()
    assert ProductRepo(db).get_product(product.id).count_in_stock == 1


def test_recompute_task_skips_missing_product():
    assert recompute_rating_task.delay(999).get() == {"product_id": 999, "status": "skipped"}
