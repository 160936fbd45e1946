# cakestore/tasks/reconcile.py
from cakestore.celery_worker import celery_app
from cakestore.data.database import SessionLocal
from cakestore.domain.errors import NotFoundError
from cakestore.repos.product_repo import ProductRepo
from cakestore.services.rating_service import RatingService
from cakestore.utils.logging import get_logger
from cakestore.utils.retry import db_retry

logger = get_logger(__name__)


@db_retry()
def _decrement(product_id: int, qty: int) -> int:
    db = SessionLocal()
    try:
        return ProductRepo(db).decrement_stock(product_id, qty)
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


@db_retry()
def _recompute(product_id: int) -> dict:
    db = SessionLocal()
    try:
        return RatingService(db).recompute(product_id)
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


@celery_app.task(name="cakestore.tasks.reconcile.apply_stock_adjustment_task")
def apply_stock_adjustment_task(product_id: int, qty: int, order_id: int):
    logger.info(f"Applying deferred stock adjustment: product {product_id} -{qty} (order {order_id})")

    updated = _decrement(product_id, qty)

    if updated == 0:
        logger.warning(
            f"Deferred adjustment for order {order_id} skipped, product {product_id} "
            f"missing or stock below {qty}"
        )
        return {"product_id": product_id, "order_id": order_id, "status": "skipped"}

    return {"product_id": product_id, "order_id": order_id, "status": "applied"}


@celery_app.task(name="cakestore.tasks.reconcile.recompute_rating_task")
def recompute_rating_task(product_id: int):
    try:
        result = _recompute(product_id)
    except NotFoundError:
        logger.warning(f"Rating recompute skipped, product {product_id} no longer exists")
        return {"product_id": product_id, "status": "skipped"}

    return {**result, "status": "applied"}


@celery_app.task(name="cakestore.tasks.reconcile.reconcile_ratings_task")
def reconcile_ratings_task():
    logger.info("Rating sweep started")

    db = SessionLocal()
    try:
        product_ids = ProductRepo(db).list_ids()
    finally:
        db.close()

    fixed = 0
    for product_id in product_ids:
        try:
            if _recompute(product_id)["changed"]:
                fixed += 1
        except NotFoundError:
            continue
        except Exception as e:
            logger.warning(f"Rating sweep failed for product {product_id}: {e}")

    logger.info(f"Rating sweep done: {len(product_ids)} checked, {fixed} corrected")
    return {"checked": len(product_ids), "corrected": fixed}
