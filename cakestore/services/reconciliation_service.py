# cakestore/services/reconciliation_service.py
from kombu.exceptions import OperationalError as BrokerError

from cakestore.tasks.reconcile import apply_stock_adjustment_task, recompute_rating_task
from cakestore.utils.logging import get_logger

logger = get_logger(__name__)


class ReconciliationService:
    """
    Hands best-effort side effects over to Celery.
    Used when the inline stock decrement or rating recompute fails,
    the worker retries them outside the request.
    """

    @staticmethod
    def schedule_stock_adjustment(product_id: int, qty: int, order_id: int) -> None:
        try:
            apply_stock_adjustment_task.delay(product_id, qty, order_id)
            logger.info(f"[RECONCILE] stock adjustment queued: product {product_id} -{qty} (order {order_id})")
        except BrokerError as e:
            logger.error(
                f"[RECONCILE] could not queue stock adjustment for product {product_id} "
                f"(order {order_id}, qty {qty}): {e}"
            )

    @staticmethod
    def schedule_rating_recompute(product_id: int) -> None:
        try:
            recompute_rating_task.delay(product_id)
            logger.info(f"[RECONCILE] rating recompute queued for product {product_id}")
        except BrokerError as e:
            # the periodic sweep picks it up later
            logger.error(f"[RECONCILE] could not queue rating recompute for product {product_id}: {e}")
