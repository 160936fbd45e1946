# cakestore/celery_worker.py
from celery import Celery

from cakestore.utils.settings import (
    CELERY_BROKER_URL,
    CELERY_RESULT_BACKEND,
    CELERY_TASK_ALWAYS_EAGER,
    RATING_SWEEP_SECONDS,
)

celery_app = Celery(
    "cakestore",
    broker=CELERY_BROKER_URL,
    backend=CELERY_RESULT_BACKEND,
)

# explicit import so the worker registers the tasks
celery_app.conf.imports = ("cakestore.tasks.reconcile",)

celery_app.conf.beat_schedule = {
    "reconcile-product-ratings": {
        "task": "cakestore.tasks.reconcile.reconcile_ratings_task",
        "schedule": RATING_SWEEP_SECONDS,
    },
}

celery_app.conf.timezone = "UTC"
celery_app.conf.task_always_eager = CELERY_TASK_ALWAYS_EAGER
