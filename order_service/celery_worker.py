# order_service/celery_worker.py
from celery import Celery

from order_service.utils.settings import CELERY_BROKER_URL, CELERY_RESULT_BACKEND

celery_app = Celery(
    "orders",
    broker=CELERY_BROKER_URL,
    backend=CELERY_RESULT_BACKEND,
)

# explicite import taskow, zeby Celery je zarejestrowal
celery_app.conf.imports = (
    "order_service.tasks.reconcile",
    "order_service.services.notification_service",
)

celery_app.conf.beat_schedule = {
    "reconcile-stale-orders-every-minute": {
        "task": "order_service.tasks.reconcile.reconcile_stale_orders_task",
        "schedule": 60.0,
    },
}

celery_app.conf.timezone = "UTC"
