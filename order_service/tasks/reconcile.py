# order_service/tasks/reconcile.py
from datetime import datetime, timezone, timedelta

from order_service.celery_worker import celery_app
from order_service.data.database import SessionLocal
from order_service.repos.order_repo import OrderRepo
from order_service.services.checkout_service import StockSaga
from order_service.services.product_client import ProductClient
from order_service.utils.settings import SAGA_STALE_SECONDS
from order_service.utils.logging import get_logger

logger = get_logger(__name__)


def reconcile_stale_orders(db, product_client: ProductClient, stale_seconds: int = SAGA_STALE_SECONDS) -> dict:
    """
    Domyka sagi przerwane w polowie:
    - saga w stanie reserving starsza niz stale_seconds -> oddaj stock, status failed
    - failed z niezwroconym stockiem -> ponow kompensacje
    """
    repo = OrderRepo(db)
    saga = StockSaga(repo, product_client)
    cutoff = datetime.now(timezone.utc) - timedelta(seconds=stale_seconds)

    failed = 0
    compensated = 0

    for order in repo.find_stale_reserving(cutoff):
        logger.warning(f"Order {order.id} saga stuck since {order.created_at}, failing it")
        if saga.compensate(order):
            compensated += 1
        order.status = "failed"
        order.saga_state = "failed"
        order.updated_at = datetime.now(timezone.utc)
        repo.commit()
        failed += 1

    for order in repo.find_failed_with_reserved_stock():
        logger.info(f"Retrying compensation for failed order {order.id}")
        if saga.compensate(order):
            compensated += 1

    logger.info(f"Reconcile done: failed={failed} compensated={compensated}")
    return {"failed": failed, "compensated": compensated}


@celery_app.task(name="order_service.tasks.reconcile.reconcile_stale_orders_task")
def reconcile_stale_orders_task():
    logger.info("Reconcile stale orders task started")

    db = SessionLocal()
    try:
        return reconcile_stale_orders(db, ProductClient())
    finally:
        db.close()
