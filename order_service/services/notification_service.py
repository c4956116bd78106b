# order_service/services/notification_service.py
import requests
from requests import RequestException

from order_service.celery_worker import celery_app
from order_service.utils.settings import NOTIFICATION_SERVICE_URL, HTTP_TIMEOUT_SECONDS
from order_service.utils.logging import get_logger

logger = get_logger(__name__)


class NotificationClient:
    """Klient HTTP do notification-service."""

    def __init__(self, base_url: str | None = None, timeout: float = HTTP_TIMEOUT_SECONDS):
        self.base_url = (base_url or NOTIFICATION_SERVICE_URL).rstrip("/")
        self.timeout = timeout

    def send(self, type: str, user_id: str, order_id: str, message: str) -> dict:
        url = f"{self.base_url}/notifications/send"
        logger.info(f"NotificationClient POST {url} type={type} order={order_id}")

        resp = requests.post(
            url,
            json={
                "type": type,
                "userId": user_id,
                "orderId": order_id,
                "message": message,
            },
            timeout=self.timeout,
        )
        resp.raise_for_status()
        return resp.json()


class NotificationService:
    """
    Best-effort side effect po commicie zamowienia.

    notify() tylko wrzuca task do Celery. Blad dispatchu jest logowany
    i polykany - nigdy nie zmienia wyniku checkoutu ani zmiany statusu.
    """

    def notify(self, type: str, user_id: str, order_id: str, message: str) -> bool:
        try:
            send_notification_task.delay(type, user_id, order_id, message)
            return True
        except Exception as e:
            logger.warning(
                f"[NOTIFICATION] dispatch failed type={type} order={order_id}: {e}"
            )
            return False

    def order_created(self, user_id: str, order_id: str) -> bool:
        return self.notify(
            "order_created",
            user_id,
            order_id,
            f"Order #{order_id} has been created successfully",
        )

    def order_status_updated(self, user_id: str, order_id: str, status: str) -> bool:
        return self.notify(
            "order_status_updated",
            user_id,
            order_id,
            f"Order #{order_id} status updated to {status}",
        )


@celery_app.task(
    name="order_service.services.notification_service.send_notification_task",
    autoretry_for=(RequestException,),
    retry_backoff=True,
    max_retries=3,
)
def send_notification_task(type: str, user_id: str, order_id: str, message: str):
    """
    Celery task - wysyla powiadomienie do notification-service.
    Po wyczerpaniu retry blad zostaje tylko w logach workera.
    """
    logger.info(f"[NOTIFICATION] User {user_id}: {type} for order {order_id}")
    NotificationClient().send(type, user_id, order_id, message)
    return {"user_id": user_id, "order_id": order_id, "type": type, "status": "sent"}
