# order_service/services/checkout_service.py
from datetime import datetime, timezone
from decimal import Decimal
from typing import List

from sqlalchemy.orm import Session

from order_service.data.models.order import OrderModel
from order_service.data.models.order_item import OrderItemModel
from order_service.domain.errors import (
    CatalogUnavailable,
    EmptyCart,
    InsufficientStock,
    InternalError,
    NotFound,
    OrderNotFound,
    ServiceError,
)
from order_service.domain.status_policy import OrderStatusPolicy
from order_service.repos.order_repo import OrderRepo
from order_service.services.cart_service import CartService
from order_service.services.lock_service import LockService
from order_service.services.notification_service import NotificationService
from order_service.services.product_client import ProductClient, ProductSnapshot
from order_service.utils.logging import get_logger

logger = get_logger(__name__)


def _utcnow():
    return datetime.now(timezone.utc)


class StockSaga:
    """
    Rezerwacja stocku w katalogu dla zapisanego zamowienia.

    Kazda linia po udanym decrease dostaje stock_reserved=True (commit per linia),
    wiec po awarii procesu wiadomo co oddac. Kompensacja robi increase
    tylko dla linii z flaga.
    """

    def __init__(self, repo: OrderRepo, product_client: ProductClient):
        self.repo = repo
        self.product_client = product_client

    def reserve(self, order: OrderModel) -> None:
        failed_item = None
        failure = None

        for item in list(order.items):
            try:
                self.product_client.adjust_stock(item.product_id, item.quantity, "decrease")
            except Exception as e:
                failed_item, failure = item, e
                break

            item.stock_reserved = True
            self.repo.commit()

        if failure is None:
            order.status = "confirmed"
            order.saga_state = "completed"
            order.updated_at = _utcnow()
            self.repo.commit()
            logger.info(f"Order {order.id} confirmed, stock reserved for {len(order.items)} lines")
            return

        logger.error(
            f"Stock decrease failed for order {order.id} product {failed_item.product_id}: {failure}"
        )
        self.compensate(order)
        order.status = "failed"
        order.saga_state = "failed"
        order.updated_at = _utcnow()
        self.repo.commit()
        logger.warning(f"Order {order.id} marked as failed")

        if isinstance(failure, InsufficientStock):
            raise InsufficientStock(failed_item.name, order_id=order.id) from failure
        if isinstance(failure, ServiceError):
            raise CatalogUnavailable(
                f"Catalog unavailable while reserving stock: {failure.message}",
                order_id=order.id,
            ) from failure
        raise InternalError("Unexpected error while reserving stock", order_id=order.id) from failure

    def compensate(self, order: OrderModel) -> bool:
        """Oddaje stock dla zarezerwowanych linii. True gdy wszystko oddane."""
        complete = True

        for item in list(order.items):
            if not item.stock_reserved:
                continue
            try:
                self.product_client.adjust_stock(item.product_id, item.quantity, "increase")
            except ServiceError as e:
                # zostaje z flaga, reconcile sprobuje ponownie
                logger.error(
                    f"Compensation failed for order {order.id} product {item.product_id}: {e}"
                )
                complete = False
                continue

            item.stock_reserved = False
            self.repo.commit()
            logger.info(f"Restored {item.quantity} of {item.product_id} for order {order.id}")

        return complete


class CheckoutService:
    """
    Jedyne miejsce gdzie z koszyka powstaje zamowienie.

    Kolaboratorzy (katalog, powiadomienia, lock) sa wstrzykiwani w konstruktorze.
    """

    def __init__(
        self,
        db: Session,
        product_client: ProductClient,
        notification_service: NotificationService,
        lock_service: LockService,
        status_policy: OrderStatusPolicy | None = None,
    ):
        self.repo = OrderRepo(db)
        self.cart_service = CartService(db, product_client, lock_service)
        self.product_client = product_client
        self.notification_service = notification_service
        self.lock_service = lock_service
        self.status_policy = status_policy or OrderStatusPolicy()
        self.saga = StockSaga(self.repo, product_client)

    def create_order(self, user_id: str, shipping_address: dict) -> OrderModel:
        """
        Use Case: checkout.

        1. koszyk nie moze byc pusty
        2. snapshot kazdego produktu z katalogu
        3. walidacja stocku (all-or-nothing, bez zapisu)
        4. total
        5. zapis zamowienia (pending) - punkt commit
        6. saga: decrease stocku, confirmed / failed + kompensacja
        7. czyszczenie koszyka
        8. powiadomienie best-effort
        """
        with self.lock_service.user_lock(user_id):
            lines = self.cart_service.get_lines(user_id)
            if not lines:
                raise EmptyCart()

            snapshots = self._fetch_snapshots(lines)

            for product, quantity in snapshots:
                if product.stock < quantity:
                    logger.info(
                        f"Checkout odrzucony dla usera {user_id}: {product.id} "
                        f"stock={product.stock} < {quantity}"
                    )
                    raise InsufficientStock(product.name, product_id=product.id)

            total = sum(
                (product.price * quantity for product, quantity in snapshots),
                Decimal("0.00"),
            )

            now = _utcnow()
            order = OrderModel(
                user_id=user_id,
                status="pending",
                payment_status="pending",
                saga_state="reserving",
                total_amount=total,
                shipping_address=shipping_address,
                created_at=now,
                updated_at=now,
                items=[
                    OrderItemModel(
                        product_id=product.id,
                        name=product.name,
                        price=product.price,
                        quantity=quantity,
                        image=product.image,
                        stock_reserved=False,
                    )
                    for product, quantity in snapshots
                ],
            )

            try:
                order = self.repo.save(order)
            except Exception:
                self.repo.rollback()
                raise

            logger.info(f"Order {order.id} created for user {user_id}, total {total}")

            self.saga.reserve(order)

            # zamowienie juz potwierdzone - blad czyszczenia koszyka tylko logujemy
            try:
                self.cart_service.clear(user_id)
            except Exception as e:
                self.repo.rollback()
                logger.error(f"Failed to clear cart of user {user_id} after order {order.id}: {e}")

        self.notification_service.order_created(user_id, order.id)
        return order

    def _fetch_snapshots(self, lines) -> List[tuple]:
        snapshots = []
        for product_id, quantity in lines:
            try:
                product: ProductSnapshot = self.product_client.get_product(product_id)
            except NotFound as e:
                raise CatalogUnavailable(
                    f"Product {product_id} could not be loaded from catalog",
                    product_id=product_id,
                ) from e
            snapshots.append((product, quantity))
        return snapshots

    def update_status(self, order_id: str, user_id: str, new_status: str) -> OrderModel:
        order = self.repo.find_by_id(order_id, user_id)
        if not order:
            raise OrderNotFound(order_id)

        self.status_policy.check(order.status, new_status)

        previous = order.status
        order.status = new_status
        order.updated_at = _utcnow()
        self.repo.commit()

        logger.info(f"Order {order_id} status {previous} -> {new_status}")

        self.notification_service.order_status_updated(user_id, order_id, new_status)
        return self.repo.find_by_id(order_id, user_id)

    #query
    def get_order(self, order_id: str, user_id: str) -> OrderModel:
        order = self.repo.find_by_id(order_id, user_id)
        if not order:
            raise OrderNotFound(order_id)
        return order

    def list_orders(self, user_id: str) -> List[OrderModel]:
        return self.repo.list_by_user(user_id)
