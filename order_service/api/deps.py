# order_service/api/deps.py
from functools import lru_cache

from fastapi import Depends, Header
from sqlalchemy.orm import Session

from order_service.data.database import get_db
from order_service.domain.errors import Unauthorized
from order_service.domain.status_policy import OrderStatusPolicy
from order_service.services.auth_client import AuthClient
from order_service.services.cart_service import CartService
from order_service.services.checkout_service import CheckoutService
from order_service.services.lock_service import LockService
from order_service.services.notification_service import NotificationService
from order_service.services.product_client import ProductClient
from order_service.utils.settings import ORDER_STATUS_POLICY


#kolaboratorzy - jedna instancja na proces, podmieniane w testach przez dependency_overrides
@lru_cache
def get_product_client() -> ProductClient:
    return ProductClient()


@lru_cache
def get_lock_service() -> LockService:
    return LockService()


@lru_cache
def get_notification_service() -> NotificationService:
    return NotificationService()


@lru_cache
def get_auth_client() -> AuthClient:
    return AuthClient()


@lru_cache
def get_status_policy() -> OrderStatusPolicy:
    return OrderStatusPolicy(ORDER_STATUS_POLICY)


def get_current_user(
    authorization: str | None = Header(None),
    auth_client: AuthClient = Depends(get_auth_client),
) -> str:
    if not authorization:
        raise Unauthorized("Missing Authorization header")

    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise Unauthorized("Expected Bearer token")

    return auth_client.verify(token.strip())


def get_cart_service(
    db: Session = Depends(get_db),
    product_client: ProductClient = Depends(get_product_client),
    lock_service: LockService = Depends(get_lock_service),
) -> CartService:
    return CartService(db=db, product_client=product_client, lock_service=lock_service)


def get_checkout_service(
    db: Session = Depends(get_db),
    product_client: ProductClient = Depends(get_product_client),
    notification_service: NotificationService = Depends(get_notification_service),
    lock_service: LockService = Depends(get_lock_service),
    status_policy: OrderStatusPolicy = Depends(get_status_policy),
) -> CheckoutService:
    return CheckoutService(
        db=db,
        product_client=product_client,
        notification_service=notification_service,
        lock_service=lock_service,
        status_policy=status_policy,
    )
