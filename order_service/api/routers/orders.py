# order_service/api/routers/orders.py
from typing import List

from fastapi import APIRouter, Depends

from order_service.api.deps import get_checkout_service, get_current_user
from order_service.domain.schemas import OrderCreate, OrderOut, OrderStatusIn
from order_service.services.checkout_service import CheckoutService

router = APIRouter(prefix="/orders", tags=["orders"])


# model_validate w handlerze - sesja db jeszcze otwarta


@router.post("", response_model=OrderOut, status_code=201)
def create_order(
    payload: OrderCreate,
    user_id: str = Depends(get_current_user),
    svc: CheckoutService = Depends(get_checkout_service),
):
    """
    Tworzy zamowienie z koszyka zalogowanego usera.
    Powiadomienie wysylane asynchronicznie (best-effort).
    """
    order = svc.create_order(
        user_id,
        payload.shipping_address.model_dump(by_alias=True),
    )
    return OrderOut.model_validate(order)


@router.get("", response_model=List[OrderOut])
def list_orders(
    user_id: str = Depends(get_current_user),
    svc: CheckoutService = Depends(get_checkout_service),
):
    return [OrderOut.model_validate(o) for o in svc.list_orders(user_id)]


@router.get("/{order_id}", response_model=OrderOut)
def get_order(
    order_id: str,
    user_id: str = Depends(get_current_user),
    svc: CheckoutService = Depends(get_checkout_service),
):
    return OrderOut.model_validate(svc.get_order(order_id, user_id))


@router.patch("/{order_id}/status", response_model=OrderOut)
def update_status(
    order_id: str,
    payload: OrderStatusIn,
    user_id: str = Depends(get_current_user),
    svc: CheckoutService = Depends(get_checkout_service),
):
    return OrderOut.model_validate(svc.update_status(order_id, user_id, payload.status))
