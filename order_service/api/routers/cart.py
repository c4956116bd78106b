# order_service/api/routers/cart.py
from fastapi import APIRouter, Depends, Response

from order_service.api.deps import get_cart_service, get_current_user
from order_service.domain.schemas import CartOut, ItemIn, ItemQuantityIn
from order_service.services.cart_service import CartService

router = APIRouter(prefix="/cart", tags=["cart"])


@router.get("", response_model=CartOut)
def get_cart(
    user_id: str = Depends(get_current_user),
    svc: CartService = Depends(get_cart_service),
):
    return svc.get_cart(user_id)


@router.post("/add", response_model=CartOut)
def add_item(
    payload: ItemIn,
    user_id: str = Depends(get_current_user),
    svc: CartService = Depends(get_cart_service),
):
    return svc.add_item(user_id, payload.product_id, payload.quantity)


@router.patch("/items/{product_id}", response_model=CartOut)
def update_item(
    product_id: str,
    payload: ItemQuantityIn,
    user_id: str = Depends(get_current_user),
    svc: CartService = Depends(get_cart_service),
):
    return svc.update_item(user_id, product_id, payload.quantity)


@router.delete("/items/{product_id}", response_model=CartOut)
def remove_item(
    product_id: str,
    user_id: str = Depends(get_current_user),
    svc: CartService = Depends(get_cart_service),
):
    return svc.remove_item(user_id, product_id)


@router.delete("", status_code=204)
def clear_cart(
    user_id: str = Depends(get_current_user),
    svc: CartService = Depends(get_cart_service),
):
    svc.remove_cart(user_id)
    return Response(status_code=204)
