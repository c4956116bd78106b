# order_service/repos/cart_repo.py
from datetime import datetime, timezone

from sqlalchemy import delete, select
from sqlalchemy.orm import Session, selectinload

from order_service.data.models.cart import CartModel
from order_service.data.models.cart_item import CartItemModel


class CartRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_cart_by_user(self, user_id: str) -> CartModel | None:
        stmt = (
            select(CartModel)
            .options(selectinload(CartModel.items))
            .where(CartModel.user_id == user_id)
        )
        return self.db.execute(stmt).scalar_one_or_none()

    def get_or_create_cart(self, user_id: str) -> CartModel:
        # koszyk tworzony leniwie przy pierwszym add
        cart = self.get_cart_by_user(user_id)
        if cart:
            return cart

        cart = CartModel(user_id=user_id)
        self.db.add(cart)
        self.db.flush()
        return cart

    def get_cart_item(self, cart_id: int, product_id: str) -> CartItemModel | None:
        stmt = select(CartItemModel).where(
            CartItemModel.cart_id == cart_id,
            CartItemModel.product_id == product_id,
        )
        return self.db.execute(stmt).scalar_one_or_none()

    def add_cart_item(self, item: CartItemModel) -> CartItemModel:
        self.db.add(item)
        self.db.flush()
        return item

    def delete_cart_item(self, cart_id: int, product_id: str) -> int:
        result = self.db.execute(
            delete(CartItemModel).where(
                CartItemModel.cart_id == cart_id,
                CartItemModel.product_id == product_id,
            )
        )
        return result.rowcount

    def delete_cart(self, user_id: str) -> bool:
        cart = self.get_cart_by_user(user_id)
        if not cart:
            return False
        self.db.delete(cart)
        self.db.flush()
        return True

    def touch(self, cart: CartModel):
        cart.updated_at = datetime.now(timezone.utc)

    def commit(self):
        self.db.commit()

    def rollback(self):
        self.db.rollback()
