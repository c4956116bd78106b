# order_service/repos/order_repo.py
from datetime import datetime
from typing import List

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from order_service.data.models.order import OrderModel
from order_service.data.models.order_item import OrderItemModel


class OrderRepo:
    """Order Store - wszystkie odczyty dla usera sa scope'owane po user_id."""

    def __init__(self, db: Session):
        self.db = db

    def save(self, order: OrderModel) -> OrderModel:
        self.db.add(order)
        self.db.commit()
        self.db.refresh(order)
        return order

    def find_by_id(self, order_id: str, user_id: str) -> OrderModel | None:
        stmt = (
            select(OrderModel)
            .options(selectinload(OrderModel.items))
            .where(OrderModel.id == order_id, OrderModel.user_id == user_id)
        )
        return self.db.execute(stmt).scalar_one_or_none()

    def list_by_user(self, user_id: str) -> List[OrderModel]:
        stmt = (
            select(OrderModel)
            .options(selectinload(OrderModel.items))
            .where(OrderModel.user_id == user_id)
            .order_by(OrderModel.created_at.desc())
        )
        return list(self.db.execute(stmt).scalars().all())

    def find_stale_reserving(self, older_than: datetime) -> List[OrderModel]:
        # saga nie doszla do konca (proces padl), tylko dla taska reconcile
        # status nie ma znaczenia - user moze go zmieniac przez API
        stmt = (
            select(OrderModel)
            .options(selectinload(OrderModel.items))
            .where(OrderModel.saga_state == "reserving", OrderModel.created_at < older_than)
        )
        return list(self.db.execute(stmt).scalars().all())

    def rollback(self):
        self.db.rollback()

    def find_failed_with_reserved_stock(self) -> List[OrderModel]:
        # saga padla, a kompensacja nie oddala calego stocku
        stmt = (
            select(OrderModel)
            .options(selectinload(OrderModel.items))
            .where(
                OrderModel.saga_state == "failed",
                OrderModel.items.any(OrderItemModel.stock_reserved.is_(True)),
            )
        )
        return list(self.db.execute(stmt).scalars().all())

    def commit(self):
        self.db.commit()
