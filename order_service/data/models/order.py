import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, String, DateTime, Numeric, JSON
from sqlalchemy.orm import relationship

from order_service.data.database import Base


def _utcnow():
    return datetime.now(timezone.utc)


class OrderModel(Base):
    __tablename__ = "orders"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(64), nullable=False, index=True)

    # pending, confirmed, processing, shipped, delivered, cancelled, failed
    status = Column(String(20), nullable=False, default="pending")
    # pending, completed, failed, refunded
    payment_status = Column(String(20), nullable=False, default="pending")
    payment_id = Column(String(64), nullable=True)
    tracking_number = Column(String(64), nullable=True)

    # reserving -> completed | failed; tylko saga to zmienia, nigdy API statusu
    saga_state = Column(String(20), nullable=False, default="reserving", index=True)

    # liczone raz przy tworzeniu
    total_amount = Column(Numeric(12, 2), nullable=False)
    shipping_address = Column(JSON, nullable=False)

    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)

    items = relationship(
        "OrderItemModel",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderItemModel.id",
    )
