from sqlalchemy import Column, Integer, String, ForeignKey, Numeric, Boolean
from sqlalchemy.orm import relationship

from order_service.data.database import Base


class OrderItemModel(Base):
    """Snapshot produktu z momentu checkoutu (nie referencja do katalogu)."""

    __tablename__ = "order_items"

    id = Column(Integer, primary_key=True)
    order_id = Column(String(36), ForeignKey("orders.id", ondelete="CASCADE"), nullable=False)
    product_id = Column(String(64), nullable=False)

    name = Column(String(255), nullable=False)
    price = Column(Numeric(12, 2), nullable=False)
    quantity = Column(Integer, nullable=False)
    image = Column(String(512), nullable=True)

    # True = stock zdjety w katalogu, do kompensacji jesli saga padnie
    stock_reserved = Column(Boolean, nullable=False, default=False)

    order = relationship("OrderModel", back_populates="items")
