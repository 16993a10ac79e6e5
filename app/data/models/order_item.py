from sqlalchemy import Column, Integer, ForeignKey, Numeric, String
from sqlalchemy.orm import relationship

from app.data.database import Base


class OrderItemModel(Base):
    """Snapshot pozycji koszyka w chwili zamówienia, nie zmienia się później."""

    __tablename__ = "order_items"

    id = Column(Integer, primary_key=True)
    order_id = Column(Integer, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False)
    position = Column(Integer, nullable=False)

    product_id = Column(String(64), nullable=False)
    name = Column(String(255), nullable=False)
    price = Column(Numeric(18, 6), nullable=False)
    quantity = Column(Integer, nullable=False)
    image = Column(String(1024), nullable=True)

    order = relationship("OrderModel", back_populates="items")
