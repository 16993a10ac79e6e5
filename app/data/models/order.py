from sqlalchemy import Column, Integer, ForeignKey, String, DateTime, Numeric, Text
from sqlalchemy.orm import relationship

from app.data.database import Base


class OrderModel(Base):
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True)
    # publiczny identyfikator, np. FM1718000000000X7K2QZ
    order_number = Column(String(40), nullable=False, unique=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    total_amount = Column(Numeric(24, 2), nullable=False)
    delivery_address = Column(Text, nullable=False)
    payment_method = Column(String(20), nullable=False)  # card, cash, paypal, other
    notes = Column(Text, nullable=False, default="")

    status = Column(String(20), nullable=False, default="confirmed")
    order_date = Column(DateTime(timezone=True), nullable=False)
    estimated_delivery = Column(DateTime(timezone=True), nullable=False)
    cancelled_at = Column(DateTime(timezone=True), nullable=True)
    cancellation_reason = Column(Text, nullable=True)

    items = relationship(
        "OrderItemModel",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderItemModel.position",
    )
