# app/domain/order_status.py
from enum import Enum

from app.domain.errors import ConflictError, ValidationError


class OrderStatus(str, Enum):
    CONFIRMED = "confirmed"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class PaymentMethod(str, Enum):
    CARD = "card"
    CASH = "cash"
    PAYPAL = "paypal"
    OTHER = "other"


# processing/shipped/delivered ustawia zewnętrzny proces realizacji
_TRANSITIONS = {
    OrderStatus.CONFIRMED: {OrderStatus.PROCESSING, OrderStatus.CANCELLED},
    OrderStatus.PROCESSING: {OrderStatus.SHIPPED, OrderStatus.CANCELLED},
    OrderStatus.SHIPPED: {OrderStatus.DELIVERED, OrderStatus.CANCELLED},
    OrderStatus.DELIVERED: set(),
    OrderStatus.CANCELLED: set(),
}


def ensure_transition(current: OrderStatus, target: OrderStatus) -> None:
    if target not in _TRANSITIONS[current]:
        raise ConflictError(f"Cannot change order status from {current.value} to {target.value}")


def parse_payment_method(value: str | None) -> PaymentMethod:
    if not value:
        raise ValidationError("Delivery address and payment method are required")
    try:
        return PaymentMethod(value.lower())
    except ValueError:
        allowed = ", ".join(m.value for m in PaymentMethod)
        raise ValidationError(f"Payment method must be one of: {allowed}")
