# app/services/order_service.py
import secrets
import string
from datetime import datetime, timezone, timedelta
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, Any, Iterable

from sqlalchemy.orm import Session

from app.data.models.order import OrderModel
from app.data.models.order_item import OrderItemModel
from app.domain.errors import NotFoundError, ValidationError
from app.domain.money import parse_price
from app.domain.order_status import OrderStatus, ensure_transition, parse_payment_method
from app.repos.order_repo import OrderRepo
from app.services.lock_service import LockService
from app.utils.settings import (
    DEFAULT_CANCELLATION_REASON,
    DELIVERY_ESTIMATE_HOURS,
    ORDER_ID_PREFIX,
)
from app.utils.logging import get_logger

logger = get_logger(__name__)

_SUFFIX_ALPHABET = string.ascii_uppercase + string.digits


def _now() -> datetime:
    return datetime.now(timezone.utc)


def new_order_number(now: datetime) -> str:
    # prefix + timestamp w ms + losowy sufiks, np. FM1718000000000X7K2QZ
    suffix = "".join(secrets.choice(_SUFFIX_ALPHABET) for _ in range(6))
    return f"{ORDER_ID_PREFIX}{int(now.timestamp() * 1000)}{suffix}"


def order_total(items: Iterable[Dict[str, Any]]) -> Decimal:
    total = sum((item["price"] * item["quantity"] for item in items), Decimal("0"))
    return total.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


def _snapshot_items(items) -> list[Dict[str, Any]]:
    """Kopia pozycji z requestu, cena zamrożona w chwili zamówienia."""
    snapshot = []
    for raw in items:
        item = raw if isinstance(raw, dict) else dict(raw)
        product_id = item.get("product_id")
        name = item.get("name")
        price = item.get("price")
        quantity = item.get("quantity")

        if not product_id or not name or price is None or quantity is None:
            raise ValidationError("Each order item needs product ID, name, price and quantity")

        price = parse_price(price)

        if quantity < 1:
            raise ValidationError("Quantity must be at least 1")

        snapshot.append(
            {
                "product_id": str(product_id),
                "name": name,
                "price": price,
                "quantity": quantity,
                "image": item.get("image"),
            }
        )
    return snapshot


class OrderService:
    """
    Serwis odpowiedzialny za domenę zamówień.
    Tworzenie zamówienia nie dotyka koszyka, to robi CheckoutService.
    """

    def __init__(self, db: Session, lock_service: LockService):
        self.repo = OrderRepo(db)
        self.lock_service = lock_service

    def create_order(
        self,
        user_id: int,
        items,
        delivery_address: str | None,
        payment_method: str | None,
        notes: str | None = None,
    ) -> Dict[str, Any]:
        """
        Use Case: Tworzenie zamówienia z przesłanych pozycji.

        1. Walidacja pozycji, adresu i metody płatności
        2. Total liczony raz, zaokrąglony do 2 miejsc
        3. Status confirmed, dostawa = data zamówienia + 24h
        """
        if not items:
            raise ValidationError("Order items are required")

        if not delivery_address or not delivery_address.strip() or not payment_method:
            raise ValidationError("Delivery address and payment method are required")

        method = parse_payment_method(payment_method)
        snapshot = _snapshot_items(items)
        total = order_total(snapshot)

        with self.lock_service.user_lock(user_id):
            now = _now()
            order = OrderModel(
                order_number=new_order_number(now),
                user_id=user_id,
                total_amount=total,
                delivery_address=delivery_address.strip(),
                payment_method=method.value,
                notes=notes or "",
                status=OrderStatus.CONFIRMED.value,
                order_date=now,
                estimated_delivery=now + timedelta(hours=DELIVERY_ESTIMATE_HOURS),
                items=[
                    OrderItemModel(position=pos, **item)
                    for pos, item in enumerate(snapshot)
                ],
            )
            created = self.repo.create_order(order)

        logger.info(
            f"Order {created.order_number} created for user {user_id}, total {created.total_amount}"
        )
        return self._to_dict(created)

    def list_orders(self, user_id: int) -> list[Dict[str, Any]]:
        return [self._to_dict(o) for o in self.repo.list_user_orders(user_id)]

    def get_order(self, user_id: int, order_id: str) -> Dict[str, Any]:
        return self._to_dict(self._require_order(user_id, order_id))

    def cancel_order(self, user_id: int, order_id: str, reason: str | None = None) -> Dict[str, Any]:
        """
        Use Case: Anulowanie zamówienia.
        Dozwolone z confirmed, processing, shipped. Z delivered/cancelled -> ConflictError.
        """
        with self.lock_service.user_lock(user_id):
            order = self._require_order(user_id, order_id)

            ensure_transition(OrderStatus(order.status), OrderStatus.CANCELLED)

            order.status = OrderStatus.CANCELLED.value
            order.cancelled_at = _now()
            order.cancellation_reason = reason or DEFAULT_CANCELLATION_REASON
            saved = self.repo.save(order)

        logger.info(f"Order {order_id} cancelled by user {user_id}")
        return self._to_dict(saved)

    def _require_order(self, user_id: int, order_id: str) -> OrderModel:
        # cudze zamówienie wygląda tak samo jak brakujące
        order = self.repo.get_user_order(user_id, order_id)

        if not order:
            raise NotFoundError("Order not found")

        return order

    @staticmethod
    def _to_dict(order: OrderModel) -> Dict[str, Any]:
        return {
            "id": order.order_number,
            "user_id": order.user_id,
            "items": [
                {
                    "product_id": i.product_id,
                    "name": i.name,
                    "price": i.price,
                    "quantity": i.quantity,
                    "image": i.image,
                }
                for i in order.items
            ],
            "total_amount": order.total_amount,
            "delivery_address": order.delivery_address,
            "payment_method": order.payment_method,
            "notes": order.notes,
            "status": order.status,
            "order_date": order.order_date,
            "estimated_delivery": order.estimated_delivery,
            "cancelled_at": order.cancelled_at,
            "cancellation_reason": order.cancellation_reason,
        }
