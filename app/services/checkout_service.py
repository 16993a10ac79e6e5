# app/services/checkout_service.py
from typing import Dict, Any

from app.domain.errors import DomainError, NotFoundError
from app.services.cart_service import CartService
from app.services.order_service import OrderService
from app.utils.logging import get_logger

logger = get_logger(__name__)


class CheckoutService:
    """
    Zamówienie + czyszczenie koszyka.
    Best effort, nie transakcja: zamówienie jest źródłem prawdy,
    błąd przy czyszczeniu koszyka nie cofa zamówienia, tylko jest logowany
    i zwracany jako cart_cleared=False.
    """

    def __init__(self, order_service: OrderService, cart_service: CartService):
        self.order_service = order_service
        self.cart_service = cart_service

    def place_order(
        self,
        user_id: int,
        items,
        delivery_address: str | None,
        payment_method: str | None,
        notes: str | None = None,
    ) -> Dict[str, Any]:
        order = self.order_service.create_order(
            user_id=user_id,
            items=items,
            delivery_address=delivery_address,
            payment_method=payment_method,
            notes=notes,
        )

        return {"order": order, "cart_cleared": self._clear_cart(user_id, order["id"])}

    def _clear_cart(self, user_id: int, order_id: str) -> bool:
        try:
            self.cart_service.clear_cart(user_id)
        except NotFoundError:
            # brak koszyka, nie ma czego czyścić
            logger.info(f"No cart to clear for user {user_id} after order {order_id}")
            return True
        except DomainError as e:
            logger.error(
                f"Order {order_id} placed but clearing cart of user {user_id} failed: "
                f"{type(e).__name__}: {e.message}"
            )
            return False

        logger.info(f"Cart of user {user_id} cleared after order {order_id}")
        return True
