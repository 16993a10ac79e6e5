# app/api/deps.py
from functools import lru_cache

from fastapi import Depends, Header
from sqlalchemy.orm import Session

from app.data.database import get_db
from app.services.cart_service import CartService
from app.services.checkout_service import CheckoutService
from app.services.lock_service import LockService, build_lock_service
from app.services.order_service import OrderService
from app.services.user_service import UserService


@lru_cache
def get_lock_service() -> LockService:
    # jeden lock service na proces, lock lokalny musi być wspólny dla requestów
    return build_lock_service()


def get_current_user_id(
    x_user_id: str | None = Header(default=None),
    db: Session = Depends(get_db),
) -> int:
    return UserService(db).authenticate(x_user_id)


def get_cart_service(
    db: Session = Depends(get_db),
    lock_service: LockService = Depends(get_lock_service),
) -> CartService:
    return CartService(db=db, lock_service=lock_service)


def get_order_service(
    db: Session = Depends(get_db),
    lock_service: LockService = Depends(get_lock_service),
) -> OrderService:
    return OrderService(db=db, lock_service=lock_service)


def get_checkout_service(
    order_service: OrderService = Depends(get_order_service),
    cart_service: CartService = Depends(get_cart_service),
) -> CheckoutService:
    return CheckoutService(order_service=order_service, cart_service=cart_service)
