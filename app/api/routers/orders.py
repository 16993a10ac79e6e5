# app/api/routers/orders.py
from fastapi import APIRouter, Depends

from app.api.deps import get_checkout_service, get_current_user_id, get_order_service
from app.domain.schemas import (
    OrderCancelIn,
    OrderCreate,
    OrderEnvelope,
    OrderListOut,
    OrderPlacedOut,
)
from app.services.checkout_service import CheckoutService
from app.services.order_service import OrderService

router = APIRouter(prefix="/orders", tags=["orders"])


@router.get("", response_model=OrderListOut)
def list_orders(
    user_id: int = Depends(get_current_user_id),
    svc: OrderService = Depends(get_order_service),
):
    orders = svc.list_orders(user_id)
    return {"orders": orders, "total": len(orders)}


@router.post("", response_model=OrderPlacedOut, status_code=201)
def place_order(
    payload: OrderCreate,
    user_id: int = Depends(get_current_user_id),
    checkout: CheckoutService = Depends(get_checkout_service),
):
    """
    Tworzy zamówienie z przesłanych pozycji i czyści koszyk (best effort).
    """
    result = checkout.place_order(
        user_id=user_id,
        items=[item.model_dump() for item in payload.items],
        delivery_address=payload.delivery_address,
        payment_method=payload.payment_method,
        notes=payload.notes,
    )
    return {**result, "message": "Order placed successfully"}


@router.get("/{order_id}", response_model=OrderEnvelope)
def get_order(
    order_id: str,
    user_id: int = Depends(get_current_user_id),
    svc: OrderService = Depends(get_order_service),
):
    return {"order": svc.get_order(user_id, order_id)}


@router.put("/{order_id}/cancel", response_model=OrderEnvelope)
def cancel_order(
    order_id: str,
    payload: OrderCancelIn | None = None,
    user_id: int = Depends(get_current_user_id),
    svc: OrderService = Depends(get_order_service),
):
    reason = payload.reason if payload else None
    return {"order": svc.cancel_order(user_id, order_id, reason), "message": "Order cancelled successfully"}
