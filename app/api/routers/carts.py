#app/api/routers/carts.py
from fastapi import APIRouter, Depends

from app.api.deps import get_cart_service, get_current_user_id
from app.domain.schemas import CartItemIn, CartOut, CartQuantityIn
from app.services.cart_service import CartService

router = APIRouter(prefix="/cart", tags=["cart"])


@router.get("", response_model=CartOut)
def get_cart(
    user_id: int = Depends(get_current_user_id),
    svc: CartService = Depends(get_cart_service),
):
    return svc.get_cart(user_id)


@router.post("", response_model=CartOut)
def add_item(
    payload: CartItemIn,
    user_id: int = Depends(get_current_user_id),
    svc: CartService = Depends(get_cart_service),
):
    cart = svc.add_item(
        user_id=user_id,
        product_id=payload.product_id,
        name=payload.name,
        price=payload.price,
        image=payload.image,
        quantity=payload.quantity,
    )
    return {**cart, "message": "Item added to cart successfully"}


@router.put("/{product_id}", response_model=CartOut)
def update_item(
    product_id: str,
    payload: CartQuantityIn,
    user_id: int = Depends(get_current_user_id),
    svc: CartService = Depends(get_cart_service),
):
    cart = svc.update_item_quantity(user_id, product_id, payload.quantity)
    message = "Item removed from cart" if payload.quantity == 0 else "Cart updated successfully"
    return {**cart, "message": message}


@router.delete("/{product_id}", response_model=CartOut)
def remove_item(
    product_id: str,
    user_id: int = Depends(get_current_user_id),
    svc: CartService = Depends(get_cart_service),
):
    cart = svc.remove_item(user_id, product_id)
    return {**cart, "message": "Item removed from cart successfully"}


@router.delete("", response_model=CartOut)
def clear_cart(
    user_id: int = Depends(get_current_user_id),
    svc: CartService = Depends(get_cart_service),
):
    cart = svc.clear_cart(user_id)
    return {**cart, "message": "Cart cleared successfully"}
