# app/domain/schemas.py
from pydantic import BaseModel, Field, ConfigDict
from pydantic.alias_generators import to_camel
from typing import List
from decimal import Decimal
from datetime import datetime


class ApiModel(BaseModel):
    """JSON po stronie klienta w camelCase, w pythonie snake_case."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


# =====================================================
# CART
# =====================================================
class CartItemIn(ApiModel):
    """Schema dla dodawania produktu do koszyka."""

    product_id: str = Field(..., min_length=1, description="ID produktu z katalogu frontu")
    name: str = Field(..., min_length=1)
    price: Decimal = Field(..., ge=0, description="Cena jednostkowa")
    image: str | None = None
    quantity: int = Field(1, ge=1, description="Ilość (co najmniej 1)")


class CartQuantityIn(ApiModel):
    """Schema dla zmiany ilości, 0 usuwa pozycje."""

    quantity: int = Field(..., ge=0)


class CartItemOut(ApiModel):
    product_id: str
    name: str
    price: Decimal
    image: str | None = None
    quantity: int
    added_at: datetime | None = None
    updated_at: datetime | None = None


class CartOut(ApiModel):
    """Schema dla koszyka (response)."""

    success: bool = True
    message: str | None = None
    items: List[CartItemOut]
    total_items: int
    total_price: Decimal


# =====================================================
# ORDERS
# =====================================================
class OrderItemIn(ApiModel):
    product_id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    price: Decimal = Field(..., ge=0)
    quantity: int = Field(..., ge=1)
    image: str | None = None


class OrderCreate(ApiModel):
    """Schema dla tworzenia zamówienia."""

    items: List[OrderItemIn] = Field(default_factory=list)
    delivery_address: str | None = None
    # walidacja wartości w OrderService, żeby błąd był domenowy
    payment_method: str | None = None
    notes: str | None = None


class OrderCancelIn(ApiModel):
    reason: str | None = None


class OrderItemOut(ApiModel):
    product_id: str
    name: str
    price: Decimal
    quantity: int
    image: str | None = None


class OrderOut(ApiModel):
    """Schema dla zamówienia (response)."""

    id: str
    user_id: int
    items: List[OrderItemOut]
    total_amount: Decimal
    delivery_address: str
    payment_method: str
    notes: str | None = None
    status: str
    order_date: datetime
    estimated_delivery: datetime
    cancelled_at: datetime | None = None
    cancellation_reason: str | None = None


class OrderEnvelope(ApiModel):
    success: bool = True
    message: str | None = None
    order: OrderOut


class OrderPlacedOut(OrderEnvelope):
    cart_cleared: bool


class OrderListOut(ApiModel):
    success: bool = True
    orders: List[OrderOut]
    total: int


# =====================================================
# USERS / HEALTH
# =====================================================
class UserCreate(ApiModel):
    """Schema dla rejestracji użytkownika."""

    email: str = Field(..., min_length=3, max_length=255)
    name: str = Field(..., min_length=1, max_length=100, description="Imię użytkownika")


class UserRead(ApiModel):
    """Schema dla użytkownika (response)."""

    id: int
    email: str
    name: str


class UserOut(ApiModel):
    success: bool = True
    message: str | None = None
    user: UserRead


class HealthOut(ApiModel):
    success: bool
    message: str
    timestamp: datetime
    database: str
