import pytest

from app.domain.errors import ConflictError, ValidationError
from app.domain.order_status import (
    OrderStatus,
    PaymentMethod,
    ensure_transition,
    parse_payment_method,
)


@pytest.mark.parametrize(
    "status", [OrderStatus.CONFIRMED, OrderStatus.PROCESSING, OrderStatus.SHIPPED]
)
def test_open_states_can_be_cancelled(status):
    ensure_transition(status, OrderStatus.CANCELLED)


@pytest.mark.parametrize("status", [OrderStatus.DELIVERED, OrderStatus.CANCELLED])
def test_terminal_states_reject_every_transition(status):
    for target in OrderStatus:
        with pytest.raises(ConflictError):
            ensure_transition(status, target)


def test_no_skipping_forward():
    with pytest.raises(ConflictError):
        ensure_transition(OrderStatus.CONFIRMED, OrderStatus.DELIVERED)


def test_parse_payment_method():
    assert parse_payment_method("PayPal") is PaymentMethod.PAYPAL
    with pytest.raises(ValidationError):
        parse_payment_method("crypto")
