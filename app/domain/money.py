# app/domain/money.py
from decimal import Decimal, InvalidOperation

from app.domain.errors import ValidationError

# ceny jednostkowe: Numeric(18, 6), sumy zamówień: Numeric(24, 2)
PRICE_PLACES = 6
PRICE_LIMIT = Decimal(10) ** 12

_PRICE_QUANT = Decimal(1).scaleb(-PRICE_PLACES)


def parse_price(value) -> Decimal:
    """Cena z requestu, zapisywana bez zaokrąglania."""
    try:
        price = Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise ValidationError("Price must be a number")

    if not price.is_finite() or price < 0:
        raise ValidationError("Price must not be negative")

    if price >= PRICE_LIMIT:
        raise ValidationError(f"Price must be lower than {PRICE_LIMIT}")

    if price != price.quantize(_PRICE_QUANT):
        raise ValidationError(f"Price can have at most {PRICE_PLACES} decimal places")

    return price
