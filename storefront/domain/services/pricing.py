# storefront/domain/services/pricing.py
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional


def round_half_up(value: float) -> int:
    """Round like a shop till: .5 always goes up (Python's round() is banker's rounding)."""
    return int(Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def compute_original_price(price: float, discount: Optional[float]) -> float:
    """
    Price before discount, i.e. the struck-through price shown next to `price`.

    original = round(price / (1 - discount/100)) when 0 < discount < 100, else price.
    A 100% discount has no finite original price, so it falls back to `price`.
    """
    if not discount or discount <= 0 or discount >= 100:
        return float(price)
    return float(round_half_up(price / (1 - discount / 100)))


def discount_from_prices(price: float, original_price: Optional[float]) -> int:
    """Inverse of compute_original_price, exact up to rounding."""
    if not original_price or original_price <= price:
        return 0
    return round_half_up((1 - price / original_price) * 100)
