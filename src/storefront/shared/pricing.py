"""Price arithmetic shared by carts and orders.

A cart and the order placed from it must agree to the cent, so both compute
their summary here:

    subtotal = sum(base_price * quantity)
    discount = sum(per-unit discount * quantity) + coupon % of subtotal
    shipping = 0 once subtotal reaches FREE_SHIPPING_THRESHOLD, else flat fee
    tax      = TAX_RATE * (subtotal - discount)
    total    = subtotal - discount + shipping + tax
"""

from datetime import UTC, datetime
from enum import Enum

from protean.fields import Float

from storefront.domain import storefront

FREE_SHIPPING_THRESHOLD = 1000.0
TAX_RATE = 0.10
DEFAULT_CURRENCY = "INR"


class ShippingMethod(Enum):
    STANDARD = "standard"
    EXPRESS = "express"


SHIPPING_FEES = {
    ShippingMethod.STANDARD.value: 50.0,
    ShippingMethod.EXPRESS.value: 100.0,
}


@storefront.value_object
class Summary:
    """Derived totals of a cart or an order."""

    subtotal = Float(default=0.0, min_value=0.0)
    discount = Float(default=0.0, min_value=0.0)
    shipping = Float(default=0.0, min_value=0.0)
    tax = Float(default=0.0, min_value=0.0)
    total = Float(default=0.0, min_value=0.0)


def money(amount) -> float:
    return round(float(amount or 0.0), 2)


def unit_discount(base_price, discount_percent) -> float:
    return money(base_price * (discount_percent or 0.0) / 100)


def final_price(base_price, discount_percent) -> float:
    return money(base_price - unit_discount(base_price, discount_percent))


def shipping_fee(subtotal, method=ShippingMethod.STANDARD.value) -> float:
    if subtotal >= FREE_SHIPPING_THRESHOLD:
        return 0.0
    return SHIPPING_FEES.get(method, SHIPPING_FEES[ShippingMethod.STANDARD.value])


def coupon_is_active(expires_at, now=None) -> bool:
    """A coupon without an expiry never lapses."""
    if expires_at is None:
        return True
    now = now or datetime.now(UTC)
    if expires_at.tzinfo is None:
        expires_at = expires_at.replace(tzinfo=UTC)
    return expires_at > now


def compute_summary(lines, coupon_percent=None, shipping_method=ShippingMethod.STANDARD.value) -> Summary:
    """Compute a Summary.

    Args:
        lines: iterable of ``(base_price, discount_percent, quantity)`` tuples.
        coupon_percent: discount percentage of an applied, unexpired coupon.
        shipping_method: key into SHIPPING_FEES.
    """
    subtotal = 0.0
    discount = 0.0
    for base_price, discount_percent, quantity in lines:
        subtotal += base_price * quantity
        discount += unit_discount(base_price, discount_percent) * quantity

    if coupon_percent:
        discount += subtotal * coupon_percent / 100

    subtotal = money(subtotal)
    discount = money(min(discount, subtotal))
    shipping = shipping_fee(subtotal, shipping_method) if subtotal else 0.0
    tax = money((subtotal - discount) * TAX_RATE)

    return Summary(
        subtotal=subtotal,
        discount=discount,
        shipping=shipping,
        tax=tax,
        total=money(subtotal - discount + shipping + tax),
    )
