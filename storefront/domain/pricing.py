# storefront/domain/pricing.py
"""
Order pricing.

All amounts are Decimal with two fractional digits. Floats and strings are
accepted at the edges and converted through str() so binary drift never
reaches a total.

Totals are rounded with round2(): add 0.00001, then truncate to cents.
This is not half-up rounding.
"""
from dataclasses import dataclass, field
from decimal import Decimal, ROUND_FLOOR
from typing import Iterable, List

CENT = Decimal("0.01")
ZERO = Decimal("0.00")
_EPSILON = Decimal("0.00001")
_HUNDRED = Decimal("100")


def to_decimal(value) -> Decimal:
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def round2(value) -> Decimal:
    return (to_decimal(value) + _EPSILON).quantize(CENT, rounding=ROUND_FLOOR)


def unit_price(discounted_price, price) -> Decimal:
    discounted = to_decimal(discounted_price)
    if discounted != 0:
        return discounted
    return to_decimal(price)


def line_subtotal(discounted_price, price, quantity: int) -> Decimal:
    return unit_price(discounted_price, price) * quantity


@dataclass(frozen=True)
class LinePricing:
    item_id: int
    product_id: int
    quantity: int
    unit_price: Decimal
    subtotal: Decimal


@dataclass(frozen=True)
class CartPricing:
    subtotal: Decimal
    shipping_cost: Decimal
    tax_percentage: Decimal
    tax_amount: Decimal
    total: Decimal
    lines: List[LinePricing] = field(default_factory=list)


def _apply_shipping_and_tax(subtotal: Decimal, shipping_cost, tax_percentage):
    with_shipping = subtotal + to_decimal(shipping_cost)
    tax_amount = (to_decimal(tax_percentage) / _HUNDRED) * with_shipping
    return tax_amount, round2(with_shipping + tax_amount)


def order_total(lines: Iterable, shipping_cost, tax_percentage) -> Decimal:
    """
    lines: anything with discounted_price, price and quantity attributes
    """
    subtotal = sum(
        (line_subtotal(line.discounted_price, line.price, line.quantity) for line in lines),
        ZERO,
    )
    _, total = _apply_shipping_and_tax(subtotal, shipping_cost, tax_percentage)
    return total


def price_cart(lines: Iterable, shipping_cost, tax_percentage) -> CartPricing:
    """
    Per-line breakdown plus totals. Lines are CartLine values.
    """
    priced = [
        LinePricing(
            item_id=line.item_id,
            product_id=line.product_id,
            quantity=line.quantity,
            unit_price=unit_price(line.discounted_price, line.price),
            subtotal=line_subtotal(line.discounted_price, line.price, line.quantity),
        )
        for line in lines
    ]

    subtotal = sum((p.subtotal for p in priced), ZERO)
    tax_amount, total = _apply_shipping_and_tax(subtotal, shipping_cost, tax_percentage)

    return CartPricing(
        subtotal=subtotal,
        shipping_cost=to_decimal(shipping_cost),
        tax_percentage=to_decimal(tax_percentage),
        tax_amount=round2(tax_amount),
        total=total,
        lines=priced,
    )


def to_minor_units(amount) -> int:
    """Dollars to cents for the gateway."""
    return int((to_decimal(amount) * _HUNDRED).to_integral_value(rounding=ROUND_FLOOR))
