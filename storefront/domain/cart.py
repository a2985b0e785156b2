# storefront/domain/cart.py
from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True)
class CartLine:
    """Cart line with the product's current pricing denormalized onto it."""

    item_id: int
    cart_id: str
    product_id: int
    name: str
    attributes: str
    quantity: int
    price: Decimal
    discounted_price: Decimal
