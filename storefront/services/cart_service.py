# storefront/services/cart_service.py
from typing import Dict, Any, List
from uuid import uuid4

from sqlalchemy.orm import Session

from storefront.data.models.cart_item import CartItemModel
from storefront.domain.cart import CartLine
from storefront.domain.errors import NotFoundError, ValidationFailure
from storefront.domain.pricing import line_subtotal
from storefront.repos.cart_repo import CartRepo
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


def _item_out(item: CartItemModel) -> Dict[str, Any]:
    return {
        "item_id": item.item_id,
        "cart_id": item.cart_id,
        "product_id": item.product_id,
        "attributes": item.attributes,
        "quantity": item.quantity,
    }


class CartService:
    """
    Use cases of the shopping cart.
    query (read_cart, get_cart) only reads, commands change the cart rows.
    A cart is just the set of rows sharing a cart_id, there is no cart table.
    """

    def __init__(self, db: Session):
        self.repo = CartRepo(db)

    # query
    def read_cart(self, cart_id: str) -> List[CartLine]:
        """
        Lines of the cart joined with current product pricing.
        Unknown or empty cart -> [] (not an error).
        """
        rows = self.repo.get_cart_lines(cart_id)
        return [
            CartLine(
                item_id=item.item_id,
                cart_id=item.cart_id,
                product_id=item.product_id,
                name=product.name,
                attributes=item.attributes,
                quantity=item.quantity,
                price=product.price,
                discounted_price=product.discounted_price,
            )
            for item, product in rows
        ]

    def get_cart(self, cart_id: str) -> List[Dict[str, Any]]:
        return [
            {
                "item_id": line.item_id,
                "cart_id": line.cart_id,
                "name": line.name,
                "attributes": line.attributes,
                "product_id": line.product_id,
                "price": line.price,
                "discounted_price": line.discounted_price,
                "quantity": line.quantity,
                "subtotal": line_subtotal(line.discounted_price, line.price, line.quantity),
            }
            for line in self.read_cart(cart_id)
        ]

    # commands
    @staticmethod
    def generate_cart_id() -> str:
        return f"cart_{uuid4().hex[:18]}"

    def add_item(self, cart_id: str, product_id: int, attributes: str, quantity: int) -> Dict[str, Any]:
        if quantity <= 0:
            raise ValidationFailure("Quantity must be greater than 0")

        if not self.repo.get_product(product_id):
            raise NotFoundError(f"Product {product_id} does not exist")

        item = self.repo.add_item(
            CartItemModel(
                cart_id=cart_id,
                product_id=product_id,
                attributes=attributes,
                quantity=quantity,
            )
        )

        logger.info(f"Added product {product_id} x{quantity} to cart {cart_id} as item {item.item_id}")
        return _item_out(item)

    def update_item(self, item_id: int, quantity: int) -> Dict[str, Any]:
        if quantity <= 0:
            raise ValidationFailure("Quantity must be greater than 0")

        item = self.repo.get_item(item_id)
        if not item:
            raise NotFoundError(f"Cart item {item_id} does not exist")

        item = self.repo.update_quantity(item, quantity)

        logger.info(f"Cart item {item_id} quantity set to {quantity}")
        return _item_out(item)

    def remove_item(self, item_id: int) -> None:
        if self.repo.delete_item(item_id) == 0:
            raise NotFoundError(f"Cart item {item_id} does not exist")

        logger.info(f"Cart item {item_id} removed")

    def empty_cart(self, cart_id: str) -> List[Dict[str, Any]]:
        removed = self.repo.empty_cart(cart_id)
        logger.info(f"Cart {cart_id} emptied, {removed} items removed")
        return self.get_cart(cart_id)
