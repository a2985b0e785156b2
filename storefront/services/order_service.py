# storefront/services/order_service.py
from typing import Dict, Any, List
from uuid import uuid4

from sqlalchemy.orm import Session

from storefront.data.database import unit_of_work
from storefront.data.models.order import OrderModel, OrderStatus
from storefront.data.models.order_detail import OrderDetailModel
from storefront.domain.errors import NotFoundError, ValidationFailure, ConflictError
from storefront.domain.pricing import CartPricing, price_cart, round2
from storefront.repos.order_repo import OrderRepo
from storefront.repos.reference_repo import ReferenceRepo
from storefront.services.cart_service import CartService
from storefront.services.lock_service import LockService, cart_checkout_key, release_quietly
from storefront.utils.settings import CHECKOUT_LOCK_TTL_SECONDS
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class OrderService:
    """
    Orders domain: pricing a cart, checkout and order queries.
    Cart rows are only read here, clearing the cart is up to the caller.
    """

    def __init__(self, db: Session, lock_service: LockService):
        self.db = db
        self.repo = OrderRepo(db)
        self.reference = ReferenceRepo(db)
        self.carts = CartService(db)
        self.lock_service = lock_service

    def _shipping_and_tax(self, shipping_id: int, tax_id: int):
        shipping = self.reference.get_shipping(shipping_id)
        if not shipping:
            raise NotFoundError(f"Shipping {shipping_id} does not exist")

        tax = self.reference.get_tax(tax_id)
        if not tax:
            raise NotFoundError(f"Tax {tax_id} does not exist")

        return shipping, tax

    def price_cart(self, cart_id: str, shipping_id: int, tax_id: int) -> CartPricing:
        """
        Use Case: quote for a cart (Query). Nothing is written.
        """
        shipping, tax = self._shipping_and_tax(shipping_id, tax_id)
        lines = self.carts.read_cart(cart_id)
        return price_cart(lines, shipping.shipping_cost, tax.tax_percentage)

    def create_order(self, cart_id: str, shipping_id: int, tax_id: int, customer_id: int) -> int:
        """
        Use Case: checkout (Command).

        1. resolves shipping and tax, nothing is written if either is missing
        2. prices the cart lines
        3. writes the order header and one detail row per line in one transaction
        4. returns the new order_id

        Two checkouts of the same cart are serialized by a redis lock.
        """
        shipping, tax = self._shipping_and_tax(shipping_id, tax_id)

        owner = uuid4().hex
        lock_key = cart_checkout_key(cart_id)
        if not self.lock_service.acquire(lock_key, owner, CHECKOUT_LOCK_TTL_SECONDS):
            raise ConflictError(f"Checkout of cart {cart_id} already in progress")

        try:
            lines = self.carts.read_cart(cart_id)
            if not lines:
                raise ValidationFailure("Cannot create an order from an empty cart")

            pricing = price_cart(lines, shipping.shipping_cost, tax.tax_percentage)

            with unit_of_work(self.db):
                order = self.repo.add_order(
                    OrderModel(
                        customer_id=customer_id,
                        shipping_id=shipping_id,
                        tax_id=tax_id,
                        total_amount=pricing.total,
                        status=OrderStatus.UNPAID,
                    )
                )
                self.repo.add_details(
                    OrderDetailModel(
                        order_id=order.order_id,
                        product_id=line.product_id,
                        product_name=line.name,
                        attributes=line.attributes,
                        quantity=line.quantity,
                        unit_cost=priced.unit_price,
                    )
                    for line, priced in zip(lines, pricing.lines)
                )
                order_id = order.order_id
        finally:
            release_quietly(self.lock_service, lock_key, owner)

        logger.info(
            f"Order {order_id} created from cart {cart_id} for customer {customer_id}, "
            f"{len(lines)} items, total {pricing.total}"
        )
        return order_id

    def get_customer_orders(self, customer_id: int) -> List[Dict[str, Any]]:
        """
        Use Case: orders of the logged in customer (Query).
        """
        return [
            {
                "order_id": o.order_id,
                "total_amount": o.total_amount,
                "status": o.status,
                "created_on": o.created_on,
                "shipped_on": o.shipped_on,
                "name": o.customer.name if o.customer else None,
            }
            for o in self.repo.get_customer_orders(customer_id)
        ]

    def get_order_summary(self, order_id: int, customer_id: int) -> Dict[str, Any]:
        """
        Use Case: line items of one order (Query).
        Orders of other customers look like missing ones.
        """
        order = self.repo.get_order_with_items(order_id)

        if not order or order.customer_id != customer_id:
            raise NotFoundError(f"Order {order_id} does not exist")

        return {
            "order_id": order.order_id,
            "total_amount": order.total_amount,
            "status": order.status,
            "orderItems": [
                {
                    "product_id": d.product_id,
                    "product_name": d.product_name,
                    "attributes": d.attributes,
                    "quantity": d.quantity,
                    "unit_cost": d.unit_cost,
                    "subtotal": round2(d.unit_cost * d.quantity),
                }
                for d in order.items
            ],
        }
