# storefront/domain/schemas.py
from pydantic import BaseModel, Field, ConfigDict
from typing import List
from decimal import Decimal
from datetime import datetime


class CartIdOut(BaseModel):
    cart_id: str


class CartItemIn(BaseModel):
    """Schema for adding a product to a cart."""

    cart_id: str = Field(..., min_length=1, max_length=32)
    product_id: int = Field(..., gt=0, description="Product id (> 0)")
    attributes: str = Field("", max_length=1000, description="Free-form, e.g. 'blue, XL'")
    quantity: int = Field(..., gt=0, description="Quantity (> 0)")


class QuantityIn(BaseModel):
    quantity: int = Field(..., gt=0, description="Quantity (> 0)")


class CartItemOut(BaseModel):
    item_id: int
    cart_id: str
    product_id: int
    attributes: str
    quantity: int


class CartLineOut(BaseModel):
    """Cart line with current product pricing (response)."""

    item_id: int
    cart_id: str
    name: str
    attributes: str
    product_id: int
    price: Decimal
    discounted_price: Decimal
    quantity: int
    subtotal: Decimal


class LinePricingOut(BaseModel):
    item_id: int
    product_id: int
    quantity: int
    unit_price: Decimal
    subtotal: Decimal

    model_config = ConfigDict(from_attributes=True)


class CartPricingOut(BaseModel):
    subtotal: Decimal
    shipping_cost: Decimal
    tax_percentage: Decimal
    tax_amount: Decimal
    total: Decimal
    lines: List[LinePricingOut]

    model_config = ConfigDict(from_attributes=True)


class MessageOut(BaseModel):
    message: str


class OrderCreate(BaseModel):
    cart_id: str = Field(..., min_length=1, max_length=32)
    shipping_id: int = Field(..., gt=0)
    tax_id: int = Field(..., gt=0)


class OrderIdOut(BaseModel):
    order_id: int


class CustomerOrderOut(BaseModel):
    order_id: int
    total_amount: Decimal
    status: int
    created_on: datetime
    shipped_on: datetime | None = None
    name: str | None = None


class OrderItemOut(BaseModel):
    product_id: int
    product_name: str
    attributes: str
    quantity: int
    unit_cost: Decimal
    subtotal: Decimal


class OrderSummaryOut(BaseModel):
    order_id: int
    total_amount: Decimal
    status: int
    orderItems: List[OrderItemOut]


class ChargeIn(BaseModel):
    """Schema for settling an order with a Stripe card token."""

    order_id: int = Field(..., gt=0)
    stripeToken: str = Field(..., min_length=1)
    email: str = Field(..., min_length=3, max_length=100)
    description: str | None = Field(None, max_length=255)


class SettlementOut(BaseModel):
    order_id: int
    outcome: str
    amount: Decimal
    charge_id: str | None = None
    message: str


class TaxOut(BaseModel):
    tax_id: int
    tax_type: str
    tax_percentage: Decimal

    model_config = ConfigDict(from_attributes=True)
