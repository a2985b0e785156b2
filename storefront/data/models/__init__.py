# import all models so SQLAlchemy registers them in Base.metadata

from storefront.data.models.customer import CustomerModel
from storefront.data.models.product import ProductModel
from storefront.data.models.cart_item import CartItemModel
from storefront.data.models.reference import ShippingModel, TaxModel
from storefront.data.models.order import OrderModel, OrderStatus
from storefront.data.models.order_detail import OrderDetailModel

__all__ = [
    "CustomerModel",
    "ProductModel",
    "CartItemModel",
    "ShippingModel",
    "TaxModel",
    "OrderModel",
    "OrderStatus",
    "OrderDetailModel",
]
