from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, ForeignKey, Boolean, DateTime

from storefront.data.database import Base


class CartItemModel(Base):
    __tablename__ = "shopping_cart"

    item_id = Column(Integer, primary_key=True)
    cart_id = Column(String(32), nullable=False, index=True)
    product_id = Column(Integer, ForeignKey("products.product_id"), nullable=False)

    attributes = Column(String(1000), nullable=False, default="")
    quantity = Column(Integer, nullable=False)
    buy_now = Column(Boolean, nullable=False, default=True)
    added_on = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
