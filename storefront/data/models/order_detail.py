from sqlalchemy import Column, Integer, ForeignKey, String, Numeric
from sqlalchemy.orm import relationship

from storefront.data.database import Base


class OrderDetailModel(Base):
    __tablename__ = "order_detail"

    item_id = Column(Integer, primary_key=True)
    order_id = Column(Integer, ForeignKey("orders.order_id"), nullable=False, index=True)
    product_id = Column(Integer, nullable=False)

    product_name = Column(String(100), nullable=False)
    attributes = Column(String(1000), nullable=False, default="")
    quantity = Column(Integer, nullable=False)
    # price actually charged, not the live product price
    unit_cost = Column(Numeric(10, 2), nullable=False)

    order = relationship("OrderModel", back_populates="items")
