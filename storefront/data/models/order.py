from enum import IntEnum
from datetime import datetime, timezone

from sqlalchemy import Column, Integer, ForeignKey, String, DateTime, Numeric
from sqlalchemy.orm import relationship

from storefront.data.database import Base


class OrderStatus(IntEnum):
    UNPAID = 0
    PAID = 1
    CHARGING = 2


class OrderModel(Base):
    __tablename__ = "orders"

    order_id = Column(Integer, primary_key=True)
    customer_id = Column(Integer, ForeignKey("customers.customer_id"), nullable=False, index=True)
    shipping_id = Column(Integer, ForeignKey("shipping.shipping_id"), nullable=False)
    tax_id = Column(Integer, ForeignKey("tax.tax_id"), nullable=False)

    total_amount = Column(Numeric(10, 2), nullable=False)
    status = Column(Integer, nullable=False, default=OrderStatus.UNPAID)
    created_on = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
    shipped_on = Column(DateTime(timezone=True), nullable=True)

    # gateway charge id / status, filled in on settlement
    reference = Column(String(50), nullable=True)
    auth_code = Column(String(50), nullable=True)
    # last decline reason, cleared once paid
    comments = Column(String(255), nullable=True)

    # set while charging, the same key and card token are replayed until the
    # order is paid or the charge is declined
    charge_key = Column(String(64), nullable=True)
    charge_source = Column(String(255), nullable=True)

    customer = relationship("CustomerModel")
    items = relationship("OrderDetailModel", back_populates="order", order_by="OrderDetailModel.item_id")
