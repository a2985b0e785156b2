from sqlalchemy import Column, Integer, String, Numeric
from storefront.data.database import Base

class ShippingModel(Base):
    __tablename__ = "shipping"
    shipping_id = Column(Integer, primary_key=True)
    shipping_type = Column(String(100), nullable=False)
    shipping_cost = Column(Numeric(10, 2), nullable=False)

class TaxModel(Base):
    __tablename__ = "tax"
    tax_id = Column(Integer, primary_key=True)
    tax_type = Column(String(100), nullable=False)
    tax_percentage = Column(Numeric(10, 2), nullable=False)
