from sqlalchemy import Column, Integer, String, Numeric
from storefront.data.database import Base

class ProductModel(Base):
    __tablename__ = "products"
    product_id = Column(Integer, primary_key=True)
    name = Column(String(100), nullable=False)
    price = Column(Numeric(10, 2), nullable=False)
    # 0.00 = no discount
    discounted_price = Column(Numeric(10, 2), nullable=False, default=0)
