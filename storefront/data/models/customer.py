from sqlalchemy import Column, Integer, String
from storefront.data.database import Base

class CustomerModel(Base):
    __tablename__ = "customers"
    customer_id = Column(Integer, primary_key=True)
    name = Column(String(50), nullable=False)
    email = Column(String(100), nullable=False, unique=True)
