"""
Customer Models
"""
from sqlalchemy import Column, String, Text, UniqueConstraint
from sqlalchemy.orm import relationship
from rentbill.core import Base
from .base import IntegerPKMixin

class Customer(Base, IntegerPKMixin):
    """Rental customer, identified by phone number"""
    __tablename__ = "customers"
    
    name = Column(String(200), nullable=False)
    phone = Column(String(20), nullable=False)
    alt_phone = Column(String(20))
    address = Column(Text, nullable=False)
    
    # Relationships
    orders = relationship("Order", back_populates="customer", order_by="Order.id.desc()")
    
    __table_args__ = (
        UniqueConstraint("phone", name="uq_customers_phone"),
    )
