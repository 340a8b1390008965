"""
Order Models
"""
from sqlalchemy import Column, String, Numeric, Integer, Date, ForeignKey, Text
from sqlalchemy.orm import relationship
from rentbill.core import Base
from .base import IntegerPKMixin

class Order(Base, IntegerPKMixin):
    """Rental order header"""
    __tablename__ = "orders"
    
    invoice_no = Column(String(36), nullable=False, unique=True)
    customer_id = Column(Integer, ForeignKey("customers.id"), nullable=False, index=True)
    
    # Dates
    order_date = Column(Date, nullable=False)
    rent_start = Column(Date)
    rent_end = Column(Date)
    
    # Derived from items, written inside the creating transaction
    total = Column(Numeric(12, 2), nullable=False, default=0)
    
    # Relationships
    customer = relationship("Customer", back_populates="orders")
    items = relationship("OrderItem", back_populates="order", order_by="OrderItem.id")

class OrderItem(Base, IntegerPKMixin):
    """Order Item/Line"""
    __tablename__ = "order_items"
    
    order_id = Column(Integer, ForeignKey("orders.id"), nullable=False, index=True)
    
    product = Column(Text, nullable=False)
    price = Column(Numeric(12, 2), nullable=False, default=0)
    quantity = Column(Integer, nullable=False, default=1)
    
    # price * quantity at write time
    line_total = Column(Numeric(12, 2), nullable=False, default=0)
    
    # Relationships
    order = relationship("Order", back_populates="items")
