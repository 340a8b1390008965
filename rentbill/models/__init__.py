from .base import IntegerPKMixin
from .customer import Customer
from .order import Order, OrderItem

__all__ = [
    # Base
    "IntegerPKMixin",
    # Customer
    "Customer",
    # Order
    "Order", "OrderItem",
]
