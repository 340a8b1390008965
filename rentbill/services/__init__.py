# Services Package
from .customer_service import CustomerService
from .order_service import OrderService
from .invoice_service import InvoiceService, InvoiceRenderer

__all__ = [
    "CustomerService",
    "OrderService",
    "InvoiceService",
    "InvoiceRenderer",
]
