# Pydantic Schemas Package
from .order import OrderCreate, OrderItemCreate, OrderCreateResult, BatchInvoiceRequest

__all__ = [
    "OrderCreate", "OrderItemCreate", "OrderCreateResult", "BatchInvoiceRequest",
]
