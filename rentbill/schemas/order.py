"""
Order Schemas
"""
from pydantic import BaseModel, Field, field_validator
from typing import Optional, List
from datetime import date
from decimal import Decimal

class OrderItemCreate(BaseModel):
    product: str = Field(..., min_length=1)
    price: Decimal = Field(Decimal("0"), ge=0)
    quantity: int = Field(1, ge=1)

    class Config:
        frozen = True
        str_strip_whitespace = True

class OrderCreate(BaseModel):
    """Checkout payload: customer details, rental dates and line items.

    name, phone and address are left optional here; the order service
    reports them as missing so the caller gets one domain error instead of
    a field-by-field schema error.
    """
    name: Optional[str] = None
    phone: Optional[str] = None
    alt_phone: Optional[str] = None
    address: Optional[str] = None
    
    order_date: Optional[date] = None
    rent_start: Optional[date] = None
    rent_end: Optional[date] = None
    
    items: List[OrderItemCreate] = []

    class Config:
        frozen = True
        str_strip_whitespace = True

    @field_validator("alt_phone", "order_date", "rent_start", "rent_end", mode="before")
    @classmethod
    def blank_to_none(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value

class OrderCreateResult(BaseModel):
    customer_id: int
    order_id: int
    invoice_no: str
    total: Decimal

class BatchInvoiceRequest(BaseModel):
    order_ids: List[int] = Field(..., min_length=1)
