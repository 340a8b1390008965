"""
API Router - JSON Endpoints
"""
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import Optional

from rentbill.core import get_db
from rentbill.models import Customer, Order, OrderItem
from rentbill.schemas.order import OrderCreate, OrderCreateResult
from rentbill.services import CustomerService, OrderService

# Import sub-routers
from rentbill.api.invoices import invoice_router

api_router = APIRouter(tags=["API"])

# Include sub-routers
api_router.include_router(invoice_router)


def customer_to_dict(customer: Customer) -> dict:
    return {
        "id": customer.id,
        "name": customer.name,
        "phone": customer.phone,
        "alt_phone": customer.alt_phone,
        "address": customer.address,
    }


def order_to_dict(order: Order) -> dict:
    return {
        "id": order.id,
        "invoice_no": order.invoice_no,
        "customer_id": order.customer_id,
        "order_date": order.order_date.isoformat() if order.order_date else None,
        "rent_start": order.rent_start.isoformat() if order.rent_start else None,
        "rent_end": order.rent_end.isoformat() if order.rent_end else None,
        "total": float(order.total or 0),
    }


def item_to_dict(item: OrderItem) -> dict:
    return {
        "id": item.id,
        "order_id": item.order_id,
        "product": item.product,
        "price": float(item.price or 0),
        "quantity": item.quantity,
        "line_total": float(item.line_total or 0),
    }


def created_to_dict(result: OrderCreateResult) -> dict:
    return {
        "success": True,
        "customerId": result.customer_id,
        "orderId": result.order_id,
        "invoiceNo": result.invoice_no,
        "total": float(result.total),
    }

# ===================== ORDERS =====================

@api_router.post("/new-customer")
def create_order(order_data: OrderCreate, db: Session = Depends(get_db)):
    """Register (or update) the customer and record their rental order"""
    return created_to_dict(OrderService.create_order(db, order_data))

@api_router.post("/generate-bill")
def generate_bill(order_data: OrderCreate, db: Session = Depends(get_db)):
    """Manual bill dated today; existing customer details are left as stored"""
    return created_to_dict(OrderService.generate_bill(db, order_data))

@api_router.get("/order-full-details")
def get_order_full_details(order_id: int = Query(..., alias="orderId"), db: Session = Depends(get_db)):
    order = OrderService.get_order_full_details(db, order_id)
    customer = order.customer
    
    return {
        "success": True,
        "order": {
            **order_to_dict(order),
            "cname": customer.name,
            "cphone": customer.phone,
            "caltphone": customer.alt_phone,
            "caddress": customer.address,
        },
        "items": [item_to_dict(item) for item in order.items],
    }

# ===================== CUSTOMERS =====================

@api_router.get("/customers")
def search_customers(q: Optional[str] = Query(None), db: Session = Depends(get_db)):
    customers = CustomerService.search_customers(db, q)
    return {"success": True, "rows": [customer_to_dict(c) for c in customers]}

@api_router.get("/customer-details")
def get_customer_details(customer_id: int = Query(..., alias="id"), db: Session = Depends(get_db)):
    customer = CustomerService.get_customer(db, customer_id)
    
    return {
        "success": True,
        "customer": customer_to_dict(customer),
        "orderDetails": [
            {
                "order": order_to_dict(order),
                "items": [item_to_dict(item) for item in order.items],
            }
            for order in customer.orders
        ],
    }

@api_router.get("/customer-orders")
def get_customer_orders(customer_id: int = Query(..., alias="id"), db: Session = Depends(get_db)):
    orders = OrderService.get_customer_orders(db, customer_id)
    return {
        "success": True,
        "rows": [
            {
                "id": o.id,
                "order_date": o.order_date.isoformat() if o.order_date else None,
                "rent_start": o.rent_start.isoformat() if o.rent_start else None,
                "rent_end": o.rent_end.isoformat() if o.rent_end else None,
                "total": float(o.total or 0),
            }
            for o in orders
        ],
    }
