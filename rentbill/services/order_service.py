"""
Order Service - Transactional order ingestion and order lookups
"""
import logging
from datetime import date
from decimal import Decimal, ROUND_HALF_UP
from typing import List, Optional
from uuid import uuid4

from sqlalchemy.orm import Session

from rentbill.core import BillingError, ValidationError, NotFound, PersistenceError
from rentbill.models import Customer, Order, OrderItem
from rentbill.schemas.order import OrderCreate, OrderCreateResult
from .customer_service import CustomerService, require_identity

logger = logging.getLogger(__name__)

# Money columns are Numeric(12, 2)
CENTS = Decimal("0.01")

class OrderService:
    """Order business logic"""
    
    @staticmethod
    def validate(order_data: OrderCreate) -> None:
        """Reject checkouts missing customer details or line items"""
        require_identity(order_data.name, order_data.phone, order_data.address)
        if not order_data.items:
            raise ValidationError("no items")
    
    @staticmethod
    def create_order(db: Session, order_data: OrderCreate) -> OrderCreateResult:
        """
        Create customer (or update it), order header and items in one transaction.
        
        The order is inserted with a zero total, items are added in the order
        given, then the total is back-filled before commit. Any failure rolls
        the whole unit back.
        """
        OrderService.validate(order_data)
        return OrderService._persist(db, order_data, order_data.order_date, update_customer=True)
    
    @staticmethod
    def generate_bill(db: Session, order_data: OrderCreate) -> OrderCreateResult:
        """
        Manual bill: same transaction as create_order, but an existing
        customer keeps their stored details and the bill is dated today.
        """
        OrderService.validate(order_data)
        return OrderService._persist(db, order_data, None, update_customer=False)
    
    @staticmethod
    def _persist(
        db: Session,
        order_data: OrderCreate,
        order_date: Optional[date],
        update_customer: bool
    ) -> OrderCreateResult:
        try:
            customer_id = CustomerService.resolve(
                db,
                name=order_data.name,
                phone=order_data.phone,
                alt_phone=order_data.alt_phone,
                address=order_data.address,
                update_existing=update_customer
            )
            
            order = Order(
                invoice_no=str(uuid4()),
                customer_id=customer_id,
                order_date=order_date or date.today(),
                rent_start=order_data.rent_start,
                rent_end=order_data.rent_end,
                total=Decimal("0")
            )
            db.add(order)
            db.flush()
            
            total = Decimal("0")
            for item_data in order_data.items:
                price = Decimal(item_data.price).quantize(CENTS, rounding=ROUND_HALF_UP)
                quantity = int(item_data.quantity)
                line_total = price * quantity
                if not line_total.is_finite():
                    raise ValueError(f"line total for {item_data.product!r} is not a finite number")
                
                db.add(OrderItem(
                    order_id=order.id,
                    product=item_data.product,
                    price=price,
                    quantity=quantity,
                    line_total=line_total
                ))
                total += line_total
            db.flush()
            
            order.total = total
            order_id, invoice_no = order.id, order.invoice_no
            db.commit()
        except BillingError:
            db.rollback()
            raise
        except Exception as e:
            db.rollback()
            logger.error(f"Order creation failed for phone {order_data.phone}: {e}")
            raise PersistenceError(str(e)) from e
        
        logger.info(f"Created order {order_id} ({invoice_no}) for customer {customer_id}, total {total}")
        
        return OrderCreateResult(
            customer_id=customer_id,
            order_id=order_id,
            invoice_no=invoice_no,
            total=total
        )
    
    @staticmethod
    def get_customer_orders(db: Session, customer_id: int) -> List[Order]:
        """Orders of one customer, newest first"""
        return db.query(Order).filter(Order.customer_id == customer_id)\
            .order_by(Order.id.desc())\
            .all()
    
    @staticmethod
    def get_order_full_details(db: Session, order_id: int) -> Order:
        """Order with its customer and items loaded"""
        order = db.query(Order).join(Customer, Customer.id == Order.customer_id)\
            .filter(Order.id == order_id)\
            .first()
        if not order:
            raise NotFound("order not found")
        return order
