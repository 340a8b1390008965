"""
Customer Service - Identity resolution and customer lookups
"""
import logging
from typing import List, Optional

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from rentbill.core import NotFound, ValidationError
from rentbill.models import Customer

logger = logging.getLogger(__name__)


def require_identity(name: Optional[str], phone: Optional[str], address: Optional[str]) -> None:
    """Name, phone and address must all be non-blank"""
    if not all(value and value.strip() for value in (name, phone, address)):
        raise ValidationError("missing required fields")


class CustomerService:
    """Customer business logic"""
    
    @staticmethod
    def get_by_phone(db: Session, phone: str) -> Optional[Customer]:
        return db.query(Customer).filter(Customer.phone == phone).first()
    
    @staticmethod
    def resolve(
        db: Session,
        name: str,
        phone: str,
        alt_phone: Optional[str],
        address: str,
        update_existing: bool = True
    ) -> int:
        """
        Find the customer owning this phone number or create one.
        
        Runs inside the caller's transaction and never commits. An existing
        customer gets name, alt_phone and address overwritten when
        update_existing is set.
        """
        require_identity(name, phone, address)
        
        customer = CustomerService.get_by_phone(db, phone)
        
        if customer is None:
            customer = Customer(name=name, phone=phone, alt_phone=alt_phone, address=address)
            try:
                with db.begin_nested():
                    db.add(customer)
                logger.info(f"Created customer {customer.id} for phone {phone}")
                return customer.id
            except IntegrityError:
                # A concurrent checkout committed this phone first
                logger.warning(f"Phone {phone} was registered concurrently, reusing existing customer")
                customer = CustomerService.get_by_phone(db, phone)
                if customer is None:
                    raise
        
        if update_existing:
            customer.name = name
            customer.alt_phone = alt_phone
            customer.address = address
            db.flush()
        
        return customer.id
    
    @staticmethod
    def search_customers(db: Session, search: Optional[str] = None) -> List[Customer]:
        """Customers whose name or phone contains the search text, newest first"""
        query = db.query(Customer)
        
        if search:
            search_term = f"%{search}%"
            query = query.filter(
                or_(
                    Customer.name.ilike(search_term),
                    Customer.phone.ilike(search_term)
                )
            )
        
        return query.order_by(Customer.id.desc()).all()
    
    @staticmethod
    def get_customer(db: Session, customer_id: int) -> Customer:
        customer = db.query(Customer).filter(Customer.id == customer_id).first()
        if not customer:
            raise NotFound("customer not found")
        return customer
    
