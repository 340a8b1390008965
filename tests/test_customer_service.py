"""Tests for customer identity resolution and customer lookups."""

import pytest
from sqlalchemy.exc import IntegrityError

from rentbill.core import NotFound, ValidationError
from rentbill.models import Customer
from rentbill.services import CustomerService, OrderService
from factories import make_order


class TestResolve:

    def test_creates_customer_for_new_phone(self, db):
        customer_id = CustomerService.resolve(db, "A", "111", None, "X")
        db.commit()

        customer = db.query(Customer).one()
        assert customer.id == customer_id
        assert (customer.name, customer.phone, customer.alt_phone, customer.address) == ("A", "111", None, "X")

    def test_same_phone_last_write_wins(self, db):
        first = CustomerService.resolve(db, "A", "111", "222", "X")
        second = CustomerService.resolve(db, "A", "111", None, "Y")
        db.commit()

        assert first == second
        customer = db.query(Customer).one()
        assert customer.address == "Y"
        assert customer.alt_phone is None

    def test_without_update_keeps_stored_details(self, db):
        first = CustomerService.resolve(db, "A", "111", None, "X")
        second = CustomerService.resolve(db, "B", "111", None, "Y", update_existing=False)

        assert first == second
        assert db.query(Customer).one().address == "X"

    def test_does_not_commit(self, db):
        CustomerService.resolve(db, "A", "111", None, "X")
        db.rollback()
        assert db.query(Customer).count() == 0

    @pytest.mark.parametrize("name, phone, address", [
        ("", "", ""),
        ("A", "111", "  "),
        ("A", None, "X"),
    ])
    def test_rejects_blank_identity(self, db, name, phone, address):
        with pytest.raises(ValidationError, match="missing required fields"):
            CustomerService.resolve(db, name, phone, None, address)
        assert db.query(Customer).count() == 0

    def test_phone_is_unique_in_store(self, db):
        db.add(Customer(name="A", phone="111", address="X"))
        db.flush()
        db.add(Customer(name="B", phone="111", address="Y"))
        with pytest.raises(IntegrityError):
            db.flush()
        db.rollback()

    def test_concurrent_registration_reuses_winner(self, db, monkeypatch):
        db.add(Customer(name="Winner", phone="111", address="W"))
        db.commit()
        winner_id = db.query(Customer).one().id

        # The first lookup misses the row, as if the other transaction
        # committed just after it ran.
        real_lookup = CustomerService.get_by_phone
        calls = []

        def stale_lookup(session, phone):
            calls.append(phone)
            if len(calls) == 1:
                return None
            return real_lookup(session, phone)

        monkeypatch.setattr(CustomerService, "get_by_phone", staticmethod(stale_lookup))

        customer_id = CustomerService.resolve(db, "A", "111", None, "X")
        db.commit()

        assert customer_id == winner_id
        assert db.query(Customer).count() == 1
        assert db.query(Customer).one().address == "X"


class TestLookups:

    def test_search_matches_name_or_phone_newest_first(self, db):
        OrderService.create_order(db, make_order(name="Ravi", phone="9000011111"))
        OrderService.create_order(db, make_order(name="Suma", phone="9000022222"))
        OrderService.create_order(db, make_order(name="Anil", phone="8000033333"))

        assert [c.name for c in CustomerService.search_customers(db, "9000")] == ["Suma", "Ravi"]
        assert [c.name for c in CustomerService.search_customers(db, "ravi")] == ["Ravi"]
        assert len(CustomerService.search_customers(db)) == 3

    def test_get_customer_with_orders(self, db):
        first = OrderService.create_order(db, make_order())
        second = OrderService.create_order(db, make_order(items=[{"product": "Mat", "price": 30, "quantity": 1}]))

        customer = CustomerService.get_customer(db, first.customer_id)
        assert [o.id for o in customer.orders] == [second.order_id, first.order_id]

    def test_unknown_customer(self, db):
        with pytest.raises(NotFound):
            CustomerService.get_customer(db, 42)
