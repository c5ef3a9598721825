"""Shared fixtures: an in-memory database and entity factories."""

from datetime import date

import pytest

from dress_rental.db.connection import get_connection
from dress_rental.db.migrations import apply_migrations
from dress_rental.services.customer_service import CustomerService
from dress_rental.services.dress_service import DressService
from dress_rental.services.payment_service import PaymentService
from dress_rental.services.rental_service import RentalService

TODAY = date(2024, 6, 15)


@pytest.fixture
def connection():
    conn = get_connection(":memory:")
    apply_migrations(conn)
    yield conn
    conn.close()


@pytest.fixture
def customer_service(connection):
    return CustomerService(connection)


@pytest.fixture
def dress_service(connection):
    return DressService(connection)


@pytest.fixture
def rental_service(connection):
    return RentalService(connection)


@pytest.fixture
def payment_service(connection):
    return PaymentService(connection)


@pytest.fixture
def make_customer(customer_service):
    counter = iter(range(1000, 10000))

    def _make(name="Aisyah Tan", date_of_birth="1990-01-01"):
        return customer_service.create_customer(
            name=name,
            ic_number=f"900101-14-{next(counter):04d}",
            date_of_birth=date_of_birth,
            phone="012-345 6789",
            email=f"{name.lower().replace(' ', '.')}@example.com",
        )

    return _make


@pytest.fixture
def make_dress(dress_service):
    def _make(name="Ivory Lace Gown", rental_price=50.0, category="Wedding"):
        return dress_service.create_dress(
            name=name,
            rental_price=rental_price,
            category=category,
            size="M",
            color="Ivory",
        )

    return _make
