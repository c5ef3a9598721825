"""Smoke test for core business flows."""

from __future__ import annotations

import tempfile
from datetime import date, timedelta
from pathlib import Path
import sys

ROOT_DIR = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT_DIR / "src"))

from dress_rental.db.connection import get_connection  # noqa: E402
from dress_rental.db.migrations import apply_migrations  # noqa: E402
from dress_rental.domain.models import AvailabilityStatus, PaymentMethod  # noqa: E402
from dress_rental.services.auth_service import AuthService  # noqa: E402
from dress_rental.services.customer_service import CustomerService  # noqa: E402
from dress_rental.services.dress_service import DressService  # noqa: E402
from dress_rental.services.errors import ValidationError  # noqa: E402
from dress_rental.services.payment_service import PaymentService  # noqa: E402
from dress_rental.services.rental_service import RentalService  # noqa: E402
from dress_rental.services.report_service import ReportService  # noqa: E402


def main() -> None:
    with tempfile.TemporaryDirectory() as temp_dir:
        temp_path = Path(temp_dir)
        db_path = temp_path / "smoke_test.db"
        connection = get_connection(db_path)
        try:
            apply_migrations(connection)

            auth_service = AuthService(connection)
            auth_service.ensure_default_admin()
            session = auth_service.login("admin", "admin123")

            customer_service = CustomerService(connection)
            dress_service = DressService(connection)
            rental_service = RentalService(connection)
            payment_service = PaymentService(connection)
            report_service = ReportService(connection)

            customer = customer_service.create_customer(
                name="Smoke Customer",
                ic_number="900101-14-5678",
                date_of_birth="1990-01-01",
                phone="012-345 6789",
                email="smoke@example.com",
            )
            gown = dress_service.create_dress(
                name="Smoke Gown",
                rental_price=50.0,
                category="Evening",
                size="M",
                color="Black",
            )

            today = date.today()
            rental_date = today - timedelta(days=6)
            rental = rental_service.create_rental(customer.id, rental_date, 4, [gown.id])
            assert rental.total_amount == 200.0
            assert dress_service.get_dress(gown.id).availability_status == AvailabilityStatus.RENTED

            try:
                rental_service.create_rental(customer.id, rental_date, 2, [gown.id])
            except ValidationError:
                pass
            else:
                raise AssertionError("A rented dress was booked twice")

            result = rental_service.return_rental(rental.id, today)
            assert result.late_fee == 20.0
            assert result.amount_due == 220.0
            assert dress_service.get_dress(gown.id).availability_status == AvailabilityStatus.AVAILABLE
            assert rental_service.return_rental(rental.id, today).already_returned

            payment = payment_service.create_payment(
                rental.id, 220.0, PaymentMethod.CASH, today, "SMOKE-1"
            )
            assert payment_service.is_rental_paid(rental.id)
            receipt = payment_service.generate_receipt(payment.id, temp_path)
            assert receipt.exists()

            report_service.dashboard(today)
            report_service.income_statement(today - timedelta(days=30), today)
            report_service.overdue_items(today)
            auth_service.logout(session)
        finally:
            connection.close()

    print("OK")


if __name__ == "__main__":
    main()
