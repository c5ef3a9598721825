"""Payments against rentals and receipt generation."""

import pytest

from dress_rental.domain.models import PaymentMethod, PaymentStatus
from dress_rental.services.errors import NotFoundError, ValidationError
from dress_rental.utils.pdf_generator import format_currency, format_date


@pytest.fixture
def rental(rental_service, make_customer, make_dress):
    return rental_service.create_rental(
        make_customer().id, "2024-06-01", 4, [make_dress(rental_price=50.0).id]
    )


class TestCreatePayment:
    def test_partial_then_full(self, payment_service, rental):
        payment_service.create_payment(rental.id, 80.0, "Cash", "2024-06-01")
        assert payment_service.balance_due(rental.id) == 120.0
        assert not payment_service.is_rental_paid(rental.id)

        payment_service.create_payment(rental.id, 120.0, PaymentMethod.ONLINE, "2024-06-02", " TX-9 ")
        assert payment_service.is_rental_paid(rental.id)
        assert payment_service.balance_due(rental.id) == 0
        payments = payment_service.list_by_rental(rental.id)
        assert len(payments) == 2
        assert {p.transaction_reference for p in payments} == {None, "TX-9"}

    def test_late_fee_is_part_of_amount_due(self, payment_service, rental_service, rental):
        payment_service.create_payment(rental.id, 200.0, "Debit Card", "2024-06-01")
        rental_service.return_rental(rental.id, "2024-06-07")
        assert not payment_service.is_rental_paid(rental.id)
        assert payment_service.balance_due(rental.id) == 20.0

    @pytest.mark.parametrize("amount", [0, -10])
    def test_amount_must_be_positive(self, payment_service, rental, amount):
        with pytest.raises(ValidationError):
            payment_service.create_payment(rental.id, amount, "Cash")

    def test_unknown_method(self, payment_service, rental):
        with pytest.raises(ValidationError, match="Invalid payment method"):
            payment_service.create_payment(rental.id, 10.0, "Cheque")

    def test_bad_date(self, payment_service, rental):
        with pytest.raises(ValidationError):
            payment_service.create_payment(rental.id, 10.0, "Cash", "01/06/2024")

    def test_unknown_rental(self, payment_service):
        with pytest.raises(NotFoundError):
            payment_service.create_payment(77, 10.0, "Cash", "2024-06-01")


class TestStatus:
    def test_refund_removes_from_paid_total(self, payment_service, rental):
        payment = payment_service.create_payment(rental.id, 200.0, "Cash", "2024-06-01")
        assert payment.status == PaymentStatus.COMPLETED

        refunded = payment_service.update_status(payment.id, "Refunded")
        assert refunded.status == PaymentStatus.REFUNDED
        assert payment_service.get_total_paid(rental.id) == 0

    def test_invalid_status(self, payment_service, rental):
        payment = payment_service.create_payment(rental.id, 20.0, "Cash", "2024-06-01")
        with pytest.raises(ValidationError):
            payment_service.update_status(payment.id, "Lost")


class TestReceipt:
    def test_receipt_written(self, payment_service, rental, tmp_path):
        payment = payment_service.create_payment(rental.id, 200.0, "Cash", "2024-06-01")
        path = payment_service.generate_receipt(payment.id, tmp_path / "receipts")
        assert path.name == f"receipt_{payment.id}_rental_{rental.id}.pdf"
        assert path.read_bytes().startswith(b"%PDF")

    def test_formatting(self):
        assert format_currency(1234.5) == "RM 1,234.50"
        assert format_date("2024-06-01") == "01/06/2024"
        assert format_date(None) == "-"
