"""Payment service for business rules."""

from __future__ import annotations

import sqlite3
from datetime import date
from pathlib import Path
from typing import Optional

from dress_rental.domain.models import Payment, PaymentMethod, PaymentStatus
from dress_rental.logging_config import get_logger
from dress_rental.repositories import CustomerRepo, DressRepo, rental_repo
from dress_rental.repositories.payment_repo import PaymentRepository
from dress_rental.services.dates import parse_date
from dress_rental.services.errors import (
    NotFoundError,
    PersistenceError,
    ValidationError,
)
from dress_rental.services.rules import is_valid_payment_method
from dress_rental.utils.pdf_generator import generate_receipt_pdf


class PaymentService:
    """Service for payment operations."""

    def __init__(self, connection: sqlite3.Connection) -> None:
        self._connection = connection
        self._connection.row_factory = sqlite3.Row
        self._repo = PaymentRepository(connection)
        self._customer_repo = CustomerRepo(connection)
        self._dress_repo = DressRepo(connection)
        self._logger = get_logger(self.__class__.__name__)

    def list_by_rental(self, rental_id: int) -> list[Payment]:
        return self._repo.list_by_rental(rental_id)

    def list_all(self) -> list[Payment]:
        return self._repo.list_all()

    def get_payment(self, payment_id: int) -> Payment:
        payment = self._repo.get_by_id(payment_id)
        if payment is None:
            raise NotFoundError(f"Payment {payment_id} not found.")
        return payment

    def get_total_paid(self, rental_id: int) -> float:
        return self._repo.get_paid_total(rental_id)

    def balance_due(self, rental_id: int) -> float:
        rental = self._get_rental(rental_id)
        return max(0.0, rental.amount_due - self.get_total_paid(rental_id))

    def is_rental_paid(self, rental_id: int) -> bool:
        """True once completed payments cover the rental total plus late fee."""
        rental = self._get_rental(rental_id)
        return self.get_total_paid(rental_id) >= rental.amount_due

    def create_payment(
        self,
        rental_id: int,
        amount: float,
        payment_method: PaymentMethod | str,
        payment_date: Optional[date | str] = None,
        transaction_reference: Optional[str] = None,
    ) -> Payment:
        if not is_valid_payment_method(payment_method):
            methods = ", ".join(method.value for method in PaymentMethod)
            raise ValidationError(f"Invalid payment method. Use: {methods}.")
        if amount <= 0:
            raise ValidationError("Payment amount must be greater than zero.")
        try:
            paid_on = parse_date(payment_date or date.today())
        except ValueError as exc:
            raise ValidationError(
                "Invalid payment date. Please use the YYYY-MM-DD format."
            ) from exc
        self._get_rental(rental_id)

        reference = (transaction_reference or "").strip() or None
        try:
            payment = self._repo.create(
                rental_id,
                float(amount),
                PaymentMethod(payment_method),
                paid_on.isoformat(),
                reference,
            )
        except sqlite3.Error as exc:
            raise PersistenceError("The payment could not be saved.") from exc
        self._logger.info(
            "Recorded payment id=%s rental_id=%s amount=%.2f method=%s",
            payment.id,
            rental_id,
            payment.amount,
            payment.payment_method.value,
        )
        return payment

    def update_status(self, payment_id: int, status: PaymentStatus | str) -> Payment:
        try:
            new_status = PaymentStatus(status)
        except ValueError as exc:
            raise ValidationError(f"Invalid payment status: {status}.") from exc
        self.get_payment(payment_id)
        try:
            self._repo.update_status(payment_id, new_status)
        except sqlite3.Error as exc:
            raise PersistenceError("The payment status could not be saved.") from exc
        return self.get_payment(payment_id)

    def generate_receipt(self, payment_id: int, output_dir: Path) -> Path:
        """Write a receipt PDF for the payment into ``output_dir``."""
        payment = self.get_payment(payment_id)
        rental_data = rental_repo.get_rental_with_items(
            payment.rental_id, connection=self._connection
        )
        if not rental_data:
            raise NotFoundError(f"Rental {payment.rental_id} not found.")
        rental, items = rental_data
        customer = self._customer_repo.get_by_id(rental.customer_id)
        lines = []
        for item in items:
            dress = self._dress_repo.get_by_id(item.dress_id)
            lines.append((item, dress.name if dress else ""))
        output_path = output_dir / f"receipt_{payment.id}_rental_{rental.id}.pdf"
        generate_receipt_pdf(
            payment,
            rental,
            lines,
            customer,
            output_path,
            paid_total=self.get_total_paid(rental.id),
        )
        self._logger.info("Receipt written payment_id=%s path=%s", payment_id, output_path)
        return output_path

    def _get_rental(self, rental_id: int):
        rental = rental_repo.get_rental(rental_id, connection=self._connection)
        if rental is None:
            raise NotFoundError(f"Rental {rental_id} not found.")
        return rental
