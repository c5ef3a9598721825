"""Repository for payments persistence."""

from __future__ import annotations

import sqlite3
from datetime import datetime
from typing import Optional

from dress_rental.db.connection import transaction
from dress_rental.domain.models import Payment, PaymentMethod, PaymentStatus
from dress_rental.logging_config import get_logger
from dress_rental.repositories.mappers import payment_from_row


class PaymentRepository:
    """Data access for payments."""

    def __init__(self, connection: sqlite3.Connection) -> None:
        self._connection = connection
        self._connection.row_factory = sqlite3.Row
        self._logger = get_logger(self.__class__.__name__)

    def list_by_rental(self, rental_id: int) -> list[Payment]:
        try:
            rows = self._connection.execute(
                """
                SELECT *
                FROM payments
                WHERE rental_id = ?
                ORDER BY payment_date DESC, id DESC
                """,
                (rental_id,),
            ).fetchall()
        except Exception:
            self._logger.exception("Failed to list payments rental_id=%s", rental_id)
            raise
        return [payment_from_row(row) for row in rows]

    def list_all(self) -> list[Payment]:
        try:
            rows = self._connection.execute(
                "SELECT * FROM payments ORDER BY payment_date DESC, id DESC"
            ).fetchall()
        except Exception:
            self._logger.exception("Failed to list payments")
            raise
        return [payment_from_row(row) for row in rows]

    def get_by_id(self, payment_id: int) -> Optional[Payment]:
        try:
            row = self._connection.execute(
                "SELECT * FROM payments WHERE id = ?",
                (payment_id,),
            ).fetchone()
        except Exception:
            self._logger.exception("Failed to fetch payment id=%s", payment_id)
            raise
        return payment_from_row(row) if row else None

    def create(
        self,
        rental_id: int,
        amount: float,
        payment_method: PaymentMethod,
        payment_date: str,
        transaction_reference: Optional[str],
        status: PaymentStatus = PaymentStatus.COMPLETED,
    ) -> Payment:
        created_at = datetime.now().isoformat(timespec="seconds")
        try:
            with transaction(self._connection):
                cursor = self._connection.execute(
                    """
                    INSERT INTO payments (
                        rental_id,
                        amount,
                        payment_method,
                        payment_date,
                        status,
                        transaction_reference,
                        created_at
                    )
                    VALUES (?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        rental_id,
                        amount,
                        payment_method.value,
                        payment_date,
                        status.value,
                        transaction_reference,
                        created_at,
                    ),
                )
        except Exception:
            self._logger.exception("Failed to create payment rental_id=%s", rental_id)
            raise
        return Payment(
            id=int(cursor.lastrowid),
            rental_id=rental_id,
            amount=amount,
            payment_method=payment_method,
            payment_date=payment_date,
            status=status,
            transaction_reference=transaction_reference,
            created_at=created_at,
        )

    def update_status(self, payment_id: int, status: PaymentStatus) -> bool:
        try:
            with transaction(self._connection):
                cursor = self._connection.execute(
                    "UPDATE payments SET status = ? WHERE id = ?",
                    (status.value, payment_id),
                )
        except Exception:
            self._logger.exception("Failed to update payment id=%s", payment_id)
            raise
        return cursor.rowcount > 0

    def get_paid_total(self, rental_id: int) -> float:
        """Sum of Completed payments for a rental."""
        try:
            row = self._connection.execute(
                """
                SELECT COALESCE(SUM(amount), 0) AS paid_total
                FROM payments
                WHERE rental_id = ?
                  AND status = ?
                """,
                (rental_id, PaymentStatus.COMPLETED.value),
            ).fetchone()
        except Exception:
            self._logger.exception(
                "Failed to calculate paid total rental_id=%s", rental_id
            )
            raise
        return float(row["paid_total"] or 0) if row else 0.0
