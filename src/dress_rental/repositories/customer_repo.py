"""Repository for customer persistence."""

from __future__ import annotations

import sqlite3
from datetime import datetime
from typing import List, Optional

from dress_rental.db.connection import transaction
from dress_rental.domain.models import Customer, RentalStatus
from dress_rental.logging_config import get_logger
from dress_rental.repositories.mappers import customer_from_row


def _now_iso() -> str:
    return datetime.now().isoformat(timespec="seconds")


class CustomerRepo:
    """CRUD operations for customers."""

    def __init__(self, connection: sqlite3.Connection) -> None:
        self._connection = connection
        self._connection.row_factory = sqlite3.Row
        self._logger = get_logger(self.__class__.__name__)

    def create(
        self,
        name: str,
        ic_number: str,
        phone: Optional[str],
        email: Optional[str],
        address: Optional[str],
        date_of_birth: str,
    ) -> Customer:
        created_at = _now_iso()
        try:
            with transaction(self._connection):
                cursor = self._connection.execute(
                    """
                    INSERT INTO customers (
                        name,
                        ic_number,
                        phone,
                        email,
                        address,
                        date_of_birth,
                        created_at,
                        updated_at
                    )
                    VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        name,
                        ic_number,
                        phone,
                        email,
                        address,
                        date_of_birth,
                        created_at,
                        created_at,
                    ),
                )
        except Exception:
            self._logger.exception("Failed to create customer")
            raise

        return Customer(
            id=cursor.lastrowid,
            name=name,
            ic_number=ic_number,
            phone=phone,
            email=email,
            address=address,
            date_of_birth=date_of_birth,
            created_at=created_at,
            updated_at=created_at,
        )

    def update(
        self,
        customer_id: int,
        name: str,
        ic_number: str,
        phone: Optional[str],
        email: Optional[str],
        address: Optional[str],
        date_of_birth: str,
    ) -> Optional[Customer]:
        updated_at = _now_iso()
        try:
            with transaction(self._connection):
                cursor = self._connection.execute(
                    """
                    UPDATE customers
                    SET
                        name = ?,
                        ic_number = ?,
                        phone = ?,
                        email = ?,
                        address = ?,
                        date_of_birth = ?,
                        updated_at = ?
                    WHERE id = ?
                    """,
                    (
                        name,
                        ic_number,
                        phone,
                        email,
                        address,
                        date_of_birth,
                        updated_at,
                        customer_id,
                    ),
                )
        except Exception:
            self._logger.exception("Failed to update customer id=%s", customer_id)
            raise

        if cursor.rowcount == 0:
            return None
        return self.get_by_id(customer_id)

    def delete(self, customer_id: int) -> bool:
        try:
            with transaction(self._connection):
                cursor = self._connection.execute(
                    "DELETE FROM customers WHERE id = ?",
                    (customer_id,),
                )
        except Exception:
            self._logger.exception("Failed to delete customer id=%s", customer_id)
            raise
        return cursor.rowcount > 0

    def list_all(self) -> List[Customer]:
        try:
            rows = self._connection.execute(
                "SELECT * FROM customers ORDER BY name"
            ).fetchall()
        except Exception:
            self._logger.exception("Failed to list customers")
            raise
        return [customer_from_row(row) for row in rows]

    def search(self, term: str) -> List[Customer]:
        """Match the term against name, IC number, phone and email."""
        term = term.strip()
        if not term:
            return self.list_all()
        pattern = f"%{term}%"
        try:
            rows = self._connection.execute(
                """
                SELECT * FROM customers
                WHERE name LIKE ?
                   OR ic_number LIKE ?
                   OR phone LIKE ?
                   OR email LIKE ?
                ORDER BY name
                """,
                (pattern, pattern, pattern, pattern),
            ).fetchall()
        except Exception:
            self._logger.exception("Failed to search customers term=%s", term)
            raise
        return [customer_from_row(row) for row in rows]

    def get_by_id(self, customer_id: int) -> Optional[Customer]:
        try:
            row = self._connection.execute(
                "SELECT * FROM customers WHERE id = ?",
                (customer_id,),
            ).fetchone()
        except Exception:
            self._logger.exception("Failed to get customer id=%s", customer_id)
            raise
        return customer_from_row(row) if row else None

    def get_by_ic(self, ic_number: str) -> Optional[Customer]:
        try:
            row = self._connection.execute(
                "SELECT * FROM customers WHERE ic_number = ?",
                (ic_number,),
            ).fetchone()
        except Exception:
            self._logger.exception("Failed to get customer by IC")
            raise
        return customer_from_row(row) if row else None

    def count_active_rentals(self, customer_id: int) -> int:
        try:
            row = self._connection.execute(
                """
                SELECT COUNT(*) AS active_count
                FROM rentals
                WHERE customer_id = ?
                  AND status = ?
                """,
                (customer_id, RentalStatus.ACTIVE.value),
            ).fetchone()
        except Exception:
            self._logger.exception(
                "Failed to count active rentals customer_id=%s", customer_id
            )
            raise
        return int(row["active_count"]) if row else 0
