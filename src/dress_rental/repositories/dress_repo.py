"""Repository for dress inventory persistence."""

from __future__ import annotations

import sqlite3
from datetime import datetime
from typing import List, Optional

from dress_rental.db.connection import transaction
from dress_rental.domain.models import (
    AvailabilityStatus,
    CleaningStatus,
    ConditionStatus,
    Dress,
)
from dress_rental.logging_config import get_logger
from dress_rental.repositories.mappers import dress_from_row


def _now_iso() -> str:
    return datetime.now().isoformat(timespec="seconds")


class DressRepo:
    """CRUD operations for dresses."""

    def __init__(self, connection: sqlite3.Connection) -> None:
        self._connection = connection
        self._connection.row_factory = sqlite3.Row
        self._logger = get_logger(self.__class__.__name__)

    def create(
        self,
        name: str,
        category: Optional[str],
        size: Optional[str],
        color: Optional[str],
        rental_price: float,
        condition_status: ConditionStatus = ConditionStatus.GOOD,
        availability_status: AvailabilityStatus = AvailabilityStatus.AVAILABLE,
        cleaning_status: CleaningStatus = CleaningStatus.CLEAN,
    ) -> Dress:
        created_at = _now_iso()
        try:
            with transaction(self._connection):
                cursor = self._connection.execute(
                    """
                    INSERT INTO dresses (
                        name,
                        category,
                        size,
                        color,
                        rental_price,
                        condition_status,
                        availability_status,
                        cleaning_status,
                        created_at,
                        updated_at
                    )
                    VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        name,
                        category,
                        size,
                        color,
                        rental_price,
                        condition_status.value,
                        availability_status.value,
                        cleaning_status.value,
                        created_at,
                        created_at,
                    ),
                )
        except Exception:
            self._logger.exception("Failed to create dress")
            raise

        return Dress(
            id=cursor.lastrowid,
            name=name,
            category=category,
            size=size,
            color=color,
            rental_price=rental_price,
            condition_status=condition_status,
            availability_status=availability_status,
            cleaning_status=cleaning_status,
            created_at=created_at,
            updated_at=created_at,
        )

    def update(
        self,
        dress_id: int,
        name: str,
        category: Optional[str],
        size: Optional[str],
        color: Optional[str],
        rental_price: float,
        condition_status: ConditionStatus,
        availability_status: AvailabilityStatus,
        cleaning_status: CleaningStatus,
    ) -> Optional[Dress]:
        updated_at = _now_iso()
        try:
            with transaction(self._connection):
                cursor = self._connection.execute(
                    """
                    UPDATE dresses
                    SET
                        name = ?,
                        category = ?,
                        size = ?,
                        color = ?,
                        rental_price = ?,
                        condition_status = ?,
                        availability_status = ?,
                        cleaning_status = ?,
                        updated_at = ?
                    WHERE id = ?
                    """,
                    (
                        name,
                        category,
                        size,
                        color,
                        rental_price,
                        condition_status.value,
                        availability_status.value,
                        cleaning_status.value,
                        updated_at,
                        dress_id,
                    ),
                )
        except Exception:
            self._logger.exception("Failed to update dress id=%s", dress_id)
            raise

        if cursor.rowcount == 0:
            return None
        return self.get_by_id(dress_id)

    def set_availability(self, dress_id: int, status: AvailabilityStatus) -> bool:
        updated_at = _now_iso()
        try:
            with transaction(self._connection):
                cursor = self._connection.execute(
                    """
                    UPDATE dresses
                    SET availability_status = ?,
                        updated_at = ?
                    WHERE id = ?
                    """,
                    (status.value, updated_at, dress_id),
                )
        except Exception:
            self._logger.exception(
                "Failed to update availability dress_id=%s status=%s",
                dress_id,
                status.value,
            )
            raise
        return cursor.rowcount > 0

    def reserve(self, dress_id: int) -> bool:
        """Flip an Available dress to Rented; False if it was not Available."""
        try:
            with transaction(self._connection):
                cursor = self._connection.execute(
                    """
                    UPDATE dresses
                    SET availability_status = ?,
                        updated_at = ?
                    WHERE id = ? AND availability_status = ?
                    """,
                    (
                        AvailabilityStatus.RENTED.value,
                        _now_iso(),
                        dress_id,
                        AvailabilityStatus.AVAILABLE.value,
                    ),
                )
        except Exception:
            self._logger.exception("Failed to reserve dress_id=%s", dress_id)
            raise
        return cursor.rowcount > 0

    def delete(self, dress_id: int) -> bool:
        try:
            with transaction(self._connection):
                cursor = self._connection.execute(
                    "DELETE FROM dresses WHERE id = ?",
                    (dress_id,),
                )
        except Exception:
            self._logger.exception("Failed to delete dress id=%s", dress_id)
            raise
        return cursor.rowcount > 0

    def count_rental_lines(self, dress_id: int) -> int:
        try:
            row = self._connection.execute(
                "SELECT COUNT(*) AS total FROM rental_items WHERE dress_id = ?",
                (dress_id,),
            ).fetchone()
        except Exception:
            self._logger.exception("Failed to count rentals dress_id=%s", dress_id)
            raise
        return int(row["total"]) if row else 0

    def get_by_id(self, dress_id: int) -> Optional[Dress]:
        try:
            row = self._connection.execute(
                "SELECT * FROM dresses WHERE id = ?",
                (dress_id,),
            ).fetchone()
        except Exception:
            self._logger.exception("Failed to get dress id=%s", dress_id)
            raise
        return dress_from_row(row) if row else None

    def list_all(self) -> List[Dress]:
        return self._list("SELECT * FROM dresses ORDER BY id", ())

    def list_by_availability(self, status: AvailabilityStatus) -> List[Dress]:
        return self._list(
            "SELECT * FROM dresses WHERE availability_status = ? ORDER BY id",
            (status.value,),
        )

    def list_by_category(self, category: str) -> List[Dress]:
        return self._list(
            "SELECT * FROM dresses WHERE category = ? ORDER BY name",
            (category,),
        )

    def list_categories(self) -> List[str]:
        try:
            rows = self._connection.execute(
                """
                SELECT DISTINCT category
                FROM dresses
                WHERE category IS NOT NULL AND category <> ''
                ORDER BY category
                """
            ).fetchall()
        except Exception:
            self._logger.exception("Failed to list dress categories")
            raise
        return [row["category"] for row in rows]

    def search(self, term: str) -> List[Dress]:
        """Match the term against name, category, color and size."""
        term = term.strip()
        if not term:
            return self.list_all()
        pattern = f"%{term}%"
        return self._list(
            """
            SELECT * FROM dresses
            WHERE name LIKE ?
               OR category LIKE ?
               OR color LIKE ?
               OR size LIKE ?
            ORDER BY name
            """,
            (pattern, pattern, pattern, pattern),
        )

    def _list(self, query: str, params: tuple[object, ...]) -> List[Dress]:
        try:
            rows = self._connection.execute(query, params).fetchall()
        except Exception:
            self._logger.exception("Failed to list dresses")
            raise
        return [dress_from_row(row) for row in rows]
