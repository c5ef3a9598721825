"""Repository helpers for rental persistence.

Write helpers open a ``transaction()`` scope of their own, which joins the
caller's transaction when one is running. Multi-step rental operations are
therefore composed by the service layer inside a single outer scope.
"""

from __future__ import annotations

import sqlite3
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from dress_rental.db.connection import transaction
from dress_rental.domain.models import Rental, RentalItem, RentalStatus
from dress_rental.logging_config import get_logger
from dress_rental.repositories.mappers import rental_from_row, rental_item_from_row


def _now_iso() -> str:
    return datetime.now().isoformat(timespec="seconds")


def _coerce_status(status: str | RentalStatus) -> RentalStatus:
    if isinstance(status, RentalStatus):
        return status
    return RentalStatus(status)


def insert_rental(
    customer_id: int,
    rental_date: str,
    due_date: str,
    total_amount: float,
    *,
    connection: sqlite3.Connection,
) -> Rental:
    """Insert an Active rental row."""
    logger = get_logger("rental_repo")
    created_at = _now_iso()
    try:
        with transaction(connection):
            cursor = connection.execute(
                """
                INSERT INTO rentals (
                    customer_id,
                    rental_date,
                    due_date,
                    total_amount,
                    late_fee,
                    status,
                    created_at,
                    updated_at
                )
                VALUES (?, ?, ?, ?, 0, ?, ?, ?)
                """,
                (
                    customer_id,
                    rental_date,
                    due_date,
                    total_amount,
                    RentalStatus.ACTIVE.value,
                    created_at,
                    created_at,
                ),
            )
    except Exception:
        logger.exception("Failed to create rental customer_id=%s", customer_id)
        raise
    return Rental(
        id=cursor.lastrowid,
        customer_id=customer_id,
        rental_date=rental_date,
        due_date=due_date,
        return_date=None,
        total_amount=total_amount,
        late_fee=0.0,
        status=RentalStatus.ACTIVE,
        created_at=created_at,
        updated_at=created_at,
    )


def insert_rental_item(
    rental_id: int,
    dress_id: int,
    rental_price: float,
    *,
    connection: sqlite3.Connection,
) -> RentalItem:
    """Link a dress to a rental at the given daily price."""
    logger = get_logger("rental_repo")
    try:
        with transaction(connection):
            cursor = connection.execute(
                """
                INSERT INTO rental_items (rental_id, dress_id, rental_price)
                VALUES (?, ?, ?)
                """,
                (rental_id, dress_id, rental_price),
            )
    except Exception:
        logger.exception(
            "Failed to create rental item rental_id=%s dress_id=%s",
            rental_id,
            dress_id,
        )
        raise
    return RentalItem(
        id=cursor.lastrowid,
        rental_id=rental_id,
        dress_id=dress_id,
        rental_price=rental_price,
    )


def set_late_fee(
    rental_id: int,
    late_fee: float,
    *,
    connection: sqlite3.Connection,
) -> bool:
    """Persist the late fee on a rental."""
    logger = get_logger("rental_repo")
    try:
        with transaction(connection):
            cursor = connection.execute(
                """
                UPDATE rentals
                SET late_fee = ?,
                    updated_at = ?
                WHERE id = ?
                """,
                (late_fee, _now_iso(), rental_id),
            )
    except Exception:
        logger.exception("Failed to update late fee rental_id=%s", rental_id)
        raise
    return cursor.rowcount > 0


def mark_returned(
    rental_id: int,
    return_date: str,
    late_fee: float,
    *,
    connection: sqlite3.Connection,
) -> bool:
    """Move an Active rental to Returned.

    Returns False when no Active rental with this id exists, so a rental
    returned concurrently is never returned twice.
    """
    logger = get_logger("rental_repo")
    try:
        with transaction(connection):
            cursor = connection.execute(
                """
                UPDATE rentals
                SET return_date = ?,
                    late_fee = ?,
                    status = ?,
                    updated_at = ?
                WHERE id = ?
                  AND status = ?
                """,
                (
                    return_date,
                    late_fee,
                    RentalStatus.RETURNED.value,
                    _now_iso(),
                    rental_id,
                    RentalStatus.ACTIVE.value,
                ),
            )
    except Exception:
        logger.exception("Failed to mark rental returned id=%s", rental_id)
        raise
    return cursor.rowcount > 0


@dataclass(frozen=True)
class Booking:
    rental_id: int
    rental_date: str
    due_date: str


def list_active_bookings(
    dress_id: int,
    *,
    exclude_rental_id: Optional[int] = None,
    connection: sqlite3.Connection,
) -> list[Booking]:
    """List the booked intervals of Active rentals that include a dress."""
    logger = get_logger("rental_repo")
    params: list[object] = [dress_id, RentalStatus.ACTIVE.value]
    exclude_clause = ""
    if exclude_rental_id is not None:
        exclude_clause = "AND r.id <> ?"
        params.append(exclude_rental_id)
    try:
        rows = connection.execute(
            f"""
            SELECT r.id, r.rental_date, r.due_date
            FROM rental_items ri
            JOIN rentals r ON r.id = ri.rental_id
            WHERE ri.dress_id = ?
              AND r.status = ?
              {exclude_clause}
            ORDER BY r.rental_date, r.id
            """,
            params,
        ).fetchall()
    except Exception:
        logger.exception("Failed to list bookings dress_id=%s", dress_id)
        raise
    return [
        Booking(
            rental_id=int(row["id"]),
            rental_date=row["rental_date"],
            due_date=row["due_date"],
        )
        for row in rows
    ]


def get_rental(
    rental_id: int,
    *,
    connection: sqlite3.Connection,
) -> Optional[Rental]:
    logger = get_logger("rental_repo")
    try:
        row = connection.execute(
            "SELECT * FROM rentals WHERE id = ?",
            (rental_id,),
        ).fetchone()
    except Exception:
        logger.exception("Failed to fetch rental id=%s", rental_id)
        raise
    return rental_from_row(row) if row else None


def list_items(
    rental_id: int,
    *,
    connection: sqlite3.Connection,
) -> list[RentalItem]:
    logger = get_logger("rental_repo")
    try:
        rows = connection.execute(
            """
            SELECT * FROM rental_items
            WHERE rental_id = ?
            ORDER BY id
            """,
            (rental_id,),
        ).fetchall()
    except Exception:
        logger.exception("Failed to fetch rental items rental_id=%s", rental_id)
        raise
    return [rental_item_from_row(row) for row in rows]


def get_rental_with_items(
    rental_id: int,
    *,
    connection: sqlite3.Connection,
) -> Optional[tuple[Rental, list[RentalItem]]]:
    """Fetch a rental and its items."""
    rental = get_rental(rental_id, connection=connection)
    if rental is None:
        return None
    return rental, list_items(rental_id, connection=connection)


def list_rentals(
    *,
    status: Optional[str | RentalStatus] = None,
    customer_id: Optional[int] = None,
    connection: sqlite3.Connection,
) -> list[Rental]:
    """List rentals, newest first, with optional status and customer filters."""
    logger = get_logger("rental_repo")
    clauses: list[str] = []
    params: list[object] = []
    if status:
        clauses.append("status = ?")
        params.append(_coerce_status(status).value)
    if customer_id is not None:
        clauses.append("customer_id = ?")
        params.append(customer_id)
    where_clause = f"WHERE {' AND '.join(clauses)}" if clauses else ""
    query = f"""
        SELECT *
        FROM rentals
        {where_clause}
        ORDER BY rental_date DESC, id DESC
    """
    try:
        rows = connection.execute(query, params).fetchall()
    except Exception:
        logger.exception("Failed to list rentals")
        raise
    return [rental_from_row(row) for row in rows]


def list_active_rentals(*, connection: sqlite3.Connection) -> list[Rental]:
    """List Active rentals ordered by due date."""
    logger = get_logger("rental_repo")
    try:
        rows = connection.execute(
            """
            SELECT *
            FROM rentals
            WHERE status = ?
            ORDER BY due_date, id
            """,
            (RentalStatus.ACTIVE.value,),
        ).fetchall()
    except Exception:
        logger.exception("Failed to list active rentals")
        raise
    return [rental_from_row(row) for row in rows]


def list_overdue_rentals(
    reference_date: str,
    *,
    connection: sqlite3.Connection,
) -> list[Rental]:
    """List Active rentals whose due date is before the reference date."""
    logger = get_logger("rental_repo")
    try:
        rows = connection.execute(
            """
            SELECT *
            FROM rentals
            WHERE status = ?
              AND due_date < ?
            ORDER BY due_date, id
            """,
            (RentalStatus.ACTIVE.value, reference_date),
        ).fetchall()
    except Exception:
        logger.exception("Failed to list overdue rentals")
        raise
    return [rental_from_row(row) for row in rows]
