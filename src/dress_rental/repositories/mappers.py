"""SQLite row mappers for domain models."""

from __future__ import annotations

import sqlite3
from enum import Enum
from typing import Any, TypeVar

from dress_rental.domain.models import (
    ActivityEntry,
    AvailabilityStatus,
    CleaningStatus,
    ConditionStatus,
    Customer,
    Dress,
    Payment,
    PaymentMethod,
    PaymentStatus,
    Rental,
    RentalItem,
    RentalStatus,
    User,
    UserRole,
)

E = TypeVar("E", bound=Enum)


def _row_value(row: sqlite3.Row, key: str) -> Any:
    return row[key] if key in row.keys() else None


def _enum_value(enum_cls: type[E], raw: Any, default: E) -> E:
    if raw is None:
        return default
    try:
        return enum_cls(raw)
    except ValueError:
        return default


def customer_from_row(row: sqlite3.Row) -> Customer:
    return Customer(
        id=_row_value(row, "id"),
        name=row["name"],
        ic_number=row["ic_number"],
        phone=_row_value(row, "phone"),
        email=_row_value(row, "email"),
        address=_row_value(row, "address"),
        date_of_birth=row["date_of_birth"],
        created_at=_row_value(row, "created_at"),
        updated_at=_row_value(row, "updated_at"),
    )


def dress_from_row(row: sqlite3.Row) -> Dress:
    # cleaning_status only exists from schema version 2 onwards.
    return Dress(
        id=_row_value(row, "id"),
        name=row["name"],
        category=_row_value(row, "category"),
        size=_row_value(row, "size"),
        color=_row_value(row, "color"),
        rental_price=float(row["rental_price"]),
        condition_status=_enum_value(
            ConditionStatus, _row_value(row, "condition_status"), ConditionStatus.GOOD
        ),
        availability_status=AvailabilityStatus(row["availability_status"]),
        cleaning_status=_enum_value(
            CleaningStatus, _row_value(row, "cleaning_status"), CleaningStatus.CLEAN
        ),
        created_at=_row_value(row, "created_at"),
        updated_at=_row_value(row, "updated_at"),
    )


def rental_from_row(row: sqlite3.Row) -> Rental:
    return Rental(
        id=_row_value(row, "id"),
        customer_id=row["customer_id"],
        rental_date=row["rental_date"],
        due_date=row["due_date"],
        return_date=_row_value(row, "return_date"),
        total_amount=float(row["total_amount"]),
        late_fee=float(row["late_fee"] or 0),
        status=RentalStatus(row["status"]),
        created_at=_row_value(row, "created_at"),
        updated_at=_row_value(row, "updated_at"),
    )


def rental_item_from_row(row: sqlite3.Row) -> RentalItem:
    return RentalItem(
        id=_row_value(row, "id"),
        rental_id=row["rental_id"],
        dress_id=row["dress_id"],
        rental_price=float(row["rental_price"]),
    )


def payment_from_row(row: sqlite3.Row) -> Payment:
    return Payment(
        id=_row_value(row, "id"),
        rental_id=row["rental_id"],
        amount=float(row["amount"]),
        payment_method=PaymentMethod(row["payment_method"]),
        payment_date=row["payment_date"],
        status=_enum_value(
            PaymentStatus, _row_value(row, "status"), PaymentStatus.COMPLETED
        ),
        transaction_reference=_row_value(row, "transaction_reference"),
        created_at=_row_value(row, "created_at"),
    )


def user_from_row(row: sqlite3.Row) -> User:
    return User(
        id=_row_value(row, "id"),
        username=row["username"],
        password_hash=row["password_hash"],
        role=UserRole(row["role"]),
        full_name=_row_value(row, "full_name"),
        email=_row_value(row, "email"),
        phone=_row_value(row, "phone"),
        is_active=bool(row["is_active"]),
        last_login=_row_value(row, "last_login"),
        created_at=_row_value(row, "created_at"),
    )


def activity_from_row(row: sqlite3.Row) -> ActivityEntry:
    return ActivityEntry(
        id=_row_value(row, "id"),
        user_id=_row_value(row, "user_id"),
        action=row["action"],
        table_name=_row_value(row, "table_name"),
        record_id=_row_value(row, "record_id"),
        details=_row_value(row, "details"),
        created_at=row["created_at"],
    )
