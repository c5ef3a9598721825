"""Aggregate queries backing the administrator reports."""

from __future__ import annotations

import sqlite3
from dataclasses import dataclass

from dress_rental.domain.models import (
    AvailabilityStatus,
    PaymentStatus,
    RentalStatus,
)
from dress_rental.logging_config import get_logger


@dataclass(frozen=True)
class MonthlySales:
    month: str
    total_sales: float
    rental_count: int


@dataclass(frozen=True)
class InventoryValuation:
    category: str
    dress_count: int
    total_value: float
    average_price: float


@dataclass(frozen=True)
class DressUtilization:
    dress_id: int
    dress_name: str
    rental_count: int
    utilization_rate: float


@dataclass(frozen=True)
class CustomerActivity:
    customer_id: int
    customer_name: str
    total_rentals: int
    total_spent: float
    average_rental: float
    first_rental_date: str


@dataclass(frozen=True)
class StatusSummary:
    status: RentalStatus
    count: int
    total_amount: float


@dataclass(frozen=True)
class CategoryRevenue:
    category: str
    total_revenue: float
    dresses_rented: int
    average_revenue_per_dress: float


@dataclass(frozen=True)
class DashboardCounts:
    customers: int
    dresses: int
    available_dresses: int
    active_rentals: int
    overdue_rentals: int


def list_monthly_sales(
    year: int,
    *,
    connection: sqlite3.Connection,
) -> list[MonthlySales]:
    """Sum rental totals plus late fees by month of rental date."""
    logger = get_logger("report_repo")
    try:
        rows = connection.execute(
            """
            SELECT
                strftime('%Y-%m', rental_date) AS month,
                COALESCE(SUM(total_amount + late_fee), 0) AS total_sales,
                COUNT(*) AS rental_count
            FROM rentals
            WHERE strftime('%Y', rental_date) = ?
            GROUP BY strftime('%Y-%m', rental_date)
            ORDER BY month
            """,
            (f"{int(year):04d}",),
        ).fetchall()
    except Exception:
        logger.exception("Failed to list monthly sales year=%s", year)
        raise
    return [
        MonthlySales(
            month=row["month"],
            total_sales=float(row["total_sales"] or 0),
            rental_count=int(row["rental_count"]),
        )
        for row in rows
        if row["month"]
    ]


def list_inventory_valuation(
    *, connection: sqlite3.Connection
) -> list[InventoryValuation]:
    logger = get_logger("report_repo")
    try:
        rows = connection.execute(
            """
            SELECT
                COALESCE(NULLIF(category, ''), 'Uncategorized') AS category,
                COUNT(*) AS dress_count,
                COALESCE(SUM(rental_price), 0) AS total_value,
                COALESCE(AVG(rental_price), 0) AS average_price
            FROM dresses
            GROUP BY COALESCE(NULLIF(category, ''), 'Uncategorized')
            ORDER BY total_value DESC
            """
        ).fetchall()
    except Exception:
        logger.exception("Failed to list inventory valuation")
        raise
    return [
        InventoryValuation(
            category=row["category"],
            dress_count=int(row["dress_count"]),
            total_value=float(row["total_value"]),
            average_price=float(row["average_price"]),
        )
        for row in rows
    ]


def list_dress_utilization(
    limit: int = 20,
    *,
    connection: sqlite3.Connection,
) -> list[DressUtilization]:
    """Rental lines per dress and their share of all rental lines (percent)."""
    logger = get_logger("report_repo")
    try:
        rows = connection.execute(
            """
            SELECT
                d.id AS dress_id,
                d.name AS dress_name,
                COUNT(ri.id) AS rental_count,
                COALESCE(
                    ROUND(
                        COUNT(ri.id) * 100.0
                        / NULLIF((SELECT COUNT(*) FROM rental_items), 0),
                        2
                    ),
                    0
                ) AS utilization_rate
            FROM dresses d
            LEFT JOIN rental_items ri ON ri.dress_id = d.id
            GROUP BY d.id, d.name
            ORDER BY rental_count DESC, d.name
            LIMIT ?
            """,
            (limit,),
        ).fetchall()
    except Exception:
        logger.exception("Failed to list dress utilization")
        raise
    return [
        DressUtilization(
            dress_id=int(row["dress_id"]),
            dress_name=row["dress_name"],
            rental_count=int(row["rental_count"]),
            utilization_rate=float(row["utilization_rate"]),
        )
        for row in rows
    ]


def list_customer_activity(
    min_rentals: int = 1,
    limit: int = 20,
    *,
    connection: sqlite3.Connection,
) -> list[CustomerActivity]:
    """Customers ranked by total spent (rental totals plus late fees)."""
    logger = get_logger("report_repo")
    try:
        rows = connection.execute(
            """
            SELECT
                c.id AS customer_id,
                c.name AS customer_name,
                COUNT(r.id) AS total_rentals,
                COALESCE(SUM(r.total_amount + r.late_fee), 0) AS total_spent,
                COALESCE(AVG(r.total_amount + r.late_fee), 0) AS average_rental,
                MIN(r.rental_date) AS first_rental_date
            FROM customers c
            JOIN rentals r ON r.customer_id = c.id
            GROUP BY c.id, c.name
            HAVING COUNT(r.id) >= ?
            ORDER BY total_spent DESC, c.name
            LIMIT ?
            """,
            (min_rentals, limit),
        ).fetchall()
    except Exception:
        logger.exception("Failed to list customer activity")
        raise
    return [
        CustomerActivity(
            customer_id=int(row["customer_id"]),
            customer_name=row["customer_name"],
            total_rentals=int(row["total_rentals"]),
            total_spent=float(row["total_spent"]),
            average_rental=float(row["average_rental"]),
            first_rental_date=row["first_rental_date"],
        )
        for row in rows
    ]


def list_status_summary(*, connection: sqlite3.Connection) -> list[StatusSummary]:
    logger = get_logger("report_repo")
    try:
        rows = connection.execute(
            """
            SELECT
                status,
                COUNT(*) AS rental_count,
                COALESCE(SUM(total_amount + late_fee), 0) AS total_amount
            FROM rentals
            GROUP BY status
            ORDER BY status
            """
        ).fetchall()
    except Exception:
        logger.exception("Failed to list rental status summary")
        raise
    return [
        StatusSummary(
            status=RentalStatus(row["status"]),
            count=int(row["rental_count"]),
            total_amount=float(row["total_amount"]),
        )
        for row in rows
    ]


def list_category_revenue(*, connection: sqlite3.Connection) -> list[CategoryRevenue]:
    """Revenue of returned rentals by dress category (price × days rented)."""
    logger = get_logger("report_repo")
    try:
        rows = connection.execute(
            """
            SELECT
                COALESCE(NULLIF(d.category, ''), 'Uncategorized') AS category,
                COALESCE(SUM(
                    ri.rental_price
                    * (julianday(r.due_date) - julianday(r.rental_date))
                ), 0) AS total_revenue,
                COUNT(DISTINCT ri.dress_id) AS dresses_rented
            FROM rental_items ri
            JOIN dresses d ON d.id = ri.dress_id
            JOIN rentals r ON r.id = ri.rental_id
            WHERE r.status = ?
            GROUP BY COALESCE(NULLIF(d.category, ''), 'Uncategorized')
            ORDER BY total_revenue DESC
            """,
            (RentalStatus.RETURNED.value,),
        ).fetchall()
    except Exception:
        logger.exception("Failed to list category revenue")
        raise
    result: list[CategoryRevenue] = []
    for row in rows:
        dresses_rented = int(row["dresses_rented"])
        total_revenue = float(row["total_revenue"])
        result.append(
            CategoryRevenue(
                category=row["category"],
                total_revenue=total_revenue,
                dresses_rented=dresses_rented,
                average_revenue_per_dress=(
                    total_revenue / dresses_rented if dresses_rented else 0.0
                ),
            )
        )
    return result


def get_payments_received(
    start_date: str,
    end_date: str,
    *,
    connection: sqlite3.Connection,
) -> float:
    """Sum Completed payments dated within the inclusive period."""
    logger = get_logger("report_repo")
    try:
        row = connection.execute(
            """
            SELECT COALESCE(SUM(amount), 0) AS total_received
            FROM payments
            WHERE status = ?
              AND date(payment_date) >= ?
              AND date(payment_date) <= ?
            """,
            (PaymentStatus.COMPLETED.value, start_date, end_date),
        ).fetchone()
    except Exception:
        logger.exception("Failed to sum payments received")
        raise
    return float(row["total_received"] or 0) if row else 0.0


def get_rental_totals(
    start_date: str,
    end_date: str,
    *,
    connection: sqlite3.Connection,
) -> tuple[float, float]:
    """Return (rental revenue, late fees) for rentals dated within the period."""
    logger = get_logger("report_repo")
    try:
        row = connection.execute(
            """
            SELECT
                COALESCE(SUM(total_amount), 0) AS rental_revenue,
                COALESCE(SUM(late_fee), 0) AS late_fees
            FROM rentals
            WHERE rental_date >= ?
              AND rental_date <= ?
            """,
            (start_date, end_date),
        ).fetchone()
    except Exception:
        logger.exception("Failed to sum rental totals")
        raise
    if not row:
        return 0.0, 0.0
    return float(row["rental_revenue"]), float(row["late_fees"])


def get_dashboard_counts(
    reference_date: str,
    *,
    connection: sqlite3.Connection,
) -> DashboardCounts:
    logger = get_logger("report_repo")
    try:
        row = connection.execute(
            """
            SELECT
                (SELECT COUNT(*) FROM customers) AS customers,
                (SELECT COUNT(*) FROM dresses) AS dresses,
                (SELECT COUNT(*) FROM dresses
                    WHERE availability_status = ?) AS available_dresses,
                (SELECT COUNT(*) FROM rentals WHERE status = ?) AS active_rentals,
                (SELECT COUNT(*) FROM rentals
                    WHERE status = ? AND due_date < ?) AS overdue_rentals
            """,
            (
                AvailabilityStatus.AVAILABLE.value,
                RentalStatus.ACTIVE.value,
                RentalStatus.ACTIVE.value,
                reference_date,
            ),
        ).fetchone()
    except Exception:
        logger.exception("Failed to load dashboard counts")
        raise
    return DashboardCounts(
        customers=int(row["customers"]),
        dresses=int(row["dresses"]),
        available_dresses=int(row["available_dresses"]),
        active_rentals=int(row["active_rentals"]),
        overdue_rentals=int(row["overdue_rentals"]),
    )
