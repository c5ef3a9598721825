"""Administrator reports built on the aggregate queries."""

from __future__ import annotations

import sqlite3
from dataclasses import dataclass
from datetime import date
from typing import Optional

from dateutil.relativedelta import relativedelta

from dress_rental.logging_config import get_logger
from dress_rental.repositories import CustomerRepo, report_repo, rental_repo
from dress_rental.repositories.report_repo import (
    CategoryRevenue,
    CustomerActivity,
    DressUtilization,
    InventoryValuation,
    MonthlySales,
    StatusSummary,
)
from dress_rental.services import fees
from dress_rental.services.dates import parse_date
from dress_rental.services.errors import ValidationError
from dress_rental.services.rules import DEFAULT_RULES, RentalRules


@dataclass(frozen=True)
class OverdueItem:
    rental_id: int
    customer_id: int
    customer_name: str
    due_date: str
    days_overdue: int
    projected_fee: float


@dataclass(frozen=True)
class IncomeStatement:
    start_date: str
    end_date: str
    payments_received: float
    rental_revenue: float
    late_fees: float

    @property
    def total_revenue(self) -> float:
        return self.rental_revenue + self.late_fees


@dataclass(frozen=True)
class Dashboard:
    customers: int
    dresses: int
    available_dresses: int
    active_rentals: int
    overdue_rentals: int
    revenue_this_month: float


def month_bounds(reference: date) -> tuple[date, date]:
    start = reference.replace(day=1)
    end = start + relativedelta(months=1, days=-1)
    return start, end


class ReportService:
    """Read-only reporting for administrators."""

    def __init__(
        self,
        connection: sqlite3.Connection,
        rental_rules: RentalRules = DEFAULT_RULES,
    ) -> None:
        self._connection = connection
        self._rules = rental_rules
        self._customer_repo = CustomerRepo(connection)
        self._logger = get_logger(self.__class__.__name__)

    def monthly_sales(self, year: int) -> list[MonthlySales]:
        return report_repo.list_monthly_sales(year, connection=self._connection)

    def inventory_valuation(self) -> list[InventoryValuation]:
        return report_repo.list_inventory_valuation(connection=self._connection)

    def dress_utilization(self, limit: int = 20) -> list[DressUtilization]:
        return report_repo.list_dress_utilization(limit, connection=self._connection)

    def customer_activity(
        self, min_rentals: int = 1, limit: int = 20
    ) -> list[CustomerActivity]:
        return report_repo.list_customer_activity(
            min_rentals, limit, connection=self._connection
        )

    def status_summary(self) -> list[StatusSummary]:
        return report_repo.list_status_summary(connection=self._connection)

    def category_revenue(self) -> list[CategoryRevenue]:
        return report_repo.list_category_revenue(connection=self._connection)

    def overdue_items(self, reference_date: Optional[date] = None) -> list[OverdueItem]:
        """Active rentals past due, with the fee they would owe today."""
        reference = reference_date or date.today()
        customers = {
            customer.id: customer.name for customer in self._customer_repo.list_all()
        }
        items: list[OverdueItem] = []
        for rental in rental_repo.list_overdue_rentals(
            reference.isoformat(), connection=self._connection
        ):
            items.append(
                OverdueItem(
                    rental_id=rental.id,
                    customer_id=rental.customer_id,
                    customer_name=customers.get(rental.customer_id, ""),
                    due_date=rental.due_date,
                    days_overdue=fees.days_late(rental.due_date, reference),
                    projected_fee=fees.late_fee(
                        rental.due_date, reference, self._rules.late_fee_per_day
                    ),
                )
            )
        items.sort(key=lambda item: item.days_overdue, reverse=True)
        return items

    def income_statement(
        self, start_date: date | str, end_date: date | str
    ) -> IncomeStatement:
        try:
            start = parse_date(start_date)
            end = parse_date(end_date)
        except ValueError as exc:
            raise ValidationError(
                "Invalid period. Please use the YYYY-MM-DD format."
            ) from exc
        if end < start:
            raise ValidationError("The end date must not be before the start date.")
        received = report_repo.get_payments_received(
            start.isoformat(), end.isoformat(), connection=self._connection
        )
        revenue, late_fees = report_repo.get_rental_totals(
            start.isoformat(), end.isoformat(), connection=self._connection
        )
        return IncomeStatement(
            start_date=start.isoformat(),
            end_date=end.isoformat(),
            payments_received=received,
            rental_revenue=revenue,
            late_fees=late_fees,
        )

    def dashboard(self, reference_date: Optional[date] = None) -> Dashboard:
        reference = reference_date or date.today()
        counts = report_repo.get_dashboard_counts(
            reference.isoformat(), connection=self._connection
        )
        start, end = month_bounds(reference)
        received = report_repo.get_payments_received(
            start.isoformat(), end.isoformat(), connection=self._connection
        )
        return Dashboard(
            customers=counts.customers,
            dresses=counts.dresses,
            available_dresses=counts.available_dresses,
            active_rentals=counts.active_rentals,
            overdue_rentals=counts.overdue_rentals,
            revenue_this_month=received,
        )
