"""Rental lifecycle: creation, return and late fees."""

from __future__ import annotations

import sqlite3
from dataclasses import dataclass
from datetime import date
from typing import Iterable, Optional

from dress_rental.db.connection import transaction
from dress_rental.domain.models import (
    AvailabilityStatus,
    Dress,
    Rental,
    RentalItem,
    RentalStatus,
)
from dress_rental.logging_config import get_logger
from dress_rental.repositories import CustomerRepo, DressRepo, rental_repo
from dress_rental.services import fees, rules
from dress_rental.services.availability_service import AvailabilityService
from dress_rental.services.dates import add_days, parse_date
from dress_rental.services.errors import (
    NotFoundError,
    PersistenceError,
    RentalFailure,
    ValidationError,
)
from dress_rental.services.rules import DEFAULT_RULES, RentalRules


@dataclass(frozen=True)
class ReturnResult:
    """Outcome of a return request."""

    rental: Rental
    late_fee: float
    already_returned: bool = False

    @property
    def amount_due(self) -> float:
        return self.rental.amount_due


class RentalService:
    """Service for rental business rules."""

    def __init__(
        self,
        connection: sqlite3.Connection,
        rental_rules: RentalRules = DEFAULT_RULES,
    ) -> None:
        self._connection = connection
        self._connection.row_factory = sqlite3.Row
        self._rules = rental_rules
        self._customer_repo = CustomerRepo(connection)
        self._dress_repo = DressRepo(connection)
        self._availability = AvailabilityService(connection)
        self._logger = get_logger(self.__class__.__name__)

    @property
    def rules(self) -> RentalRules:
        return self._rules

    def get_rental(self, rental_id: int) -> Rental:
        rental = rental_repo.get_rental(rental_id, connection=self._connection)
        if rental is None:
            raise NotFoundError(f"Rental {rental_id} not found.")
        return rental

    def get_rental_with_items(self, rental_id: int) -> tuple[Rental, list[RentalItem]]:
        rental_data = rental_repo.get_rental_with_items(
            rental_id, connection=self._connection
        )
        if not rental_data:
            raise NotFoundError(f"Rental {rental_id} not found.")
        return rental_data

    def list_rentals(
        self,
        status: Optional[RentalStatus] = None,
        customer_id: Optional[int] = None,
    ) -> list[Rental]:
        return rental_repo.list_rentals(
            status=status, customer_id=customer_id, connection=self._connection
        )

    def list_customer_rentals(self, customer_id: int) -> list[Rental]:
        return self.list_rentals(customer_id=customer_id)

    def list_active_rentals(self) -> list[Rental]:
        return rental_repo.list_active_rentals(connection=self._connection)

    def list_overdue_rentals(self, reference_date: Optional[date] = None) -> list[Rental]:
        reference = reference_date or date.today()
        return rental_repo.list_overdue_rentals(
            reference.isoformat(), connection=self._connection
        )

    def amount_due(self, rental: Rental | int) -> float:
        if isinstance(rental, int):
            rental = self.get_rental(rental)
        return rental.amount_due

    def calculate_due_date(self, rental_date: date | str, duration_days: int) -> date:
        try:
            return add_days(rental_date, duration_days)
        except ValueError as exc:
            raise ValidationError(
                "Invalid rental date. Please use the YYYY-MM-DD format.",
                RentalFailure.INVALID_DATE,
            ) from exc

    def quote_total(self, dresses: Iterable[Dress], duration_days: int) -> float:
        return sum(dress.rental_price * duration_days for dress in dresses)

    def create_rental(
        self,
        customer_id: int,
        rental_date: date | str,
        duration_days: int,
        dress_ids: Iterable[int],
    ) -> Rental:
        """Book dresses for a customer and mark them Rented, all or nothing."""
        dress_ids = [int(dress_id) for dress_id in dress_ids]
        if not rules.is_valid_duration(duration_days, self._rules):
            raise ValidationError(
                "Rental duration must be between "
                f"{self._rules.min_rental_days} and {self._rules.max_rental_days} days.",
                RentalFailure.INVALID_DURATION,
            )
        if self._customer_repo.get_by_id(customer_id) is None:
            raise NotFoundError(f"Customer {customer_id} not found.")
        active_count = self._customer_repo.count_active_rentals(customer_id)
        if not rules.is_under_rental_limit(active_count, self._rules):
            raise ValidationError(
                "Customer already has the maximum of "
                f"{self._rules.max_active_rentals} active rentals.",
                RentalFailure.RENTAL_LIMIT_REACHED,
            )
        if not rules.is_valid_item_count(len(dress_ids), self._rules):
            raise ValidationError(
                f"A rental must include between 1 and "
                f"{self._rules.max_items_per_rental} dresses.",
                RentalFailure.INVALID_ITEM_COUNT,
            )
        if len(set(dress_ids)) != len(dress_ids):
            raise ValidationError(
                "The same dress cannot be added twice to a rental.",
                RentalFailure.INVALID_ITEM_COUNT,
            )
        due_date = self.calculate_due_date(rental_date, duration_days)
        start_date = parse_date(rental_date)

        try:
            with transaction(self._connection):
                dresses = self._check_dresses(dress_ids, start_date, due_date)
                rental = self._write_rental(
                    customer_id, start_date, due_date, duration_days, dresses
                )
        except sqlite3.Error as exc:
            self._logger.exception(
                "Rental creation rolled back customer_id=%s", customer_id
            )
            raise PersistenceError(
                "The rental could not be saved. No changes were made."
            ) from exc

        self._logger.info(
            "Created rental id=%s customer_id=%s dresses=%s total=%.2f",
            rental.id,
            customer_id,
            dress_ids,
            rental.total_amount,
        )
        return rental

    def _check_dresses(
        self, dress_ids: list[int], start_date: date, due_date: date
    ) -> list[Dress]:
        dresses: list[Dress] = []
        for dress_id in dress_ids:
            dress = self._dress_repo.get_by_id(dress_id)
            if dress is None:
                raise NotFoundError(f"Dress {dress_id} not found.")
            if not rules.is_rentable_status(dress.availability_status):
                raise ValidationError(
                    f"Dress {dress_id} is not available "
                    f"({dress.availability_status.value}).",
                    RentalFailure.ITEM_UNAVAILABLE,
                )
            if not self._availability.is_available(dress_id, start_date, due_date):
                raise ValidationError(
                    f"Dress {dress_id} has overlapping bookings.",
                    RentalFailure.ITEM_OVERLAP,
                )
            dresses.append(dress)
        return dresses

    def _write_rental(
        self,
        customer_id: int,
        start_date: date,
        due_date: date,
        duration_days: int,
        dresses: list[Dress],
    ) -> Rental:
        total_amount = self.quote_total(dresses, duration_days)
        rental = rental_repo.insert_rental(
            customer_id,
            start_date.isoformat(),
            due_date.isoformat(),
            total_amount,
            connection=self._connection,
        )
        for dress in dresses:
            if dress.rental_price <= 0:
                raise ValidationError(
                    f"Invalid price for dress {dress.id}.",
                    RentalFailure.INVALID_PRICE,
                )
            rental_repo.insert_rental_item(
                rental.id,
                dress.id,
                dress.rental_price,
                connection=self._connection,
            )
            reserved = self._dress_repo.reserve(dress.id)
            if not reserved:
                raise ValidationError(
                    f"Dress {dress.id} was rented by someone else.",
                    RentalFailure.ITEM_UNAVAILABLE,
                )
        return rental

    def preview_late_fee(
        self, rental: Rental, compare_date: Optional[date | str] = None
    ) -> float:
        """Late fee as of ``compare_date`` (default: return date, then today)."""
        if compare_date is None and rental.return_date:
            compare_date = rental.return_date
        return fees.late_fee(rental.due_date, compare_date, self._rules.late_fee_per_day)

    def calculate_late_fee(self, rental_id: int) -> float:
        """Compute the late fee and store it on the rental."""
        rental = self.get_rental(rental_id)
        fee = self.preview_late_fee(rental)
        try:
            rental_repo.set_late_fee(rental_id, fee, connection=self._connection)
        except sqlite3.Error as exc:
            raise PersistenceError("The late fee could not be saved.") from exc
        return fee

    def return_rental(
        self,
        rental_id: int,
        return_date: Optional[date | str] = None,
    ) -> ReturnResult:
        """Close an Active rental, store its late fee and release its dresses.

        Returning a rental that is already Returned changes nothing and
        reports ``already_returned=True``.
        """
        rental = self.get_rental(rental_id)
        if rental.status == RentalStatus.RETURNED:
            self._logger.info("Rental id=%s already returned", rental_id)
            return ReturnResult(
                rental=rental, late_fee=rental.late_fee, already_returned=True
            )
        try:
            returned_on = parse_date(return_date or date.today())
        except ValueError as exc:
            raise ValidationError(
                "Invalid return date. Please use the YYYY-MM-DD format.",
                RentalFailure.INVALID_DATE,
            ) from exc
        if returned_on < parse_date(rental.rental_date):
            raise ValidationError(
                "Return date cannot be before the rental date.",
                RentalFailure.INVALID_DATE,
            )
        fee = self.preview_late_fee(rental, returned_on)

        try:
            with transaction(self._connection):
                marked = rental_repo.mark_returned(
                    rental_id,
                    returned_on.isoformat(),
                    fee,
                    connection=self._connection,
                )
                if marked:
                    for item in rental_repo.list_items(
                        rental_id, connection=self._connection
                    ):
                        self._dress_repo.set_availability(
                            item.dress_id, AvailabilityStatus.AVAILABLE
                        )
        except sqlite3.Error as exc:
            self._logger.exception("Rental return rolled back id=%s", rental_id)
            raise PersistenceError(
                "The return could not be saved. No changes were made."
            ) from exc

        updated = self.get_rental(rental_id)
        if not marked:
            return ReturnResult(
                rental=updated, late_fee=updated.late_fee, already_returned=True
            )
        self._logger.info(
            "Returned rental id=%s on %s late_fee=%.2f", rental_id, returned_on, fee
        )
        return ReturnResult(rental=updated, late_fee=fee)
