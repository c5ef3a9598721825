"""Customer service for registration rules."""

from __future__ import annotations

import sqlite3
from datetime import date
from typing import Optional

from dress_rental.domain.models import Customer
from dress_rental.logging_config import get_logger
from dress_rental.repositories import CustomerRepo, rental_repo
from dress_rental.services import rules
from dress_rental.services.dates import parse_date
from dress_rental.services.errors import (
    NotFoundError,
    PersistenceError,
    ValidationError,
)
from dress_rental.services.rules import DEFAULT_RULES, RentalRules


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


class CustomerService:
    """Service for customer registration and lookup."""

    def __init__(
        self,
        connection: sqlite3.Connection,
        rental_rules: RentalRules = DEFAULT_RULES,
    ) -> None:
        self._connection = connection
        self._repo = CustomerRepo(connection)
        self._rules = rental_rules
        self._logger = get_logger(self.__class__.__name__)

    def get_customer(self, customer_id: int) -> Customer:
        customer = self._repo.get_by_id(customer_id)
        if customer is None:
            raise NotFoundError(f"Customer {customer_id} not found.")
        return customer

    def get_by_ic(self, ic_number: str) -> Optional[Customer]:
        return self._repo.get_by_ic(ic_number.strip())

    def list_customers(self) -> list[Customer]:
        return self._repo.list_all()

    def search(self, term: str) -> list[Customer]:
        term = term.strip()
        if not term:
            return self._repo.list_all()
        return self._repo.search(term)

    def active_rental_count(self, customer_id: int) -> int:
        return self._repo.count_active_rentals(customer_id)

    def create_customer(
        self,
        name: str,
        ic_number: str,
        date_of_birth: date | str,
        phone: Optional[str] = None,
        email: Optional[str] = None,
        address: Optional[str] = None,
        *,
        today: Optional[date] = None,
    ) -> Customer:
        fields = self._validate(name, ic_number, date_of_birth, phone, email, today)
        if self._repo.get_by_ic(fields["ic_number"]) is not None:
            raise ValidationError("IC Number already exists.")
        try:
            customer = self._repo.create(
                fields["name"],
                fields["ic_number"],
                fields["phone"],
                fields["email"],
                _clean(address),
                fields["date_of_birth"],
            )
        except sqlite3.Error as exc:
            raise PersistenceError("The customer could not be saved.") from exc
        self._logger.info("Created customer id=%s", customer.id)
        return customer

    def update_customer(
        self,
        customer_id: int,
        name: str,
        ic_number: str,
        date_of_birth: date | str,
        phone: Optional[str] = None,
        email: Optional[str] = None,
        address: Optional[str] = None,
        *,
        today: Optional[date] = None,
    ) -> Customer:
        self.get_customer(customer_id)
        fields = self._validate(name, ic_number, date_of_birth, phone, email, today)
        existing = self._repo.get_by_ic(fields["ic_number"])
        if existing is not None and existing.id != customer_id:
            raise ValidationError("IC Number already exists.")
        try:
            customer = self._repo.update(
                customer_id,
                fields["name"],
                fields["ic_number"],
                fields["phone"],
                fields["email"],
                _clean(address),
                fields["date_of_birth"],
            )
        except sqlite3.Error as exc:
            raise PersistenceError("The customer could not be saved.") from exc
        if customer is None:
            raise NotFoundError(f"Customer {customer_id} not found.")
        return customer

    def delete_customer(self, customer_id: int) -> None:
        self.get_customer(customer_id)
        history = rental_repo.list_rentals(
            customer_id=customer_id, connection=self._connection
        )
        if history:
            raise ValidationError(
                "Customers with rental history cannot be deleted."
            )
        try:
            self._repo.delete(customer_id)
        except sqlite3.Error as exc:
            raise PersistenceError("The customer could not be deleted.") from exc
        self._logger.info("Deleted customer id=%s", customer_id)

    def _validate(
        self,
        name: str,
        ic_number: str,
        date_of_birth: date | str,
        phone: Optional[str],
        email: Optional[str],
        today: Optional[date],
    ) -> dict[str, Optional[str]]:
        name = name.strip()
        if not name:
            raise ValidationError("Customer name is required.")
        ic_number = ic_number.strip()
        if not rules.is_valid_ic_number(ic_number):
            raise ValidationError("Invalid IC Number. Expected YYMMDD-PB-####.")
        try:
            birth = parse_date(date_of_birth)
        except ValueError as exc:
            raise ValidationError(
                "Invalid date of birth. Please use the YYYY-MM-DD format."
            ) from exc
        if not rules.is_adult(birth, today, self._rules):
            raise ValidationError(
                f"Customer must be at least {self._rules.min_customer_age} years old."
            )
        phone = _clean(phone)
        if phone and not rules.is_valid_phone(phone):
            raise ValidationError("Invalid phone number.")
        email = _clean(email)
        if email and not rules.is_valid_email(email):
            raise ValidationError("Invalid email address.")
        return {
            "name": name,
            "ic_number": ic_number,
            "date_of_birth": birth.isoformat(),
            "phone": phone,
            "email": email,
        }
