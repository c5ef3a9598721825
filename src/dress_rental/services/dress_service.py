"""Dress inventory service."""

from __future__ import annotations

import sqlite3
from typing import Optional

from dress_rental.domain.models import (
    AvailabilityStatus,
    CleaningStatus,
    ConditionStatus,
    Dress,
)
from dress_rental.logging_config import get_logger
from dress_rental.repositories import DressRepo
from dress_rental.services.errors import (
    NotFoundError,
    PersistenceError,
    ValidationError,
)


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


def _coerce(enum_cls, value, label: str):
    try:
        return enum_cls(value)
    except ValueError as exc:
        raise ValidationError(f"Invalid {label}: {value}.") from exc


class DressService:
    """Service for the dress catalogue.

    Rented status is owned by the rental lifecycle: it is set when a rental
    is created and cleared when it is returned, never by hand.
    """

    def __init__(self, connection: sqlite3.Connection) -> None:
        self._connection = connection
        self._repo = DressRepo(connection)
        self._logger = get_logger(self.__class__.__name__)

    def get_dress(self, dress_id: int) -> Dress:
        dress = self._repo.get_by_id(dress_id)
        if dress is None:
            raise NotFoundError(f"Dress {dress_id} not found.")
        return dress

    def get_price(self, dress_id: int) -> float:
        return self.get_dress(dress_id).rental_price

    def list_dresses(self) -> list[Dress]:
        return self._repo.list_all()

    def list_available(self) -> list[Dress]:
        return self._repo.list_by_availability(AvailabilityStatus.AVAILABLE)

    def list_by_category(self, category: str) -> list[Dress]:
        return self._repo.list_by_category(category)

    def list_categories(self) -> list[str]:
        return self._repo.list_categories()

    def search(self, term: str) -> list[Dress]:
        return self._repo.search(term)

    def create_dress(
        self,
        name: str,
        rental_price: float,
        category: Optional[str] = None,
        size: Optional[str] = None,
        color: Optional[str] = None,
        condition_status: ConditionStatus | str = ConditionStatus.GOOD,
        cleaning_status: CleaningStatus | str = CleaningStatus.CLEAN,
    ) -> Dress:
        name = self._validate_name(name)
        price = self._validate_price(rental_price)
        condition = _coerce(ConditionStatus, condition_status, "condition")
        cleaning = _coerce(CleaningStatus, cleaning_status, "cleaning status")
        try:
            dress = self._repo.create(
                name,
                _clean(category),
                _clean(size),
                _clean(color),
                price,
                condition,
                AvailabilityStatus.AVAILABLE,
                cleaning,
            )
        except sqlite3.Error as exc:
            raise PersistenceError("The dress could not be saved.") from exc
        self._logger.info("Created dress id=%s price=%.2f", dress.id, price)
        return dress

    def update_dress(
        self,
        dress_id: int,
        name: str,
        rental_price: float,
        category: Optional[str] = None,
        size: Optional[str] = None,
        color: Optional[str] = None,
        condition_status: ConditionStatus | str = ConditionStatus.GOOD,
        cleaning_status: CleaningStatus | str = CleaningStatus.CLEAN,
    ) -> Dress:
        current = self.get_dress(dress_id)
        name = self._validate_name(name)
        price = self._validate_price(rental_price)
        condition = _coerce(ConditionStatus, condition_status, "condition")
        cleaning = _coerce(CleaningStatus, cleaning_status, "cleaning status")
        try:
            dress = self._repo.update(
                dress_id,
                name,
                _clean(category),
                _clean(size),
                _clean(color),
                price,
                condition,
                current.availability_status,
                cleaning,
            )
        except sqlite3.Error as exc:
            raise PersistenceError("The dress could not be saved.") from exc
        if dress is None:
            raise NotFoundError(f"Dress {dress_id} not found.")
        return dress

    def set_availability(
        self, dress_id: int, status: AvailabilityStatus | str
    ) -> Dress:
        """Move a dress between Available and Maintenance."""
        new_status = _coerce(AvailabilityStatus, status, "availability")
        dress = self.get_dress(dress_id)
        if new_status == AvailabilityStatus.RENTED:
            raise ValidationError("Dresses are marked Rented by creating a rental.")
        if dress.availability_status == AvailabilityStatus.RENTED:
            raise ValidationError(
                "This dress is out on rental. Return the rental to release it."
            )
        try:
            self._repo.set_availability(dress_id, new_status)
        except sqlite3.Error as exc:
            raise PersistenceError("The availability could not be saved.") from exc
        self._logger.info(
            "Dress id=%s availability %s -> %s",
            dress_id,
            dress.availability_status.value,
            new_status.value,
        )
        return self.get_dress(dress_id)

    def delete_dress(self, dress_id: int) -> None:
        self.get_dress(dress_id)
        if self._repo.count_rental_lines(dress_id) > 0:
            raise ValidationError("Dresses with rental history cannot be deleted.")
        try:
            self._repo.delete(dress_id)
        except sqlite3.Error as exc:
            raise PersistenceError("The dress could not be deleted.") from exc
        self._logger.info("Deleted dress id=%s", dress_id)

    def _validate_name(self, name: str) -> str:
        name = name.strip()
        if not name:
            raise ValidationError("Dress name is required.")
        return name

    def _validate_price(self, rental_price: float) -> float:
        try:
            price = float(rental_price)
        except (TypeError, ValueError) as exc:
            raise ValidationError("Rental price must be a number.") from exc
        if price <= 0:
            raise ValidationError("Rental price must be greater than zero.")
        return price
