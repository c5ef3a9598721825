"""Dress availability checks across date ranges."""

from __future__ import annotations

import sqlite3
from datetime import date
from typing import Optional

from dress_rental.logging_config import get_logger
from dress_rental.repositories import rental_repo
from dress_rental.services.dates import parse_date


def intervals_overlap(
    start_a: date, end_a: date, start_b: date, end_b: date
) -> bool:
    """Inclusive overlap: ``[a1, a2]`` and ``[b1, b2]`` share at least one day."""
    return start_a <= end_b and start_b <= end_a


class AvailabilityService:
    """Answers whether a dress is free for a date range.

    Only Active rentals block a dress; Returned rentals never do.
    """

    def __init__(self, connection: sqlite3.Connection) -> None:
        self._connection = connection
        self._connection.row_factory = sqlite3.Row
        self._logger = get_logger(self.__class__.__name__)

    def conflicting_rentals(
        self,
        dress_id: int,
        start_date: date | str,
        end_date: date | str,
        exclude_rental_id: Optional[int] = None,
    ) -> list[int]:
        """Ids of Active rentals whose booking overlaps the requested range."""
        start = parse_date(start_date)
        end = parse_date(end_date)
        if end < start:
            raise ValueError("End date must not be before start date.")
        bookings = rental_repo.list_active_bookings(
            dress_id,
            exclude_rental_id=exclude_rental_id,
            connection=self._connection,
        )
        return [
            booking.rental_id
            for booking in bookings
            if intervals_overlap(
                parse_date(booking.rental_date),
                parse_date(booking.due_date),
                start,
                end,
            )
        ]

    def is_available(
        self,
        dress_id: int,
        start_date: date | str,
        end_date: date | str,
        exclude_rental_id: Optional[int] = None,
    ) -> bool:
        conflicts = self.conflicting_rentals(
            dress_id, start_date, end_date, exclude_rental_id=exclude_rental_id
        )
        if conflicts:
            self._logger.debug(
                "Dress %s is booked by rental(s) %s for %s..%s",
                dress_id,
                conflicts,
                start_date,
                end_date,
            )
        return not conflicts
