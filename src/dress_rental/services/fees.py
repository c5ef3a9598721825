"""Late fee arithmetic."""

from __future__ import annotations

from datetime import date
from typing import Optional

from dress_rental.services.dates import parse_date


def days_late(due_date: date | str, compare_date: date | str) -> int:
    """Whole calendar days ``compare_date`` falls after ``due_date`` (never negative)."""
    delta = parse_date(compare_date) - parse_date(due_date)
    return max(0, delta.days)


def late_fee(
    due_date: date | str,
    compare_date: Optional[date | str],
    per_day: float,
) -> float:
    """Flat per-day penalty; ``compare_date`` defaults to today."""
    if compare_date is None:
        compare_date = date.today()
    return days_late(due_date, compare_date) * per_day
