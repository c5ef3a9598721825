"""Calendar date helpers shared by the services."""

from __future__ import annotations

import re
from datetime import date, datetime, timedelta

from dateutil import parser

# YYYY-MM-DD, optionally followed by a time part as stored in timestamps.
_ISO_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}(?:[T ].+)?$")


def parse_date(value: date | str) -> date:
    """Parse a ``YYYY-MM-DD`` date (or ISO datetime) string into a ``date``.

    Raises ``ValueError`` for anything that is not a complete, valid
    calendar date; partial forms such as ``2024`` or ``2024-06`` and the
    basic ``20240601`` layout are rejected.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip()
    if not _ISO_DATE_RE.match(text):
        raise ValueError(f"Invalid date: {value!r}")
    try:
        return parser.isoparse(text).date()
    except (OverflowError, ValueError) as exc:
        raise ValueError(f"Invalid date: {value!r}") from exc


def to_iso(value: date | str) -> str:
    return parse_date(value).isoformat()


def add_days(start: date | str, days: int) -> date:
    """Calendar-day arithmetic; no business-day adjustment.

    Raises ``ValueError`` when the result falls outside the calendar.
    """
    try:
        return parse_date(start) + timedelta(days=days)
    except OverflowError as exc:
        raise ValueError(f"Date out of range: {start!r} + {days} days") from exc
