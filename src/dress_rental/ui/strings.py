"""Centralized UI strings for consistent communication."""

from __future__ import annotations

from typing import Optional

from PySide6 import QtCore

from dress_rental.config import CURRENCY_SYMBOL
from dress_rental.version import __app_name__

APP_NAME = __app_name__

TITLE_WARNING = "Warning"
TITLE_ERROR = "Error"
TITLE_SUCCESS = "Success"
TITLE_CONFIRMATION = "Confirm"

MSG_UNEXPECTED = "Something went wrong. Details were written to the log file."


def format_currency(value: float) -> str:
    return f"{CURRENCY_SYMBOL} {value:,.2f}"


def format_date(value: Optional[str]) -> str:
    if not value:
        return "-"
    parsed = QtCore.QDate.fromString(value[:10], "yyyy-MM-dd")
    return parsed.toString("dd/MM/yyyy") if parsed.isValid() else value


def to_iso(value: QtCore.QDate) -> str:
    return value.toString("yyyy-MM-dd")
