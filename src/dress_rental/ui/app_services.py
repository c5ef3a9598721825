"""Service container for the UI layer."""

from __future__ import annotations

import sqlite3
from dataclasses import dataclass
from pathlib import Path

from dress_rental.services.auth_service import AuthService, Session
from dress_rental.services.customer_service import CustomerService
from dress_rental.services.dress_service import DressService
from dress_rental.services.payment_service import PaymentService
from dress_rental.services.rental_service import RentalService
from dress_rental.services.report_service import ReportService
from dress_rental.services.rules import RentalRules
from dress_rental.ui.data_bus import DataEventBus
from dress_rental.utils.theme import ThemeManager


@dataclass(frozen=True)
class AppServices:
    """Shared services and the logged-in session for dependency injection."""

    connection: sqlite3.Connection
    session: Session
    rules: RentalRules
    data_bus: DataEventBus
    auth_service: AuthService
    customer_service: CustomerService
    dress_service: DressService
    rental_service: RentalService
    payment_service: PaymentService
    report_service: ReportService
    theme_manager: ThemeManager
    receipts_dir: Path

    def log_activity(
        self,
        action: str,
        table_name: str,
        record_id: int | None = None,
        details: str | None = None,
    ) -> None:
        self.auth_service.log_activity(
            self.session, action, table_name, record_id, details
        )
