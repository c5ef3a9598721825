"""Application entry point."""

from __future__ import annotations

import sys

from PySide6 import QtWidgets

from dress_rental.config import AppConfig
from dress_rental.db.connection import get_connection
from dress_rental.db.migrations import apply_migrations
from dress_rental.logging_config import configure_logging, get_logger
from dress_rental.paths import get_config_path, get_db_path, get_receipts_dir
from dress_rental.services.auth_service import AuthService
from dress_rental.services.customer_service import CustomerService
from dress_rental.services.dress_service import DressService
from dress_rental.services.payment_service import PaymentService
from dress_rental.services.rental_service import RentalService
from dress_rental.services.report_service import ReportService
from dress_rental.services.rules import load_rental_rules
from dress_rental.ui.app_services import AppServices
from dress_rental.ui.data_bus import DataEventBus
from dress_rental.ui.dialogs import LoginDialog
from dress_rental.ui.main_window import MainWindow
from dress_rental.utils.theme import ThemeManager


def main() -> int:
    """Start the Dress Rental Manager application."""
    configure_logging()
    connection = get_connection(get_db_path())
    apply_migrations(connection)

    config = AppConfig()
    logger = get_logger(__name__)
    logger.info("Starting %s", config.app_name)

    auth_service = AuthService(connection)
    auth_service.ensure_default_admin()
    rules = load_rental_rules(get_config_path())

    app = QtWidgets.QApplication(sys.argv)
    app.setApplicationName(config.app_name)
    app.setOrganizationName(config.organization_name)
    app.setOrganizationDomain(config.organization_domain)
    app.aboutToQuit.connect(connection.close)
    theme_manager = ThemeManager(app, get_config_path())

    login = LoginDialog(auth_service)
    if login.exec() != QtWidgets.QDialog.Accepted or login.session is None:
        logger.info("Login cancelled")
        connection.close()
        return 0

    services = AppServices(
        connection=connection,
        session=login.session,
        rules=rules,
        data_bus=DataEventBus(),
        auth_service=auth_service,
        customer_service=CustomerService(connection, rules),
        dress_service=DressService(connection),
        rental_service=RentalService(connection, rules),
        payment_service=PaymentService(connection),
        report_service=ReportService(connection, rules),
        theme_manager=theme_manager,
        receipts_dir=get_receipts_dir(),
    )

    window = MainWindow(services)
    window.show()

    return app.exec()


if __name__ == "__main__":
    raise SystemExit(main())
