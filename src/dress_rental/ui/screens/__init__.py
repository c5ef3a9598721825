"""Screen widgets for the Dress Rental Manager UI."""

from dress_rental.ui.screens.customers_screen import CustomersScreen
from dress_rental.ui.screens.dresses_screen import DressesScreen
from dress_rental.ui.screens.payments_screen import PaymentsScreen
from dress_rental.ui.screens.rentals_screen import RentalsScreen
from dress_rental.ui.screens.reports_screen import ReportsScreen
from dress_rental.ui.screens.users_screen import UsersScreen

__all__ = [
    "CustomersScreen",
    "DressesScreen",
    "PaymentsScreen",
    "RentalsScreen",
    "ReportsScreen",
    "UsersScreen",
]
