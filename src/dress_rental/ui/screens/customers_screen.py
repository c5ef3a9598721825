"""Screen for customer management."""

from __future__ import annotations

from typing import List, Optional

from PySide6 import QtCore, QtWidgets

from dress_rental.domain.models import Customer
from dress_rental.ui.app_services import AppServices
from dress_rental.ui.screens.base_screen import (
    BaseScreen,
    build_table,
    confirm,
    fill_table,
    show_service_error,
)
from dress_rental.ui.strings import TITLE_WARNING, format_currency, format_date, to_iso


class CustomerDialog(QtWidgets.QDialog):
    """Dialog for creating or editing a customer."""

    def __init__(
        self,
        parent: QtWidgets.QWidget | None = None,
        customer: Optional[Customer] = None,
    ) -> None:
        super().__init__(parent)
        self.setWindowTitle("Customer")
        self.setModal(True)
        self._build_ui()
        if customer:
            self._load_customer(customer)

    def _build_ui(self) -> None:
        layout = QtWidgets.QVBoxLayout(self)

        form = QtWidgets.QFormLayout()
        self.name_input = QtWidgets.QLineEdit()
        self.ic_input = QtWidgets.QLineEdit()
        self.ic_input.setPlaceholderText("YYMMDD-PB-####")
        self.birth_input = QtWidgets.QDateEdit(QtCore.QDate(1995, 1, 1))
        self.birth_input.setCalendarPopup(True)
        self.birth_input.setDisplayFormat("dd/MM/yyyy")
        self.phone_input = QtWidgets.QLineEdit()
        self.phone_input.setPlaceholderText("012-345 6789")
        self.email_input = QtWidgets.QLineEdit()
        self.address_input = QtWidgets.QPlainTextEdit()
        self.address_input.setFixedHeight(80)

        form.addRow("Name:", self.name_input)
        form.addRow("IC Number:", self.ic_input)
        form.addRow("Date of birth:", self.birth_input)
        form.addRow("Phone:", self.phone_input)
        form.addRow("Email:", self.email_input)
        form.addRow("Address:", self.address_input)
        layout.addLayout(form)

        self.button_box = QtWidgets.QDialogButtonBox(
            QtWidgets.QDialogButtonBox.Save | QtWidgets.QDialogButtonBox.Cancel
        )
        self.button_box.accepted.connect(self._on_accept)
        self.button_box.rejected.connect(self.reject)
        layout.addWidget(self.button_box)

    def _load_customer(self, customer: Customer) -> None:
        self.name_input.setText(customer.name)
        self.ic_input.setText(customer.ic_number)
        birth = QtCore.QDate.fromString(customer.date_of_birth, "yyyy-MM-dd")
        if birth.isValid():
            self.birth_input.setDate(birth)
        self.phone_input.setText(customer.phone or "")
        self.email_input.setText(customer.email or "")
        self.address_input.setPlainText(customer.address or "")

    def _on_accept(self) -> None:
        if not self.name_input.text().strip() or not self.ic_input.text().strip():
            QtWidgets.QMessageBox.warning(
                self, TITLE_WARNING, "Name and IC Number are required."
            )
            return
        self.accept()

    def get_data(self) -> dict[str, Optional[str]]:
        return {
            "name": self.name_input.text().strip(),
            "ic_number": self.ic_input.text().strip(),
            "date_of_birth": to_iso(self.birth_input.date()),
            "phone": self.phone_input.text().strip() or None,
            "email": self.email_input.text().strip() or None,
            "address": self.address_input.toPlainText().strip() or None,
        }


class CustomersScreen(BaseScreen):
    """Screen for customers."""

    def __init__(self, services: AppServices) -> None:
        super().__init__(services)
        self._customers: List[Customer] = []
        self._search_timer = QtCore.QTimer(self)
        self._search_timer.setSingleShot(True)
        self._search_timer.setInterval(250)
        self._search_timer.timeout.connect(self.refresh)
        self._build_ui()
        self.refresh()

    def _build_ui(self) -> None:
        layout = QtWidgets.QVBoxLayout(self)
        self._add_header(
            layout,
            "Customers",
            "Register customers (18 or older) and look them up by name, IC, phone or email.",
        )

        search_layout = QtWidgets.QHBoxLayout()
        self.search_input = QtWidgets.QLineEdit()
        self.search_input.setPlaceholderText("Search customers")
        self.search_input.textChanged.connect(lambda _text: self._search_timer.start())
        search_layout.addWidget(QtWidgets.QLabel("Search:"))
        search_layout.addWidget(self.search_input)
        layout.addLayout(search_layout)

        button_layout = QtWidgets.QHBoxLayout()
        self.new_button = QtWidgets.QPushButton("New")
        self.edit_button = QtWidgets.QPushButton("Edit")
        self.delete_button = QtWidgets.QPushButton("Delete")
        self.history_button = QtWidgets.QPushButton("History")
        self.new_button.clicked.connect(self._on_new)
        self.edit_button.clicked.connect(self._on_edit)
        self.delete_button.clicked.connect(self._on_delete)
        self.history_button.clicked.connect(self._on_history)
        for button in (
            self.new_button,
            self.edit_button,
            self.delete_button,
            self.history_button,
        ):
            button_layout.addWidget(button)
        button_layout.addStretch()
        layout.addLayout(button_layout)

        self.table = self._themed(
            build_table(
                ["ID", "Name", "IC Number", "Phone", "Email", "Date of birth", "Active rentals"]
            )
        )
        self.table.itemSelectionChanged.connect(self._on_selection_changed)
        layout.addWidget(self.table)
        self._on_selection_changed()

    def refresh(self) -> None:
        try:
            customers = self._services.customer_service.search(self.search_input.text())
            rows = [
                [
                    str(customer.id),
                    customer.name,
                    customer.ic_number,
                    customer.phone or "-",
                    customer.email or "-",
                    format_date(customer.date_of_birth),
                    str(self._services.customer_service.active_rental_count(customer.id)),
                ]
                for customer in customers
            ]
        except Exception as exc:
            show_service_error(self, exc)
            return
        self._customers = customers
        fill_table(self.table, rows)
        self._on_selection_changed()

    def _get_selected_customer(self) -> Optional[Customer]:
        selected = self.table.selectionModel().selectedRows()
        if not selected:
            return None
        row = selected[0].row()
        if row < 0 or row >= len(self._customers):
            return None
        return self._customers[row]

    def _on_selection_changed(self) -> None:
        has_selection = self._get_selected_customer() is not None
        self.edit_button.setEnabled(has_selection)
        self.delete_button.setEnabled(has_selection)
        self.history_button.setEnabled(has_selection)

    def _on_new(self) -> None:
        dialog = CustomerDialog(self)
        if dialog.exec() != QtWidgets.QDialog.Accepted:
            return
        try:
            customer = self._services.customer_service.create_customer(**dialog.get_data())
        except Exception as exc:
            show_service_error(self, exc)
            return
        self._services.log_activity("Customer Created", "customers", customer.id, customer.name)
        self._services.data_bus.notify(f"Customer {customer.name} registered.")

    def _on_edit(self) -> None:
        customer = self._get_selected_customer()
        if not customer:
            return
        dialog = CustomerDialog(self, customer=customer)
        if dialog.exec() != QtWidgets.QDialog.Accepted:
            return
        try:
            updated = self._services.customer_service.update_customer(
                customer.id, **dialog.get_data()
            )
        except Exception as exc:
            show_service_error(self, exc)
            return
        self._services.log_activity("Customer Updated", "customers", updated.id)
        self._services.data_bus.notify(f"Customer {updated.name} updated.")

    def _on_delete(self) -> None:
        customer = self._get_selected_customer()
        if not customer:
            return
        if not confirm(self, f"Delete customer '{customer.name}'?"):
            return
        try:
            self._services.customer_service.delete_customer(customer.id)
        except Exception as exc:
            show_service_error(self, exc)
            return
        self._services.log_activity("Customer Deleted", "customers", customer.id)
        self._services.data_bus.notify(f"Customer {customer.name} deleted.")

    def _on_history(self) -> None:
        customer = self._get_selected_customer()
        if not customer:
            return
        try:
            rentals = self._services.rental_service.list_customer_rentals(customer.id)
        except Exception as exc:
            show_service_error(self, exc)
            return
        if not rentals:
            message = "No rentals yet."
        else:
            message = "\n".join(
                f"#{rental.id}  {format_date(rental.rental_date)} to "
                f"{format_date(rental.due_date)}  {rental.status.value}  "
                f"{format_currency(rental.amount_due)}"
                for rental in rentals
            )
        QtWidgets.QMessageBox.information(self, f"Rentals of {customer.name}", message)
