"""Screen for rentals: booking, returns and late fees."""

from __future__ import annotations

from datetime import date
from typing import List, Optional

from PySide6 import QtCore, QtWidgets

from dress_rental.domain.models import Customer, Dress, Rental, RentalStatus
from dress_rental.services.dates import add_days
from dress_rental.services.rental_service import ReturnResult
from dress_rental.ui.app_services import AppServices
from dress_rental.ui.screens.base_screen import (
    BaseScreen,
    build_table,
    confirm,
    fill_table,
    show_service_error,
)
from dress_rental.ui.strings import (
    TITLE_SUCCESS,
    TITLE_WARNING,
    format_currency,
    format_date,
    to_iso,
)

FILTER_ALL = "All"
FILTER_ACTIVE = "Active"
FILTER_RETURNED = "Returned"
FILTER_OVERDUE = "Overdue"


class NewRentalDialog(QtWidgets.QDialog):
    """Pick a customer, a period and up to the item limit of available dresses."""

    def __init__(self, services: AppServices, parent: QtWidgets.QWidget | None = None) -> None:
        super().__init__(parent)
        self._services = services
        self._customers: List[Customer] = []
        self._dresses: List[Dress] = []
        self.setWindowTitle("New rental")
        self.setModal(True)
        self.resize(560, 520)
        self._build_ui()
        self._load_choices()
        self._update_summary()

    def _build_ui(self) -> None:
        rules = self._services.rules
        layout = QtWidgets.QVBoxLayout(self)
        form = QtWidgets.QFormLayout()

        self.customer_combo = QtWidgets.QComboBox()
        self.date_input = QtWidgets.QDateEdit(QtCore.QDate.currentDate())
        self.date_input.setCalendarPopup(True)
        self.date_input.setDisplayFormat("dd/MM/yyyy")
        self.duration_input = QtWidgets.QSpinBox()
        self.duration_input.setRange(rules.min_rental_days, rules.max_rental_days)
        self.duration_input.setValue(min(3, rules.max_rental_days))
        self.duration_input.setSuffix(" day(s)")
        self.due_label = QtWidgets.QLabel()

        form.addRow("Customer:", self.customer_combo)
        form.addRow("Rental date:", self.date_input)
        form.addRow("Duration:", self.duration_input)
        form.addRow("Due date:", self.due_label)
        layout.addLayout(form)

        layout.addWidget(
            QtWidgets.QLabel(
                f"Available dresses (select 1 to {rules.max_items_per_rental}):"
            )
        )
        self.dress_list = QtWidgets.QListWidget()
        layout.addWidget(self.dress_list)

        self.total_label = QtWidgets.QLabel()
        self.total_label.setStyleSheet("font-size: 16px; font-weight: 600;")
        layout.addWidget(self.total_label)

        button_box = QtWidgets.QDialogButtonBox(
            QtWidgets.QDialogButtonBox.Ok | QtWidgets.QDialogButtonBox.Cancel
        )
        button_box.button(QtWidgets.QDialogButtonBox.Ok).setText("Create rental")
        button_box.accepted.connect(self._on_accept)
        button_box.rejected.connect(self.reject)
        layout.addWidget(button_box)

        self.date_input.dateChanged.connect(lambda _value: self._update_summary())
        self.duration_input.valueChanged.connect(lambda _value: self._update_summary())
        self.dress_list.itemChanged.connect(lambda _item: self._update_summary())

    def _load_choices(self) -> None:
        self._customers = self._services.customer_service.list_customers()
        for customer in self._customers:
            self.customer_combo.addItem(
                f"{customer.name} ({customer.ic_number})", customer.id
            )
        self._dresses = self._services.dress_service.list_available()
        for dress in self._dresses:
            label = (
                f"#{dress.id} {dress.name} | {dress.category or '-'} | "
                f"{dress.size or '-'} | {format_currency(dress.rental_price)}/day"
            )
            item = QtWidgets.QListWidgetItem(label)
            item.setData(QtCore.Qt.UserRole, dress.id)
            item.setFlags(item.flags() | QtCore.Qt.ItemIsUserCheckable)
            item.setCheckState(QtCore.Qt.Unchecked)
            self.dress_list.addItem(item)

    def selected_dress_ids(self) -> list[int]:
        ids = []
        for index in range(self.dress_list.count()):
            item = self.dress_list.item(index)
            if item.checkState() == QtCore.Qt.Checked:
                ids.append(int(item.data(QtCore.Qt.UserRole)))
        return ids

    def _update_summary(self) -> None:
        duration = self.duration_input.value()
        due = add_days(to_iso(self.date_input.date()), duration)
        self.due_label.setText(due.strftime("%d/%m/%Y"))
        chosen = set(self.selected_dress_ids())
        dresses = [dress for dress in self._dresses if dress.id in chosen]
        total = self._services.rental_service.quote_total(dresses, duration)
        self.total_label.setText(
            f"{len(dresses)} dress(es), total {format_currency(total)}"
        )

    def _on_accept(self) -> None:
        if self.customer_combo.currentIndex() < 0:
            QtWidgets.QMessageBox.warning(self, TITLE_WARNING, "Register a customer first.")
            return
        if not self.selected_dress_ids():
            QtWidgets.QMessageBox.warning(self, TITLE_WARNING, "Select at least one dress.")
            return
        self.accept()

    def get_data(self) -> dict[str, object]:
        return {
            "customer_id": int(self.customer_combo.currentData()),
            "rental_date": to_iso(self.date_input.date()),
            "duration_days": self.duration_input.value(),
            "dress_ids": self.selected_dress_ids(),
        }


class ReturnDialog(QtWidgets.QDialog):
    """Ask for the return date and preview the late fee."""

    def __init__(
        self,
        services: AppServices,
        rental: Rental,
        parent: QtWidgets.QWidget | None = None,
    ) -> None:
        super().__init__(parent)
        self._services = services
        self._rental = rental
        self.setWindowTitle(f"Return rental #{rental.id}")
        self.setModal(True)

        layout = QtWidgets.QVBoxLayout(self)
        form = QtWidgets.QFormLayout()
        self.date_input = QtWidgets.QDateEdit(QtCore.QDate.currentDate())
        self.date_input.setCalendarPopup(True)
        self.date_input.setDisplayFormat("dd/MM/yyyy")
        self.fee_label = QtWidgets.QLabel()
        form.addRow("Due date:", QtWidgets.QLabel(format_date(rental.due_date)))
        form.addRow("Return date:", self.date_input)
        form.addRow("Late fee:", self.fee_label)
        layout.addLayout(form)

        button_box = QtWidgets.QDialogButtonBox(
            QtWidgets.QDialogButtonBox.Ok | QtWidgets.QDialogButtonBox.Cancel
        )
        button_box.accepted.connect(self.accept)
        button_box.rejected.connect(self.reject)
        layout.addWidget(button_box)

        self.date_input.dateChanged.connect(lambda _value: self._update_fee())
        self._update_fee()

    def _update_fee(self) -> None:
        fee = self._services.rental_service.preview_late_fee(
            self._rental, to_iso(self.date_input.date())
        )
        self.fee_label.setText(format_currency(fee))

    def return_date(self) -> str:
        return to_iso(self.date_input.date())


class RentalsScreen(BaseScreen):
    """Screen listing rentals with lifecycle actions."""

    def __init__(self, services: AppServices) -> None:
        super().__init__(services)
        self._rentals: List[Rental] = []
        self._customer_names: dict[int, str] = {}
        self._build_ui()
        self.refresh()

    def _build_ui(self) -> None:
        layout = QtWidgets.QVBoxLayout(self)
        rules = self._services.rules
        self._add_header(
            layout,
            "Rentals",
            f"Up to {rules.max_items_per_rental} dresses for "
            f"{rules.min_rental_days}-{rules.max_rental_days} days, at most "
            f"{rules.max_active_rentals} active rentals per customer. Late returns cost "
            f"{format_currency(rules.late_fee_per_day)} per day.",
        )

        filter_layout = QtWidgets.QHBoxLayout()
        self.status_filter = QtWidgets.QComboBox()
        self.status_filter.addItems(
            [FILTER_ALL, FILTER_ACTIVE, FILTER_OVERDUE, FILTER_RETURNED]
        )
        self.status_filter.currentIndexChanged.connect(lambda _index: self.refresh())
        filter_layout.addWidget(QtWidgets.QLabel("Show:"))
        filter_layout.addWidget(self.status_filter)
        filter_layout.addStretch()
        layout.addLayout(filter_layout)

        button_layout = QtWidgets.QHBoxLayout()
        self.new_button = QtWidgets.QPushButton("New rental")
        self.return_button = QtWidgets.QPushButton("Return")
        self.fee_button = QtWidgets.QPushButton("Update late fee")
        self.details_button = QtWidgets.QPushButton("Details")
        self.new_button.clicked.connect(self._on_new)
        self.return_button.clicked.connect(self._on_return)
        self.fee_button.clicked.connect(self._on_update_fee)
        self.details_button.clicked.connect(self._on_details)
        for button in (
            self.new_button,
            self.return_button,
            self.fee_button,
            self.details_button,
        ):
            button_layout.addWidget(button)
        button_layout.addStretch()
        layout.addLayout(button_layout)

        self.table = self._themed(
            build_table(
                [
                    "ID",
                    "Customer",
                    "Rental date",
                    "Due date",
                    "Returned",
                    "Total",
                    "Late fee",
                    "Amount due",
                    "Status",
                ]
            )
        )
        self.table.itemSelectionChanged.connect(self._on_selection_changed)
        self.table.doubleClicked.connect(lambda _index: self._on_details())
        layout.addWidget(self.table)
        self._on_selection_changed()

    def _load_rentals(self) -> List[Rental]:
        service = self._services.rental_service
        choice = self.status_filter.currentText()
        if choice == FILTER_ACTIVE:
            return service.list_active_rentals()
        if choice == FILTER_OVERDUE:
            return service.list_overdue_rentals()
        if choice == FILTER_RETURNED:
            return service.list_rentals(status=RentalStatus.RETURNED)
        return service.list_rentals()

    def refresh(self) -> None:
        try:
            rentals = self._load_rentals()
            self._customer_names = {
                customer.id: customer.name
                for customer in self._services.customer_service.list_customers()
            }
        except Exception as exc:
            show_service_error(self, exc)
            return
        self._rentals = rentals
        today = date.today().isoformat()
        rows = []
        for rental in rentals:
            status = rental.status.value
            if rental.status == RentalStatus.ACTIVE and rental.due_date < today:
                status = "Overdue"
            rows.append(
                [
                    str(rental.id),
                    self._customer_names.get(rental.customer_id, str(rental.customer_id)),
                    format_date(rental.rental_date),
                    format_date(rental.due_date),
                    format_date(rental.return_date),
                    format_currency(rental.total_amount),
                    format_currency(rental.late_fee),
                    format_currency(rental.amount_due),
                    status,
                ]
            )
        fill_table(self.table, rows)
        self._on_selection_changed()

    def _selected(self) -> Optional[Rental]:
        selected = self.table.selectionModel().selectedRows()
        if not selected:
            return None
        row = selected[0].row()
        return self._rentals[row] if 0 <= row < len(self._rentals) else None

    def _on_selection_changed(self) -> None:
        rental = self._selected()
        is_active = rental is not None and rental.status == RentalStatus.ACTIVE
        self.return_button.setEnabled(is_active)
        self.fee_button.setEnabled(rental is not None)
        self.details_button.setEnabled(rental is not None)

    def _on_new(self) -> None:
        try:
            dialog = NewRentalDialog(self._services, self)
        except Exception as exc:
            show_service_error(self, exc)
            return
        if dialog.exec() != QtWidgets.QDialog.Accepted:
            return
        try:
            rental = self._services.rental_service.create_rental(**dialog.get_data())
        except Exception as exc:
            show_service_error(self, exc)
            return
        self._services.log_activity(
            "Rental Created",
            "rentals",
            rental.id,
            f"total={rental.total_amount:.2f}",
        )
        QtWidgets.QMessageBox.information(
            self,
            TITLE_SUCCESS,
            f"Rental #{rental.id} created. Due on {format_date(rental.due_date)}.\n"
            f"Total: {format_currency(rental.total_amount)}",
        )
        self._services.data_bus.notify(f"Rental #{rental.id} created.")

    def _on_return(self) -> None:
        rental = self._selected()
        if not rental:
            return
        dialog = ReturnDialog(self._services, rental, self)
        if dialog.exec() != QtWidgets.QDialog.Accepted:
            return
        try:
            result = self._services.rental_service.return_rental(
                rental.id, dialog.return_date()
            )
        except Exception as exc:
            show_service_error(self, exc)
            return
        self._report_return(result)

    def _report_return(self, result: ReturnResult) -> None:
        rental = result.rental
        if result.already_returned:
            QtWidgets.QMessageBox.information(
                self, TITLE_WARNING, f"Rental #{rental.id} was already returned."
            )
            return
        self._services.log_activity(
            "Rental Returned", "rentals", rental.id, f"late_fee={result.late_fee:.2f}"
        )
        QtWidgets.QMessageBox.information(
            self,
            TITLE_SUCCESS,
            f"Rental #{rental.id} returned.\n"
            f"Late fee: {format_currency(result.late_fee)}\n"
            f"Amount due: {format_currency(result.amount_due)}",
        )
        self._services.data_bus.notify(f"Rental #{rental.id} returned.")

    def _on_update_fee(self) -> None:
        rental = self._selected()
        if not rental:
            return
        if not confirm(self, f"Recalculate and store the late fee for rental #{rental.id}?"):
            return
        try:
            fee = self._services.rental_service.calculate_late_fee(rental.id)
        except Exception as exc:
            show_service_error(self, exc)
            return
        self._services.data_bus.notify(
            f"Rental #{rental.id} late fee set to {format_currency(fee)}."
        )

    def _on_details(self) -> None:
        rental = self._selected()
        if not rental:
            return
        try:
            _rental, items = self._services.rental_service.get_rental_with_items(rental.id)
            lines = []
            for item in items:
                dress = self._services.dress_service.get_dress(item.dress_id)
                lines.append(
                    f"#{dress.id} {dress.name}: {format_currency(item.rental_price)}/day"
                )
            paid = self._services.payment_service.get_total_paid(rental.id)
        except Exception as exc:
            show_service_error(self, exc)
            return
        QtWidgets.QMessageBox.information(
            self,
            f"Rental #{rental.id}",
            "\n".join(lines)
            + f"\n\nAmount due: {format_currency(rental.amount_due)}"
            + f"\nPaid: {format_currency(paid)}",
        )
