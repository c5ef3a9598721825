"""Screen for payments and receipts."""

from __future__ import annotations

from typing import List, Optional

from PySide6 import QtCore, QtGui, QtWidgets

from dress_rental.config import CURRENCY_SYMBOL
from dress_rental.domain.models import Payment, PaymentMethod, PaymentStatus, Rental
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


class PaymentDialog(QtWidgets.QDialog):
    """Record a payment against a rental."""

    def __init__(self, services: AppServices, parent: QtWidgets.QWidget | None = None) -> None:
        super().__init__(parent)
        self._services = services
        self._rentals: List[Rental] = []
        self.setWindowTitle("Record payment")
        self.setModal(True)
        self._build_ui()
        self._load_rentals()

    def _build_ui(self) -> None:
        layout = QtWidgets.QVBoxLayout(self)
        form = QtWidgets.QFormLayout()
        self.rental_combo = QtWidgets.QComboBox()
        self.balance_label = QtWidgets.QLabel("-")
        self.amount_input = QtWidgets.QDoubleSpinBox()
        self.amount_input.setPrefix(f"{CURRENCY_SYMBOL} ")
        self.amount_input.setRange(0.0, 1_000_000.0)
        self.amount_input.setDecimals(2)
        self.method_combo = QtWidgets.QComboBox()
        self.method_combo.addItems([method.value for method in PaymentMethod])
        self.date_input = QtWidgets.QDateEdit(QtCore.QDate.currentDate())
        self.date_input.setCalendarPopup(True)
        self.date_input.setDisplayFormat("dd/MM/yyyy")
        self.reference_input = QtWidgets.QLineEdit()

        form.addRow("Rental:", self.rental_combo)
        form.addRow("Balance due:", self.balance_label)
        form.addRow("Amount:", self.amount_input)
        form.addRow("Method:", self.method_combo)
        form.addRow("Date:", self.date_input)
        form.addRow("Transaction ref.:", self.reference_input)
        layout.addLayout(form)

        button_box = QtWidgets.QDialogButtonBox(
            QtWidgets.QDialogButtonBox.Save | QtWidgets.QDialogButtonBox.Cancel
        )
        button_box.accepted.connect(self._on_accept)
        button_box.rejected.connect(self.reject)
        layout.addWidget(button_box)
        self.rental_combo.currentIndexChanged.connect(self._on_rental_changed)

    def _load_rentals(self) -> None:
        payments = self._services.payment_service
        for rental in self._services.rental_service.list_rentals():
            if payments.is_rental_paid(rental.id):
                continue
            self._rentals.append(rental)
            self.rental_combo.addItem(
                f"#{rental.id} due {format_date(rental.due_date)} "
                f"({format_currency(rental.amount_due)})",
                rental.id,
            )

    def _on_rental_changed(self, _index: int) -> None:
        rental_id = self.rental_combo.currentData()
        if rental_id is None:
            self.balance_label.setText("-")
            return
        balance = self._services.payment_service.balance_due(int(rental_id))
        self.balance_label.setText(format_currency(balance))
        self.amount_input.setValue(balance)

    def _on_accept(self) -> None:
        if self.rental_combo.currentData() is None:
            QtWidgets.QMessageBox.warning(self, TITLE_WARNING, "No rental has a balance due.")
            return
        if self.amount_input.value() <= 0:
            QtWidgets.QMessageBox.warning(
                self, TITLE_WARNING, "The amount must be greater than zero."
            )
            return
        self.accept()

    def get_data(self) -> dict[str, object]:
        return {
            "rental_id": int(self.rental_combo.currentData()),
            "amount": self.amount_input.value(),
            "payment_method": self.method_combo.currentText(),
            "payment_date": to_iso(self.date_input.date()),
            "transaction_reference": self.reference_input.text().strip() or None,
        }


class PaymentsScreen(BaseScreen):
    """Screen listing payments."""

    def __init__(self, services: AppServices) -> None:
        super().__init__(services)
        self._payments: List[Payment] = []
        self._build_ui()
        self.refresh()

    def _build_ui(self) -> None:
        layout = QtWidgets.QVBoxLayout(self)
        self._add_header(
            layout,
            "Payments",
            "A rental is settled once completed payments cover its total and late fee.",
        )

        button_layout = QtWidgets.QHBoxLayout()
        self.new_button = QtWidgets.QPushButton("Record payment")
        self.refund_button = QtWidgets.QPushButton("Mark refunded")
        self.receipt_button = QtWidgets.QPushButton("Receipt PDF")
        self.new_button.clicked.connect(self._on_new)
        self.refund_button.clicked.connect(self._on_refund)
        self.receipt_button.clicked.connect(self._on_receipt)
        for button in (self.new_button, self.refund_button, self.receipt_button):
            button_layout.addWidget(button)
        button_layout.addStretch()
        layout.addLayout(button_layout)

        self.table = self._themed(
            build_table(
                ["ID", "Rental", "Date", "Method", "Amount", "Status", "Reference"]
            )
        )
        self.table.itemSelectionChanged.connect(self._on_selection_changed)
        layout.addWidget(self.table)
        self._on_selection_changed()

    def refresh(self) -> None:
        try:
            payments = self._services.payment_service.list_all()
        except Exception as exc:
            show_service_error(self, exc)
            return
        self._payments = payments
        fill_table(
            self.table,
            [
                [
                    str(payment.id),
                    f"#{payment.rental_id}",
                    format_date(payment.payment_date),
                    payment.payment_method.value,
                    format_currency(payment.amount),
                    payment.status.value,
                    payment.transaction_reference or "-",
                ]
                for payment in payments
            ],
        )
        self._on_selection_changed()

    def _selected(self) -> Optional[Payment]:
        selected = self.table.selectionModel().selectedRows()
        if not selected:
            return None
        row = selected[0].row()
        return self._payments[row] if 0 <= row < len(self._payments) else None

    def _on_selection_changed(self) -> None:
        payment = self._selected()
        self.receipt_button.setEnabled(payment is not None)
        self.refund_button.setEnabled(
            payment is not None and payment.status == PaymentStatus.COMPLETED
        )

    def _on_new(self) -> None:
        try:
            dialog = PaymentDialog(self._services, self)
        except Exception as exc:
            show_service_error(self, exc)
            return
        if dialog.exec() != QtWidgets.QDialog.Accepted:
            return
        try:
            payment = self._services.payment_service.create_payment(**dialog.get_data())
            paid = self._services.payment_service.is_rental_paid(payment.rental_id)
        except Exception as exc:
            show_service_error(self, exc)
            return
        self._services.log_activity(
            "Payment Recorded", "payments", payment.id, f"amount={payment.amount:.2f}"
        )
        status = "fully paid" if paid else "partially paid"
        self._services.data_bus.notify(
            f"Payment #{payment.id} recorded; rental #{payment.rental_id} is {status}."
        )

    def _on_refund(self) -> None:
        payment = self._selected()
        if not payment:
            return
        if not confirm(self, f"Mark payment #{payment.id} as refunded?"):
            return
        try:
            self._services.payment_service.update_status(payment.id, PaymentStatus.REFUNDED)
        except Exception as exc:
            show_service_error(self, exc)
            return
        self._services.log_activity("Payment Refunded", "payments", payment.id)
        self._services.data_bus.notify(f"Payment #{payment.id} refunded.")

    def _on_receipt(self) -> None:
        payment = self._selected()
        if not payment:
            return
        try:
            path = self._services.payment_service.generate_receipt(
                payment.id, self._services.receipts_dir
            )
        except Exception as exc:
            show_service_error(self, exc)
            return
        QtWidgets.QMessageBox.information(self, TITLE_SUCCESS, f"Receipt saved to:\n{path}")
        QtGui.QDesktopServices.openUrl(QtCore.QUrl.fromLocalFile(str(path)))
